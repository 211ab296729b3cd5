"""Orchestration of a single generate-and-publish cycle."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Protocol, Sequence

from autoblog.errors import FileIOError
from autoblog.models.manifest import ManifestEntry
from autoblog.models.post import GenerationResult
from autoblog.models.publisher import PublicationResult
from autoblog.services.archive import save_completion
from autoblog.services.manifest import ManifestStore
from autoblog.services.parser import validate_post


logger = logging.getLogger(__name__)


class SupportsGeneration(Protocol):
    """Protocol describing the post generator interface."""

    def generate_post(self, resume: str, previous_posts: Sequence[str]) -> GenerationResult:
        """Return the prompt, raw completion and parsed post for one attempt."""


@dataclass(slots=True)
class PipelineResult:
    """Structured summary of a successful pipeline run."""

    generation: GenerationResult
    publication: PublicationResult
    archive_path: Path
    reconciled: list[ManifestEntry] = field(default_factory=list)


@dataclass(slots=True)
class PostPipeline:
    """Coordinate manifest checks, generation, publication and archiving.

    Every failure propagates to the caller; a run either publishes exactly one
    post or leaves the manifest and post files as they were. The completion is
    archived before publication and removed again when publication fails.
    """

    generator: SupportsGeneration
    store: ManifestStore
    resume_file: Path
    completions_directory: Path

    def run(self, *, published_at: datetime | None = None) -> PipelineResult:
        self.store.ensure_manifest()
        reconciled = self.store.reconcile()
        if reconciled:
            logger.warning("Dropped %d manifest entries without post files", len(reconciled))

        previous_posts = self.store.get_previous_posts()
        resume = self._read_resume()

        logger.info("Generating post...")
        generation = self.generator.generate_post(resume, previous_posts)
        post = validate_post(generation.post)
        logger.info('Generated post: "%s"', post.title)

        logger.info("Saving raw chat completion...")
        slug = self.store.resolve_slug(post, self.store.read_manifest())
        archive_path = save_completion(self.completions_directory, generation, slug=slug)

        logger.info("Publishing post...")
        try:
            publication = self.store.add_post(post, published_at=published_at)
        except Exception:
            archive_path.unlink(missing_ok=True)
            raise

        if publication.slug != slug:
            archive_path = self._rename_archive(archive_path, publication.slug)

        return PipelineResult(
            generation=generation,
            publication=publication,
            archive_path=archive_path,
            reconciled=reconciled,
        )

    @staticmethod
    def _rename_archive(archive_path: Path, slug: str) -> Path:
        destination = archive_path.with_name(f"{slug}.json")
        try:
            return archive_path.replace(destination)
        except OSError as exc:
            raise FileIOError(destination, "Could not rename completion archive") from exc

    def _read_resume(self) -> str:
        path = Path(self.resume_file)
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise FileIOError(path, "Could not read resume") from exc
