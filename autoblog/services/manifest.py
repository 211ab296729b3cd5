"""Manifest store that keeps the post ledger and the site's post files consistent.

Publication is a two-phase operation: the updated manifest is staged and
serialised first, the post file is committed next, and the manifest is
committed last. When the manifest commit fails the freshly written post file
is removed again so that neither store references a half-published post.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from autoblog.errors import FileIOError, ManifestCorruptError
from autoblog.models.manifest import Manifest, ManifestEntry
from autoblog.models.post import Post
from autoblog.models.publisher import PublicationResult
from autoblog.services.parser import legacy_slug, slugify


logger = logging.getLogger(__name__)


def _write_text_atomic(path: Path, contents: str) -> None:
    """Write ``contents`` to a temporary sibling of ``path`` and move it into place."""

    path.parent.mkdir(parents=True, exist_ok=True)
    handle = tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    )
    try:
        with handle:
            handle.write(contents)
        os.replace(handle.name, path)
    except BaseException:
        Path(handle.name).unlink(missing_ok=True)
        raise


def _entry_slugs(entry: ManifestEntry) -> list[str]:
    """Return the file keys an entry may be stored under."""

    if entry.slug:
        return [entry.slug]
    candidates = [slugify(entry.title), legacy_slug(entry.title)]
    return [slug for index, slug in enumerate(candidates) if slug and slug not in candidates[:index]]


@dataclass(slots=True)
class ManifestStore:
    """Read, append to, and persist the manifest and its post files."""

    posts_directory: Path
    manifest_file: Path

    def __post_init__(self) -> None:
        self.posts_directory = Path(self.posts_directory)
        self.manifest_file = Path(self.manifest_file)

    # ------------------------------------------------------------------
    # Manifest I/O
    # ------------------------------------------------------------------
    def read_manifest(self) -> Manifest:
        """Load and validate the manifest, failing loudly on any schema violation."""

        try:
            contents = self.manifest_file.read_text(encoding="utf-8")
        except OSError as exc:
            raise FileIOError(self.manifest_file, "Could not read manifest") from exc

        try:
            data = json.loads(contents)
        except json.JSONDecodeError as exc:
            raise ManifestCorruptError(self.manifest_file, f"Manifest is not valid JSON ({exc.msg})") from exc

        try:
            return Manifest.model_validate(data)
        except ValidationError as exc:
            raise ManifestCorruptError(
                self.manifest_file, f"Manifest failed schema validation ({exc.error_count()} errors)"
            ) from exc

    def write_manifest(self, manifest: Manifest) -> None:
        """Serialise ``manifest`` and replace the stored file atomically."""

        self._commit(self.manifest_file, self._serialize(manifest), "Could not write manifest")

    def ensure_manifest(self) -> Manifest:
        """Return the stored manifest, creating an empty one on first run."""

        if not self.manifest_file.exists():
            logger.info("Creating empty manifest at %s", self.manifest_file)
            manifest = Manifest.empty()
            self.write_manifest(manifest)
            return manifest
        return self.read_manifest()

    def get_previous_posts(self) -> list[str]:
        """Return the titles of every published post in publication order."""

        return self.read_manifest().titles

    # ------------------------------------------------------------------
    # Post files
    # ------------------------------------------------------------------
    def post_path(self, slug: str) -> Path:
        return self.posts_directory / f"{slug}.md"

    def write_post_file(
        self,
        post: Post,
        *,
        slug: str | None = None,
        published_at: datetime | None = None,
    ) -> Path:
        """Render front matter and body to ``<slug>.md``, replacing any existing file."""

        published = (published_at or datetime.now(timezone.utc)).astimezone(timezone.utc)
        destination = self.post_path(slug or post.slug)
        self._commit(destination, self._render_post(post, published), "Could not write post file")
        return destination

    def resolve_slug(self, post: Post, manifest: Manifest) -> str:
        """Return ``post.slug`` or a suffixed variant not used by the manifest or on disk."""

        used = {slug for entry in manifest.posts for slug in _entry_slugs(entry)}
        base_slug = post.slug or "post"
        slug = base_slug
        suffix = 2
        while slug in used or self.post_path(slug).exists():
            slug = f"{base_slug}-{suffix}"
            suffix += 1
        return slug

    # ------------------------------------------------------------------
    # Composite operations
    # ------------------------------------------------------------------
    def add_post(self, post: Post, *, published_at: datetime | None = None) -> PublicationResult:
        """Publish ``post``: append it to the manifest and write its content file."""

        manifest = self.read_manifest()
        slug = self.resolve_slug(post, manifest)
        if slug != post.slug:
            logger.info("Slug %r already in use, publishing as %r", post.slug, slug)

        entry = ManifestEntry.from_post(post, slug=slug)
        staged = self._serialize(manifest.appended(entry))
        published = (published_at or datetime.now(timezone.utc)).astimezone(timezone.utc)

        path = self.write_post_file(post, slug=slug, published_at=published)
        try:
            self._commit(self.manifest_file, staged, "Could not write manifest")
        except FileIOError:
            logger.error("Manifest commit failed, removing post file %s", path)
            path.unlink(missing_ok=True)
            raise

        logger.info("Published post %r to %s", post.title, path)
        return PublicationResult(slug=slug, path=path, published_at=published, entry=entry)

    def reconcile(self) -> list[ManifestEntry]:
        """Drop manifest entries whose post file no longer exists and return them."""

        manifest = self.read_manifest()
        kept: list[ManifestEntry] = []
        removed: list[ManifestEntry] = []
        for entry in manifest.posts:
            if any(self.post_path(slug).exists() for slug in _entry_slugs(entry)):
                kept.append(entry)
            else:
                removed.append(entry)

        if removed:
            for entry in removed:
                logger.warning("Removing manifest entry %r: post file is missing", entry.title)
            self.write_manifest(manifest.model_copy(update={"posts": kept}))
        return removed

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _serialize(manifest: Manifest) -> str:
        return json.dumps(manifest.to_document(), indent=2, ensure_ascii=False) + "\n"

    @staticmethod
    def _render_post(post: Post, published: datetime) -> str:
        metadata: dict[str, Any] = {
            "title": post.title,
            "date": published.isoformat(),
            "tags": list(post.tags),
        }
        front_matter = yaml.safe_dump(metadata, allow_unicode=True, sort_keys=False).strip()
        body = post.body.lstrip("\r\n").rstrip()
        return f"---\n{front_matter}\n---\n\n{body}\n"

    @staticmethod
    def _commit(path: Path, contents: str, reason: str) -> None:
        try:
            _write_text_atomic(path, contents)
        except OSError as exc:
            raise FileIOError(path, reason) from exc
