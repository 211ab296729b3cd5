"""Data structures describing the outcome of publishing a post."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from autoblog.models.manifest import ManifestEntry


@dataclass(slots=True)
class PublicationResult:
    """Outcome returned by the manifest store after committing a post."""

    slug: str
    path: Path
    published_at: datetime
    entry: ManifestEntry
