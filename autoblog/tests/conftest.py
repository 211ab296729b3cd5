"""Shared fixtures for the test suite."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

import pytest

from autoblog.services.manifest import ManifestStore


@dataclass(slots=True)
class SitePaths:
    posts: Path
    manifest: Path
    completions: Path
    resume: Path


@pytest.fixture
def site(tmp_path: Path) -> SitePaths:
    """Return a site layout with a resume and an empty manifest."""

    paths = SitePaths(
        posts=tmp_path / "site" / "content" / "posts",
        manifest=tmp_path / "site" / "data" / "manifest.json",
        completions=tmp_path / "site" / "data" / "completions",
        resume=tmp_path / "site" / "content" / "resume.md",
    )
    paths.posts.mkdir(parents=True)
    paths.resume.write_text("# Jane Doe\nBackend engineer: Python, Postgres, Kubernetes.\n", encoding="utf-8")
    paths.manifest.parent.mkdir(parents=True)
    paths.manifest.write_text(
        json.dumps({"posts": [], "updatedAt": "2024-01-01T00:00:00.000Z"}, indent=2),
        encoding="utf-8",
    )
    return paths


@pytest.fixture
def store(site: SitePaths) -> ManifestStore:
    return ManifestStore(posts_directory=site.posts, manifest_file=site.manifest)
