"""Turn free-text chat completions into structured :class:`Post` records.

Parsing is line oriented and tolerant: malformed model output degrades to a
best-effort post (empty title, no tags, the whole remainder as body) instead
of raising. Callers that need stronger guarantees run :func:`validate_post`
before publishing.
"""
from __future__ import annotations

import re
from datetime import datetime, timezone

from autoblog.errors import InvalidPostError
from autoblog.models.post import Post


_TAGS_MARKER = "tags:"
_HORIZONTAL_RULE = "---"
_TITLE_STRIP_CHARS = str.maketrans("", "", '#*"')
_TITLE_LABEL_RE = re.compile(r"^\s*title:\s*", re.IGNORECASE)
_SLUG_UNSAFE_RE = re.compile(r"[^a-z0-9-]+")
_SLUG_HYPHENS_RE = re.compile(r"-{2,}")


def normalize_title(value: str) -> str:
    """Strip markdown emphasis, quotes and any leading ``Title:`` label."""

    title = value.translate(_TITLE_STRIP_CHARS).strip()
    while True:
        stripped = _TITLE_LABEL_RE.sub("", title, count=1)
        if stripped == title:
            break
        title = stripped
    return title.strip()


def legacy_slug(title: str) -> str:
    """Return the unsanitised slug: lowercased, spaces and slashes as hyphens."""

    return title.lower().replace(" ", "-").replace("/", "-")


def slugify(title: str) -> str:
    """Return a filesystem and URL friendly slug for ``title``."""

    slug = _SLUG_UNSAFE_RE.sub("", legacy_slug(title))
    slug = _SLUG_HYPHENS_RE.sub("-", slug)
    return slug.strip("-")


def parse_tags(line: str) -> list[str]:
    """Split the text following the ``tags:`` marker into lowercase tokens."""

    index = line.lower().find(_TAGS_MARKER)
    remainder = line[index + len(_TAGS_MARKER) :] if index != -1 else line
    tags: list[str] = []
    for token in remainder.split(","):
        cleaned = token.strip(" \t*").lower()
        if cleaned:
            tags.append(cleaned)
    return tags


def parse_completion(text: str, *, created_at: datetime | None = None) -> Post:
    """Parse a chat completion into a :class:`Post`. Never raises on odd input."""

    lines = [line.removesuffix("\r") for line in text.split("\n")]
    while lines and not lines[0].strip():
        lines.pop(0)

    title_source, *candidates = lines or [""]
    body_lines = [line for line in candidates if line.strip() != _HORIZONTAL_RULE]

    tags: list[str] = []
    for index, line in enumerate(body_lines):
        if _TAGS_MARKER in line.lower():
            tags = parse_tags(body_lines.pop(index))
            break

    title = normalize_title(title_source)
    return Post(
        title=title,
        slug=slugify(title),
        body="\n".join(body_lines),
        tags=tags,
        created_at=created_at or datetime.now(timezone.utc),
    )


def validate_post(post: Post) -> Post:
    """Reject posts that cannot be published: empty title, slug or body."""

    if not post.title.strip():
        raise InvalidPostError("Generated post has an empty title")
    if not post.slug:
        raise InvalidPostError(f"Generated post title {post.title!r} does not yield a usable slug")
    if not post.body.strip():
        raise InvalidPostError(f"Generated post {post.title!r} has an empty body")
    return post


__all__ = [
    "legacy_slug",
    "normalize_title",
    "parse_completion",
    "parse_tags",
    "slugify",
    "validate_post",
]
