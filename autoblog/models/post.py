"""Domain models for generated blog posts."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from langchain_core.messages import BaseMessage


def _default_datetime() -> datetime:
    """Return a timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class Post:
    """Structured post produced from a single chat completion."""

    title: str
    slug: str
    body: str
    tags: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=_default_datetime)


@dataclass(slots=True)
class GenerationResult:
    """Everything produced by one generation attempt, kept for archiving."""

    prompt: list[BaseMessage]
    completion: str
    model: str
    post: Post
