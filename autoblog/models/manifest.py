"""Schema for the manifest of published posts stored alongside the site."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

if TYPE_CHECKING:  # pragma: no cover - for static type checking only
    from autoblog.models.post import Post


def _as_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC and normalise aware ones to UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _format_timestamp(value: datetime) -> str:
    return _as_utc(value).isoformat().replace("+00:00", "Z")


class ManifestEntry(BaseModel):
    """Projection of a published post kept in the manifest."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    title: str
    tags: list[str]
    created_at: datetime = Field(..., alias="createdAt")
    slug: str | None = None

    @field_validator("created_at")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @field_serializer("created_at")
    def _serialize_created_at(self, value: datetime) -> str:
        return _format_timestamp(value)

    @classmethod
    def from_post(cls, post: "Post", *, slug: str | None = None) -> "ManifestEntry":
        return cls(
            title=post.title,
            tags=list(post.tags),
            created_at=post.created_at,
            slug=slug or post.slug,
        )


class Manifest(BaseModel):
    """Append-only ledger of every post published to the site."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    posts: list[ManifestEntry]
    updated_at: datetime = Field(..., alias="updatedAt")

    @field_validator("updated_at")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @field_serializer("updated_at")
    def _serialize_updated_at(self, value: datetime) -> str:
        return _format_timestamp(value)

    @classmethod
    def empty(cls, *, updated_at: datetime | None = None) -> "Manifest":
        return cls(posts=[], updated_at=updated_at or datetime.now(timezone.utc))

    def appended(self, entry: ManifestEntry) -> "Manifest":
        """Return a copy with ``entry`` appended and ``updated_at`` moved to its timestamp."""

        return self.model_copy(update={"posts": [*self.posts, entry], "updated_at": entry.created_at})

    def to_document(self) -> dict:
        """Return the JSON-ready document written to disk.

        Entries without a recorded slug are written without the key so legacy
        manifests keep their shape. Every other field, unknown ones included,
        is written as read.
        """

        document = self.model_dump(mode="json", by_alias=True)
        for entry in document["posts"]:
            if entry.get("slug") is None:
                entry.pop("slug", None)
        return document

    @property
    def titles(self) -> list[str]:
        return [entry.title for entry in self.posts]
