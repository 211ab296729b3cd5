"""Raw completion archive kept next to the site for auditing generated posts."""
from __future__ import annotations

import json
from pathlib import Path

from autoblog.errors import FileIOError
from autoblog.models.post import GenerationResult
from autoblog.services.prompts import serialize_messages


def save_completion(directory: Path | str, result: GenerationResult, *, slug: str | None = None) -> Path:
    """Write the prompt, model and raw completion to ``<directory>/<slug>.json``."""

    destination = Path(directory) / f"{slug or result.post.slug}.json"
    payload = {
        "model": result.model,
        "prompt": serialize_messages(result.prompt),
        "completion": result.completion,
    }
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    except OSError as exc:
        raise FileIOError(destination, "Could not write completion archive") from exc
    return destination
