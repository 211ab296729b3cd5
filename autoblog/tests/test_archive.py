from __future__ import annotations

import json
from pathlib import Path

import pytest

from autoblog.errors import FileIOError
from autoblog.models.post import GenerationResult
from autoblog.services.archive import save_completion
from autoblog.services.parser import parse_completion
from autoblog.services.prompts import build_prompt


COMPLETION = "Title: Copy-on-Write Pages\nTags: operating systems\nFork shares pages until a write."


def sample_result() -> GenerationResult:
    return GenerationResult(
        prompt=build_prompt("resume", ["Older"]),
        completion=COMPLETION,
        model="gpt-3.5-turbo-0301",
        post=parse_completion(COMPLETION),
    )


def test_save_completion_writes_prompt_model_and_completion(tmp_path: Path) -> None:
    path = save_completion(tmp_path / "completions", sample_result())

    assert path == tmp_path / "completions" / "copy-on-write-pages.json"
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert list(payload) == ["model", "prompt", "completion"]
    assert payload["model"] == "gpt-3.5-turbo-0301"
    assert payload["completion"] == COMPLETION
    assert payload["prompt"][2] == {"role": "user", "content": 'Your previous 60 posts include: "Older"'}


def test_save_completion_uses_published_slug(tmp_path: Path) -> None:
    path = save_completion(tmp_path, sample_result(), slug="copy-on-write-pages-2")

    assert path.name == "copy-on-write-pages-2.json"


def test_save_completion_reports_unwritable_directory(tmp_path: Path) -> None:
    blocker = tmp_path / "completions"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(FileIOError) as excinfo:
        save_completion(blocker, sample_result())

    assert excinfo.value.path == blocker / "copy-on-write-pages.json"
