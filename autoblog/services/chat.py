"""Chat model boundary used by the post generator.

Live generation goes through LangChain chat models (``ChatOpenAI`` or
``ChatOllama``). For local development and tests the
:class:`FixtureChatResponder` replays a recorded OpenAI chat completion so the
whole pipeline can run without network access.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol

from langchain_core.messages import AIMessage, BaseMessage


DEFAULT_FIXTURE_PATH = Path(__file__).resolve().parents[1] / "fixtures" / "chat-completion.json"


class SupportsInvoke(Protocol):
    """Protocol implemented by LangChain chat models."""

    def invoke(self, input: Any, **kwargs: Any) -> BaseMessage | str:  # pragma: no cover - interface
        """Invoke the underlying model."""


class FixtureChatResponder:
    """Deterministic responder that returns the first choice of a recorded completion."""

    def __init__(self, fixture_path: Path | str = DEFAULT_FIXTURE_PATH) -> None:
        self.fixture_path = Path(fixture_path)
        self.calls: list[Any] = []
        self._completion: dict[str, Any] | None = None

    def invoke(self, input: Any, **kwargs: Any) -> AIMessage:
        self.calls.append(input)
        completion = self._load()
        choices = completion.get("choices") or []
        message = choices[0].get("message", {}) if choices else {}
        return AIMessage(
            content=message.get("content") or "",
            response_metadata={"model_name": completion.get("model", "fixture")},
        )

    def _load(self) -> dict[str, Any]:
        if self._completion is None:
            payload = json.loads(self.fixture_path.read_text(encoding="utf-8"))
            if not isinstance(payload, dict):
                raise ValueError(f"Chat completion fixture must be a JSON object: {self.fixture_path}")
            self._completion = payload
        return self._completion


def extract_text(response: BaseMessage | str | None) -> str:
    """Return the text content of a chat model response."""

    if response is None:
        return ""
    if isinstance(response, str):
        return response
    content = getattr(response, "content", None)
    if isinstance(content, list):
        parts: list[str] = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(str(part.get("text", "")))
        return "".join(parts)
    return content if isinstance(content, str) else ""


def response_model_name(response: BaseMessage | str | None) -> str | None:
    """Return the model name reported in a response's metadata, when present."""

    metadata = getattr(response, "response_metadata", None) or {}
    name = metadata.get("model_name") or metadata.get("model")
    return str(name) if name else None


__all__ = [
    "DEFAULT_FIXTURE_PATH",
    "FixtureChatResponder",
    "SupportsInvoke",
    "extract_text",
    "response_model_name",
]
