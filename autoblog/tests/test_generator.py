from __future__ import annotations

from typing import Any, Sequence

import pytest
from langchain_core.messages import AIMessage, SystemMessage

from autoblog.errors import ChatClientError
from autoblog.services.generator import PostGenerator


class DummyLLM:
    """Simple fake LLM that returns a fixed AIMessage payload."""

    def __init__(self, response: str, *, metadata: dict[str, Any] | None = None) -> None:
        self._response = response
        self._metadata = metadata or {}
        self.calls: list[Sequence[Any]] = []

    def invoke(self, input: Any, **_: Any) -> AIMessage:
        self.calls.append(input)
        return AIMessage(content=self._response, response_metadata=self._metadata)


class FailingLLM:
    def invoke(self, input: Any, **_: Any) -> AIMessage:
        raise TimeoutError("request timed out")


COMPLETION = (
    "Title: Understanding Binary Search Trees\n"
    "Tags: algorithms, data-structures\n"
    "Binary search trees are..."
)


def test_generate_post_returns_prompt_completion_and_post() -> None:
    llm = DummyLLM(COMPLETION, metadata={"model_name": "gpt-test"})
    generator = PostGenerator(llm=llm, model_name="configured")

    result = generator.generate_post("resume text", ["Older Post"])

    assert llm.calls == [result.prompt]
    assert isinstance(result.prompt[0], SystemMessage)
    assert result.completion == COMPLETION
    assert result.model == "gpt-test"
    assert result.post.title == "Understanding Binary Search Trees"
    assert result.post.tags == ["algorithms", "data-structures"]
    assert '"Older Post"' in result.prompt[2].content


def test_generate_post_falls_back_to_configured_model_name() -> None:
    generator = PostGenerator(llm=DummyLLM(COMPLETION), model_name="configured")

    assert generator.generate_post("resume", []).model == "configured"


def test_generate_post_respects_history_size() -> None:
    generator = PostGenerator(llm=DummyLLM(COMPLETION), history_size=1)

    result = generator.generate_post("resume", ["First", "Second"])

    assert result.prompt[2].content == 'Your previous 1 posts include: "Second"'


def test_generate_post_wraps_client_failures() -> None:
    generator = PostGenerator(llm=FailingLLM())

    with pytest.raises(ChatClientError, match="request timed out") as excinfo:
        generator.generate_post("resume", [])

    assert isinstance(excinfo.value.__cause__, TimeoutError)


def test_generate_post_rejects_empty_completion() -> None:
    generator = PostGenerator(llm=DummyLLM("   \n"))

    with pytest.raises(ChatClientError, match="did not contain"):
        generator.generate_post("resume", [])
