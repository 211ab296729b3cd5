"""Tests for prompt construction."""
from __future__ import annotations

from langchain_core.messages import HumanMessage, SystemMessage

from autoblog.services.prompts import (
    PREVIOUS_POST_COUNT,
    SYSTEM_PROMPT,
    build_prompt,
    recent_titles,
    serialize_messages,
)


RESUME = "# Jane Doe\nSkills: Python, {templating} braces, Kubernetes"


def test_build_prompt_starts_with_persona_and_resume() -> None:
    messages = build_prompt(RESUME, ["First"])

    assert isinstance(messages[0], SystemMessage)
    assert messages[0].content == SYSTEM_PROMPT
    assert isinstance(messages[1], HumanMessage)
    assert messages[1].content.endswith(RESUME)
    assert all(isinstance(message, HumanMessage) for message in messages[1:])


def test_build_prompt_lists_recent_titles_most_recent_first() -> None:
    messages = build_prompt(RESUME, ["Oldest", "Middle", "Newest"], history_size=2)

    history = messages[2].content
    assert history == 'Your previous 2 posts include: "Newest", "Middle"'


def test_build_prompt_with_empty_history_renders_empty_list() -> None:
    messages = build_prompt(RESUME, [])

    assert messages[2].content == f"Your previous {PREVIOUS_POST_COUNT} posts include: "


def test_build_prompt_includes_output_format_instructions() -> None:
    contents = [message.content for message in build_prompt(RESUME, [])]

    assert any("title for the post and include it on the first line" in text for text in contents)
    assert any('"Tags: <tag1>, <tag2>"' in text for text in contents)
    assert any("Do not include links to images" in text for text in contents)
    assert any("should not be related to a previous post" in text for text in contents)


def test_build_prompt_is_deterministic() -> None:
    titles = [f"Post {index}" for index in range(100)]

    assert build_prompt(RESUME, titles) == build_prompt(RESUME, titles)


def test_recent_titles_windows_history() -> None:
    titles = [f"Post {index}" for index in range(100)]

    window = recent_titles(titles)

    assert len(window) == PREVIOUS_POST_COUNT
    assert window[0] == "Post 99"
    assert window[-1] == "Post 40"
    assert recent_titles(titles, history_size=0) == []


def test_serialize_messages_uses_chat_roles() -> None:
    serialized = serialize_messages(build_prompt(RESUME, ["First"]))

    assert serialized[0] == {"role": "system", "content": SYSTEM_PROMPT}
    assert {item["role"] for item in serialized[1:]} == {"user"}
