"""Prompt construction for the post generator."""
from __future__ import annotations

from typing import Sequence

from langchain_core.messages import BaseMessage
from langchain_core.prompts import ChatPromptTemplate


PREVIOUS_POST_COUNT = 60

SYSTEM_PROMPT = (
    "You are the author of a personal technical blog about software engineering and computer science subjects."
)

_INSTRUCTIONS: tuple[str, ...] = (
    "Come up with an advanced topic for an expert level reader that is about a particular single feature, fact,"
    " pattern, paradigm, convention, theory, framework, library, or best practice.",
    "Write a post about the chosen topic following the instructions given below:",
    "Your writing style is academic, informative, and focused on detailed technical information.",
    "The topic should not be related to a previous post.",
    "Use computer code snippets (in the relevant programming language) in order to illustrate the information"
    " presented.",
    "Format the body of the post in the markdown markup language.",
    "Come up with a title for the post and include it on the first line.",
    'Include one to three tags for the post on the second line formatted as a comma separated list, for example:'
    ' "Tags: <tag1>, <tag2>".',
    "The post should be multiple sections in length.",
    "Do not include links to images in the post.",
    "Do not include contact information in the post.",
    "Do not add extra whitespace around lists.",
)

_ROLE_NAMES = {"system": "system", "human": "user", "ai": "assistant"}


def _default_prompt() -> ChatPromptTemplate:
    return ChatPromptTemplate.from_messages(
        [
            ("system", SYSTEM_PROMPT),
            (
                "human",
                "New topics for blog posts should be based off of the technical skills, experience, and interests"
                " presented in the following resume:\n{resume}",
            ),
            ("human", "Your previous {history_size} posts include: {previous_posts}"),
            *(("human", instruction) for instruction in _INSTRUCTIONS),
        ]
    )


def recent_titles(previous_titles: Sequence[str], *, history_size: int = PREVIOUS_POST_COUNT) -> list[str]:
    """Return the last ``history_size`` titles, most recent first."""

    if history_size <= 0:
        return []
    return list(reversed(previous_titles[-history_size:]))


def build_prompt(
    resume: str,
    previous_titles: Sequence[str],
    *,
    history_size: int = PREVIOUS_POST_COUNT,
) -> list[BaseMessage]:
    """Return the ordered chat messages asking the model for a new post."""

    window = recent_titles(previous_titles, history_size=history_size)
    return _default_prompt().format_messages(
        resume=resume,
        history_size=history_size,
        previous_posts=", ".join(f'"{title}"' for title in window),
    )


def serialize_messages(messages: Sequence[BaseMessage]) -> list[dict[str, str]]:
    """Render messages as ``{"role", "content"}`` mappings for archiving."""

    return [
        {"role": _ROLE_NAMES.get(message.type, message.type), "content": str(message.content)}
        for message in messages
    ]


__all__ = ["PREVIOUS_POST_COUNT", "SYSTEM_PROMPT", "build_prompt", "recent_titles", "serialize_messages"]
