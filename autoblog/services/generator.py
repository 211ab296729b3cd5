"""Post generator that prompts the chat model and parses its completion."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from autoblog.errors import ChatClientError
from autoblog.models.post import GenerationResult
from autoblog.services.chat import SupportsInvoke, extract_text, response_model_name
from autoblog.services.parser import parse_completion
from autoblog.services.prompts import PREVIOUS_POST_COUNT, build_prompt


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PostGenerator:
    """Generate a single post from a resume and the titles already published."""

    llm: SupportsInvoke
    model_name: str = "unknown"
    history_size: int = PREVIOUS_POST_COUNT

    def generate_post(self, resume: str, previous_posts: Sequence[str]) -> GenerationResult:
        """Prompt the model once and parse the reply. Chat failures raise :class:`ChatClientError`."""

        prompt = build_prompt(resume, previous_posts, history_size=self.history_size)
        logger.debug("Requesting completion with %d prompt messages", len(prompt))

        try:
            response = self.llm.invoke(prompt)
        except Exception as exc:
            raise ChatClientError(f"Chat completion request failed: {exc}") from exc

        text = extract_text(response)
        if not text.strip():
            raise ChatClientError("Chat completion did not contain any message content")

        post = parse_completion(text)
        model = response_model_name(response) or self.model_name
        logger.info("Parsed completion from %s into post %r", model, post.title)
        return GenerationResult(prompt=prompt, completion=text, model=model, post=post)
