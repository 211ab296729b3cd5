"""Generate one blog post with the chat model and publish it to the site.

The script is meant to run on a schedule (for example a daily cron job). It
reads the resume and the manifest of previously published posts, asks the
configured chat model for a new post, writes the post file and manifest entry,
and archives the raw completion.

Model selection:
- ``--mock`` or ``AUTOBLOG_MOCK=true`` replays the bundled completion fixture.
- Otherwise ``AUTOBLOG_LLM_PROVIDER`` picks ``openai`` (default) or ``ollama``;
  any other value falls back to the fixture responder.
"""
from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Callable, TypeVar

from autoblog.errors import AutoblogError, ConfigurationError
from autoblog.services.chat import FixtureChatResponder, SupportsInvoke
from autoblog.services.generator import PostGenerator
from autoblog.services.manifest import ManifestStore
from autoblog.services.pipeline import PostPipeline
from autoblog.services.prompts import PREVIOUS_POST_COUNT


LOGGER = logging.getLogger("autoblog.pipeline")

DEFAULT_OPENAI_MODEL = "gpt-3.5-turbo"
DEFAULT_OLLAMA_MODEL = "llama3.1"

_Number = TypeVar("_Number", int, float)


def _env_flag(name: str) -> bool:
    return (os.getenv(name) or "").strip().lower() in {"1", "true", "yes"}


def _env_number(name: str, default: str, convert: Callable[[str], _Number]) -> _Number:
    raw = os.getenv(name, default)
    try:
        return convert(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc


def _configure_logging() -> None:
    level_name = os.getenv("AUTOBLOG_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate and publish a blog post.")
    parser.add_argument(
        "--posts",
        default=os.getenv("AUTOBLOG_POSTS_DIR", "./site/content/posts"),
        help="Directory receiving post markdown files.",
    )
    parser.add_argument(
        "--manifest",
        default=os.getenv("AUTOBLOG_MANIFEST", "./site/data/manifest.json"),
        help="Path to the JSON manifest of published posts.",
    )
    parser.add_argument(
        "--completions",
        default=os.getenv("AUTOBLOG_COMPLETIONS_DIR", "./site/data/completions"),
        help="Directory receiving raw completion archives.",
    )
    parser.add_argument(
        "--resume",
        default=os.getenv("AUTOBLOG_RESUME", "./site/content/resume.md"),
        help="Resume file used to steer topic selection.",
    )
    parser.add_argument(
        "--mock",
        action="store_true",
        default=_env_flag("AUTOBLOG_MOCK"),
        help="Replay the bundled completion fixture instead of calling a model.",
    )
    return parser.parse_args(argv)


def _create_llm(mock: bool) -> tuple[SupportsInvoke, str]:
    """Return the chat model to use and its configured name."""

    if mock:
        return FixtureChatResponder(), "fixture"

    provider = (os.getenv("AUTOBLOG_LLM_PROVIDER") or "openai").strip().lower()
    temperature = _env_number("AUTOBLOG_MODEL_TEMPERATURE", "0.7", float)

    if provider in {"openai", "gpt"}:
        from langchain_openai import ChatOpenAI

        model_name = os.getenv("OPENAI_MODEL") or DEFAULT_OPENAI_MODEL
        try:
            return ChatOpenAI(model=model_name, temperature=temperature), model_name
        except Exception as exc:
            raise ConfigurationError(f"Could not create OpenAI chat model: {exc}") from exc

    if provider == "ollama":
        from langchain_ollama import ChatOllama

        model_name = os.getenv("AUTOBLOG_OLLAMA_MODEL") or DEFAULT_OLLAMA_MODEL
        base_url = (os.getenv("AUTOBLOG_OLLAMA_URL") or "http://127.0.0.1:11434").rstrip("/")
        try:
            return ChatOllama(model=model_name, base_url=base_url, temperature=temperature), model_name
        except Exception as exc:
            raise ConfigurationError(f"Could not create Ollama chat model: {exc}") from exc

    LOGGER.warning("Unknown LLM provider %r, replaying the completion fixture", provider)
    return FixtureChatResponder(), "fixture"


def _build_pipeline(args: argparse.Namespace) -> PostPipeline:
    llm, model_name = _create_llm(args.mock)
    generator = PostGenerator(
        llm=llm,
        model_name=model_name,
        history_size=_env_number("AUTOBLOG_HISTORY_SIZE", str(PREVIOUS_POST_COUNT), int),
    )
    store = ManifestStore(posts_directory=Path(args.posts), manifest_file=Path(args.manifest))
    return PostPipeline(
        generator=generator,
        store=store,
        resume_file=Path(args.resume),
        completions_directory=Path(args.completions),
    )


def run(argv: list[str] | None = None) -> int:
    _configure_logging()
    args = _parse_args(argv)
    try:
        pipeline = _build_pipeline(args)
        result = pipeline.run()
    except AutoblogError as exc:
        LOGGER.error("Run aborted: %s", exc)
        return 1

    publication = result.publication
    LOGGER.info("Published post '%s' at %s", publication.slug, publication.published_at.isoformat())
    LOGGER.info("Post path: %s", publication.path)
    LOGGER.info("Completion archive: %s", result.archive_path)
    LOGGER.info("Complete.")
    return 0


if __name__ == "__main__":  # pragma: no cover - script entry point
    raise SystemExit(run())
