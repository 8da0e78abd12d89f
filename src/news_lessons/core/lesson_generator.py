"""Lesson generation from a single news article.

The article and level are turned into a prompt, sent to Gemini, and the
reply is reduced to one JSON object validated as a ``Lesson``. Lessons are
cached per (title, level) for a day.
"""

import base64
from typing import Any, Dict

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
from pydantic import ValidationError as PydanticValidationError

from ..config import settings
from ..errors import ConfigurationError, GenerationError, UpstreamError
from ..logging_config import get_logger
from ..models.lesson import Lesson, LessonArticle
from ..tools.cache import TTLStore
from .lesson_extraction import PARSE_FAILURE_MESSAGE, extract_json_object
from .prompts import build_lesson_prompt


logger = get_logger("core.lesson_generator")

TITLE_KEY_LENGTH = 40


def lesson_cache_key(title: str, level: str) -> str:
    title_key = base64.b64encode(title.encode("utf-8")).decode("ascii")[:TITLE_KEY_LENGTH]
    return f"lesson_{title_key}_{level}"


def _get_gemini_model() -> genai.GenerativeModel:
    """Return a Gemini model client using configuration from settings."""

    if not settings.google_api_key:
        raise ConfigurationError("GOOGLE_API_KEY not configured")
    genai.configure(api_key=settings.google_api_key)

    generation_config: Dict[str, Any] = {"max_output_tokens": settings.lesson_max_output_tokens}
    if settings.lesson_json_mode:
        generation_config["response_mime_type"] = "application/json"
    return genai.GenerativeModel(settings.lesson_model_name, generation_config=generation_config)


def _response_text(response) -> str:
    try:
        return response.text or ""
    except ValueError as exc:
        # Raised by the SDK when the candidate was blocked or has no text part.
        raise GenerationError(PARSE_FAILURE_MESSAGE) from exc


def parse_lesson(text: str) -> Dict[str, Any]:
    data = extract_json_object(text)
    try:
        lesson = Lesson.model_validate(data)
    except PydanticValidationError as exc:
        logger.warning("generate_lesson_schema_mismatch", errors=exc.error_count())
        raise GenerationError(f"{PARSE_FAILURE_MESSAGE}: unexpected lesson shape") from exc
    return lesson.model_dump()


def generate_lesson(article: LessonArticle, level: str, cache: TTLStore) -> Dict[str, Any]:
    key = lesson_cache_key(article.title, level)
    cached = cache.get(key)
    if cached is not None:
        logger.info("generate_lesson_cache_hit", level=level, cache_key=key)
        return cached

    model = _get_gemini_model()
    prompt = build_lesson_prompt(article, level)

    logger.info(
        "generate_lesson_call",
        level=level,
        source=article.source,
        model=settings.lesson_model_name,
    )
    try:
        response = model.generate_content(prompt)
    except google_exceptions.GoogleAPIError as exc:
        logger.warning("generate_lesson_upstream_error", error=str(exc))
        raise UpstreamError(getattr(exc, "message", None) or str(exc)) from exc
    except Exception as exc:
        # SDK-side failures such as BlockedPromptException or StopCandidateException.
        logger.warning("generate_lesson_sdk_error", error_type=type(exc).__name__, error=str(exc))
        raise UpstreamError(str(exc) or "Gemini request failed") from exc

    try:
        lesson = parse_lesson(_response_text(response))
    except GenerationError as exc:
        logger.warning("generate_lesson_parse_failed", level=level, error=exc.message)
        raise

    cache.set(key, lesson)
    logger.info(
        "generate_lesson_success",
        level=level,
        cache_key=key,
        vocabulary=len(lesson["vocabulary"]),
        quiz=len(lesson["quiz"]),
    )
    return lesson
