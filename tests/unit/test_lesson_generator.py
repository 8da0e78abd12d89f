import base64
import json

import pytest
from google.api_core import exceptions as google_exceptions

import src.news_lessons.core.lesson_generator as lesson_generator
from src.news_lessons import config
from src.news_lessons.core.lesson_generator import generate_lesson, lesson_cache_key
from src.news_lessons.core.prompts import LEVEL_INSTRUCTIONS, build_lesson_prompt
from src.news_lessons.errors import ConfigurationError, GenerationError, UpstreamError
from src.news_lessons.models.lesson import LessonArticle
from src.news_lessons.tools.cache import TTLStore


LESSON = {
    "headline": "Central bank holds rates",
    "body": "The central bank kept interest rates unchanged on Thursday.",
    "translation": "中央銀行は木曜日、金利を据え置いた。",
    "vocabulary": [
        {
            "word": "unchanged",
            "pronunciation": "アンチェインジド",
            "meaning": "変わらない",
            "example": "Prices were unchanged.",
            "pos": "adjective",
        }
    ],
    "grammar": [
        {
            "pattern": "Passive voice",
            "explanation": "受動態",
            "sentence": "Rates were kept unchanged.",
            "breakdown": "be + 過去分詞",
        }
    ],
    "quiz": [
        {"question": "What did the bank do?", "options": ["A", "B", "C", "D"], "answer": 2, "explanation": "本文参照"}
    ],
}


class FakeClock:
    def __init__(self, start: float = 1_000.0) -> None:
        self.value = start

    def __call__(self) -> float:
        return self.value


class DummyResponse:
    def __init__(self, content: str) -> None:
        self.text = content


class DummyModel:
    def __init__(self, reply: str) -> None:
        self.reply = reply
        self.prompts = []

    def generate_content(self, prompt: str) -> DummyResponse:
        self.prompts.append(prompt)
        return DummyResponse(self.reply)


@pytest.fixture
def article() -> LessonArticle:
    return LessonArticle(
        title="Central bank holds rates steady",
        source="Example Times",
        summary="Policymakers kept rates unchanged.",
    )


def test_lesson_cache_key_uses_title_prefix() -> None:
    title = "A very long headline about markets, central banks and inflation"
    expected = base64.b64encode(title.encode("utf-8")).decode("ascii")[:40]
    assert lesson_cache_key(title, "advanced") == f"lesson_{expected}_advanced"
    assert len(expected) == 40


def test_lesson_cache_key_handles_non_ascii_titles() -> None:
    assert lesson_cache_key("東京", "beginner") == "lesson_5p2x5Lqs_beginner"


def test_build_lesson_prompt_embeds_article_and_level(article) -> None:
    prompt = build_lesson_prompt(article, "beginner")
    assert "Headline: Central bank holds rates steady" in prompt
    assert "Source: Example Times" in prompt
    assert "Summary: Policymakers kept rates unchanged." in prompt
    assert LEVEL_INSTRUCTIONS["beginner"] in prompt
    assert "exactly 3 quiz questions" in prompt
    assert '"vocabulary":[' in prompt


def test_generate_lesson_returns_parsed_lesson(monkeypatch, article) -> None:
    model = DummyModel(json.dumps(LESSON, ensure_ascii=False))
    monkeypatch.setattr(lesson_generator, "_get_gemini_model", lambda: model)
    store = TTLStore(ttl=86400, timer=FakeClock())

    lesson = generate_lesson(article, "intermediate", store)

    assert lesson["headline"] == LESSON["headline"]
    assert lesson["vocabulary"][0]["word"] == "unchanged"
    assert lesson["quiz"][0]["answer"] == 2
    assert LEVEL_INSTRUCTIONS["intermediate"] in model.prompts[0]


def test_generate_lesson_accepts_fenced_reply(monkeypatch, article) -> None:
    model = DummyModel("```json\n" + json.dumps(LESSON) + "\n```")
    monkeypatch.setattr(lesson_generator, "_get_gemini_model", lambda: model)
    store = TTLStore(ttl=86400, timer=FakeClock())

    lesson = generate_lesson(article, "advanced", store)

    assert lesson["body"] == LESSON["body"]


def test_generate_lesson_uses_cache_within_ttl(monkeypatch, article) -> None:
    model = DummyModel(json.dumps(LESSON))
    monkeypatch.setattr(lesson_generator, "_get_gemini_model", lambda: model)
    clock = FakeClock()
    store = TTLStore(ttl=86400, timer=clock)

    first = generate_lesson(article, "intermediate", store)
    clock.value += 86399
    second = generate_lesson(article, "intermediate", store)

    assert len(model.prompts) == 1
    assert second is first

    clock.value += 1
    generate_lesson(article, "intermediate", store)
    assert len(model.prompts) == 2


def test_generate_lesson_caches_per_level(monkeypatch, article) -> None:
    model = DummyModel(json.dumps(LESSON))
    monkeypatch.setattr(lesson_generator, "_get_gemini_model", lambda: model)
    store = TTLStore(ttl=86400, timer=FakeClock())

    generate_lesson(article, "beginner", store)
    generate_lesson(article, "advanced", store)

    assert len(model.prompts) == 2


def test_generate_lesson_requires_api_key(monkeypatch, article) -> None:
    monkeypatch.setattr(config.settings, "google_api_key", None)
    store = TTLStore(ttl=86400, timer=FakeClock())

    with pytest.raises(ConfigurationError):
        generate_lesson(article, "intermediate", store)


def test_generate_lesson_unparseable_reply(monkeypatch, article) -> None:
    model = DummyModel("I'm sorry, I can't produce that lesson.")
    monkeypatch.setattr(lesson_generator, "_get_gemini_model", lambda: model)
    store = TTLStore(ttl=86400, timer=FakeClock())

    with pytest.raises(GenerationError) as excinfo:
        generate_lesson(article, "intermediate", store)

    assert excinfo.value.message == "Failed to parse lesson JSON"
    assert len(store) == 0


def test_generate_lesson_rejects_wrong_shape(monkeypatch, article) -> None:
    model = DummyModel(json.dumps({"title": "no headline or body"}))
    monkeypatch.setattr(lesson_generator, "_get_gemini_model", lambda: model)
    store = TTLStore(ttl=86400, timer=FakeClock())

    with pytest.raises(GenerationError):
        generate_lesson(article, "intermediate", store)


def test_generate_lesson_wraps_provider_errors(monkeypatch, article) -> None:
    class FailingModel:
        def generate_content(self, prompt: str):
            raise google_exceptions.ServiceUnavailable("model overloaded")

    monkeypatch.setattr(lesson_generator, "_get_gemini_model", lambda: FailingModel())
    store = TTLStore(ttl=86400, timer=FakeClock())

    with pytest.raises(UpstreamError) as excinfo:
        generate_lesson(article, "intermediate", store)

    assert excinfo.value.message == "model overloaded"


def test_generate_lesson_wraps_unexpected_sdk_errors(monkeypatch, article) -> None:
    class BlockingModel:
        def generate_content(self, prompt: str):
            raise RuntimeError("prompt blocked")

    monkeypatch.setattr(lesson_generator, "_get_gemini_model", lambda: BlockingModel())
    store = TTLStore(ttl=86400, timer=FakeClock())

    with pytest.raises(UpstreamError) as excinfo:
        generate_lesson(article, "intermediate", store)

    assert excinfo.value.message == "prompt blocked"


def test_lesson_article_treats_null_fields_as_empty() -> None:
    parsed = LessonArticle.model_validate({"title": "T", "source": None, "summary": None})
    assert parsed.source == ""
    assert parsed.summary == ""
    assert "Source: \n" in build_lesson_prompt(parsed, "beginner")
