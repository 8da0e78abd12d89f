"""Prompt templates for the lesson generator."""

from ..models.lesson import LessonArticle


LEVEL_INSTRUCTIONS = {
    "beginner": (
        "Beginner (TOEIC 300-500). Pick 5 basic vocabulary words. 2 grammar points "
        "(present/past tense, passive voice). Japanese explanations should be gentle "
        "and beginner-friendly."
    ),
    "intermediate": (
        "Intermediate (TOEIC 600-750). Pick 6 intermediate vocabulary words. 3 grammar "
        "points (relative clauses, subjunctive, participle clauses)."
    ),
    "advanced": (
        "Advanced (TOEIC 800+). Pick 7 advanced vocabulary words. 3 advanced grammar "
        "points (inversion, cleft sentences, nominalization). Include business/academic "
        "expressions."
    ),
}


LESSON_JSON_SCHEMA = (
    '{"headline":"The full English headline",'
    '"body":"A 4-6 sentence English news paragraph expanding on the summary",'
    '"translation":"上記bodyの自然な日本語訳",'
    '"vocabulary":[{"word":"English word","pronunciation":"カタカナ発音",'
    '"meaning":"日本語の意味","example":"Example sentence using this word",'
    '"pos":"part of speech"}],'
    '"grammar":[{"pattern":"Grammar pattern name","explanation":"日本語での文法解説",'
    '"sentence":"The relevant English sentence from body","breakdown":"文の構造の日本語解説"}],'
    '"quiz":[{"question":"Question text","options":["A","B","C","D"],"answer":0,'
    '"explanation":"日本語での解説"}]}'
)


LESSON_PROMPT_TEMPLATE = """You are an English teacher for Japanese learners, styled like CNN English Express magazine.

Here is today's news article:
Headline: {title}
Source: {source}
Summary: {summary}

Create an English lesson based on this article. Return ONLY a valid JSON object. No markdown, no backticks, no text before or after the JSON:
{schema}

Level: {level_instruction}
Include exactly 3 quiz questions (vocabulary, grammar, and comprehension)."""


def build_lesson_prompt(article: LessonArticle, level: str) -> str:
    level_instruction = LEVEL_INSTRUCTIONS.get(level, LEVEL_INSTRUCTIONS["intermediate"])
    return LESSON_PROMPT_TEMPLATE.format(
        title=article.title,
        source=article.source,
        summary=article.summary,
        schema=LESSON_JSON_SCHEMA,
        level_instruction=level_instruction,
    )
