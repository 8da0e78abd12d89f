from typing import List, Literal

from pydantic import BaseModel, ConfigDict, field_validator


Level = Literal["beginner", "intermediate", "advanced"]


class LessonArticle(BaseModel):
    """The subset of an article the lesson prompt needs.

    Clients usually post a full news ``Article``; unused fields are ignored.
    """

    title: str
    source: str = ""
    summary: str = ""

    @field_validator("source", "summary", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return "" if value is None else value


class LessonRequest(BaseModel):
    article: LessonArticle
    level: Level = "intermediate"


class VocabularyItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    word: str
    pronunciation: str = ""
    meaning: str = ""
    example: str = ""
    pos: str = ""


class GrammarPoint(BaseModel):
    model_config = ConfigDict(extra="allow")

    pattern: str
    explanation: str = ""
    sentence: str = ""
    breakdown: str = ""


class QuizQuestion(BaseModel):
    model_config = ConfigDict(extra="allow")

    question: str
    options: List[str] = []
    answer: int = 0
    explanation: str = ""


class Lesson(BaseModel):
    model_config = ConfigDict(extra="allow")

    headline: str
    body: str
    translation: str = ""
    vocabulary: List[VocabularyItem] = []
    grammar: List[GrammarPoint] = []
    quiz: List[QuizQuestion] = []
