from .news import Article  # noqa: F401
from .lesson import (  # noqa: F401
    Level,
    LessonArticle,
    LessonRequest,
    VocabularyItem,
    GrammarPoint,
    QuizQuestion,
    Lesson,
)
