"""Error taxonomy shared by both handlers.

Every error is terminal for the request. The API layer renders them as
``{"error": message}`` with the class's ``status_code``.
"""


class NewsLessonError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(NewsLessonError):
    """The client sent a request body we cannot use."""

    status_code = 400


class ConfigurationError(NewsLessonError):
    """A required provider credential is missing from the environment."""


class UpstreamError(NewsLessonError):
    """The provider call failed or returned an error payload."""


class GenerationError(NewsLessonError):
    """The LLM reply could not be turned into a lesson."""
