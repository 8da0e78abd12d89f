from mangum import Mangum

from src.news_lessons.api.lambda_handler import handler
from src.news_lessons.api.server import app


def test_lambda_handler_wraps_fastapi_app() -> None:
    assert isinstance(handler, Mangum)
    assert handler.app is app
