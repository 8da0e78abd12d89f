from typing import Any, Callable, Dict, Optional

from fastapi import Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..config import settings
from ..core.lesson_generator import generate_lesson
from ..core.news_fetcher import fetch_news
from ..errors import NewsLessonError
from ..logging_config import get_logger
from ..models.lesson import LessonRequest
from ..tools.cache import TTLStore


app = FastAPI(
    title="News Lessons API",
    description="Daily news headlines and LLM-generated English lessons",
    version="1.0.0",
)
logger = get_logger("api.server")


ROUTE_METHODS = {
    "/news": "GET, POST, OPTIONS",
    "/lesson": "POST, OPTIONS",
}


def cors_headers(path: str) -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Headers": "Content-Type",
        "Access-Control-Allow-Methods": ROUTE_METHODS.get(path, "GET, POST, OPTIONS"),
    }


def _json(request: Request, content: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(content=content, status_code=status_code, headers=cors_headers(request.url.path))


def _call(event: str, func: Callable[..., Any], *args: Any) -> Any:
    """Run a handler body so that any failure surfaces as a NewsLessonError."""
    try:
        return func(*args)
    except NewsLessonError:
        raise
    except Exception as exc:
        logger.error(event, error_type=type(exc).__name__, error=str(exc))
        raise NewsLessonError(str(exc) or "Internal server error") from exc


# ============================================================================
# Caches
# ============================================================================

news_cache = TTLStore(ttl=settings.news_cache_ttl_seconds, maxsize=settings.cache_max_entries)
lesson_cache = TTLStore(ttl=settings.lesson_cache_ttl_seconds, maxsize=settings.cache_max_entries)


def get_news_cache() -> TTLStore:
    return news_cache


def get_lesson_cache() -> TTLStore:
    return lesson_cache


# ============================================================================
# Error handlers
# ============================================================================


@app.exception_handler(NewsLessonError)
def handle_news_lesson_error(request: Request, exc: NewsLessonError) -> JSONResponse:
    logger.warning(
        "request_failed",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=exc.message,
        status_code=exc.status_code,
    )
    return _json(request, {"error": exc.message}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("request_invalid_body", path=request.url.path, errors=len(exc.errors()))
    return _json(request, {"error": "Invalid request body"}, status_code=400)


@app.exception_handler(StarletteHTTPException)
def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = "Method not allowed" if exc.status_code == 405 else str(exc.detail)
    response = _json(request, {"error": message}, status_code=exc.status_code)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


# ============================================================================
# Endpoints
# ============================================================================


class NewsRequest(BaseModel):
    category: Optional[str] = None


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.options("/news")
@app.options("/lesson")
def preflight(request: Request) -> Response:
    return Response(status_code=204, headers=cors_headers(request.url.path))


@app.get("/news")
def get_news(
    request: Request,
    category: Optional[str] = None,
    cache: TTLStore = Depends(get_news_cache),
) -> JSONResponse:
    logger.info("news_request", method="GET", category=category)
    return _json(request, _call("news_error", fetch_news, category, cache))


@app.post("/news")
def post_news(
    request: Request,
    category: Optional[str] = None,
    body: Optional[NewsRequest] = Body(None),
    cache: TTLStore = Depends(get_news_cache),
) -> JSONResponse:
    """Same as ``GET /news``; the query string wins over the JSON body."""
    if category is None and body is not None:
        category = body.category
    logger.info("news_request", method="POST", category=category)
    return _json(request, _call("news_error", fetch_news, category, cache))


@app.post("/lesson")
def post_lesson(
    request: Request,
    req: LessonRequest,
    cache: TTLStore = Depends(get_lesson_cache),
) -> JSONResponse:
    logger.info("lesson_request", level=req.level, source=req.article.source)
    return _json(request, _call("lesson_error", generate_lesson, req.article, req.level, cache))
