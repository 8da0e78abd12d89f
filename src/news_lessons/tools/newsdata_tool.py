from typing import Any, Dict, List

import httpx

from ..config import settings
from ..errors import ConfigurationError, UpstreamError
from ..models.news import Article


_NEWSDATA_LATEST_URL = "https://newsdata.io/api/1/latest"


def _to_article(item: Dict[str, Any], fallback_topic: str) -> Article:
    categories = item.get("category") or []
    return Article(
        title=item.get("title") or "",
        source=item.get("source_name") or "Unknown",
        summary=item.get("description") or item.get("title"),
        topic=categories[0] if categories else fallback_topic,
        image=item.get("image_url") or None,
        link=item.get("link") or "",
        pubDate=item.get("pubDate") or "",
    )


def fetch_latest_newsdata(category: str, provider_category: str, size: int = 5) -> List[Article]:
    """Fetch the latest English headlines for a category from NewsData.io.

    ``category`` is our own category name and only used as the topic when
    the provider does not tag an item. ``provider_category`` is what gets
    sent upstream.
    """

    if not settings.newsdata_api_key:
        raise ConfigurationError("NEWSDATA_API_KEY not configured")

    params = {
        "apikey": settings.newsdata_api_key,
        "language": "en",
        "category": provider_category,
        "image": 1,
        "size": size,
    }

    try:
        response = httpx.get(_NEWSDATA_LATEST_URL, params=params, timeout=settings.http_timeout_seconds)
    except httpx.HTTPError as exc:
        raise UpstreamError(str(exc) or "NewsData request failed") from exc

    try:
        data = response.json()
    except ValueError as exc:
        raise UpstreamError("NewsData API returned a non-JSON response") from exc

    if not isinstance(data, dict) or data.get("status") != "success":
        results = data.get("results") if isinstance(data, dict) else None
        message = results.get("message") if isinstance(results, dict) else None
        raise UpstreamError(message or "NewsData API error")

    raw_articles = data.get("results") or []
    if not isinstance(raw_articles, list):
        raise UpstreamError("NewsData API returned unexpected results")

    articles = [
        _to_article(item, category)
        for item in raw_articles
        if isinstance(item, dict) and item.get("title")
    ]
    return articles[:size]
