from datetime import datetime, timezone
from typing import Any, Dict, List

from ..config import settings
from ..logging_config import get_logger
from ..tools.cache import TTLStore
from ..tools.newsdata_tool import fetch_latest_newsdata


logger = get_logger("core.news_fetcher")

DEFAULT_CATEGORY = "world"

# Our category names -> NewsData.io taxonomy.
CATEGORY_MAP = {
    "world": "world",
    "business": "business",
    "tech": "technology",
    "sports": "sports",
}


def resolve_category(category: str | None) -> str:
    """Return a known category name, falling back to ``world``."""
    if category in CATEGORY_MAP:
        return category
    return DEFAULT_CATEGORY


def news_cache_key(category: str, now: float) -> str:
    today = datetime.fromtimestamp(now, tz=timezone.utc).date().isoformat()
    return f"news_{category}_{today}"


def fetch_news(category: str | None, cache: TTLStore) -> List[Dict[str, Any]]:
    """Return up to ``news_page_size`` articles for today's UTC date.

    Results are cached per (category, day). The cache is checked before the
    credential so a warm entry keeps being served.
    """
    resolved = resolve_category(category)
    if category is not None and resolved != category:
        logger.info("fetch_news_unknown_category", requested=category, resolved=resolved)

    key = news_cache_key(resolved, cache.now())
    cached = cache.get(key)
    if cached is not None:
        logger.info("fetch_news_cache_hit", category=resolved, cache_key=key, results=len(cached))
        return cached

    logger.info("fetch_news_call", category=resolved, provider_category=CATEGORY_MAP[resolved])
    articles = fetch_latest_newsdata(
        resolved,
        CATEGORY_MAP[resolved],
        size=settings.news_page_size,
    )
    payload = [article.to_payload() for article in articles]

    cache.set(key, payload)
    logger.info("fetch_news_fetched", category=resolved, cache_key=key, results=len(payload))
    return payload
