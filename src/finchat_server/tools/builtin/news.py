"""news tool backed by NewsAPI.

A free-text query takes precedence over a category; with neither, the
default US top-headlines feed is returned.
"""

import logging
from typing import Any

from pydantic import BaseModel

from finchat_server.errors import ToolExecutionError
from finchat_server.tools.providers import fetch_json, require_credential
from finchat_server.tools.registry import (
    Tool,
    ToolArguments,
    ToolContext,
    ToolParameter,
    ToolSpec,
)

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "Failed to fetch news data"
MISSING_KEY_MESSAGE = "News API key not configured"
MAX_ARTICLES = 5


class NewsArguments(ToolArguments):
    query: str | None = None
    category: str | None = None


class NewsArticle(BaseModel):
    title: str | None = None
    description: str | None = None
    url: str | None = None
    source_name: str | None = None
    published_at: str | None = None

    @classmethod
    def from_provider(cls, raw: dict[str, Any]) -> "NewsArticle":
        source = raw.get("source") or {}
        return cls(
            title=raw.get("title"),
            description=raw.get("description"),
            url=raw.get("url"),
            source_name=source.get("name") if isinstance(source, dict) else None,
            published_at=raw.get("publishedAt"),
        )


def build_news_request(
    query: str | None, category: str | None
) -> tuple[str, dict[str, Any]]:
    """Return the endpoint path and query parameters for a news lookup."""
    params: dict[str, Any] = {"pageSize": MAX_ARTICLES, "language": "en"}
    query = (query or "").strip()
    category = (category or "").strip()

    if query:
        params["q"] = query
        return "everything", params

    if category:
        params["category"] = category
    params["country"] = "us"
    return "top-headlines", params


async def fetch_news(args: NewsArguments, context: ToolContext) -> list[NewsArticle]:
    api_key = require_credential(context.settings.news_api_key, MISSING_KEY_MESSAGE)
    endpoint, params = build_news_request(args.query, args.category)

    data = await fetch_json(
        context,
        f"{context.settings.news_api_base_url}/{endpoint}",
        FAILURE_MESSAGE,
        params=params,
        headers={"X-Api-Key": api_key},
    )

    if not isinstance(data, dict) or data.get("status") == "error":
        logger.warning(f"{FAILURE_MESSAGE}: provider reported an error")
        raise ToolExecutionError(FAILURE_MESSAGE)

    articles = data.get("articles") or []
    if not isinstance(articles, list):
        logger.warning(f"{FAILURE_MESSAGE}: articles is not a list")
        raise ToolExecutionError(FAILURE_MESSAGE)

    logger.debug(f"News provider returned {len(articles)} articles from {endpoint}")
    return [
        NewsArticle.from_provider(raw)
        for raw in articles[:MAX_ARTICLES]
        if isinstance(raw, dict)
    ]


NEWS_TOOL = Tool(
    spec=ToolSpec(
        name="news",
        description="Get latest news articles by category or search query",
        parameters=(
            ToolParameter(
                "query", "string", "Search query for news articles", required=False
            ),
            ToolParameter(
                "category",
                "string",
                "News category (technology, business, sports, etc.)",
                required=False,
            ),
        ),
    ),
    arguments=NewsArguments,
    handler=fetch_news,
)
