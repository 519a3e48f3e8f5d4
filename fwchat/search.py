"""Google Custom Search backed ``web_search`` tool."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from .core.messages import ToolDefinition, ToolParameter

logger = logging.getLogger(__name__)

GOOGLE_SEARCH_URL = "https://www.googleapis.com/customsearch/v1"
MAX_RESULTS = 10

WEB_SEARCH_TOOL = ToolDefinition(
    name="web_search",
    description="Search the internet for current information",
    parameters=(ToolParameter(name="query", type="string", description="Search query"),),
)


def format_results(query: str, items: Any) -> str:
    if not items:
        return "No search results found."
    lines = [f'Search results for "{query}":', ""]
    for rank, item in enumerate(items, start=1):
        item = item if isinstance(item, dict) else {}
        lines.append(f"{rank}. {item.get('title') or ''}")
        lines.append(f"   URL: {item.get('link') or ''}")
        lines.append(f"   {item.get('snippet') or ''}")
        lines.append("")
    return "\n".join(lines) + "\n"


class GoogleSearch:
    """Callable search capability. Errors come back as text, never as exceptions."""

    def __init__(
        self,
        api_key: str,
        cx: str = "",
        *,
        http_client: Optional[httpx.Client] = None,
        timeout: float = 30.0,
    ):
        self.api_key = api_key
        self.cx = cx
        self._http = http_client or httpx.Client(timeout=timeout)

    def __call__(self, query: str) -> str:
        if not query or not query.strip():
            return "Error performing web search: empty query"
        params: Dict[str, Any] = {"key": self.api_key, "q": query, "num": MAX_RESULTS}
        if self.cx:
            params["cx"] = self.cx

        logger.info("Searching the web for %r", query)
        try:
            response = self._http.get(GOOGLE_SEARCH_URL, params=params)
            if not response.is_success:
                logger.warning("Web search returned %d", response.status_code)
                return (
                    "Error performing web search: Google Search API Error: "
                    f"{response.status_code} {response.reason_phrase}\n{response.text}"
                )
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Web search failed: %s", exc)
            return f"Error performing web search: {exc}"

        items = data.get("items") if isinstance(data, dict) else None
        return format_results(query, items)

    def handle(self, arguments: Dict[str, Any]) -> str:
        """Tool-registry adapter: ``{"query": ...}`` -> formatted results."""
        query = arguments.get("query")
        return self(query if isinstance(query, str) else "")

    def close(self) -> None:
        self._http.close()
