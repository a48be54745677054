"""
src/tools/web.py — http_request and search tools.

Both go through httpx with a fixed timeout. Tests pass their own httpx.Client
(e.g. backed by httpx.MockTransport); otherwise a short-lived client is opened per call.
"""


import json
import logging
from typing import Any, Callable, Dict, Optional
import httpx

from config import (
    BRAVE_SEARCH_URL,
    DEFAULT_COUNTRY,
    DEFAULT_SEARCH_COUNT,
    HTTP_METHODS,
    HTTP_TIMEOUT_S,
    MAX_SEARCH_COUNT,
    brave_api_key,
)
from tools.registry import Tool, ToolExecutionError, object_schema


logger = logging.getLogger(__name__)


def _send(client: Optional[httpx.Client], method: str, url: str, **kwargs) -> httpx.Response:

    if client is not None:
        return client.request(method, url, **kwargs)

    with httpx.Client(timeout=HTTP_TIMEOUT_S, follow_redirects=True) as c:
        return c.request(method, url, **kwargs)


# -------- http_request ---------------------------------------------------------
def _render_body(resp: httpx.Response) -> str:

    content_type = resp.headers.get("content-type", "")

    if "application/json" in content_type:
        return json.dumps(resp.json(), indent=2, ensure_ascii=False)

    return resp.text

def http_request(
        url: str,
        *,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
        client: Optional[httpx.Client] = None,
) -> str:
    """
    Issue one HTTP request and render status, content type and body.

    Raises:
        ToolExecutionError: invalid URL, network error, timeout, or undecodable JSON.
    """

    method = (method or "GET").upper()

    try:
        if method not in HTTP_METHODS:
            raise ValueError(f"unsupported method {method}")
        if headers is not None and not isinstance(headers, dict):
            raise ValueError("headers must be an object")
        # Header values arrive as arbitrary JSON scalars
        headers = {str(k): str(v) for k, v in (headers or {}).items()}
        resp = _send(client, method, url, headers=headers, content=body)
        rendered = _render_body(resp)
    except (httpx.HTTPError, httpx.InvalidURL, TypeError, ValueError) as e:
        raise ToolExecutionError(f"HTTP request failed: {e}") from e

    content_type = resp.headers.get("content-type", "")

    return (
        f"HTTP {method} {url}\n"
        f"Status: {resp.status_code} {resp.reason_phrase}\n"
        f"Content-Type: {content_type}\n\n"
        f"Response:\n{rendered}"
    )

def http_request_tool(client: Optional[httpx.Client] = None) -> Tool:

    def _execute(args: Dict[str, Any]) -> str:

        return http_request(
            str(args.get("url") or ""),
            method=args.get("method") or "GET",
            headers=args.get("headers"),
            body=args.get("body"),
            client=client,
        )

    return Tool(
        name="http_request",
        description="Make an HTTP request to a URL and return the response",
        input_schema=object_schema(
            {
                "url": {"type": "string", "description": "The URL to make the request to"},
                "method": {
                    "type": "string",
                    "description": "HTTP method (GET, POST, etc.)",
                    "enum": list(HTTP_METHODS),
                },
                "headers": {"type": "object", "description": "Optional HTTP headers"},
                "body": {"type": "string", "description": "Optional request body for POST/PUT requests"},
            },
            required=["url"],
        ),
        execute=_execute,
    )


# -------- search ---------------------------------------------------------------
def format_search_results(query: str, country: str, data: Dict[str, Any]) -> str:

    results = (data.get("web") or {}).get("results") or []

    out = f'Search Results for: "{query}"\n'
    out += f"Country: {country}, Results: {len(results)}\n\n"

    if not results:
        return out + "No search results found.\n"

    for i, item in enumerate(results, start=1):
        out += f"{i}. {item.get('title', '')}\n"
        out += f"   URL: {item.get('url', '')}\n"
        out += f"   Description: {item.get('description', '')}\n\n"

    return out

def search(
        query: str,
        *,
        count: int = DEFAULT_SEARCH_COUNT,
        country: str = DEFAULT_COUNTRY,
        client: Optional[httpx.Client] = None,
        api_key_fn: Callable[[], Optional[str]] = brave_api_key,
) -> str:
    """
    Query the Brave web search API.

    Raises:
        ToolExecutionError: BRAVE_API_KEY is unset, the API answers non-2xx, or the request fails.
    """

    try:
        api_key = api_key_fn()
        if not api_key:
            raise ValueError("BRAVE_API_KEY environment variable is not set")

        count = max(1, min(int(count), MAX_SEARCH_COUNT))
        resp = _send(
            client,
            "GET",
            BRAVE_SEARCH_URL,
            params={"q": query, "count": str(count), "country": country},
            headers={
                "Accept": "application/json",
                "Accept-Encoding": "gzip",
                "X-Subscription-Token": api_key,
            },
        )
        if not resp.is_success:
            raise ValueError(f"Brave Search API error: {resp.status_code} {resp.reason_phrase}")
        data = resp.json()
    except (httpx.HTTPError, httpx.InvalidURL, ValueError, TypeError) as e:
        raise ToolExecutionError(f"Search failed: {e}") from e

    logger.debug("Search for %r returned %s bytes", query, len(resp.content))

    return format_search_results(query, country, data)

def search_tool(
        client: Optional[httpx.Client] = None,
        api_key_fn: Callable[[], Optional[str]] = brave_api_key,
) -> Tool:

    def _execute(args: Dict[str, Any]) -> str:

        return search(
            str(args.get("query") or ""),
            count=args.get("count") or DEFAULT_SEARCH_COUNT,
            country=args.get("country") or DEFAULT_COUNTRY,
            client=client,
            api_key_fn=api_key_fn,
        )

    return Tool(
        name="search",
        description="Search the web using Brave Search API",
        input_schema=object_schema(
            {
                "query": {"type": "string", "description": "Search query (max 400 characters, 50 words)"},
                "count": {
                    "type": "number",
                    "description": f"Number of search results to return (max {MAX_SEARCH_COUNT})",
                    "minimum": 1,
                    "maximum": MAX_SEARCH_COUNT,
                },
                "country": {
                    "type": "string",
                    "description": "Country code for search results (e.g., US, UK, CA)",
                    "default": DEFAULT_COUNTRY,
                },
            },
            required=["query"],
        ),
        execute=_execute,
    )
