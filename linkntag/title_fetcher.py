"""Best-effort page title lookup.

Tries the page directly and then a fixed list of relay services, taking the
first response that looks like an HTML page. Any failure yields ``None``.
"""

import re
import time
from urllib.parse import quote, urlparse

import requests
from bs4 import BeautifulSoup

from common.display import console
from common.url_utils import ensure_scheme
from .config import get_title_timeout
from .errors import TitleFetchError

FETCH_ROUTES = [
    "{url}",
    "https://api.allorigins.win/raw?url={quoted}",
    "https://corsproxy.io/?{quoted}",
    "https://api.codetabs.com/v1/proxy?quest={quoted}",
]

HEADERS = {
    "Accept": "text/html",
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
}

TITLE_MAX_CHARS = 100
MIN_HTML_CHARS = 100

_verbose = False


def set_verbose(enabled: int | bool) -> None:
    """Enable or disable verbose request logging."""
    global _verbose
    _verbose = enabled


def _log(message: str) -> None:
    if _verbose:
        console.print(f"  [dim][HTTP] {message}[/dim]")


def _route_url(route: str, url: str) -> str:
    return route.format(url=url, quoted=quote(url, safe=""))


def _fetch_html(route_url: str, timeout: float) -> str:
    """GET one route and return its body if it looks like an HTML page.

    Raises:
        TitleFetchError: On HTTP/connection errors or a non-HTML body
        requests.Timeout: When the attempt exceeds ``timeout``
    """
    _log(f"GET {urlparse(route_url).netloc}")
    t0 = time.monotonic()
    try:
        response = requests.get(route_url, headers=HEADERS, timeout=timeout)
        response.raise_for_status()
    except requests.Timeout:
        raise
    except requests.RequestException as e:
        raise TitleFetchError(str(e)) from e
    _log(f"{response.status_code} ({time.monotonic() - t0:.1f}s)")

    content_type = response.headers.get("content-type", "").lower()
    if content_type and "html" not in content_type:
        raise TitleFetchError(f"not HTML: {content_type}")
    body = response.text
    if not body or len(body) <= MIN_HTML_CHARS or "<title" not in body.lower():
        raise TitleFetchError("response is not an HTML page")
    return body


def clean_title(title: str) -> str:
    """Collapse whitespace and cap the length."""
    title = re.sub(r"\s+", " ", title).strip()
    if len(title) > TITLE_MAX_CHARS:
        title = title[:TITLE_MAX_CHARS] + "..."
    return title


def extract_title(html: str) -> str | None:
    """Pick og:title, then twitter:title, then <title>."""
    soup = BeautifulSoup(html, "html.parser")
    candidates = [
        soup.find("meta", attrs={"property": "og:title"}),
        soup.find("meta", attrs={"name": "twitter:title"}),
    ]
    for meta in candidates:
        if meta and meta.get("content", "").strip():
            return clean_title(meta["content"])
    if soup.title and soup.title.string and soup.title.string.strip():
        return clean_title(soup.title.string)
    return None


def fetch_title(url: str, timeout: float | None = None, routes: list[str] | None = None) -> str | None:
    """Fetch a human-readable title for ``url``.

    Args:
        url: Page URL (https:// is assumed when missing)
        timeout: Per-attempt timeout in seconds (default from LINKNTAG_TITLE_TIMEOUT)
        routes: Ordered route templates; ``{url}`` and ``{quoted}`` are filled in

    Returns:
        Cleaned title, or None if every route failed or an attempt timed out
    """
    if not url or not url.strip():
        return None
    if timeout is None:
        timeout = get_title_timeout()
    target = ensure_scheme(url)

    for route in routes or FETCH_ROUTES:
        try:
            html = _fetch_html(_route_url(route, target), timeout)
        except requests.Timeout:
            _log("timed out, giving up")
            return None
        except TitleFetchError as e:
            _log(f"skipped: {e}")
            continue
        title = extract_title(html)
        if title:
            return title
    return None
