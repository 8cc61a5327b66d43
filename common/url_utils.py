"""URL helpers shared by commands and adapters."""

import re
from urllib.parse import quote, urlparse

HTTP_URL_PATTERN = re.compile(r"^https?://.+", re.IGNORECASE)

FAVICON_SERVICE = "https://www.google.com/s2/favicons?domain={domain}&sz=16"


def is_http_url(text: str) -> bool:
    """True if the (trimmed) text looks like an http(s) URL."""
    return bool(text) and bool(HTTP_URL_PATTERN.match(text.strip()))


def ensure_scheme(url: str) -> str:
    """Prepend https:// to URLs typed without a scheme."""
    url = url.strip()
    if not url.startswith("http://") and not url.startswith("https://"):
        return "https://" + url
    return url


def favicon_url(url: str) -> str:
    """Favicon lookup URL for a link's site, or "" if the URL has no host."""
    try:
        host = urlparse(url.strip()).hostname or ""
    except ValueError:
        return ""
    if not host:
        return ""
    domain = host[4:] if host.startswith("www.") else host
    return FAVICON_SERVICE.format(domain=quote(domain))
