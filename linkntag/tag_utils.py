"""Tag normalization, tag flavours and domain tags."""

import re
from typing import NamedTuple
from urllib.parse import urlparse

CAMEL_CASE = "camelCase"
SNAKE_CASE = "snake_case"
CASE_MODES = (CAMEL_CASE, SNAKE_CASE)

# Reserved pseudo-tag: "links with no explicit tags"
NO_TAG = "noTag"

EXPLICIT = "explicit"
DOMAIN = "domain"
RESERVED = "reserved"

DOMAIN_FALLBACK_PATTERN = re.compile(r"https?://(?:www\.)?([^/]+)", re.IGNORECASE)
_PHRASE_SPLIT = re.compile(r"[\s_]+")
_WHITESPACE = re.compile(r"\s+")


class Tag(NamedTuple):
    kind: str
    value: str


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def to_camel_case(phrase: str) -> str:
    """Join words as camelCase: first word lower-cased, the rest capitalized."""
    words = [w for w in _PHRASE_SPLIT.split(phrase) if w]
    if not words:
        return ""
    return words[0].lower() + "".join(_capitalize(w) for w in words[1:])


def to_snake_case(tag: str) -> str:
    """Convert a phrase or a camelCase token to snake_case."""
    if _WHITESPACE.search(tag):
        return _WHITESPACE.sub("_", tag.lower())
    if "_" not in tag and any(c.isupper() for c in tag[1:]):
        return (tag[0] + "".join(f"_{c}" if c.isupper() else c for c in tag[1:])).lower()
    return tag.lower()


def convert_tag_case(tag: str, mode: str) -> str:
    """Convert a single stored tag (no spaces) to the given case mode."""
    if not tag:
        return tag
    if mode == SNAKE_CASE:
        return to_snake_case(tag)
    if "_" in tag:
        return to_camel_case(tag)
    return tag[:1].lower() + tag[1:]


def normalize_tag(raw: str, mode: str) -> str:
    """Return the canonical spelling of a raw tag token under ``mode``.

    Leading ``#`` markers are stripped. Phrases (containing whitespace) are
    joined in the target style; single tokens are converted from their current
    style. Returns ``""`` when nothing is left.
    """
    if not raw:
        return ""
    tag = raw.strip().lstrip("#").strip()
    if not tag:
        return ""
    if _WHITESPACE.search(tag):
        return to_snake_case(tag) if mode == SNAKE_CASE else to_camel_case(tag)
    return convert_tag_case(tag, mode)


def is_no_tag(tag: str) -> bool:
    return tag.lstrip("#").lower() == NO_TAG.lower()


def classify_tag(raw: str) -> Tag:
    """Turn a raw tag string (as shown or typed) into a tagged ``Tag``."""
    value = raw.strip().lstrip("#")
    if is_no_tag(value):
        return Tag(RESERVED, NO_TAG)
    if value.startswith("@"):
        return Tag(DOMAIN, value)
    return Tag(EXPLICIT, value)


def is_draggable(raw: str) -> bool:
    """Only explicit tags can be dropped onto other links."""
    return classify_tag(raw).kind == EXPLICIT


def display_tag(raw: str) -> str:
    """Prefix explicit and reserved tags with ``#`` for display."""
    tag = classify_tag(raw)
    if tag.kind == DOMAIN:
        return tag.value
    return f"#{tag.value}"


def get_domain(url: str) -> str:
    """Extract the host of ``url`` without a leading ``www.``.

    Falls back to a regex and finally to the raw URL; never raises.
    """
    try:
        parsed = urlparse(url.strip())
        if parsed.scheme.lower() == "file":
            return "file"
        host = parsed.hostname or ""
    except ValueError:
        host = ""
    if host:
        return host[4:] if host.startswith("www.") else host
    match = DOMAIN_FALLBACK_PATTERN.search(url)
    return match.group(1) if match else url


def get_domain_tag(url: str) -> str | None:
    """Return the derived ``@domain`` tag for a URL, or None for an empty URL."""
    if not url:
        return None
    domain = get_domain(url)
    return f"@{domain}" if domain else None


def sanitize_tags(tags: list[str], url: str = "") -> list[str]:
    """Drop empty, duplicate (case-insensitive), reserved and own-domain tags."""
    domain_tag = (get_domain_tag(url) or "").lower()
    seen = set()
    result = []
    for tag in tags:
        key = tag.lower()
        if not tag or key in seen or is_no_tag(tag) or key == domain_tag:
            continue
        seen.add(key)
        result.append(tag)
    return result
