"""Filtering and ordering of the link list."""

from datetime import datetime, timezone

from .parser import COMMAND_MARKER
from .tag_index import link_tag_set, link_tags
from .tag_utils import is_no_tag

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def parse_created(value) -> datetime:
    """Parse an ISO timestamp (a trailing ``Z`` is accepted); unknown sorts oldest."""
    if not value:
        return _OLDEST
    try:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return _OLDEST
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def has_tags(link: dict) -> bool:
    return any(t for t in link.get("tags", []))


def link_matches_tags(link: dict, selected_tags: list[str]) -> bool:
    """AND across selected tags; ``noTag`` only matches untagged links, and only alone."""
    if not selected_tags:
        return True
    if any(is_no_tag(t) for t in selected_tags):
        others = [t for t in selected_tags if not is_no_tag(t)]
        return not others and not has_tags(link)
    wanted = {t.lstrip("#").lower() for t in selected_tags}
    return wanted <= link_tag_set(link)


def link_matches_search(link: dict, search_term: str) -> bool:
    """Substring match against the URL and every tag; commands never filter."""
    if not search_term or search_term.startswith(COMMAND_MARKER):
        return True
    term = search_term.lower()
    if term in (link.get("url") or "").lower():
        return True
    return any(term in tag.lower() for tag in link_tags(link))


def sort_links(links: list[dict]) -> list[dict]:
    """Untagged links first, newest first within each group."""
    by_date = sorted(links, key=lambda l: parse_created(l.get("created_at")), reverse=True)
    return sorted(by_date, key=has_tags)


def query_links(links: list[dict], selected_tags: list[str], search_term: str = "") -> list[dict]:
    """Apply the tag filter and search term, then order the result."""
    return sort_links([
        link for link in links
        if link_matches_tags(link, selected_tags) and link_matches_search(link, search_term)
    ])
