"""Bulk tag rewrites: rename, case-mode conversion, adding a tag to a link.

All functions return new link lists; the input collection is never mutated.
"""

from .tag_utils import (
    CAMEL_CASE,
    EXPLICIT,
    classify_tag,
    convert_tag_case,
    normalize_tag,
    sanitize_tags,
)


def _keys(tag: str, mode: str) -> set[str]:
    """Spellings a tag is known by: as stored and as normalized under ``mode``."""
    keys = {tag.lstrip("#").lower(), normalize_tag(tag, mode).lower()}
    keys.discard("")
    return keys


def count_affected(links: list[dict], old_tag: str, mode: str = CAMEL_CASE) -> int:
    """Number of links carrying an explicit tag that normalizes to ``old_tag``."""
    old_keys = _keys(old_tag, mode)
    return sum(1 for link in links if any(_keys(t, mode) & old_keys for t in link.get("tags", [])))


def rename_tag(links: list[dict], old_tag: str, new_tag: str, mode: str = CAMEL_CASE) -> tuple[list[dict], int]:
    """Respell ``old_tag`` as ``new_tag`` on every link carrying it.

    Stored tags match when they normalize to ``old_tag`` under ``mode`` (case
    ignored), so legacy spellings like ``machine learning`` are found too.
    ``new_tag`` is used verbatim (it is already normalized). A link that ends up
    with the new name twice keeps a single copy in the first position.
    Domain tags are derived from URLs and cannot be renamed.

    Returns:
        Tuple of (updated links, number of links changed)
    """
    old_keys = _keys(old_tag, mode)
    if classify_tag(old_tag).kind != EXPLICIT or not new_tag or not old_keys:
        return list(links), 0

    updated = []
    affected = 0
    for link in links:
        tags = link.get("tags", [])
        if not any(_keys(t, mode) & old_keys for t in tags):
            updated.append(link)
            continue
        affected += 1
        renamed = [new_tag if _keys(t, mode) & old_keys else t for t in tags]
        updated.append({**link, "tags": sanitize_tags(renamed, link.get("url") or "")})
    return updated, affected


def recase_links(links: list[dict], mode: str) -> list[dict]:
    """Convert every stored tag to ``mode`` (domain tags are not stored, so untouched)."""
    updated = []
    for link in links:
        tags = link.get("tags", [])
        if not tags:
            updated.append(link)
            continue
        converted = [convert_tag_case(t, mode) for t in tags]
        updated.append({**link, "tags": sanitize_tags(converted, link.get("url") or "")})
    return updated


def add_tag(links: list[dict], link_id, tag: str, mode: str) -> tuple[list[dict], bool]:
    """Attach an explicit tag to one link (the drag-a-chip-onto-a-link action).

    Domain and reserved tags are refused, as is a tag the link already has.

    Returns:
        Tuple of (links, whether anything changed)
    """
    if classify_tag(tag).kind != EXPLICIT:
        return list(links), False
    normalized = normalize_tag(tag, mode)
    if not normalized:
        return list(links), False

    updated = []
    changed = False
    for link in links:
        if link.get("id") != link_id:
            updated.append(link)
            continue
        existing = link.get("tags", [])
        if any(t.lower() == normalized.lower() for t in existing):
            updated.append(link)
            continue
        new_tags = sanitize_tags(existing + [normalized], link.get("url") or "")
        changed = len(new_tags) != len(existing)
        updated.append({**link, "tags": new_tags})
    return updated, changed
