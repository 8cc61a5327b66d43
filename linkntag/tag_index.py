"""Tag statistics over the link collection and co-occurrence suggestions."""

from collections import Counter
from typing import NamedTuple

from .tag_utils import get_domain_tag, is_no_tag


class TagIndex(NamedTuple):
    """Derived view: lower-cased tag -> link count, plus first-seen spellings."""

    cardinality: Counter
    vocabulary: list[str]

    def count(self, tag: str) -> int:
        return self.cardinality.get(tag.lower(), 0)

    def max_count(self) -> int:
        return max(self.cardinality.values(), default=0)

    def rank(self, tags: list[str]) -> list[str]:
        """Order tags by descending cardinality; ties keep their input order."""
        return sorted(tags, key=self.count, reverse=True)


def link_tags(link: dict) -> list[str]:
    """Explicit tags of a link followed by its domain tag (if any)."""
    tags = [t for t in link.get("tags", []) if t]
    domain_tag = get_domain_tag(link.get("url") or "")
    if domain_tag:
        tags.append(domain_tag)
    return tags


def link_tag_set(link: dict) -> set[str]:
    """Lower-cased derived tag set of a link (explicit + domain)."""
    return {t.lower() for t in link_tags(link)}


def build_index(links: list[dict]) -> TagIndex:
    """Count every explicit and domain tag across ``links``.

    Each link contributes once per explicit tag and once for its domain tag.
    The vocabulary keeps the first spelling seen, walking each link's domain
    tag before its explicit tags.
    """
    cardinality = Counter()
    vocabulary = []
    seen = set()
    for link in links:
        domain_tag = get_domain_tag(link.get("url") or "")
        ordered = ([domain_tag] if domain_tag else []) + [t for t in link.get("tags", []) if t]
        for tag in ordered:
            key = tag.lower()
            cardinality[key] += 1
            if key not in seen:
                seen.add(key)
                vocabulary.append(tag)
    return TagIndex(cardinality, vocabulary)


def matching_links(links: list[dict], selected_tags: list[str]) -> list[dict]:
    """Links whose derived tag set contains every selected tag."""
    wanted = {t.lstrip("#").lower() for t in selected_tags}
    return [link for link in links if wanted <= link_tag_set(link)]


def cooccurring_tags(links: list[dict], selected_tags: list[str]) -> set[str]:
    """Lower-cased tags sharing a link with all selected tags (selected excluded)."""
    wanted = {t.lstrip("#").lower() for t in selected_tags}
    pool = set()
    for link in matching_links(links, selected_tags):
        pool |= link_tag_set(link) - wanted
    return pool


def available_tags(links: list[dict], selected_tags: list[str], index: TagIndex | None = None) -> list[str]:
    """Tags worth offering next given the current selection.

    With no selection this is the whole vocabulary ranked by cardinality.
    Otherwise only the rarest co-occurring tags are offered, which steers the
    user toward narrower refinements.
    """
    if index is None:
        index = build_index(links)

    if not selected_tags:
        return index.rank(index.vocabulary)

    if any(is_no_tag(t) for t in selected_tags):
        return []

    pool = cooccurring_tags(links, selected_tags)
    if not pool:
        return []

    min_count = min(index.cardinality[tag] for tag in pool)
    candidates = [t for t in index.vocabulary if t.lower() in pool and index.count(t) == min_count]
    return index.rank(candidates)
