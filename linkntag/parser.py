"""Parsing of the free-text entry line: title words, #tags and commands."""

import re
from typing import NamedTuple

from .tag_utils import normalize_tag

# The entry field doubles as a command line: "> rename | #old | #new"
COMMAND_MARKER = ">"
RENAME_PATTERN = re.compile(
    r"^>\s*rename\s*\|\s*(?P<old>[^|]+?)\s*\|\s*(?P<new>[^|]+?)\s*$",
    re.IGNORECASE,
)


class ParsedText(NamedTuple):
    body: str
    tags: list[str]


class RenameRequest(NamedTuple):
    old_tag: str
    new_tag: str


def parse_rename(text: str, mode: str) -> RenameRequest | None:
    """Recognize the rename command; both sides come back normalized."""
    match = RENAME_PATTERN.match(text.strip())
    if not match:
        return None
    old_tag = normalize_tag(match.group("old"), mode)
    new_tag = normalize_tag(match.group("new"), mode)
    if not old_tag or not new_tag:
        return None
    return RenameRequest(old_tag, new_tag)


def parse_tags(tokens: list[str], mode: str) -> list[str]:
    """Normalize ``#token`` candidates, dropping empties and case-insensitive repeats."""
    tags = []
    seen = set()
    for token in tokens:
        tag = normalize_tag(token, mode)
        if not tag or tag.lower() in seen:
            continue
        seen.add(tag.lower())
        tags.append(tag)
    return tags


def parse_link_text(text: str, mode: str) -> ParsedText | RenameRequest:
    """Split entry text into a title body and normalized tags.

    Example: ``"Great read #python #web dev"`` gives body ``"Great read dev"``
    and tags ``["python", "web"]``. A rename command is returned as a
    ``RenameRequest`` instead, so the caller can route it separately.
    """
    if not text:
        return ParsedText("", [])

    rename = parse_rename(text, mode)
    if rename is not None:
        return rename

    body_parts = []
    tag_tokens = []
    for word in text.split():
        if word.startswith("#"):
            tag_tokens.append(word)
        else:
            body_parts.append(word)

    return ParsedText(" ".join(body_parts), parse_tags(tag_tokens, mode))


def format_link_text(link: dict) -> str:
    """Render a link back into its editable ``title #tag1 #tag2`` form."""
    title = link.get("title", "")
    tags = " ".join(f"#{t}" for t in link.get("tags", []))
    return f"{title} {tags}".strip()
