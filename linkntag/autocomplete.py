"""#tag autocomplete for the entry field."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import NamedTuple

MAX_SUGGESTIONS = 5


class Suggestions(NamedTuple):
    active: bool
    items: list[str]
    start: int  # index of the '#' that opened the token, -1 when inactive


INACTIVE = Suggestions(False, [], -1)


def open_tag_start(text: str, cursor: int) -> int:
    """Index of the '#' opening the token under the cursor, or -1.

    The token must be on the cursor's line and not yet closed by whitespace.
    """
    cursor = max(0, min(cursor, len(text)))
    line_start = text.rfind("\n", 0, cursor) + 1
    hash_index = text.rfind("#", line_start, cursor)
    if hash_index == -1:
        return -1
    if any(c.isspace() for c in text[hash_index + 1:cursor]):
        return -1
    return hash_index


def suggest(
    text: str,
    cursor: int,
    vocabulary: list[str],
    cardinality: Mapping[str, int] | None = None,
) -> Suggestions:
    """Vocabulary entries completing the ``#token`` under the cursor.

    Exact matches are left out since there is nothing to complete. When
    ``cardinality`` is given, candidates are ranked most-used first.
    """
    start = open_tag_start(text, cursor)
    if start == -1:
        return INACTIVE

    typed = text[start + 1:cursor].lower()
    matches = [t for t in vocabulary if t.lower().startswith(typed) and len(t) > len(typed)]
    if cardinality is not None:
        matches.sort(key=lambda t: cardinality.get(t.lower(), 0), reverse=True)
    return Suggestions(True, matches[:MAX_SUGGESTIONS], start)


def insert_suggestion(text: str, cursor: int, suggestion: str) -> tuple[str, int]:
    """Replace the open token with ``#suggestion `` and return (text, new cursor)."""
    start = open_tag_start(text, cursor)
    if start == -1:
        return text, cursor
    head = text[:start + 1] + suggestion + " "
    return head + text[cursor:], len(head)


@dataclass
class SuggestionMenu:
    """Highlight state of the suggestion popup.

    ``index`` -1 means nothing is highlighted; committing then takes the first item.
    """

    items: list[str] = field(default_factory=list)
    index: int = -1

    @property
    def visible(self) -> bool:
        return bool(self.items)

    def show(self, items: list[str]) -> None:
        self.items = list(items)
        self.index = -1

    def hide(self) -> None:
        self.items = []
        self.index = -1

    def move_down(self) -> None:
        if self.index < len(self.items) - 1:
            self.index += 1

    def move_up(self) -> None:
        self.index = self.index - 1 if self.index > 0 else -1

    def choice(self) -> str | None:
        if not self.items:
            return None
        return self.items[self.index if self.index >= 0 else 0]

    def handle_key(self, key: str) -> str | None:
        """Apply a navigation key. Returns "moved", "commit", "dismiss" or None."""
        if not self.items:
            return None
        if key == "down":
            self.move_down()
            return "moved"
        if key == "up":
            self.move_up()
            return "moved"
        if key in ("enter", "tab"):
            return "commit"
        if key == "escape":
            self.hide()
            return "dismiss"
        return None
