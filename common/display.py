"""Display and formatting utilities."""

from rich.console import Console
from rich.text import Text

from linkntag.tag_utils import EXPLICIT, classify_tag, display_tag

console = Console(highlight=False)

# Tag colors run from grey (rare) to teal (most used)
GREY = (136, 136, 136)
TEAL = (122, 163, 163)


def get_tag_color(tag_name: str, index) -> str:
    """Interpolate a tag's color by its cardinality relative to the busiest tag.

    Domain (``@``) and reserved (``noTag``) tags are always dim.
    """
    if classify_tag(tag_name).kind != EXPLICIT:
        return "dim"
    ratio = index.count(tag_name) / max(index.max_count(), 1)
    r, g, b = (round(lo + (hi - lo) * ratio) for lo, hi in zip(GREY, TEAL))
    return f"rgb({r},{g},{b})"


def format_tag_chip(tag_name: str, index, selected: bool = False) -> Text:
    """One tag chip: ``#tag`` / ``@domain``, bold and underlined when selected."""
    style = get_tag_color(tag_name, index)
    if selected:
        style += " bold underline"
    return Text(display_tag(tag_name), style=style)


def format_tags_display(tags: list[str], index) -> Text:
    """Space-separated colored tag chips."""
    text = Text()
    for i, tag in enumerate(tags):
        if i:
            text.append(" ")
        text.append(format_tag_chip(tag, index))
    return text
