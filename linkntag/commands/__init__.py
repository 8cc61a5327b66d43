"""Command implementations for link-n-tag."""

from .add import add_link
from .edit import edit_link, remove_link, tag_link
from .list_links import list_links
from .rename import rename_tags
from .settings import case_mode, theme
from .tags import show_tags
from .title import share_link, show_title
from .tui import launch_tui

__all__ = [
    "add_link",
    "case_mode",
    "edit_link",
    "launch_tui",
    "list_links",
    "remove_link",
    "rename_tags",
    "share_link",
    "show_tags",
    "show_title",
    "tag_link",
    "theme",
]
