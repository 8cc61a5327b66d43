"""Rename tag command."""

from .add import add_link


def rename_tags(old_tag: str, new_tag: str, yes: bool = False) -> int:
    """Rename a tag on every link; same flow as typing ``> rename | #old | #new``."""
    return add_link(f"> rename | #{old_tag.lstrip('#')} | #{new_tag.lstrip('#')}", yes=yes)
