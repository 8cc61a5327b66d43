"""Exceptions raised by link-n-tag components."""


class LinkNTagError(Exception):
    """Base exception for errors reported to the user by commands."""
    pass


class StoreError(LinkNTagError):
    """Raised when the link store cannot be written."""
    pass


class TitleFetchError(LinkNTagError):
    """Raised by a single title fetch route; never escapes ``fetch_title``."""
    pass
