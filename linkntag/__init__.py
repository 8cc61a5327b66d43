"""link-n-tag: bookmarks with #tags, domain tags and tag-driven filtering."""

__version__ = "0.1.0"
