#!/usr/bin/env python3
"""
link-n-tag: save links with #tags and browse them by tag.

Usage:
    # Save the URL on the clipboard (or --url) with a title and tags
    python link_n_tag.py add "Great article #python #web dev"
    python link_n_tag.py add "#python" --url https://example.com --fetch-title

    # List links filtered by tags (AND) and/or a search term
    python link_n_tag.py list --tags python,@example.com
    python link_n_tag.py list --tags noTag           # untagged links only
    python link_n_tag.py list --search docs

    # Tags worth selecting next (rarest co-occurring tags when filtered)
    python link_n_tag.py tags --tags python

    # Rename a tag everywhere (same as typing "> rename | #old | #new")
    python link_n_tag.py rename old_tag newTag --yes

    # Switch tag spelling, converting every stored tag
    python link_n_tag.py case-mode snake_case

    # Interactive browser
    python link_n_tag.py tui
"""

from linkntag.cli import main

if __name__ == "__main__":
    main()
