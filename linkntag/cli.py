"""CLI argument parsing and dispatch for link-n-tag."""

import argparse
import sys

from common.display import console
from .commands import (
    add_link,
    case_mode,
    edit_link,
    launch_tui,
    list_links,
    remove_link,
    rename_tags,
    share_link,
    show_tags,
    show_title,
    tag_link,
    theme,
)
from .config import THEMES
from .location import read_selected_tags
from .tag_utils import CASE_MODES
from .title_fetcher import set_verbose


def _split_tags(value: str | None) -> list[str]:
    """Comma-separated tag list, as in the ``tags`` query parameter."""
    return [t.strip() for t in (value or "").split(",") if t.strip()]


def _selected_tags(args) -> list[str]:
    """Tags from --tags followed by those encoded in a --from address."""
    tags = _split_tags(args.tags)
    if getattr(args, "from_url", None):
        seen = {t.lower() for t in tags}
        tags += [t for t in read_selected_tags(args.from_url) if t.lower() not in seen]
    return tags


def _add_add_parser(subparsers):
    """Add the 'add' subcommand parser."""
    p = subparsers.add_parser("add", help='Save a link from "title #tag1 #tag2" (or run "> rename | #old | #new")')
    p.add_argument("text", type=str, help="Title and #tags, or a > command")
    p.add_argument("--url", type=str, default=None, help="URL to save (default: URL on the clipboard)")
    p.add_argument("--fetch-title", action="store_true", help="Fetch the page title when TEXT has only tags")
    p.add_argument("-y", "--yes", action="store_true", help="Do not ask before renaming tags")
    p.add_argument("-v", "--verbose", action="count", default=0, help="-v to log title fetch requests")


def _add_list_parser(subparsers):
    """Add the 'list' subcommand parser."""
    p = subparsers.add_parser("list", help="List links, untagged first, newest first")
    p.add_argument("--tags", type=str, default=None, help="Comma-separated tags that must all match (noTag = untagged)")
    p.add_argument("--from", dest="from_url", type=str, default=None, help="Take the tag filter from a shared address (see 'share')")
    p.add_argument("--search", type=str, default="", help="Substring to find in URLs and tags")
    p.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    p.add_argument("-v", "--verbose", action="count", default=0, help="-v to show URLs and full titles")


def _add_tags_parser(subparsers):
    """Add the 'tags' subcommand parser."""
    p = subparsers.add_parser("tags", help="Show tags to filter by, with link counts")
    p.add_argument("--tags", type=str, default=None, help="Comma-separated tags already selected")
    p.add_argument("--from", dest="from_url", type=str, default=None, help="Take the selection from a shared address")


def _add_link_edit_parsers(subparsers):
    """Add the 'edit', 'rm' and 'tag' subcommand parsers."""
    p = subparsers.add_parser("edit", help='Replace a link\'s title and tags with "title #tag1 #tag2"')
    p.add_argument("id", type=int, help="Link ID")
    p.add_argument("text", type=str, help="New title and #tags")

    p = subparsers.add_parser("rm", help="Delete a link")
    p.add_argument("id", type=int, help="Link ID")

    p = subparsers.add_parser("tag", help="Add a tag to a link")
    p.add_argument("id", type=int, help="Link ID")
    p.add_argument("tag", type=str, help="Tag to add")


def _add_rename_parser(subparsers):
    """Add the 'rename' subcommand parser."""
    p = subparsers.add_parser("rename", help="Rename a tag on every link")
    p.add_argument("old", type=str, help="Current tag")
    p.add_argument("new", type=str, help="New tag")
    p.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")


def _add_settings_parsers(subparsers):
    """Add the 'case-mode' and 'theme' subcommand parsers."""
    p = subparsers.add_parser("case-mode", help="Show or set the tag case mode (converts stored tags)")
    p.add_argument("mode", nargs="?", choices=CASE_MODES, default=None)

    p = subparsers.add_parser("theme", help="Show or set the TUI theme")
    p.add_argument("mode", nargs="?", choices=THEMES, default=None)


def _add_misc_parsers(subparsers):
    """Add the 'title', 'share' and 'tui' subcommand parsers."""
    p = subparsers.add_parser("title", help="Fetch the title of a web page")
    p.add_argument("url", type=str, help="Page URL")
    p.add_argument("-v", "--verbose", action="count", default=0, help="-v to log requests")

    p = subparsers.add_parser("share", help="Print an address opening the given tag filter")
    p.add_argument("--tags", type=str, required=True, help="Comma-separated tags")

    p = subparsers.add_parser("tui", help="Interactive browser")
    p.add_argument("--tags", type=str, default=None, help="Comma-separated tags to start filtered by")
    p.add_argument("--from", dest="from_url", type=str, default=None, help="Start with the filter of a shared address")


def build_parser() -> argparse.ArgumentParser:
    """Build and return the main argument parser."""
    parser = argparse.ArgumentParser(
        description="link-n-tag: bookmarks with #tags, domain tags and tag filters"
    )
    subparsers = parser.add_subparsers(dest="command")

    _add_add_parser(subparsers)
    _add_list_parser(subparsers)
    _add_tags_parser(subparsers)
    _add_link_edit_parsers(subparsers)
    _add_rename_parser(subparsers)
    _add_settings_parsers(subparsers)
    _add_misc_parsers(subparsers)

    return parser


def dispatch(args) -> int:
    """Route parsed args to the appropriate command function.

    Returns:
        Exit code (0 = success, 1 = error)
    """
    if getattr(args, "verbose", 0):
        set_verbose(True)

    if args.command == "add":
        return add_link(text=args.text, url=args.url, fetch=args.fetch_title, yes=args.yes)
    elif args.command == "list":
        list_links(tags=_selected_tags(args), search=args.search, verbose=args.verbose, as_json=args.json)
        return 0
    elif args.command == "tags":
        show_tags(tags=_selected_tags(args))
        return 0
    elif args.command == "edit":
        return edit_link(args.id, args.text)
    elif args.command == "rm":
        return remove_link(args.id)
    elif args.command == "tag":
        return tag_link(args.id, args.tag)
    elif args.command == "rename":
        return rename_tags(args.old, args.new, yes=args.yes)
    elif args.command == "case-mode":
        return case_mode(args.mode)
    elif args.command == "theme":
        return theme(args.mode)
    elif args.command == "title":
        return show_title(args.url)
    elif args.command == "share":
        return share_link(_split_tags(args.tags))
    elif args.command == "tui":
        launch_tui(tags=_selected_tags(args))
        return 0
    return 1


def main():
    """Entry point for the link-n-tag CLI."""
    from dotenv import load_dotenv
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        exit_code = dispatch(args)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        exit_code = 1
    sys.exit(exit_code)
