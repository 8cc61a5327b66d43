"""Title lookup and shareable filter link commands."""

from rich.markup import escape

from common.display import console
from ..config import get_base_url
from ..location import with_selected_tags
from ..tag_utils import classify_tag
from ..title_fetcher import fetch_title


def show_title(url: str) -> int:
    """Print the fetched title of a page (exit code 1 when none was found)."""
    with console.status("Fetching title...", spinner="dots"):
        title = fetch_title(url)
    if not title:
        console.print("[yellow]No title found[/yellow]")
        return 1
    console.print(escape(title))
    return 0


def share_link(tags: list[str]) -> int:
    """Print an address that opens the app filtered by ``tags``."""
    print(with_selected_tags(get_base_url(), [classify_tag(t).value for t in tags]))
    return 0
