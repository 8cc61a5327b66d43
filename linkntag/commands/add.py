"""Add link command - saves a URL with a title and #tags parsed from one line of text."""

from rich.markup import escape
from rich.prompt import Confirm
from rich.text import Text

from common.display import console, format_tags_display
from common.url_utils import is_http_url
from ..clipboard import SystemClipboard
from ..controller import (
    CREATED,
    MISSING_TITLE,
    MISSING_URL,
    RENAME_NOOP,
    RENAME_PENDING,
    open_controller,
)
from ..errors import LinkNTagError
from ..title_fetcher import fetch_title


def _resolve_url(url: str | None, controller) -> str:
    """Explicit --url, else a URL found on the clipboard."""
    if url:
        return url.strip()
    return controller.check_clipboard(SystemClipboard().read_text()) or controller.state.clipboard_url


def _confirm_rename(controller, result, yes: bool) -> int:
    request = result.rename
    console.print(
        f"Rename [bold]#{request.old_tag}[/bold] → [bold]#{request.new_tag}[/bold] "
        f"on [bold]{result.affected}[/bold] link{'s' if result.affected != 1 else ''}"
    )
    if not yes and not Confirm.ask("Proceed?", console=console, default=False):
        controller.cancel_rename()
        console.print("[dim]Cancelled.[/dim]")
        return 0
    changed = controller.confirm_rename()
    console.print(f"[green]Renamed on {changed} link{'s' if changed != 1 else ''}.[/green]")
    return 0


def add_link(
    text: str,
    url: str | None = None,
    fetch: bool = False,
    yes: bool = False,
) -> int:
    """Save a link from ``"title #tag1 #tag2"`` text, or run a rename command.

    Returns:
        Exit code (0 = success, 1 = error)
    """
    controller = open_controller()
    url = _resolve_url(url, controller) if not text.strip().startswith(">") else ""

    if url and not is_http_url(url):
        console.print(f"[yellow]Warning: {url} does not look like an http(s) URL[/yellow]")

    has_title = any(not w.startswith("#") for w in text.split())
    if fetch and url and not has_title:
        with console.status("Fetching title...", spinner="dots"):
            title = fetch_title(url)
        if title:
            console.print(f"[dim]Title:[/dim] {escape(title)}")
            text = f"{title} {text}".strip()
        else:
            console.print("[yellow]Could not fetch a title[/yellow]")

    try:
        result = controller.submit(text, url)
    except LinkNTagError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    if result.status == RENAME_NOOP:
        console.print(f"[yellow]No links tagged #{result.rename.old_tag} - nothing to rename.[/yellow]")
        return 0
    if result.status == RENAME_PENDING:
        try:
            return _confirm_rename(controller, result, yes)
        except LinkNTagError as e:
            console.print(f"[red]Error: {e}[/red]")
            return 1
    if result.status == MISSING_URL:
        console.print("[red]Error: No URL given and no new URL on the clipboard[/red]")
        return 1
    if result.status == MISSING_TITLE:
        console.print("[red]Error: A title is required (tags alone are not enough)[/red]")
        return 1

    if result.status == CREATED:
        link = result.link
        console.print(f"[green]+[/green] {escape(link['title'])} [dim]<{link['url']}>[/dim]")
        if link["tags"]:
            line = Text("  ")
            line.append(format_tags_display(link["tags"], controller.index()))
            console.print(line)
        return 0
    return 1
