"""List links command."""

import json
import shutil

from rich.markup import escape
from rich.text import Text

from common.display import console, format_tags_display
from common.url_utils import favicon_url
from ..controller import open_controller
from ..tag_index import link_tags
from ..tag_utils import get_domain_tag


def list_links(
    tags: list[str] | None = None,
    search: str = "",
    verbose: int = 0,
    as_json: bool = False,
) -> None:
    """List links filtered by tags (AND) and a search term.

    Untagged links come first, then newest first.

    Args:
        tags: Selected tag filter (``noTag`` lists untagged links)
        search: Substring matched against URLs and tags
        verbose: If set, show URLs under each title
        as_json: Print the result as a JSON array instead
    """
    controller = open_controller()
    controller.set_selected_tags(tags or [])
    controller.set_search(search)
    links = controller.visible_links()

    if as_json:
        rows = [
            {
                **link,
                "domainTag": get_domain_tag(link.get("url") or ""),
                "favicon": favicon_url(link.get("url") or ""),
            }
            for link in links
        ]
        print(json.dumps(rows, ensure_ascii=False))
        return

    if not links:
        console.print("[dim]No links found.[/dim]")
        return

    index = controller.index()
    terminal_width = shutil.get_terminal_size().columns or 120
    title_max = max(20, terminal_width - 40)

    for link in links:
        title = (link.get("title") or "").strip() or "Untitled"
        if not verbose and len(title) > title_max:
            title = title[:title_max - 3] + "..."
        url = link.get("url") or ""

        line = Text()
        line.append(f"  {link.get('id', '?')!s:<14} ", style="dim")
        line.append(title, style=f"link {url}" if url else "")
        line.append("  ")
        line.append(format_tags_display(link_tags(link), index))
        console.print(line)

        if verbose:
            console.print(f"                  [dim]{escape(url)}[/dim]")

    summary = f"\n[bold]{len(links)}[/bold] of {len(controller.state.links)} links"
    if controller.state.selected_tags:
        summary += f" [dim]· tags: {escape(', '.join(controller.state.selected_tags))}[/dim]"
    console.print(summary)
