"""Edit, remove and tag commands for single links."""

from rich.markup import escape

from common.display import console
from ..controller import open_controller
from ..errors import LinkNTagError
from ..tag_utils import is_draggable


def edit_link(link_id: int, text: str) -> int:
    """Replace a link's title and tags with ``"title #tag1 #tag2"``.

    Returns:
        Exit code (0 = success, 1 = error)
    """
    controller = open_controller()
    if not any(l.get("id") == link_id for l in controller.state.links):
        console.print(f"[red]Error: Link {link_id} not found[/red]")
        return 1
    controller.start_edit(link_id)
    try:
        if not controller.update_link(link_id, text):
            console.print("[red]Error: A title is required[/red]")
            return 1
    except LinkNTagError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1
    console.print(f"[green]Updated[/green] {link_id}")
    return 0


def remove_link(link_id: int) -> int:
    """Delete a link by id."""
    controller = open_controller()
    try:
        removed = controller.delete_link(link_id)
    except LinkNTagError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1
    if not removed:
        console.print(f"[red]Error: Link {link_id} not found[/red]")
        return 1
    console.print(f"[red]Deleted[/red] {link_id}")
    return 0


def tag_link(link_id: int, tag: str) -> int:
    """Add one explicit tag to a link (domain tags and noTag are refused)."""
    if not is_draggable(tag):
        console.print(f"[red]Error: {escape(tag)} is not an assignable tag[/red]")
        return 1
    controller = open_controller()
    try:
        changed = controller.drop_tag(tag, link_id)
    except LinkNTagError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1
    if not changed:
        console.print("[dim]Nothing changed (unknown link or tag already present).[/dim]")
        return 0
    console.print(f"[green]Tagged[/green] {link_id}")
    return 0
