"""Tags command - tag chips with counts, narrowed by the current selection."""

from rich.markup import escape
from rich.text import Text

from common.display import console, format_tag_chip
from ..controller import open_controller


def show_tags(tags: list[str] | None = None) -> None:
    """Show the tags worth selecting next, with their link counts.

    With no selection every tag is listed, most used first. With a selection
    only the rarest tags sharing a link with all selected tags are offered.
    """
    controller = open_controller()
    controller.set_selected_tags(tags or [])
    index = controller.index()

    if not index.vocabulary:
        console.print("[dim]No tags yet.[/dim]")
        return

    selected = controller.state.selected_tags
    if selected:
        line = Text("Selected: ", style="dim")
        for tag in selected:
            line.append(format_tag_chip(tag, index, selected=True))
            line.append(" ")
        console.print(line)

    available = controller.available_tags()
    if not available:
        console.print("[dim]No further tags to narrow by.[/dim]")
        return

    for tag in available:
        line = Text("  ")
        line.append(format_tag_chip(tag, index))
        line.append(f"  {index.count(tag)}", style="dim")
        console.print(line)

    console.print(f"\n[bold]{len(available)}[/bold] of {len(index.vocabulary)} tags"
                  + (f" [dim]· narrowing {escape(', '.join(selected))}[/dim]" if selected else ""))
