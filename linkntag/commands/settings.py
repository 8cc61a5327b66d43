"""Case mode and theme commands."""

from common.display import console
from ..config import THEMES
from ..controller import open_controller
from ..errors import LinkNTagError
from ..tag_utils import CASE_MODES


def case_mode(mode: str | None = None) -> int:
    """Show or change the tag case mode; changing it re-spells every stored tag."""
    controller = open_controller()
    current = controller.state.case_mode
    if mode is None:
        console.print(f"Tag case mode: [bold]{current}[/bold]")
        return 0
    if mode not in CASE_MODES:
        console.print(f"[red]Error: mode must be one of {', '.join(CASE_MODES)}[/red]")
        return 1
    if mode == current:
        console.print(f"[dim]Already {mode}.[/dim]")
        return 0
    try:
        with console.status("Converting tags...", spinner="dots"):
            controller.set_case_mode(mode)
    except LinkNTagError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1
    console.print(f"Tag case mode: [bold]{mode}[/bold] [dim]({len(controller.state.links)} links converted)[/dim]")
    return 0


def theme(mode: str | None = None) -> int:
    """Show or set the theme used by the TUI."""
    controller = open_controller()
    if mode is None:
        console.print(f"Theme: [bold]{controller.state.theme}[/bold]")
        return 0
    if mode not in THEMES:
        console.print(f"[red]Error: theme must be one of {', '.join(THEMES)}[/red]")
        return 1
    if mode != controller.state.theme:
        controller.toggle_theme()
    console.print(f"Theme: [bold]{mode}[/bold]")
    return 0
