"""Interactive TUI: type "title #tags" to save the copied URL, filter by tag chips."""

import webbrowser

from rich.text import Text
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.screen import ModalScreen
from textual.widgets import Footer, Header, Input, Label, OptionList, Static
from textual.widgets.option_list import Option

from common.display import format_tag_chip, format_tags_display
from ..clipboard import SystemClipboard
from ..config import DARK
from ..controller import (
    CREATED,
    MISSING_TITLE,
    MISSING_URL,
    RENAME_NOOP,
    RENAME_PENDING,
    LinkController,
    open_controller,
)
from ..errors import LinkNTagError
from ..location import TagHistory
from ..tag_index import link_tags
from ..title_fetcher import fetch_title

CLIPBOARD_POLL_S = 1.0

_TEXTUAL_THEMES = {"dark": "textual-dark", "light": "textual-light"}


class _ConfirmRenameScreen(ModalScreen[bool]):
    """Modal asking the user to confirm a bulk tag rename."""

    CSS = """
    _ConfirmRenameScreen {
        align: center middle;
    }
    _ConfirmRenameScreen Label {
        padding: 2 4;
        background: $panel;
        border: tall $primary;
        text-align: center;
    }
    """

    BINDINGS = [
        Binding("y", "yes", "Yes"),
        Binding("enter", "yes", "Yes"),
        Binding("n", "no", "No"),
        Binding("escape", "no", "No"),
    ]

    def __init__(self, message: str, **kwargs):
        super().__init__(**kwargs)
        self._message = message

    def compose(self) -> ComposeResult:
        yield Label(f"{self._message}\n\n[y] Yes   [n] No")

    def action_yes(self) -> None:
        self.dismiss(True)

    def action_no(self) -> None:
        self.dismiss(False)


class TagInput(Input):
    """Entry field whose Up/Down/Tab/Enter/Escape drive the #tag suggestion menu."""

    BINDINGS = [
        Binding("down", "menu('down')", show=False),
        Binding("up", "menu('up')", show=False),
        Binding("tab", "menu('tab')", show=False),
        Binding("escape", "menu('escape')", show=False),
    ]

    def action_menu(self, key: str) -> None:
        if self.app.menu_key(key):
            return
        if key == "tab":
            self.screen.focus_next()
        elif key == "escape":
            self.app.action_escape_action()

    async def action_submit(self) -> None:
        if self.app.menu_key("enter"):
            return
        await super().action_submit()


class LinkTagApp(App):
    """Single-screen link list with tag chips and #tag autocomplete."""

    TITLE = "link-n-tag"

    CSS = """
    #clipboard {
        height: 1;
        padding: 0 1;
        color: $text-muted;
    }
    #suggestions {
        height: auto;
        max-height: 7;
        display: none;
        border: tall $primary;
    }
    #suggestions.visible {
        display: block;
    }
    #search {
        display: none;
    }
    #search.visible {
        display: block;
    }
    #tags {
        width: 1fr;
        border-right: tall $primary-darken-3;
    }
    #links {
        width: 3fr;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("escape", "escape_action", "Clear filter", show=False),
        Binding("ctrl+o", "open_browser", "Open"),
        Binding("ctrl+e", "edit_link", "Edit"),
        Binding("ctrl+d", "delete_link", "Delete"),
        Binding("ctrl+a", "assign_tag", "Tag link"),
        Binding("ctrl+f", "toggle_search", "Search"),
        Binding("ctrl+k", "toggle_case_mode", "Case mode"),
        Binding("ctrl+t", "toggle_theme", "Theme"),
        Binding("ctrl+b", "history_back", "Back", show=False),
        Binding("ctrl+n", "history_forward", "Forward", show=False),
    ]

    def __init__(self, controller: LinkController, clipboard: SystemClipboard | None = None, **kwargs):
        super().__init__(**kwargs)
        self.controller = controller
        self.clipboard = clipboard or SystemClipboard()
        self.history = TagHistory()

    # ── Compose ───────────────────────────────────────────────────────────────

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield Static("", id="clipboard")
        yield TagInput(placeholder="title #tag1 #tag2   ·   > rename | #old | #new", id="entry")
        suggestions = OptionList(id="suggestions")
        suggestions.can_focus = False
        yield suggestions
        yield Input(placeholder="search urls and tags", id="search")
        with Horizontal():
            yield OptionList(id="tags")
            yield OptionList(id="links")
        yield Footer()

    def on_mount(self) -> None:
        self._apply_theme()
        self.history.push(self.controller.state.selected_tags)
        self._refresh_lists()
        self.set_interval(CLIPBOARD_POLL_S, self._poll_clipboard)
        self._poll_clipboard()

    # ── Rendering ─────────────────────────────────────────────────────────────

    def _apply_theme(self) -> None:
        self.theme = _TEXTUAL_THEMES.get(self.controller.state.theme, _TEXTUAL_THEMES[DARK])

    def _refresh_lists(self) -> None:
        state = self.controller.state
        index = self.controller.index()
        available = self.controller.available_tags()

        tags_list = self.query_one("#tags", OptionList)
        tags_list.clear_options()
        shown = {t.lower() for t in available}
        chips = [t for t in state.selected_tags if t.lower() not in shown] + available
        selected = {t.lower() for t in state.selected_tags}
        tags_list.add_options([
            Option(format_tag_chip(tag, index, selected=tag.lower() in selected), id=tag.lower())
            for tag in chips
        ])

        links_list = self.query_one("#links", OptionList)
        links_list.clear_options()
        visible = self.controller.visible_links()
        links_list.add_options([Option(self._link_label(link, index), id=str(link["id"])) for link in visible])

        self._set_subtitle(len(visible))

    @staticmethod
    def _link_label(link: dict, index) -> Text:
        label = Text()
        label.append((link.get("title") or "").strip() or "Untitled")
        label.append("  ")
        label.append(format_tags_display(link_tags(link), index))
        return label

    def _set_subtitle(self, visible_count: int) -> None:
        state = self.controller.state
        parts = [state.case_mode, f"{visible_count}/{len(state.links)} links"]
        if state.selected_tags:
            parts.append(" ".join(f"#{t}" if not t.startswith("@") else t for t in state.selected_tags))
        self.sub_title = "  ·  ".join(parts)

    def _show_suggestions(self) -> None:
        menu = self.controller.state.menu
        widget = self.query_one("#suggestions", OptionList)
        widget.clear_options()
        if menu.visible:
            widget.add_options([Option(f"#{s}") for s in menu.items])
            widget.highlighted = menu.index if menu.index >= 0 else None
        widget.set_class(menu.visible, "visible")

    def _set_clipboard_status(self) -> None:
        state = self.controller.state
        status = self.query_one("#clipboard", Static)
        if not state.clipboard_url:
            status.update("")
        elif state.fetching_title:
            status.update(f"⟳ {state.clipboard_url}  fetching title…")
        else:
            status.update(f"⎘ {state.clipboard_url}")

    # ── Entry / autocomplete ──────────────────────────────────────────────────

    def menu_key(self, key: str) -> bool:
        """Route a key from the entry to the suggestion menu; True if consumed."""
        entry = self.query_one("#entry", TagInput)
        result = self.controller.handle_key(key, entry.value, entry.cursor_position)
        if result is None:
            return False
        text, cursor = result
        if text != entry.value:
            entry.value = text
            entry.cursor_position = cursor
        self._show_suggestions()
        return True

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "search":
            self.controller.set_search(event.value)
            self._refresh_lists()
            return
        self.controller.on_input_changed(event.value, event.input.cursor_position)
        self._show_suggestions()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id != "entry":
            return
        text = event.value
        try:
            if self.controller.state.editing_link_id is not None:
                self._submit_edit(text)
            else:
                self._submit_new(text)
        except LinkNTagError as e:
            self.notify(str(e), severity="error", timeout=6)

    def _submit_edit(self, text: str) -> None:
        link_id = self.controller.state.editing_link_id
        if not self.controller.update_link(link_id, text):
            self.notify("A title is required", severity="warning", timeout=4)
            return
        self.query_one("#entry", TagInput).value = ""
        self._refresh_lists()

    def _submit_new(self, text: str) -> None:
        result = self.controller.submit(text)
        if result.status == RENAME_NOOP:
            self.notify(f"No links tagged #{result.rename.old_tag}", severity="warning", timeout=4)
        elif result.status == RENAME_PENDING:
            request = result.rename
            noun = "link" if result.affected == 1 else "links"
            message = f"Rename #{request.old_tag} → #{request.new_tag} on {result.affected} {noun}?"

            def on_confirm(confirmed: bool | None) -> None:
                if not confirmed:
                    self.controller.cancel_rename()
                    return
                changed = self.controller.confirm_rename()
                self.query_one("#entry", TagInput).value = ""
                self.notify(f"Renamed on {changed} {noun}", timeout=4)
                self._refresh_lists()

            self.push_screen(_ConfirmRenameScreen(message), on_confirm)
        elif result.status == MISSING_URL:
            self.notify("Copy a URL first", severity="warning", timeout=4)
        elif result.status == MISSING_TITLE:
            self.notify("A title is required", severity="warning", timeout=4)
        elif result.status == CREATED:
            self.query_one("#entry", TagInput).value = ""
            self._set_clipboard_status()
            self._refresh_lists()

    # ── Clipboard / title fetch ───────────────────────────────────────────────

    @work(thread=True, exclusive=True, group="clipboard")
    def _poll_clipboard(self) -> None:
        """Runs in a background thread; pyperclip may block on some platforms."""
        text = self.clipboard.read_text()
        self.call_from_thread(self._on_clipboard, text)

    def _on_clipboard(self, text: str) -> None:
        previous = self.controller.state.clipboard_url
        url = self.controller.check_clipboard(text)
        if url:
            self.query_one("#entry", TagInput).value = ""
            self._fetch_title_worker(url)
        if url or previous != self.controller.state.clipboard_url:
            self._set_clipboard_status()

    @work(thread=True)
    def _fetch_title_worker(self, url: str) -> None:
        try:
            title = fetch_title(url)
        except ValueError:
            title = None
        self.call_from_thread(self._on_title, url, title)

    def _on_title(self, url: str, title: str | None) -> None:
        if self.controller.apply_fetched_title(url, title):
            entry = self.query_one("#entry", TagInput)
            entry.value = self.controller.state.input_text
            entry.cursor_position = len(entry.value)
        self._set_clipboard_status()

    # ── Tag chips ─────────────────────────────────────────────────────────────

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option_list.id != "tags":
            return
        tag = next(
            (t for t in self.controller.state.selected_tags + self.controller.index().vocabulary
             if t.lower() == event.option.id),
            event.option.id,
        )
        self.controller.toggle_tag(tag)
        self.history.push(self.controller.state.selected_tags)
        self._refresh_lists()

    def _set_selection(self, tags: list[str]) -> None:
        self.controller.set_selected_tags(tags)
        self._refresh_lists()

    def action_history_back(self) -> None:
        self._set_selection(self.history.back())

    def action_history_forward(self) -> None:
        self._set_selection(self.history.forward())

    # ── Link actions ──────────────────────────────────────────────────────────

    def _highlighted_link_id(self) -> int | None:
        links_list = self.query_one("#links", OptionList)
        if links_list.highlighted is None:
            return None
        option = links_list.get_option_at_index(links_list.highlighted)
        return int(option.id)

    def _highlighted_tag(self) -> str | None:
        tags_list = self.query_one("#tags", OptionList)
        if tags_list.highlighted is None:
            return None
        key = tags_list.get_option_at_index(tags_list.highlighted).id
        return next((t for t in self.controller.index().vocabulary if t.lower() == key), None)

    def action_open_browser(self) -> None:
        link_id = self._highlighted_link_id()
        link = next((l for l in self.controller.state.links if l.get("id") == link_id), None)
        if link and link.get("url"):
            webbrowser.open(link["url"])

    def action_edit_link(self) -> None:
        link_id = self._highlighted_link_id()
        if link_id is None:
            return
        entry = self.query_one("#entry", TagInput)
        entry.value = self.controller.start_edit(link_id)
        entry.cursor_position = len(entry.value)
        entry.focus()
        self.notify("Editing - Enter saves, Escape cancels", timeout=3)

    def action_delete_link(self) -> None:
        link_id = self._highlighted_link_id()
        if link_id is None:
            return
        try:
            self.controller.delete_link(link_id)
        except LinkNTagError as e:
            self.notify(str(e), severity="error", timeout=6)
        self._refresh_lists()

    def action_assign_tag(self) -> None:
        """Attach the highlighted tag chip to the highlighted link."""
        tag, link_id = self._highlighted_tag(), self._highlighted_link_id()
        if tag is None or link_id is None:
            return
        try:
            if not self.controller.drop_tag(tag, link_id):
                self.notify(f"{tag} was not added", severity="warning", timeout=3)
        except LinkNTagError as e:
            self.notify(str(e), severity="error", timeout=6)
        self._refresh_lists()

    # ── Settings / misc ───────────────────────────────────────────────────────

    def action_toggle_case_mode(self) -> None:
        try:
            mode = self.controller.toggle_case_mode()
        except LinkNTagError as e:
            self.notify(str(e), severity="error", timeout=6)
            return
        self.notify(f"Tags are now {mode}", timeout=3)
        self._refresh_lists()

    def action_toggle_theme(self) -> None:
        self.controller.toggle_theme()
        self._apply_theme()

    def action_toggle_search(self) -> None:
        search = self.query_one("#search", Input)
        visible = not search.has_class("visible")
        search.set_class(visible, "visible")
        if visible:
            search.focus()
        else:
            search.value = ""
            self.controller.set_search("")
            self.query_one("#entry", TagInput).focus()
            self._refresh_lists()

    def action_escape_action(self) -> None:
        """Cancel editing, then clear the tag filter; quit when nothing is left."""
        state = self.controller.state
        if state.editing_link_id is not None:
            state.editing_link_id = None
            self.query_one("#entry", TagInput).value = ""
        elif state.selected_tags:
            self._set_selection([])
            self.history.push([])
        else:
            self.exit()


# ── Entry point ───────────────────────────────────────────────────────────────

def launch_tui(tags: list[str] | None = None) -> None:
    """Launch the interactive TUI, optionally starting with a tag filter."""
    controller = open_controller()
    controller.set_selected_tags(tags or [])
    LinkTagApp(controller).run()
