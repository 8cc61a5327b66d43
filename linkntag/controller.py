"""Application state and the single controller allowed to change it."""

from dataclasses import dataclass, field
from typing import NamedTuple

from .autocomplete import SuggestionMenu, insert_suggestion, suggest
from .clipboard import ClipboardWatcher
from .config import DARK, LIGHT, Settings, get_links_path, get_settings_path, load_settings, save_settings
from .parser import ParsedText, RenameRequest, format_link_text, parse_link_text
from .query import query_links
from .rename import add_tag, count_affected, recase_links, rename_tag
from .store import LinkStore, new_link
from .tag_index import TagIndex, available_tags, build_index
from .tag_utils import CAMEL_CASE, SNAKE_CASE, classify_tag, sanitize_tags

# submit() outcomes
CREATED = "created"
RENAME_PENDING = "rename_pending"
RENAME_NOOP = "rename_noop"
MISSING_URL = "missing_url"
MISSING_TITLE = "missing_title"


class SubmitResult(NamedTuple):
    status: str
    link: dict | None = None
    rename: RenameRequest | None = None
    affected: int = 0


@dataclass
class AppState:
    links: list[dict] = field(default_factory=list)
    selected_tags: list[str] = field(default_factory=list)
    search_term: str = ""
    case_mode: str = CAMEL_CASE
    theme: str = DARK
    input_text: str = ""
    clipboard_url: str = ""
    fetching_title: bool = False
    editing_link_id: int | None = None
    menu: SuggestionMenu = field(default_factory=SuggestionMenu)
    pending_rename: RenameRequest | None = None


class LinkController:
    """Routes every user action to the pure tag engine and commits results to the store."""

    def __init__(self, store: LinkStore, settings: Settings, settings_path=None, watcher: ClipboardWatcher | None = None):
        self.store = store
        self.settings = settings
        self.settings_path = settings_path
        self.watcher = watcher or ClipboardWatcher()
        self.state = AppState(
            links=store.load(),
            case_mode=settings.tagCaseMode,
            theme=settings.theme,
        )

    # ── Store ─────────────────────────────────────────────────────────────────

    def _commit(self, links: list[dict]) -> None:
        self.store.save(links)
        self.state.links = links

    def _save_settings(self) -> None:
        self.settings.tagCaseMode = self.state.case_mode
        self.settings.theme = self.state.theme
        save_settings(self.settings, self.settings_path)

    # ── Derived views ─────────────────────────────────────────────────────────

    def index(self) -> TagIndex:
        return build_index(self.state.links)

    def available_tags(self) -> list[str]:
        return available_tags(self.state.links, self.state.selected_tags, self.index())

    def visible_links(self) -> list[dict]:
        return query_links(self.state.links, self.state.selected_tags, self.state.search_term)

    # ── Links ─────────────────────────────────────────────────────────────────

    def submit(self, text: str, url: str = "") -> SubmitResult:
        """Handle an entered line: create a link, or stage a rename command."""
        parsed = parse_link_text(text.strip(), self.state.case_mode)

        if isinstance(parsed, RenameRequest):
            affected = count_affected(self.state.links, parsed.old_tag, self.state.case_mode)
            if not affected:
                return SubmitResult(RENAME_NOOP, rename=parsed)
            self.state.pending_rename = parsed
            return SubmitResult(RENAME_PENDING, rename=parsed, affected=affected)

        url = (url or self.state.clipboard_url).strip()
        if not url:
            return SubmitResult(MISSING_URL)
        if not parsed.body:
            return SubmitResult(MISSING_TITLE)

        link = new_link(url, parsed.body, parsed.tags, self.state.links)
        self._commit(self.state.links + [link])
        self.watcher.mark_processed(url)
        self.state.input_text = ""
        self.state.clipboard_url = ""
        self.state.menu.hide()
        return SubmitResult(CREATED, link=link)

    def confirm_rename(self) -> int:
        """Apply the staged rename; returns the number of links changed."""
        request = self.state.pending_rename
        self.state.pending_rename = None
        if request is None:
            return 0
        links, affected = rename_tag(self.state.links, request.old_tag, request.new_tag, self.state.case_mode)
        if affected:
            self._commit(links)
            self.state.selected_tags = [
                request.new_tag if t.lower() == request.old_tag.lower() else t
                for t in self.state.selected_tags
            ]
        self.state.input_text = ""
        return affected

    def cancel_rename(self) -> None:
        self.state.pending_rename = None

    def start_edit(self, link_id) -> str:
        """Begin editing a link; returns its editable text."""
        link = next((l for l in self.state.links if l.get("id") == link_id), None)
        if link is None:
            return ""
        self.state.editing_link_id = link_id
        return format_link_text(link)

    def update_link(self, link_id, text: str) -> bool:
        """Re-parse ``text`` into the link's title and tags. An empty title is refused."""
        parsed = parse_link_text(text.strip(), self.state.case_mode)
        if not isinstance(parsed, ParsedText) or not parsed.body:
            return False
        found = False
        links = []
        for link in self.state.links:
            if link.get("id") == link_id:
                found = True
                link = {**link, "title": parsed.body, "tags": sanitize_tags(parsed.tags, link.get("url") or "")}
            links.append(link)
        if not found:
            return False
        self._commit(links)
        self.state.editing_link_id = None
        return True

    def delete_link(self, link_id) -> bool:
        links = [l for l in self.state.links if l.get("id") != link_id]
        if len(links) == len(self.state.links):
            return False
        self._commit(links)
        return True

    def drop_tag(self, tag: str, link_id) -> bool:
        """Add a dragged tag chip to a link; domain and reserved tags are ignored."""
        links, changed = add_tag(self.state.links, link_id, tag, self.state.case_mode)
        if changed:
            self._commit(links)
        return changed

    # ── Tag filter / search ───────────────────────────────────────────────────

    def toggle_tag(self, tag: str) -> list[str]:
        """Select or deselect a tag chip (case-insensitive)."""
        value = classify_tag(tag).value
        selected = self.state.selected_tags
        if any(t.lower() == value.lower() for t in selected):
            self.state.selected_tags = [t for t in selected if t.lower() != value.lower()]
        else:
            self.state.selected_tags = selected + [value]
        return self.state.selected_tags

    def set_selected_tags(self, tags: list[str]) -> None:
        self.state.selected_tags = [classify_tag(t).value for t in tags if t.strip()]

    def set_search(self, term: str) -> None:
        self.state.search_term = term

    # ── Settings ──────────────────────────────────────────────────────────────

    def toggle_case_mode(self) -> str:
        """Switch case mode and re-spell every stored tag accordingly."""
        mode = SNAKE_CASE if self.state.case_mode == CAMEL_CASE else CAMEL_CASE
        self.set_case_mode(mode)
        return mode

    def set_case_mode(self, mode: str) -> None:
        """Re-spell stored tags first; the mode only changes once they are saved."""
        self._commit(recase_links(self.state.links, mode))
        self.state.case_mode = mode
        self._save_settings()

    def toggle_theme(self) -> str:
        self.state.theme = LIGHT if self.state.theme == DARK else DARK
        self._save_settings()
        return self.state.theme

    # ── Autocomplete ──────────────────────────────────────────────────────────

    def on_input_changed(self, text: str, cursor: int) -> list[str]:
        """Refresh the suggestion menu for the text under the cursor."""
        self.state.input_text = text
        index = self.index()
        result = suggest(text, cursor, index.vocabulary, index.cardinality)
        if result.active and result.items:
            self.state.menu.show(result.items)
        else:
            self.state.menu.hide()
        return self.state.menu.items

    def handle_key(self, key: str, text: str, cursor: int) -> tuple[str, int] | None:
        """Feed a key to the suggestion menu.

        Returns the new (text, cursor) when a suggestion was committed, the
        unchanged pair when the key was consumed otherwise, and None when the
        key is not for the menu.
        """
        action = self.state.menu.handle_key(key)
        if action is None:
            return None
        if action == "commit":
            choice = self.state.menu.choice()
            self.state.menu.hide()
            text, cursor = insert_suggestion(text, cursor, choice)
            self.state.input_text = text
        return text, cursor

    # ── Clipboard / title ─────────────────────────────────────────────────────

    def check_clipboard(self, text: str) -> str:
        """Track a newly copied URL. Returns the URL when it is new (a title fetch is due)."""
        url = self.watcher.check(text, self.state.links)
        if not url:
            self.state.clipboard_url = ""
            return ""
        if url == self.state.clipboard_url:
            return ""
        self.state.clipboard_url = url
        self.state.input_text = ""
        self.state.fetching_title = True
        return url

    def apply_fetched_title(self, url: str, title: str | None) -> bool:
        """Pre-fill the entry with a fetched title unless the user already typed."""
        if url != self.state.clipboard_url:
            return False
        self.state.fetching_title = False
        if not title or self.state.input_text.strip():
            return False
        self.state.input_text = title
        return True


def open_controller() -> LinkController:
    """Controller over the configured data directory (LINKNTAG_DATA_DIR)."""
    settings_path = get_settings_path()
    return LinkController(LinkStore(get_links_path()), load_settings(settings_path), settings_path)
