"""Unit tests for linkntag.controller module."""

import json
from unittest.mock import patch

import pytest

from linkntag.clipboard import ClipboardWatcher
from linkntag.config import Settings, load_settings
from linkntag.controller import (
    CREATED,
    MISSING_TITLE,
    MISSING_URL,
    RENAME_NOOP,
    RENAME_PENDING,
    LinkController,
    open_controller,
)
from linkntag.errors import StoreError
from linkntag.parser import RenameRequest
from linkntag.store import LinkStore
from linkntag.tag_utils import SNAKE_CASE


@pytest.fixture
def seed():
    return [
        {"id": 1, "title": "A", "url": "https://a.com", "tags": ["oldTag", "news"], "created_at": "2024-01-01T00:00:00+00:00"},
        {"id": 2, "title": "B", "url": "https://b.com", "tags": ["oldTag"], "created_at": "2024-01-02T00:00:00+00:00"},
        {"id": 3, "title": "C", "url": "https://c.com", "tags": [], "created_at": "2024-01-03T00:00:00+00:00"},
    ]


@pytest.fixture
def make_controller(tmp_path):
    def _make(links=None, settings=None):
        store = LinkStore(tmp_path / "links.json")
        if links is not None:
            store.save(links)
        return LinkController(store, settings or Settings(), tmp_path / "settings.json", ClipboardWatcher(lambda: 0.0))
    return _make


def stored(controller):
    return json.loads(controller.store.path.read_text())


class TestSubmit:
    """Test LinkController.submit."""

    def test_creates_link(self, make_controller):
        controller = make_controller([])
        result = controller.submit("Great read #python #web", "https://www.x.com/post")
        assert result.status == CREATED
        assert result.link["title"] == "Great read"
        assert result.link["tags"] == ["python", "web"]
        assert stored(controller) == [result.link]
        assert controller.state.links == [result.link]

    def test_uses_clipboard_url(self, make_controller):
        controller = make_controller([])
        controller.check_clipboard("https://clip.com/x")
        result = controller.submit("Clip #t")
        assert result.link["url"] == "https://clip.com/x"
        assert controller.state.clipboard_url == ""
        # just-saved URL is not offered again
        assert controller.check_clipboard("https://clip.com/x") == ""

    def test_missing_url(self, make_controller):
        assert make_controller([]).submit("Title #t").status == MISSING_URL

    def test_missing_title(self, make_controller):
        controller = make_controller([])
        assert controller.submit("#only #tags", "https://a.com").status == MISSING_TITLE
        assert controller.state.links == []

    def test_domain_tag_not_stored(self, make_controller):
        controller = make_controller([])
        result = controller.submit("T #@a.com #x", "https://a.com")
        assert result.link["tags"] == ["x"]

    def test_tags_follow_case_mode(self, make_controller):
        controller = make_controller([], Settings(tagCaseMode=SNAKE_CASE))
        result = controller.submit("T #machineLearning", "https://a.com")
        assert result.link["tags"] == ["machine_learning"]


class TestRenameFlow:
    """Test the staged rename flow."""

    def test_rename_confirmed(self, make_controller, seed):
        controller = make_controller(seed)
        result = controller.submit("> rename | #oldTag | #NewTag")
        assert result.status == RENAME_PENDING
        assert result.rename == RenameRequest("oldTag", "newTag")
        assert result.affected == 2
        # nothing written before confirmation
        assert stored(controller) == seed

        assert controller.confirm_rename() == 2
        tags = [l["tags"] for l in stored(controller)]
        assert tags == [["newTag", "news"], ["newTag"], []]
        assert controller.state.pending_rename is None

    def test_rename_cancelled(self, make_controller, seed):
        controller = make_controller(seed)
        controller.submit("> rename | #oldTag | #newTag")
        controller.cancel_rename()
        assert controller.confirm_rename() == 0
        assert stored(controller) == seed

    def test_rename_noop(self, make_controller, seed):
        controller = make_controller(seed)
        result = controller.submit("> rename | #missing | #x")
        assert result.status == RENAME_NOOP
        assert controller.state.pending_rename is None

    def test_rename_updates_selection(self, make_controller, seed):
        controller = make_controller(seed)
        controller.set_selected_tags(["oldtag"])
        controller.submit("> rename | #oldTag | #newTag")
        controller.confirm_rename()
        assert controller.state.selected_tags == ["newTag"]
        assert [l["id"] for l in controller.visible_links()] == [2, 1]


class TestLinkEditing:
    """Test edit, delete and drop_tag."""

    def test_start_edit(self, make_controller, seed):
        controller = make_controller(seed)
        assert controller.start_edit(1) == "A #oldTag #news"
        assert controller.state.editing_link_id == 1
        assert controller.start_edit(99) == ""

    def test_update_link(self, make_controller, seed):
        controller = make_controller(seed)
        controller.start_edit(3)
        assert controller.update_link(3, "New title #Fresh")
        link = stored(controller)[2]
        assert link["title"] == "New title"
        assert link["tags"] == ["fresh"]
        assert link["created_at"] == seed[2]["created_at"]
        assert controller.state.editing_link_id is None

    def test_update_requires_title(self, make_controller, seed):
        controller = make_controller(seed)
        assert not controller.update_link(3, "#onlyTags")
        assert not controller.update_link(99, "Title")
        assert not controller.update_link(3, "> rename | a | b")

    def test_delete(self, make_controller, seed):
        controller = make_controller(seed)
        assert controller.delete_link(2)
        assert [l["id"] for l in stored(controller)] == [1, 3]
        assert not controller.delete_link(2)

    def test_drop_tag(self, make_controller, seed):
        controller = make_controller(seed)
        assert controller.drop_tag("news", 3)
        assert stored(controller)[2]["tags"] == ["news"]
        assert not controller.drop_tag("@a.com", 3)
        assert not controller.drop_tag("noTag", 3)


class TestFiltering:
    """Test tag selection and derived views."""

    def test_toggle_tag(self, make_controller, seed):
        controller = make_controller(seed)
        assert controller.toggle_tag("#news") == ["news"]
        assert [l["id"] for l in controller.visible_links()] == [1]
        assert controller.toggle_tag("NEWS") == []

    def test_available_tags(self, make_controller, seed):
        controller = make_controller(seed)
        controller.toggle_tag("oldTag")
        assert controller.available_tags() == ["@a.com", "news", "@b.com"]

    def test_no_tag_and_search(self, make_controller, seed):
        controller = make_controller(seed)
        controller.set_selected_tags(["noTag"])
        assert [l["id"] for l in controller.visible_links()] == [3]
        controller.set_selected_tags([])
        controller.set_search("b.com")
        assert [l["id"] for l in controller.visible_links()] == [2]


class TestSettings:
    """Test case mode and theme switching."""

    def test_toggle_case_mode_recases_and_persists(self, make_controller, seed, tmp_path):
        controller = make_controller(seed)
        assert controller.toggle_case_mode() == SNAKE_CASE
        assert stored(controller)[0]["tags"] == ["old_tag", "news"]
        assert load_settings(tmp_path / "settings.json").tagCaseMode == SNAKE_CASE

    def test_toggle_theme(self, make_controller, tmp_path):
        controller = make_controller([])
        assert controller.toggle_theme() == "light"
        assert load_settings(tmp_path / "settings.json").theme == "light"
        assert controller.toggle_theme() == "dark"

    def test_failed_recase_keeps_mode(self, make_controller, seed, tmp_path):
        """A case mode change that cannot be saved leaves mode and tags as they were."""
        controller = make_controller(seed)
        with patch.object(controller.store, "save", side_effect=StoreError("disk full")):
            with pytest.raises(StoreError):
                controller.set_case_mode(SNAKE_CASE)
        assert controller.state.case_mode == "camelCase"
        assert controller.state.links[0]["tags"] == ["oldTag", "news"]
        assert stored(controller) == seed
        assert not (tmp_path / "settings.json").exists()


class TestAutocomplete:
    """Test on_input_changed and handle_key."""

    def test_menu_shown_and_committed(self, make_controller, seed):
        controller = make_controller(seed)
        text = "Title #ol"
        assert controller.on_input_changed(text, len(text)) == ["oldTag"]
        assert controller.handle_key("enter", text, len(text)) == ("Title #oldTag ", 14)
        assert not controller.state.menu.visible
        assert controller.state.input_text == "Title #oldTag "

    def test_navigation(self, make_controller, seed):
        controller = make_controller(seed)
        text = "#"
        items = controller.on_input_changed(text, 1)
        assert items[0] == "oldTag"
        assert controller.handle_key("down", text, 1) == (text, 1)
        assert controller.handle_key("down", text, 1) == (text, 1)
        new_text, _ = controller.handle_key("tab", text, 1)
        assert new_text == f"#{items[1]} "

    def test_escape_hides(self, make_controller, seed):
        controller = make_controller(seed)
        controller.on_input_changed("#n", 2)
        assert controller.handle_key("escape", "#n", 2) == ("#n", 2)
        assert controller.handle_key("enter", "#n", 2) is None

    def test_no_menu_without_matches(self, make_controller, seed):
        controller = make_controller(seed)
        assert controller.on_input_changed("#zzz", 4) == []
        assert controller.handle_key("down", "#zzz", 4) is None


class TestClipboardAndTitle:
    """Test check_clipboard and apply_fetched_title."""

    def test_new_url_needs_title(self, make_controller, seed):
        controller = make_controller(seed)
        assert controller.check_clipboard("https://new.com") == "https://new.com"
        assert controller.state.fetching_title
        # same URL polled again
        assert controller.check_clipboard("https://new.com") == ""
        assert controller.state.clipboard_url == "https://new.com"

    def test_stored_url_ignored(self, make_controller, seed):
        controller = make_controller(seed)
        assert controller.check_clipboard("https://a.com") == ""
        assert controller.state.clipboard_url == ""

    def test_title_fills_empty_input(self, make_controller):
        controller = make_controller([])
        controller.check_clipboard("https://new.com")
        assert controller.apply_fetched_title("https://new.com", "Fetched")
        assert controller.state.input_text == "Fetched"
        assert not controller.state.fetching_title

    def test_title_does_not_overwrite_typing(self, make_controller):
        controller = make_controller([])
        controller.check_clipboard("https://new.com")
        controller.on_input_changed("typed", 5)
        assert not controller.apply_fetched_title("https://new.com", "Fetched")
        assert controller.state.input_text == "typed"

    def test_stale_title_ignored(self, make_controller):
        controller = make_controller([])
        controller.check_clipboard("https://first.com")
        controller.check_clipboard("https://second.com")
        assert not controller.apply_fetched_title("https://first.com", "Old")
        assert controller.state.input_text == ""


class TestOpenController:
    """Test open_controller."""

    def test_uses_data_dir(self, monkeypatch, tmp_path, seed):
        monkeypatch.setenv("LINKNTAG_DATA_DIR", str(tmp_path))
        LinkStore(tmp_path / "links.json").save(seed)
        controller = open_controller()
        assert len(controller.state.links) == 3
        assert controller.settings_path == tmp_path / "settings.json"


class TestLegacyTags:
    """Test renaming tags stored in an older spelling."""

    def test_rename_legacy_spellings(self, make_controller, tmp_path):
        (tmp_path / "links.json").write_text(json.dumps([
            {"id": 1, "title": "T", "url": "https://a.com", "tags": "machine learning, old_tag", "created_at": ""},
        ]))
        controller = make_controller()
        result = controller.submit("> rename | #machine learning | #ml")
        assert result.status == RENAME_PENDING
        assert result.affected == 1
        assert controller.confirm_rename() == 1
        assert controller.submit("> rename | #old_tag | #x").affected == 1
        controller.confirm_rename()
        assert stored(controller)[0]["tags"] == ["ml", "x"]
