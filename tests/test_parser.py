"""Unit tests for linkntag.parser module."""

from linkntag.parser import (
    ParsedText,
    RenameRequest,
    format_link_text,
    parse_link_text,
    parse_rename,
)
from linkntag.tag_utils import CAMEL_CASE, SNAKE_CASE


class TestParseLinkText:
    """Test parse_link_text function."""

    def test_body_and_tags(self):
        """Should split title words from #tags."""
        result = parse_link_text("Great read #python #web", CAMEL_CASE)
        assert result == ParsedText("Great read", ["python", "web"])

    def test_tags_are_parsed_token_by_token(self):
        """A word after a #tag belongs to the body, not the tag."""
        result = parse_link_text("Great Article #machine Learning", CAMEL_CASE)
        assert result.body == "Great Article Learning"
        assert result.tags == ["machine"]

    def test_tags_normalized_to_mode(self):
        """Should normalize every tag with the active case mode."""
        result = parse_link_text("Docs #machine_learning #webDev", CAMEL_CASE)
        assert result.tags == ["machineLearning", "webDev"]
        result = parse_link_text("Docs #machine_learning #webDev", SNAKE_CASE)
        assert result.tags == ["machine_learning", "web_dev"]

    def test_deduplicates_keeping_first_spelling(self):
        """Should drop repeats that differ only by case."""
        result = parse_link_text("x #News #news #NEWS", CAMEL_CASE)
        assert result.tags == ["news"]

    def test_bare_hash_dropped(self):
        """A lone # is a tag candidate that normalizes to nothing."""
        result = parse_link_text("Title # #ok", CAMEL_CASE)
        assert result == ParsedText("Title", ["ok"])

    def test_whitespace_runs(self):
        """Should tokenize on any run of whitespace."""
        result = parse_link_text("  A \t b\n#c  ", CAMEL_CASE)
        assert result == ParsedText("A b", ["c"])

    def test_empty_text(self):
        assert parse_link_text("", CAMEL_CASE) == ParsedText("", [])

    def test_every_plain_token_lands_in_body(self):
        """Non-# tokens keep their order in the body."""
        text = "one #a two #b three"
        result = parse_link_text(text, CAMEL_CASE)
        assert result.body.split() == [w for w in text.split() if not w.startswith("#")]

    def test_rename_command(self):
        """Should report a rename request instead of a link edit."""
        result = parse_link_text("> rename | #oldTag | #NewTag", CAMEL_CASE)
        assert result == RenameRequest("oldTag", "newTag")

    def test_rename_normalizes_both_sides(self):
        result = parse_link_text(">RENAME|#old tag|#new_tag", CAMEL_CASE)
        assert isinstance(result, RenameRequest)
        assert result == RenameRequest("oldTag", "newTag")

    def test_rename_with_empty_side_is_plain_text(self):
        """A rename with nothing to rename parses like ordinary text."""
        result = parse_link_text("> rename | # | #new", CAMEL_CASE)
        assert isinstance(result, ParsedText)


class TestParseRename:
    """Test parse_rename function."""

    def test_flexible_whitespace(self):
        assert parse_rename(">  rename   |   #a   |   #b  ", SNAKE_CASE) == RenameRequest("a", "b")

    def test_hash_optional(self):
        assert parse_rename("> rename | a | b", CAMEL_CASE) == RenameRequest("a", "b")

    def test_not_a_command(self):
        assert parse_rename("rename | a | b", CAMEL_CASE) is None
        assert parse_rename("> rename | a", CAMEL_CASE) is None


class TestFormatLinkText:
    """Test format_link_text function."""

    def test_title_and_tags(self):
        link = {"title": "Docs", "tags": ["python", "web"]}
        assert format_link_text(link) == "Docs #python #web"

    def test_no_tags(self):
        assert format_link_text({"title": "Docs", "tags": []}) == "Docs"

    def test_round_trips_through_parser(self):
        """Editing a link without changes should parse back to the same values."""
        link = {"title": "Docs here", "tags": ["pythonTips", "web"]}
        assert parse_link_text(format_link_text(link), CAMEL_CASE) == ParsedText("Docs here", ["pythonTips", "web"])
