"""Unit tests for linkntag.tag_index module."""

import pytest

from linkntag.tag_index import (
    available_tags,
    build_index,
    cooccurring_tags,
    link_tag_set,
    link_tags,
    matching_links,
)


@pytest.fixture
def two_links():
    return [
        {"id": 1, "url": "https://a.com", "tags": ["news"]},
        {"id": 2, "url": "https://b.com", "tags": []},
    ]


@pytest.fixture
def library():
    return [
        {"id": 1, "url": "https://www.python.org/doc", "tags": ["python", "docs"]},
        {"id": 2, "url": "https://realpython.com/a", "tags": ["python", "tutorial"]},
        {"id": 3, "url": "https://realpython.com/b", "tags": ["Python", "tutorial", "async"]},
        {"id": 4, "url": "https://news.ycombinator.com", "tags": ["news"]},
        {"id": 5, "url": "https://example.com", "tags": []},
    ]


class TestBuildIndex:
    """Test build_index function."""

    def test_counts_explicit_and_domain(self, library):
        """Should count every explicit tag and one domain tag per link."""
        index = build_index(library)
        assert index.count("python") == 3
        assert index.count("PYTHON") == 3
        assert index.count("@realpython.com") == 2
        assert index.count("@python.org") == 1
        assert index.count("missing") == 0

    def test_vocabulary_first_seen_spelling(self, library):
        """Should keep the first spelling seen, domain tag before explicit tags."""
        index = build_index(library)
        assert index.vocabulary[:3] == ["@python.org", "python", "docs"]
        assert "Python" not in index.vocabulary

    def test_cardinality_conservation(self, library):
        """Total count equals explicit tags plus one domain tag per link."""
        index = build_index(library)
        assert sum(index.cardinality.values()) == sum(len(l["tags"]) + 1 for l in library)

    def test_empty(self):
        index = build_index([])
        assert index.vocabulary == []
        assert index.max_count() == 0

    def test_max_count(self, library):
        assert build_index(library).max_count() == 3

    def test_recomputed_from_current_links(self, library):
        """Index reflects the collection it was built from, nothing cached."""
        before = build_index(library)
        after = build_index(library[:1])
        assert before.count("python") == 3
        assert after.count("python") == 1


class TestLinkTags:
    """Test link_tags and link_tag_set functions."""

    def test_includes_domain(self):
        link = {"url": "https://www.a.com/x", "tags": ["One"]}
        assert link_tags(link) == ["One", "@a.com"]
        assert link_tag_set(link) == {"one", "@a.com"}

    def test_no_url(self):
        assert link_tags({"url": "", "tags": ["x"]}) == ["x"]


class TestAvailableTags:
    """Test available_tags function."""

    def test_no_selection_returns_vocabulary(self, two_links):
        """Ties keep first-seen order."""
        assert available_tags(two_links, []) == ["@a.com", "news", "@b.com"]

    def test_no_selection_ranked_by_cardinality(self, library):
        result = available_tags(library, [])
        assert result[0] == "python"
        assert result.index("tutorial") < result.index("docs")

    def test_selection_returns_cooccurring(self, two_links):
        assert available_tags(two_links, ["news"]) == ["@a.com"]

    def test_selection_keeps_rarest_only(self, library):
        """Only co-occurring tags with the minimum global count are offered."""
        result = available_tags(library, ["python"])
        # co-occurring: @python.org(1) docs(1) @realpython.com(2) tutorial(2) async(1)
        assert result == ["@python.org", "docs", "async"]

    def test_selection_is_case_insensitive(self, library):
        assert available_tags(library, ["PYTHON", "#Tutorial"]) == ["async"]

    def test_domain_tag_selection(self, library):
        assert available_tags(library, ["@realpython.com"]) == ["async"]

    def test_no_tag_selected(self, library):
        """noTag offers nothing further."""
        assert available_tags(library, ["noTag"]) == []
        assert available_tags(library, ["NOTAG", "python"]) == []

    def test_no_match(self, library):
        assert available_tags(library, ["python", "news"]) == []

    def test_accepts_prebuilt_index(self, library):
        index = build_index(library)
        assert available_tags(library, [], index) == available_tags(library, [])


class TestCooccurrence:
    """Test matching_links and cooccurring_tags functions."""

    def test_matching_links(self, library):
        assert [l["id"] for l in matching_links(library, ["tutorial"])] == [2, 3]

    def test_pool_shrinks_with_more_tags(self, library):
        """Adding selected tags never grows the candidate pool's match set."""
        selections = [[], ["python"], ["python", "tutorial"], ["python", "tutorial", "async"]]
        sizes = [len(matching_links(library, s)) for s in selections]
        assert sizes == sorted(sizes, reverse=True)

    def test_excludes_selected(self, library):
        pool = cooccurring_tags(library, ["tutorial"])
        assert "tutorial" not in pool
        assert pool == {"python", "async", "@realpython.com"}
