"""Mirror the selected tag filter to and from a ``tags`` URL query parameter."""

from dataclasses import dataclass, field
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

TAGS_PARAM = "tags"


def read_selected_tags(url: str) -> list[str]:
    """Selected tags encoded in ``url`` (comma-separated, blanks dropped)."""
    params = dict(parse_qsl(urlparse(url).query))
    raw = params.get(TAGS_PARAM, "")
    return [t.strip() for t in raw.split(",") if t.strip()]


def with_selected_tags(url: str, tags: list[str]) -> str:
    """Return ``url`` with its ``tags`` parameter set to ``tags`` (removed when empty)."""
    parsed = urlparse(url)
    params = [(k, v) for k, v in parse_qsl(parsed.query) if k != TAGS_PARAM]
    if tags:
        params.append((TAGS_PARAM, ",".join(tags)))
    return urlunparse(parsed._replace(query=urlencode(params, safe=",@")))


@dataclass
class TagHistory:
    """Back/forward stack of filter states, like browser history entries."""

    entries: list[list[str]] = field(default_factory=lambda: [[]])
    position: int = 0

    @property
    def current(self) -> list[str]:
        return list(self.entries[self.position])

    def push(self, tags: list[str]) -> None:
        if list(tags) == self.entries[self.position]:
            return
        del self.entries[self.position + 1:]
        self.entries.append(list(tags))
        self.position += 1

    def back(self) -> list[str]:
        if self.position > 0:
            self.position -= 1
        return self.current

    def forward(self) -> list[str]:
        if self.position < len(self.entries) - 1:
            self.position += 1
        return self.current
