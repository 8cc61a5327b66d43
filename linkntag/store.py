"""JSON-file link store. The whole collection is read and replaced at once."""

import contextlib
import json
import os
import tempfile
import time
from datetime import datetime, timezone
from pathlib import Path

from common.display import console
from .errors import StoreError
from .tag_utils import sanitize_tags


def _coerce_tags(tags) -> list[str]:
    """Accept both tag lists and legacy comma-separated tag strings."""
    if isinstance(tags, str):
        return [t.strip() for t in tags.split(",") if t.strip()]
    if isinstance(tags, list):
        return [str(t).strip() for t in tags if str(t).strip()]
    return []


def new_link(url: str, title: str, tags: list[str], links: list[dict]) -> dict:
    """Build a link record with an id (epoch ms) greater than any existing id."""
    now = datetime.now(timezone.utc)
    link_id = int(time.time() * 1000)
    existing = [l["id"] for l in links if isinstance(l.get("id"), int)]
    if existing and link_id <= max(existing):
        link_id = max(existing) + 1
    return {
        "id": link_id,
        "title": title,
        "url": url,
        "tags": sanitize_tags(tags, url),
        "created_at": now.isoformat(),
    }


class LinkStore:
    """Ordered link collection persisted as a JSON array."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> list[dict]:
        """Read all links; a missing or unreadable file gives an empty list."""
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            console.print(f"[yellow]Warning: could not read {self.path}: {e}[/yellow]")
            return []
        if not isinstance(data, list):
            console.print(f"[yellow]Warning: {self.path} does not hold a link list[/yellow]")
            return []

        links = []
        for item in data:
            if not isinstance(item, dict):
                continue
            url = str(item.get("url") or "").strip()
            links.append({**item, "url": url, "tags": sanitize_tags(_coerce_tags(item.get("tags")), url)})
        return links

    def save(self, links: list[dict]) -> None:
        """Atomically replace the stored collection with ``links``.

        Raises:
            StoreError: If the file cannot be written
        """
        tmp = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".links-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(links, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except OSError as e:
            raise StoreError(f"could not write {self.path}: {e}") from e
        finally:
            # only left over when writing or replacing failed
            if tmp and os.path.exists(tmp):
                with contextlib.suppress(OSError):
                    os.unlink(tmp)

    def find(self, link_id) -> dict | None:
        return next((l for l in self.load() if l.get("id") == link_id), None)
