"""Clipboard access and detection of freshly copied URLs."""

import time

import pyperclip

from common.url_utils import is_http_url

# How long a just-saved (or already stored) URL is ignored on the clipboard
PROCESSED_TTL_S = 30


class SystemClipboard:
    """Reads the system clipboard through pyperclip."""

    def read_text(self) -> str:
        try:
            return pyperclip.paste() or ""
        except pyperclip.PyperclipException:
            return ""


class ClipboardWatcher:
    """Decides whether clipboard text is a new URL worth offering for saving."""

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._processed: dict[str, float] = {}

    def _expire(self) -> None:
        now = self._clock()
        self._processed = {u: t for u, t in self._processed.items() if t > now}

    def mark_processed(self, url: str) -> None:
        self._processed[url] = self._clock() + PROCESSED_TTL_S

    def is_processed(self, url: str) -> bool:
        self._expire()
        return url in self._processed

    def check(self, text: str, links: list[dict]) -> str:
        """Return the clipboard URL, or "" when it is not a URL or already handled."""
        if not is_http_url(text):
            return ""
        url = text.strip()
        if self.is_processed(url):
            return ""
        if any(link.get("url") == url for link in links):
            self.mark_processed(url)
            return ""
        return url
