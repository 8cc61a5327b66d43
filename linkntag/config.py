"""Configuration from the environment and persisted user settings."""

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path

from .tag_utils import CAMEL_CASE, CASE_MODES

DARK = "dark"
LIGHT = "light"
THEMES = (DARK, LIGHT)

DEFAULT_TITLE_TIMEOUT = 10
DEFAULT_BASE_URL = "http://localhost/"


@dataclass
class Settings:
    tagCaseMode: str = CAMEL_CASE
    theme: str = DARK


def get_data_dir() -> Path:
    """Directory holding links.json and settings.json (LINKNTAG_DATA_DIR)."""
    return Path(os.environ.get("LINKNTAG_DATA_DIR") or Path.home() / ".link-n-tag").expanduser()


def get_title_timeout() -> float:
    """Per-attempt title fetch timeout in seconds.

    Raises:
        ValueError: If LINKNTAG_TITLE_TIMEOUT is not a positive number
    """
    raw = os.environ.get("LINKNTAG_TITLE_TIMEOUT")
    if not raw:
        return DEFAULT_TITLE_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"LINKNTAG_TITLE_TIMEOUT must be a number, got {raw!r}")
    if value <= 0:
        raise ValueError("LINKNTAG_TITLE_TIMEOUT must be positive")
    return value


def get_base_url() -> str:
    """Address used when building shareable filtered views."""
    return os.environ.get("LINKNTAG_BASE_URL", DEFAULT_BASE_URL)


def get_links_path() -> Path:
    return get_data_dir() / "links.json"


def get_settings_path() -> Path:
    return get_data_dir() / "settings.json"


def load_settings(path: Path | None = None) -> Settings:
    """Load persisted settings; missing files and unknown values fall back to defaults."""
    path = path or get_settings_path()
    if not path.exists():
        return Settings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        return Settings()
    if not isinstance(data, dict):
        return Settings()

    settings = Settings()
    if data.get("tagCaseMode") in CASE_MODES:
        settings.tagCaseMode = data["tagCaseMode"]
    if data.get("theme") in THEMES:
        settings.theme = data["theme"]
    return settings


def save_settings(settings: Settings, path: Path | None = None) -> None:
    path = path or get_settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(settings), indent=2), encoding="utf-8")
