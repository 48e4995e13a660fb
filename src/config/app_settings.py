"""Application settings file: API key and recently opened projects."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from services.errors import StoreError
from services.project_store import ProjectStore, ProjectSummary
from utils.env import get_data_dir

logger = logging.getLogger(__name__)

SETTINGS_FILE_NAME = "stable-diffusion-desktop.config.json"

KEY_API_KEY = "apiKey"
KEY_RECENT_PROJECTS = "recentProjects"

DEFAULT_RECENT_LIMIT = 10


def default_settings_path() -> Path:
    return get_data_dir() / SETTINGS_FILE_NAME


class AppSettings:
    """Key/value settings persisted as a small JSON document."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else default_settings_path()
        self._settings: Dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        """Load settings from file; an unreadable file yields empty settings."""
        self._settings = {}
        if not self.path.exists():
            return
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                saved = json.load(f)
            if isinstance(saved, dict):
                self._settings = saved
            else:
                logger.warning("Ignoring malformed settings file %s", self.path)
            logger.debug("Settings loaded from %s", self.path)
        except (OSError, ValueError) as e:
            logger.warning("Failed to load settings: %s", e)

    def save(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(self._settings, f, indent=2)
            logger.debug("Settings saved to %s", self.path)
        except OSError as e:
            logger.error("Failed to save settings: %s", e)
            raise

    def get(self, key: str, default: Any = None) -> Any:
        return self._settings.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set a value and persist immediately."""
        self._settings[key] = value
        self.save()


class ApiKeyStore:
    """The credential collaborator used by the generation service."""

    def __init__(self, settings: AppSettings):
        self.settings = settings

    def get(self) -> Optional[str]:
        value = self.settings.get(KEY_API_KEY)
        return value if isinstance(value, str) and value else None

    def set(self, api_key: str) -> None:
        self.settings.set(KEY_API_KEY, api_key)

    def has(self) -> bool:
        value = self.get()
        return bool(value and value.strip())


class RecentProjects:
    """Most-recently-opened project paths, newest first."""

    def __init__(self, settings: AppSettings, max_entries: int = DEFAULT_RECENT_LIMIT):
        self.settings = settings
        self.max_entries = max_entries

    def paths(self) -> List[Path]:
        raw = self.settings.get(KEY_RECENT_PROJECTS) or []
        return [Path(item) for item in raw if isinstance(item, str) and item]

    def add(self, path: Union[Path, str]) -> None:
        normalized = Path(path).expanduser().absolute()
        entries = [p for p in self.paths() if p != normalized]
        entries.insert(0, normalized)
        self._store(entries[: self.max_entries])

    def remove(self, path: Union[Path, str]) -> None:
        normalized = Path(path).expanduser().absolute()
        entries = [p for p in self.paths() if p != normalized]
        self._store(entries)

    def list_projects(self, store: ProjectStore) -> List[ProjectSummary]:
        """Summaries of recent entries that still are valid projects."""
        summaries: List[ProjectSummary] = []
        for path in self.paths():
            try:
                summaries.append(store.inspect(path))
            except StoreError as e:
                logger.info("Skipping recent project %s: %s", path, e)
        return summaries

    def _store(self, entries: List[Path]) -> None:
        self.settings.set(KEY_RECENT_PROJECTS, [str(p) for p in entries])
