"""
------------------------------------------------------------------------------
Project:        DokuMini
File:           core/config.py
Version:        1.0.0
Producer:       thorsten.schnebeck@gmx.net
Generator:      Antigravity
Description:    Application settings on QSettings: site title, download
                folder, display locale and logging levels, plus the durable
                slot that remembers the logged-in user between runs.
                Profiles ('-P dev') isolate settings, data and database.
------------------------------------------------------------------------------
"""

import json
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from PyQt6.QtCore import QSettings, QStandardPaths


class AppConfig:
    """
    Typed accessors over one QSettings store per profile.
    The most recently requested profile becomes the default for later instances.
    """

    # Groups
    GROUP_APPEARANCE: str = "Appearance"
    GROUP_STORAGE: str = "Storage"
    GROUP_LOGGING: str = "Logging"
    GROUP_SESSION: str = "Session"

    # Keys
    KEY_SITE_NAME: str = "site_name"
    KEY_DOWNLOAD_DIR: str = "download_dir"
    KEY_LANGUAGE: str = "language"
    KEY_LOG_LEVEL: str = "log_level"
    KEY_LOG_COMPONENTS: str = "log_components"
    KEY_CURRENT_USER: str = "current_user"

    # Defaults
    DEFAULT_SITE_NAME: str = "DokuMini"
    DEFAULT_LANGUAGE: str = "id"
    DEFAULT_LOG_LEVEL: str = "WARNING"

    APP_ID: str = "dokumini"

    _active_profile: Optional[str] = None

    def __init__(self, profile: Optional[str] = None) -> None:
        """
        Args:
            profile: Optional profile name (e.g. 'dev'). Settings and data
                     directories are then keyed 'dokumini-<profile>'.
        """
        if profile is None:
            profile = AppConfig._active_profile
        else:
            AppConfig._active_profile = profile

        self.profile = profile
        self.active_id = f"{self.APP_ID}-{profile}" if profile else self.APP_ID
        self.settings = QSettings(self.active_id, self.active_id)

    # --- Locations ---

    def _standard_dir(self, location: QStandardPaths.StandardLocation) -> Path:
        base = QStandardPaths.writableLocation(location)
        target = Path(base) / self.active_id
        target.mkdir(parents=True, exist_ok=True)
        return target

    def get_config_dir(self) -> Path:
        """~/.config/dokumini[-profile]/"""
        return self._standard_dir(QStandardPaths.StandardLocation.ConfigLocation)

    def get_data_dir(self) -> Path:
        """~/.local/share/dokumini[-profile]/"""
        return self._standard_dir(QStandardPaths.StandardLocation.GenericDataLocation)

    def get_database_path(self) -> Path:
        """Location of the embedded store: <data_dir>/dokumini[-profile].db"""
        return self.get_data_dir() / f"{self.active_id}.db"

    def get_log_file_path(self) -> Path:
        return self.get_data_dir() / "app.log"

    # --- Raw access ---

    @contextmanager
    def _group(self, group: str) -> Iterator[QSettings]:
        if group:
            self.settings.beginGroup(group)
        try:
            yield self.settings
        finally:
            if group:
                self.settings.endGroup()

    def _get_setting(self, group: str, key: str, default: Any = None) -> Any:
        with self._group(group) as s:
            return s.value(key, default)

    def _get_text(self, group: str, key: str, default: str = "") -> str:
        """String setting; empty or missing values yield 'default'."""
        val = self._get_setting(group, key, None)
        return str(val).strip() if val not in (None, "") else default

    def _set_setting(self, group: str, key: str, value: Any) -> None:
        """Stores a value; strings are saved without surrounding whitespace."""
        if isinstance(value, str):
            value = value.strip()
        with self._group(group) as s:
            s.setValue(key, value)

    def _remove_setting(self, group: str, key: str) -> None:
        with self._group(group) as s:
            s.remove(key)

    # --- Appearance ---

    def get_site_name(self) -> str:
        """Title shown in headers. A blank value falls back to 'DokuMini'."""
        return self._get_text(self.GROUP_APPEARANCE, self.KEY_SITE_NAME) or self.DEFAULT_SITE_NAME

    def set_site_name(self, name: str) -> None:
        self._set_setting(self.GROUP_APPEARANCE, self.KEY_SITE_NAME, name)

    def get_language(self) -> str:
        """Locale used for date display ('id', 'de', 'en', ...)."""
        return self._get_text("", self.KEY_LANGUAGE, self.DEFAULT_LANGUAGE)

    def set_language(self, lang: str) -> None:
        self._set_setting("", self.KEY_LANGUAGE, lang)

    # --- Storage ---

    def get_download_dir(self) -> Path:
        """
        Folder that downloads are written to. Defaults to the platform
        download location, or ~/Downloads where the platform reports none.
        """
        configured = self._get_text(self.GROUP_STORAGE, self.KEY_DOWNLOAD_DIR)
        if configured:
            return Path(configured).expanduser()
        base = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.DownloadLocation)
        return Path(base) if base else Path.home() / "Downloads"

    def set_download_dir(self, path: str) -> None:
        self._set_setting(self.GROUP_STORAGE, self.KEY_DOWNLOAD_DIR, str(path))

    # --- Logging ---

    def get_log_level(self) -> str:
        return self._get_text(self.GROUP_LOGGING, self.KEY_LOG_LEVEL, self.DEFAULT_LOG_LEVEL)

    def set_log_level(self, level: str) -> None:
        self._set_setting(self.GROUP_LOGGING, self.KEY_LOG_LEVEL, level.upper())

    def get_log_components(self) -> Dict[str, str]:
        """Component level overrides, stored as a JSON object."""
        raw = self._get_text(self.GROUP_LOGGING, self.KEY_LOG_COMPONENTS, "{}")
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            return {}
        return data if isinstance(data, dict) else {}

    def set_log_components(self, components: Dict[str, str]) -> None:
        self._set_setting(self.GROUP_LOGGING, self.KEY_LOG_COMPONENTS, json.dumps(components))

    # --- Session slot ---

    def get_session_user_json(self) -> Optional[str]:
        """Raw JSON of the remembered user, or None."""
        return self._get_text(self.GROUP_SESSION, self.KEY_CURRENT_USER) or None

    def set_session_user_json(self, payload: str) -> None:
        self._set_setting(self.GROUP_SESSION, self.KEY_CURRENT_USER, payload)
        self.settings.sync()

    def clear_session_user(self) -> None:
        self._remove_setting(self.GROUP_SESSION, self.KEY_CURRENT_USER)
        self.settings.sync()
