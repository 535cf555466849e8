"""
Settings Repository - manages application key-value settings.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from taskman_app.models.theme import Theme

logger = logging.getLogger(__name__)

KEY_THEME = 'theme'
KEY_NOTIFICATIONS = 'notifications_enabled'


class SettingsRepository:
    """Handle all settings reads and writes against a JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load_settings(self) -> Dict[str, str]:
        """
        Load all application settings from disk.

        Returns:
            Dictionary of key-value settings; empty if the file is missing or unreadable
        """
        try:
            with self.path.open('r', encoding='utf-8') as handle:
                data = json.load(handle)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning("Could not read settings from %s: %s", self.path, e)
            return {}

        if not isinstance(data, dict):
            logger.warning("Ignoring settings file %s: not a JSON object", self.path)
            return {}
        return {str(key): str(value) for key, value in data.items()}

    def get_setting(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Get a single setting by key.

        Args:
            key: Setting key
            default: Default value if key doesn't exist

        Returns:
            Setting value or default
        """
        return self.load_settings().get(key, default)

    def save_settings(self, settings: Dict[str, str]):
        """
        Replace the stored settings with the given mapping.

        Raises:
            OSError: The settings file could not be written
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open('w', encoding='utf-8') as handle:
            json.dump(settings, handle, indent=2, sort_keys=True)

    def save_setting(self, key: str, value) -> None:
        """
        Save or update a setting.

        Args:
            key: Setting key
            value: Setting value, stored as its string form
        """
        settings = self.load_settings()
        settings[key] = str(value)
        self.save_settings(settings)

    def delete_setting(self, key: str) -> bool:
        """
        Delete a setting by key.

        Returns:
            True if the key existed, False otherwise
        """
        settings = self.load_settings()
        if key not in settings:
            return False
        del settings[key]
        self.save_settings(settings)
        return True


class AppSettings:
    """Typed view over the settings store: theme and notification switch."""

    def __init__(self, repository: SettingsRepository):
        self.repository = repository
        self._theme = Theme.default()
        self._notifications_enabled = True

    def load(self):
        values = self.repository.load_settings()
        self._theme = Theme.from_name(values.get(KEY_THEME, Theme.default().display_name))
        raw = values.get(KEY_NOTIFICATIONS, 'true')
        self._notifications_enabled = raw.strip().lower() == 'true'
        return self

    def save(self):
        settings = self.repository.load_settings()
        settings[KEY_THEME] = self._theme.display_name
        settings[KEY_NOTIFICATIONS] = 'true' if self._notifications_enabled else 'false'
        self.repository.save_settings(settings)

    @property
    def theme(self) -> Theme:
        return self._theme

    def set_theme(self, theme: Theme):
        self._theme = theme
        self.save()

    @property
    def notifications_enabled(self) -> bool:
        return self._notifications_enabled

    def set_notifications_enabled(self, enabled: bool):
        self._notifications_enabled = bool(enabled)
        self.save()
