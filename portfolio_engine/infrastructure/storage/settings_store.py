"""
File-backed settings store.
"""

import json
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from portfolio_engine.config import Settings
from portfolio_engine.core.exceptions.portfolio import ConfigurationError

DEFAULT_SETTINGS_PATH = Path("portfolio_settings.json")


class SettingsStore:
    """Persist Settings as a JSON document.

    Values saved in the file override environment variables and defaults.
    The store is read-only to the engine; changes made through ``update``
    apply from the next cycle.
    """

    def __init__(self, path: Path | str = DEFAULT_SETTINGS_PATH) -> None:
        self.path = Path(path)

    def read_file(self) -> dict[str, Any]:
        """Return the values stored in the file, or an empty dict without one.

        Raises:
            ConfigurationError: If the file is unreadable or not a JSON object
        """
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read settings file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Settings file {self.path} must hold a JSON object")
        return data

    def load(self) -> Settings:
        """Load settings, falling back to environment and defaults.

        Raises:
            ConfigurationError: If the file is unreadable or holds invalid values
        """
        data = self.read_file()
        try:
            return Settings(**data)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid settings in {self.path}: {e}") from e

    def update(self, **changes: object) -> Settings:
        """Write ``changes`` into the settings file and return the result.

        Only keys already in the file and the changed keys are written, so
        values coming from the environment or defaults are never pinned.

        Raises:
            ConfigurationError: If a changed value is invalid
        """
        data = self.read_file()
        data.update({k: v for k, v in changes.items() if v is not None})
        try:
            settings = Settings(**data)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid settings: {e}") from e
        self._write(data)
        return settings

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        logger.info(f"Saved settings to {self.path}")
