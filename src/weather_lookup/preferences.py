"""Persisted provider preference stored as JSON in the user config directory."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ValidationError

from .exceptions import ConfigError
from .providers.models import Provider

CONFIG_FILE_NAME = "config.json"


class ProviderPreference(BaseModel):
    """On-disk shape of the preference file."""

    provider: Provider = Provider.OPEN_METEO


class ProviderPreferenceStore:
    """Loads and saves the preferred provider, creating a default file on first use."""

    def __init__(self, config_dir: Path) -> None:
        self.path = config_dir / CONFIG_FILE_NAME

    def load(self) -> ProviderPreference:
        if not self.path.exists():
            preference = ProviderPreference()
            self.save(preference)
            return preference
        try:
            raw = self.path.read_text(encoding="utf-8")
            return ProviderPreference.model_validate(json.loads(raw))
        except (OSError, ValueError, ValidationError) as exc:
            raise ConfigError(f"Failed reading provider preference {self.path}: {exc}") from exc

    def save(self, preference: ProviderPreference) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(preference.model_dump(mode="json"), indent=2) + "\n",
                encoding="utf-8",
            )
        except OSError as exc:
            raise ConfigError(f"Failed writing provider preference {self.path}: {exc}") from exc
