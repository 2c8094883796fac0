"""Configuration Management Package"""

import json
import math
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from changelog_gen import DEFAULT_MODEL, MODEL_NAMES

# Valid configuration ranges (OpenAI chat-completion limits)
TEMPERATURE_RANGE = (0.0, 2.0)
FREQUENCY_PENALTY_RANGE = (-2.0, 2.0)


def _in_range(value, bounds: tuple[float, float]) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value) and bounds[0] <= value <= bounds[1]


@dataclass
class Config:
    """User configuration with sensible defaults."""
    model: str = DEFAULT_MODEL
    temperature: float = 0.5
    frequency_penalty: float = 0.0
    short: bool = False

    def validate(self) -> list[str]:
        """Validate config values and return list of warnings.

        Invalid values are replaced with defaults after warning.
        """
        warnings = []
        defaults = Config()

        if self.model not in MODEL_NAMES:
            warnings.append(f"Invalid model '{self.model}', using '{defaults.model}'")
            self.model = defaults.model

        if not _in_range(self.temperature, TEMPERATURE_RANGE):
            warnings.append(f"Invalid temperature '{self.temperature}', using {defaults.temperature}")
            self.temperature = defaults.temperature

        if not _in_range(self.frequency_penalty, FREQUENCY_PENALTY_RANGE):
            warnings.append(f"Invalid frequency_penalty '{self.frequency_penalty}', using {defaults.frequency_penalty}")
            self.frequency_penalty = defaults.frequency_penalty

        if not isinstance(self.short, bool):
            warnings.append(f"Invalid short '{self.short}', using {str(defaults.short).lower()}")
            self.short = defaults.short

        return warnings

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        config = cls(**filtered)
        for warning in config.validate():
            print(f"Config warning: {warning}", file=sys.stderr)
        return config


class ConfigManager:
    """Manages loading configuration from .clogrc."""

    CONFIG_FILENAME = ".clogrc"

    def __init__(self):
        self._config: Optional[Config] = None
        self._config_path: Optional[Path] = None

    def load(self) -> Config:
        if self._config is not None:
            return self._config

        for path in (Path.cwd() / self.CONFIG_FILENAME, Path.home() / self.CONFIG_FILENAME):
            if path.exists():
                self._config = self._load_from_file(path)
                self._config_path = path
                return self._config

        self._config = Config()
        return self._config

    def _load_from_file(self, path: Path) -> Config:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("expected a JSON object")
            return Config.from_dict(data)
        except (ValueError, OSError) as e:
            print(f"Config warning: Could not load {path}: {e}", file=sys.stderr)
            return Config()

    def get_config_path(self) -> Optional[Path]:
        return self._config_path


_manager = ConfigManager()


def load_config() -> Config:
    return _manager.load()


def get_config_path() -> Optional[Path]:
    return _manager.get_config_path()


__all__ = [
    "Config",
    "ConfigManager",
    "load_config",
    "get_config_path",
    "TEMPERATURE_RANGE",
    "FREQUENCY_PENALTY_RANGE",
]
