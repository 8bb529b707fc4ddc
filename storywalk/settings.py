"""Display settings for the terminal story walker."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

SETTINGS_ENV_VAR = "STORYWALK_SETTINGS"
SETTINGS_PATH = Path("settings.json")

BASE_LINE_WIDTH = 70
MIN_LINE_WIDTH = 40
MAX_LINE_WIDTH = 120


def _clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


@dataclass
class Settings:
    """Presentation toggles read at startup."""

    ui_scale: float = 1.0
    high_contrast: bool = False

    def clamp(self) -> "Settings":
        self.ui_scale = _clamp(float(self.ui_scale), 0.5, 2.0)
        self.high_contrast = bool(self.high_contrast)
        return self

    @property
    def line_width(self) -> int:
        width = int(round(BASE_LINE_WIDTH * self.ui_scale))
        return max(MIN_LINE_WIDTH, min(MAX_LINE_WIDTH, width))

    def copy(self) -> "Settings":
        return Settings.from_dict(self.to_dict())

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None) -> "Settings":
        if not isinstance(data, dict):
            return cls()

        def _as_float(key: str, default: float) -> float:
            try:
                return float(data.get(key, default))
            except (TypeError, ValueError):
                return default

        def _as_bool(key: str, default: bool) -> bool:
            value = data.get(key, default)
            if isinstance(value, bool):
                return value
            if isinstance(value, str):
                lowered = value.strip().lower()
                if lowered in {"true", "1", "yes", "on"}:
                    return True
                if lowered in {"false", "0", "no", "off"}:
                    return False
            return bool(value) if value is not None else default

        settings = cls(
            ui_scale=_as_float("ui_scale", 1.0),
            high_contrast=_as_bool("high_contrast", False),
        )
        return settings.clamp()


def default_settings_path() -> Path:
    override = os.environ.get(SETTINGS_ENV_VAR)
    if override:
        return Path(override)
    return SETTINGS_PATH


def load_settings(path: Path | str | None = None) -> Settings:
    path = Path(path) if path is not None else default_settings_path()
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError:
        return Settings()
    except (OSError, ValueError, TypeError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
        return Settings()
    return Settings.from_dict(data)
