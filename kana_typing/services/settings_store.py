from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from kana_typing.domain.romaji_table import TableOptions

logger = logging.getLogger(__name__)

SETTINGS_ENV_VAR = "KANA_TYPING_SETTINGS"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class MatcherSettings:
    wo_short_alias: bool = True
    lenient_yoon: bool = True
    small_kana_compounds: bool = True
    finish_on_trailing_n: bool = False

    def table_options(self) -> TableOptions:
        return TableOptions(
            wo_short_alias=self.wo_short_alias,
            lenient_yoon=self.lenient_yoon,
            small_kana_compounds=self.small_kana_compounds,
        )


class SettingsStore:
    """YAML-backed settings reader.

    Responsibilities:
      - Load settings.yaml (missing or malformed files read as {})
      - Provide typed helpers for the matcher options and log level

    settings.yaml structure:
      romaji:
        wo_short_alias: true
        lenient_yoon: true
        small_kana_compounds: true
        finish_on_trailing_n: false
      logging:
        level: WARNING
    """

    def __init__(self, settings_path: str | os.PathLike[str] | None = None) -> None:
        if settings_path is None:
            env_path = os.environ.get(SETTINGS_ENV_VAR)
            if env_path:
                self._path = Path(env_path)
            else:
                # <project_root>/settings.yaml
                project_root = Path(__file__).resolve().parents[2]
                self._path = project_root / "settings.yaml"
        else:
            self._path = Path(settings_path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, Any]:
        try:
            p = self._path
            if not p.exists():
                return {}
            with p.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
                return data if isinstance(data, dict) else {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Failed to read settings %s: %s", self._path, e)
            return {}

    def get_matcher_settings(self) -> MatcherSettings:
        s = self.load()
        section = s.get("romaji") or {}
        if not isinstance(section, dict):
            logger.warning("Ignoring non-mapping 'romaji' section in %s", self._path)
            section = {}

        defaults = MatcherSettings()

        def _bval(key: str) -> bool:
            default = getattr(defaults, key)
            v = section.get(key, default)
            if isinstance(v, bool):
                return v
            logger.warning("Setting romaji.%s must be true/false, got %r", key, v)
            return default

        return MatcherSettings(
            wo_short_alias=_bval("wo_short_alias"),
            lenient_yoon=_bval("lenient_yoon"),
            small_kana_compounds=_bval("small_kana_compounds"),
            finish_on_trailing_n=_bval("finish_on_trailing_n"),
        )

    def get_log_level(self) -> str:
        s = self.load()
        section = s.get("logging") or {}
        level = section.get("level", "WARNING") if isinstance(section, dict) else "WARNING"
        name = str(level).strip().upper()
        return name if name in _LOG_LEVELS else "WARNING"
