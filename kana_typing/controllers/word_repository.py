from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from kana_typing.domain.romaji_matcher import MalformedReadingError, validate_reading
from kana_typing.domain.romaji_table import RomajiTable, default_table

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WordEntry:
    display: str
    reading: str


BUILTIN_WORDS: tuple[WordEntry, ...] = (
    WordEntry(display="こんにちは", reading="こんにちは"),
    WordEntry(display="てすと", reading="てすと"),
)


class WordRepository:
    """Load typeable words from data/words.yaml.

    Accepted shapes under the `words:` key:
      - {display: 東京, reading: とうきょう}
      - "ひらがな"  (display and reading are the same)

    Readings the matcher cannot type are skipped with a warning.
    """

    def __init__(
        self,
        *,
        data_path: Path | None = None,
        table: Optional[RomajiTable] = None,
    ) -> None:
        self._data_path = data_path or (Path(__file__).resolve().parents[2] / "data" / "words.yaml")
        self._table = table if table is not None else default_table()
        self._items: list[WordEntry] = []

        self._load()

    @property
    def items(self) -> list[WordEntry]:
        return list(self._items)

    @property
    def data_path(self) -> Path:
        return self._data_path

    def __len__(self) -> int:
        return len(self._items)

    def pick(self, previous: Optional[WordEntry] = None, rng: Optional[random.Random] = None) -> WordEntry:
        """Return a random word, different from `previous` when possible."""
        r = rng or random
        if len(self._items) == 1:
            return self._items[0]
        choices = [w for w in self._items if w != previous] or self._items
        return r.choice(choices)

    def _load(self) -> None:
        data = self._read_yaml()
        raw_items = data.get("words", []) if isinstance(data, dict) else []
        if not isinstance(raw_items, list):
            raw_items = []
        for raw in raw_items:
            item = self._parse_item(raw)
            if item is None:
                continue
            self._items.append(item)

        if not self._items:
            logger.info("No words loaded from %s; using built-in list", self._data_path)
            self._items = list(BUILTIN_WORDS)

    def _read_yaml(self) -> dict[str, Any]:
        try:
            if not self._data_path.exists():
                return {}
            raw = self._data_path.read_text(encoding="utf-8")
            data = yaml.safe_load(raw)
            return data if isinstance(data, dict) else {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Failed to read word list %s: %s", self._data_path, e)
            return {}

    def _parse_item(self, raw: Any) -> WordEntry | None:
        if isinstance(raw, str):
            display = reading = raw.strip()
        elif isinstance(raw, dict):
            reading = raw.get("reading")
            display = raw.get("display", reading)
            if not isinstance(reading, str) or not isinstance(display, str):
                return None
            reading = reading.strip()
            display = display.strip() or reading
        else:
            return None

        if not reading:
            return None

        try:
            validate_reading(reading, self._table)
        except MalformedReadingError as e:
            logger.warning("Skipping word %r: %s", display, e)
            return None

        return WordEntry(display=display, reading=reading)
