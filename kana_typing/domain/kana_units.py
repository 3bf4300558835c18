from __future__ import annotations

"""Kana unit segmentation (domain layer).

This module contains *no* Qt/UI dependencies.

It centralises:
- which small kana attach to the preceding character
- classification of a character into a UnitKind
- splitting a reading into the units the matcher walks through

Primary API:
- segment_reading(reading)
- unit_at(reading, offset)
"""

from dataclasses import dataclass
from typing import Final, Optional

from kana_typing.domain.enums import UnitKind


# -----------------------------------------------------------------------------
# Domain data
# -----------------------------------------------------------------------------

SMALL_YOON: Final[frozenset[str]] = frozenset({"ゃ", "ゅ", "ょ"})
SMALL_VOWELS: Final[frozenset[str]] = frozenset({"ぁ", "ぃ", "ぅ", "ぇ", "ぉ", "ゎ"})

GEMINATE_MARK: Final[str] = "っ"
NASAL_MARK: Final[str] = "ん"
LONG_VOWEL_MARK: Final[str] = "ー"

# Wave dash and fullwidth hyphen show up in word lists as a prolonged sound mark
_LONG_VOWEL_VARIANTS: Final[frozenset[str]] = frozenset({"－", "〜", "～"})

_KATAKANA_FIRST: Final[int] = 0x30A1
_KATAKANA_LAST: Final[int] = 0x30F6
_KATAKANA_OFFSET: Final[int] = 0x60

_VOWEL_BY_ROW: Final[dict[str, str]] = {}
for _vowel, _row in (
    ("a", "あかさたなはまやらわがざだばぱぁゃゎ"),
    ("i", "いきしちにひみりぎじぢびぴぃ"),
    ("u", "うくすつぬふむゆるぐずづぶぷぅゅゔ"),
    ("e", "えけせてねへめれげぜでべぺぇ"),
    ("o", "おこそとのほもよろをごぞどぼぽぉょ"),
):
    for _ch in _row:
        _VOWEL_BY_ROW[_ch] = _vowel


@dataclass(frozen=True)
class KanaUnit:
    text: str
    start: int
    kind: UnitKind

    @property
    def end(self) -> int:
        return self.start + len(self.text)

    def __len__(self) -> int:
        return len(self.text)


# -----------------------------------------------------------------------------
# Character helpers
# -----------------------------------------------------------------------------

def normalize_reading(text: str) -> str:
    """Fold katakana to hiragana so both scripts type the same way.

    The prolonged sound mark is kept as-is; wave dashes become "ー".
    """
    out: list[str] = []
    for ch in text or "":
        code = ord(ch)
        if _KATAKANA_FIRST <= code <= _KATAKANA_LAST:
            out.append(chr(code - _KATAKANA_OFFSET))
        elif ch in _LONG_VOWEL_VARIANTS:
            out.append(LONG_VOWEL_MARK)
        else:
            out.append(ch)
    return "".join(out)


def attaches_to_previous(ch: Optional[str]) -> bool:
    """Return True if `ch` merges with the preceding base character."""
    return bool(ch) and (ch in SMALL_YOON or ch in SMALL_VOWELS)


def classify_char(ch: str) -> UnitKind:
    if ch == GEMINATE_MARK:
        return UnitKind.GEMINATE
    if ch == NASAL_MARK:
        return UnitKind.NASAL
    if ch == LONG_VOWEL_MARK:
        return UnitKind.LONG_VOWEL
    return UnitKind.REGULAR


# -----------------------------------------------------------------------------
# Segmentation
# -----------------------------------------------------------------------------

def unit_at(reading: str, offset: int) -> Optional[KanaUnit]:
    """Return the unit starting at `offset`, or None at/after the end."""
    if offset < 0 or offset >= len(reading):
        return None

    ch = reading[offset]
    kind = classify_char(ch)
    if kind is not UnitKind.REGULAR:
        return KanaUnit(text=ch, start=offset, kind=kind)

    nxt = reading[offset + 1] if offset + 1 < len(reading) else None
    if attaches_to_previous(nxt):
        return KanaUnit(text=ch + nxt, start=offset, kind=kind)
    return KanaUnit(text=ch, start=offset, kind=kind)


def segment_reading(reading: str) -> list[KanaUnit]:
    units: list[KanaUnit] = []
    offset = 0
    while offset < len(reading):
        unit = unit_at(reading, offset)
        if unit is None:
            break
        units.append(unit)
        offset = unit.end
    return units


def previous_unit_start(reading: str, offset: int) -> int:
    """Return the start of the unit that ends at `offset`.

    Walks the segmentation from the beginning, so a cursor right after
    "きゃ" or "ふぁ" steps back over both characters.
    """
    if offset <= 0:
        return 0
    start = 0
    for unit in segment_reading(reading):
        if unit.end >= offset:
            return unit.start
        start = unit.end
    return start


def vowel_of_unit(unit_text: str) -> Optional[str]:
    """Return the vowel a kana unit ends on, e.g. "きょ" -> "o"."""
    if not unit_text:
        return None
    return _VOWEL_BY_ROW.get(unit_text[-1]) or _VOWEL_BY_ROW.get(unit_text[0])
