from __future__ import annotations

"""Romaji spelling table (domain layer).

Built once from a many-to-one canonical table (spelling -> kana) by inverting
it into kana -> spellings and then adding derived alternates. Each derivation
step is a plain function over a `dict[str, list[str]]` so it can be tested on
its own; `build_table()` runs them in order and freezes the result.

Spelling lists are ordered longest first, which makes greedy matching
deterministic: the first spelling the buffer starts with is the longest one.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Final, Iterable, Iterator, Mapping, Optional

from kana_typing.domain.enums import UnitKind
from kana_typing.domain.kana_units import SMALL_VOWELS, SMALL_YOON, classify_char


# -----------------------------------------------------------------------------
# Canonical table: spelling -> kana
# -----------------------------------------------------------------------------

CANONICAL_ROMAJI: Final[dict[str, str]] = {
    "a": "あ", "i": "い", "u": "う", "e": "え", "o": "お",
    "ka": "か", "ki": "き", "ku": "く", "ke": "け", "ko": "こ",
    "kya": "きゃ", "kyu": "きゅ", "kyo": "きょ",
    "sa": "さ", "shi": "し", "si": "し", "su": "す", "se": "せ", "so": "そ",
    "sha": "しゃ", "shu": "しゅ", "sho": "しょ", "sya": "しゃ", "syu": "しゅ", "syo": "しょ",
    "ta": "た", "chi": "ち", "ti": "ち", "tsu": "つ", "tu": "つ", "te": "て", "to": "と",
    "cha": "ちゃ", "chu": "ちゅ", "cho": "ちょ", "tya": "ちゃ", "tyu": "ちゅ", "tyo": "ちょ",
    "na": "な", "ni": "に", "nu": "ぬ", "ne": "ね", "no": "の",
    "nya": "にゃ", "nyu": "にゅ", "nyo": "にょ",
    "ha": "は", "hi": "ひ", "fu": "ふ", "hu": "ふ", "he": "へ", "ho": "ほ",
    "hya": "ひゃ", "hyu": "ひゅ", "hyo": "ひょ",
    "ma": "ま", "mi": "み", "mu": "む", "me": "め", "mo": "も",
    "mya": "みゃ", "myu": "みゅ", "myo": "みょ",
    "ya": "や", "yu": "ゆ", "yo": "よ",
    "ra": "ら", "ri": "り", "ru": "る", "re": "れ", "ro": "ろ",
    "rya": "りゃ", "ryu": "りゅ", "ryo": "りょ",
    "wa": "わ", "wo": "を",
    "ga": "が", "gi": "ぎ", "gu": "ぐ", "ge": "げ", "go": "ご",
    "gya": "ぎゃ", "gyu": "ぎゅ", "gyo": "ぎょ",
    "za": "ざ", "ji": "じ", "zi": "じ", "zu": "ず", "ze": "ぜ", "zo": "ぞ",
    "ja": "じゃ", "ju": "じゅ", "jo": "じょ", "jya": "じゃ", "jyu": "じゅ", "jyo": "じょ",
    "zya": "じゃ", "zyu": "じゅ", "zyo": "じょ",
    "da": "だ", "di": "ぢ", "du": "づ", "de": "で", "do": "ど",
    "dya": "ぢゃ", "dyu": "ぢゅ", "dyo": "ぢょ",
    "ba": "ば", "bi": "び", "bu": "ぶ", "be": "べ", "bo": "ぼ",
    "bya": "びゃ", "byu": "びゅ", "byo": "びょ",
    "pa": "ぱ", "pi": "ぴ", "pu": "ぷ", "pe": "ぺ", "po": "ぽ",
    "pya": "ぴゃ", "pyu": "ぴゅ", "pyo": "ぴょ",
    "fa": "ふぁ", "fi": "ふぃ", "fe": "ふぇ", "fo": "ふぉ",
    "ltu": "っ", "xtu": "っ", "ltsu": "っ", "xtsu": "っ",
    # Foreign-sound compounds
    "she": "しぇ", "che": "ちぇ", "je": "じぇ", "zye": "じぇ",
    "thi": "てぃ", "dhi": "でぃ", "twu": "とぅ", "dwu": "どぅ",
    "wi": "うぃ", "we": "うぇ", "who": "うぉ",
    "vu": "ゔ", "va": "ゔぁ", "vi": "ゔぃ", "ve": "ゔぇ", "vo": "ゔぉ",
    "tsa": "つぁ", "tse": "つぇ", "tso": "つぉ",
    # Small kana typed on their own
    "xa": "ぁ", "xi": "ぃ", "xu": "ぅ", "xe": "ぇ", "xo": "ぉ",
    "la": "ぁ", "li": "ぃ", "lu": "ぅ", "le": "ぇ", "lo": "ぉ",
    "xya": "ゃ", "xyu": "ゅ", "xyo": "ょ", "lya": "ゃ", "lyu": "ゅ", "lyo": "ょ",
    "xwa": "ゎ", "lwa": "ゎ",
    "xn": "ん",
}

# Augmentation (a): one unit with an extra short alias
SHORT_ALIASES: Final[dict[str, tuple[str, ...]]] = {
    "を": ("o",),
}

# Augmentation (b): lenient yoon, e.g. "siyo" for しょ
YOON_TAILS: Final[dict[str, str]] = {"ゃ": "ya", "ゅ": "yu", "ょ": "yo"}
YOON_BASE_VOWEL: Final[str] = "i"


@dataclass(frozen=True)
class TableOptions:
    wo_short_alias: bool = True
    lenient_yoon: bool = True
    small_kana_compounds: bool = True


# -----------------------------------------------------------------------------
# Build steps
# -----------------------------------------------------------------------------

def invert_table(canonical: Mapping[str, str]) -> dict[str, list[str]]:
    """Invert spelling -> kana into kana -> [spellings] (insertion order kept)."""
    mapping: dict[str, list[str]] = {}
    for spelling, kana in canonical.items():
        mapping.setdefault(kana, []).append(spelling)
    return mapping


def add_alias(mapping: dict[str, list[str]], unit: str, spelling: str) -> None:
    spellings = mapping.setdefault(unit, [])
    if spelling not in spellings:
        spellings.append(spelling)


def add_yoon_fallbacks(mapping: dict[str, list[str]]) -> None:
    """Let every base+ゃ/ゅ/ょ unit accept <base spelling ending in i> + ya/yu/yo."""
    for unit in list(mapping):
        if len(unit) != 2 or unit[1] not in YOON_TAILS:
            continue
        tail = YOON_TAILS[unit[1]]
        for base_spelling in list(mapping.get(unit[0], [])):
            if base_spelling.endswith(YOON_BASE_VOWEL):
                add_alias(mapping, unit, base_spelling + tail)


def add_small_kana_compounds(
    mapping: dict[str, list[str]],
    bases: Optional[Iterable[str]] = None,
) -> None:
    """Let base+small units be typed as <base spelling> + <small kana spelling>.

    Also creates entries for attachable pairs the canonical table lacks
    (e.g. "てぇ"), limited to `bases` when given, otherwise to every kana with
    spellings.
    """
    smalls = sorted(SMALL_YOON | SMALL_VOWELS)
    base_units = [u for u in (bases if bases is not None else list(mapping)) if len(u) == 1]
    for base in base_units:
        if base in smalls or classify_char(base) is not UnitKind.REGULAR:
            continue
        base_spellings = list(mapping.get(base, []))
        if not base_spellings:
            continue
        for small in smalls:
            small_spellings = mapping.get(small, [])
            for bs in base_spellings:
                for ss in small_spellings:
                    add_alias(mapping, base + small, bs + ss)


def sort_longest_first(mapping: dict[str, list[str]]) -> dict[str, tuple[str, ...]]:
    result: dict[str, tuple[str, ...]] = {}
    for unit, spellings in mapping.items():
        unique = list(dict.fromkeys(spellings))
        unique.sort(key=len, reverse=True)
        result[unit] = tuple(unique)
    return result


# -----------------------------------------------------------------------------
# Table
# -----------------------------------------------------------------------------

class RomajiTable:
    """Immutable unit -> spellings lookup."""

    def __init__(self, entries: Mapping[str, Iterable[str]]) -> None:
        self._entries: dict[str, tuple[str, ...]] = {
            str(unit): tuple(spellings) for unit, spellings in entries.items()
        }

    def spellings_for(self, unit: str) -> tuple[str, ...]:
        return self._entries.get(unit, ())

    def accepts(self, unit: str) -> bool:
        return bool(self._entries.get(unit))

    def is_possible_prefix(self, buffer: str, unit: str) -> bool:
        """True iff `buffer` is a non-empty prefix of a spelling of `unit`."""
        if not buffer:
            return False
        return any(s.startswith(buffer) for s in self.spellings_for(unit))

    def starts_with_any(self, unit: str, letters: Iterable[str]) -> bool:
        firsts = set(letters)
        return any(s[:1] in firsts for s in self.spellings_for(unit))

    def __contains__(self, unit: object) -> bool:
        return unit in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return "RomajiTable({} units)".format(len(self._entries))


def build_table(
    options: Optional[TableOptions] = None,
    canonical: Optional[Mapping[str, str]] = None,
) -> RomajiTable:
    opts = options or TableOptions()
    mapping = invert_table(canonical if canonical is not None else CANONICAL_ROMAJI)

    if opts.wo_short_alias:
        for unit, aliases in SHORT_ALIASES.items():
            for alias in aliases:
                add_alias(mapping, unit, alias)

    if opts.lenient_yoon:
        add_yoon_fallbacks(mapping)

    if opts.small_kana_compounds:
        add_small_kana_compounds(mapping)

    return RomajiTable(sort_longest_first(mapping))


@lru_cache(maxsize=None)
def default_table() -> RomajiTable:
    return build_table()


@lru_cache(maxsize=None)
def table_for(options: TableOptions) -> RomajiTable:
    return build_table(options)
