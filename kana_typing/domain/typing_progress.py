from __future__ import annotations

"""Read-only projections of a MatcherState for the UI layer.

Nothing here mutates the state it is given.
"""

from dataclasses import dataclass
from typing import Optional

from kana_typing.domain.enums import CharState, UnitKind
from kana_typing.domain.kana_units import segment_reading, vowel_of_unit
from kana_typing.domain.romaji_matcher import CONSONANTS, MatcherState


@dataclass(frozen=True)
class Progress:
    completed_unit_count: int
    current_unit_index: Optional[int]  # None once the word is complete
    error_at_current: bool
    cursor: int
    total_units: int
    buffer: str = ""

    @property
    def complete(self) -> bool:
        return self.current_unit_index is None


def renderable_progress(state: MatcherState) -> Progress:
    units = segment_reading(state.reading)
    completed = sum(1 for u in units if u.end <= state.cursor)
    current: Optional[int] = completed if completed < len(units) else None
    return Progress(
        completed_unit_count=completed,
        current_unit_index=current,
        error_at_current=bool(state.error_at_cursor) and current is not None,
        cursor=state.cursor,
        total_units=len(units),
        buffer=state.buffer,
    )


def char_states(state: MatcherState) -> list[CharState]:
    """Return one CharState per character of the reading."""
    out: list[CharState] = []
    for i in range(len(state.reading)):
        if i < state.cursor:
            out.append(CharState.CORRECT)
        elif i == state.cursor:
            out.append(CharState.ERROR if state.error_at_cursor else CharState.CURRENT)
        else:
            out.append(CharState.UPCOMING)
    return out


def _preferred(spellings: tuple[str, ...]) -> str:
    """Shortest spelling; ties go to the earlier table entry."""
    if not spellings:
        return ""
    return min(spellings, key=len)


def romaji_hint(state: MatcherState) -> str:
    """Suggest a spelling for the untyped remainder of the word.

    Example: "きっぷ" -> "kippu", "ほん" -> "honn", "らーめん" -> "raamenn".
    """
    units = [u for u in segment_reading(state.reading) if u.start >= state.cursor]
    parts: list[str] = []
    pending_geminate = False
    vowel = state.last_vowel
    for idx, unit in enumerate(units):
        if unit.kind is UnitKind.GEMINATE:
            pending_geminate = True
            continue
        if unit.kind is UnitKind.LONG_VOWEL:
            spelling = vowel or "-"
        elif unit.kind is UnitKind.NASAL:
            nxt = units[idx + 1] if idx + 1 < len(units) else None
            following = _preferred(state.table.spellings_for(nxt.text)) if nxt else ""
            if following[:1] in CONSONANTS and following[:1] not in ("n", "y"):
                spelling = "n"
            else:
                spelling = "nn"
        else:
            spelling = _preferred(state.table.spellings_for(unit.text))
            vowel = vowel_of_unit(unit.text)

        if pending_geminate:
            if spelling[:1] in CONSONANTS:
                spelling = spelling[0] + spelling
            else:
                spelling = "xtu" + spelling
            pending_geminate = False
        parts.append(spelling)

    if pending_geminate:
        parts.append("xtu")
    return "".join(parts)
