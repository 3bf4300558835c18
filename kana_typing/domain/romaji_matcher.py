from __future__ import annotations

"""Incremental romaji -> kana matcher (domain layer).

This module is intentionally Qt-free.

State for one word lives in a `MatcherState`; the module-level functions
take that state, mutate it, and report what happened as a `PushResult`.
`RomajiMatcher` is a small owner object for callers that prefer methods.

Matching rules per unit kind:
- REGULAR: the buffer must start with one of the unit's spellings
  (longest first).
- GEMINATE (っ): a doubled consonant; one letter is consumed, the second
  starts the next unit. Explicit small-tsu spellings (xtu, ltsu, ...) are
  accepted as well.
- NASAL (ん): "nn", "n" + consonant other than "y", or "m" when the next unit
  starts with b/p/m.
- LONG_VOWEL (ー): the previous vowel repeated, or "-".

A dead end is only judged on a keystroke that consumed nothing. Dead ends on
REGULAR units are recovered by dropping leading letters until the rest of the
buffer is a valid start again; other kinds have no recovery.
"""

import logging
from dataclasses import dataclass, field
from typing import Final, Optional

from kana_typing.domain.enums import PushStatus, UnitKind
from kana_typing.domain.kana_units import (
    KanaUnit,
    normalize_reading,
    previous_unit_start,
    segment_reading,
    unit_at,
)
from kana_typing.domain.romaji_table import RomajiTable, default_table

logger = logging.getLogger(__name__)


VOWELS: Final[frozenset[str]] = frozenset("aiueo")
CONSONANTS: Final[frozenset[str]] = frozenset("bcdfghjklmnpqrstvwxyz")
LABIALS: Final[frozenset[str]] = frozenset("bpm")
LONG_VOWEL_ALIAS: Final[str] = "-"
NASAL_GLIDE: Final[str] = "y"

ALPHABET: Final[frozenset[str]] = VOWELS | CONSONANTS | {LONG_VOWEL_ALIAS}


class MalformedReadingError(ValueError):
    """A reading contains a unit the matcher can never complete."""

    def __init__(self, reading: str, offset: int, unit: str) -> None:
        super().__init__(
            "Reading {!r} has no romaji for {!r} at offset {}".format(reading, unit, offset)
        )
        self.reading = reading
        self.offset = offset
        self.unit = unit


@dataclass
class MatcherState:
    reading: str
    table: RomajiTable = field(default_factory=default_table, repr=False)
    cursor: int = 0
    buffer: str = ""
    last_vowel: Optional[str] = None
    error_at_cursor: bool = False
    finish_on_trailing_n: bool = False

    @property
    def complete(self) -> bool:
        return self.cursor >= len(self.reading)

    def current_unit(self) -> Optional[KanaUnit]:
        return unit_at(self.reading, self.cursor)


@dataclass(frozen=True)
class PushResult:
    progressed: bool = False
    unit_completed: bool = False
    word_completed: bool = False
    error: bool = False
    recovered: bool = False
    consumed: tuple[str, ...] = ()

    @property
    def status(self) -> PushStatus:
        if self.word_completed:
            return PushStatus.WORD_COMPLETE
        if self.error:
            return PushStatus.ERROR
        if self.progressed:
            return PushStatus.PROGRESSED
        return PushStatus.PENDING


# -----------------------------------------------------------------------------
# Word lifecycle
# -----------------------------------------------------------------------------

def validate_reading(reading: str, table: RomajiTable) -> str:
    """Return the normalised reading or raise MalformedReadingError."""
    text = normalize_reading(reading)
    if not text:
        raise MalformedReadingError(reading, 0, "")
    seen_regular = False
    for unit in segment_reading(text):
        if unit.kind is UnitKind.REGULAR:
            if not table.accepts(unit.text):
                raise MalformedReadingError(reading, unit.start, unit.text)
            seen_regular = True
        elif unit.kind is UnitKind.LONG_VOWEL and not seen_regular:
            # nothing to lengthen yet
            raise MalformedReadingError(reading, unit.start, unit.text)
    return text


def begin_word(
    reading: str,
    table: Optional[RomajiTable] = None,
    *,
    finish_on_trailing_n: bool = False,
) -> MatcherState:
    tbl = table if table is not None else default_table()
    text = validate_reading(reading, tbl)
    return MatcherState(reading=text, table=tbl, finish_on_trailing_n=finish_on_trailing_n)


def reset_word(state: MatcherState) -> None:
    state.cursor = 0
    state.buffer = ""
    state.last_vowel = None
    state.error_at_cursor = False


# -----------------------------------------------------------------------------
# Consumption rules
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class _Step:
    letters: int   # letters taken from the buffer front
    advance: int   # characters the cursor moves
    spelling: str


def _next_unit_is_labial(state: MatcherState, unit: KanaUnit) -> bool:
    nxt = unit_at(state.reading, unit.end)
    if nxt is None:
        return False
    if nxt.kind is UnitKind.REGULAR:
        return state.table.starts_with_any(nxt.text, LABIALS)
    return False


def _match_regular(state: MatcherState, unit: KanaUnit) -> Optional[_Step]:
    for spelling in state.table.spellings_for(unit.text):
        if state.buffer.startswith(spelling):
            return _Step(letters=len(spelling), advance=len(unit), spelling=spelling)
    return None


def _match_geminate(state: MatcherState, unit: KanaUnit) -> Optional[_Step]:
    buf = state.buffer
    for spelling in state.table.spellings_for(unit.text):
        if buf.startswith(spelling):
            return _Step(letters=len(spelling), advance=1, spelling=spelling)
    if len(buf) >= 2 and buf[0] in CONSONANTS and buf[0] == buf[1]:
        return _Step(letters=1, advance=1, spelling=buf[0])
    return None


def _match_nasal(state: MatcherState, unit: KanaUnit) -> Optional[_Step]:
    buf = state.buffer
    if buf.startswith("nn"):
        return _Step(letters=2, advance=1, spelling="nn")
    if len(buf) >= 2 and buf[0] == "n" and buf[1] in CONSONANTS and buf[1] != NASAL_GLIDE:
        return _Step(letters=1, advance=1, spelling="n")
    if buf[:1] == "m" and _next_unit_is_labial(state, unit):
        return _Step(letters=1, advance=1, spelling="m")
    for spelling in state.table.spellings_for(unit.text):
        if buf.startswith(spelling):
            return _Step(letters=len(spelling), advance=1, spelling=spelling)
    if (
        buf == "n"
        and state.finish_on_trailing_n
        and unit.end >= len(state.reading)
    ):
        return _Step(letters=1, advance=1, spelling="n")
    return None


def _match_long_vowel(state: MatcherState, unit: KanaUnit) -> Optional[_Step]:
    first = state.buffer[:1]
    if first == LONG_VOWEL_ALIAS and state.last_vowel:
        return _Step(letters=1, advance=1, spelling=first)
    if state.last_vowel and first == state.last_vowel:
        return _Step(letters=1, advance=1, spelling=first)
    return None


_MATCHERS = {
    UnitKind.REGULAR: _match_regular,
    UnitKind.GEMINATE: _match_geminate,
    UnitKind.NASAL: _match_nasal,
    UnitKind.LONG_VOWEL: _match_long_vowel,
}


def _could_continue(state: MatcherState, unit: KanaUnit) -> bool:
    """True if the buffer can still grow into a match for `unit`."""
    buf = state.buffer
    if not buf:
        return True
    table = state.table
    if unit.kind is UnitKind.REGULAR:
        return table.is_possible_prefix(buf, unit.text)
    if unit.kind is UnitKind.GEMINATE:
        if table.is_possible_prefix(buf, unit.text):
            return True
        return len(buf) == 1 and buf in CONSONANTS
    if unit.kind is UnitKind.NASAL:
        if buf == "n" or table.is_possible_prefix(buf, unit.text):
            return True
        return buf == "m" and _next_unit_is_labial(state, unit)
    # Long vowel marks are decided by a single letter
    return False


def _consume(state: MatcherState) -> list[tuple[KanaUnit, str]]:
    taken: list[tuple[KanaUnit, str]] = []
    while state.buffer and not state.complete:
        unit = state.current_unit()
        if unit is None:
            break
        step = _MATCHERS[unit.kind](state, unit)
        if step is None:
            break
        state.buffer = state.buffer[step.letters:]
        state.cursor += step.advance
        state.error_at_cursor = False
        if unit.kind is UnitKind.REGULAR:
            state.last_vowel = step.spelling[-1]
        taken.append((unit, step.spelling))
    return taken


def _trim_to_valid_suffix(buffer: str, unit: KanaUnit, table: RomajiTable) -> str:
    """Drop leading letters until the rest is a valid start for `unit`.

    Returns "" if no non-empty suffix qualifies. Always terminates: each
    iteration removes one letter.
    """
    buf = buffer
    while buf and not table.is_possible_prefix(buf, unit.text):
        buf = buf[1:]
    return buf


# -----------------------------------------------------------------------------
# Public operations
# -----------------------------------------------------------------------------

def push_letter(state: MatcherState, letter: str) -> PushResult:
    if not isinstance(letter, str) or len(letter) != 1 or letter not in ALPHABET:
        raise ValueError("Expected a lowercase ASCII letter or '-', got {!r}".format(letter))

    if state.complete:
        return PushResult(word_completed=True)

    start_cursor = state.cursor
    state.buffer += letter
    taken = _consume(state)
    recovered = False
    error = False

    # Letters left over from a consumption wait for the next keystroke.
    unit = state.current_unit()
    if not taken and unit is not None and state.buffer and not _could_continue(state, unit):
        if unit.kind is UnitKind.REGULAR:
            trimmed = _trim_to_valid_suffix(state.buffer, unit, state.table)
            if trimmed:
                logger.debug("Recovered %r -> %r at %r", state.buffer, trimmed, unit.text)
                state.buffer = trimmed
                state.error_at_cursor = False
                recovered = True
                taken.extend(_consume(state))
            else:
                error = True
        else:
            error = True

        if error:
            logger.debug("Dead end %r at %r (offset %d)", state.buffer, unit.text, unit.start)
            state.buffer = ""
            state.error_at_cursor = True

    if not error:
        state.error_at_cursor = False
    if state.complete:
        state.buffer = ""

    return PushResult(
        progressed=state.cursor > start_cursor,
        unit_completed=any(u.kind is not UnitKind.GEMINATE for u, _ in taken),
        word_completed=state.complete,
        error=error,
        recovered=recovered,
        consumed=tuple(spelling for _, spelling in taken),
    )


def finish_word(state: MatcherState) -> PushResult:
    """Flush end of input: a lone "n" completes a word-final ん."""
    if state.complete:
        return PushResult(word_completed=True)

    unit = state.current_unit()
    if (
        unit is not None
        and unit.kind is UnitKind.NASAL
        and unit.end >= len(state.reading)
        and state.buffer == "n"
    ):
        state.buffer = ""
        state.cursor = unit.end
        state.error_at_cursor = False
        return PushResult(
            progressed=True,
            unit_completed=True,
            word_completed=True,
            consumed=("n",),
        )
    return PushResult()


def backspace(state: MatcherState) -> None:
    if state.buffer:
        state.buffer = state.buffer[:-1]
        state.error_at_cursor = False
        return
    if state.cursor > 0:
        state.cursor = previous_unit_start(state.reading, state.cursor)
        state.error_at_cursor = False


# -----------------------------------------------------------------------------
# Owner object
# -----------------------------------------------------------------------------

class RomajiMatcher:
    """Owns the MatcherState for the word currently being typed."""

    def __init__(
        self,
        table: Optional[RomajiTable] = None,
        *,
        finish_on_trailing_n: bool = False,
    ) -> None:
        self._table = table if table is not None else default_table()
        self._finish_on_trailing_n = bool(finish_on_trailing_n)
        self._state: Optional[MatcherState] = None

    @property
    def table(self) -> RomajiTable:
        return self._table

    @property
    def state(self) -> MatcherState:
        if self._state is None:
            raise RuntimeError("No word has been started")
        return self._state

    @property
    def reading(self) -> str:
        return self.state.reading

    @property
    def complete(self) -> bool:
        return self._state is not None and self._state.complete

    def begin(self, reading: str) -> MatcherState:
        self._state = begin_word(
            reading, self._table, finish_on_trailing_n=self._finish_on_trailing_n
        )
        return self._state

    def push(self, letter: str) -> PushResult:
        return push_letter(self.state, letter)

    def backspace(self) -> None:
        backspace(self.state)

    def finish(self) -> PushResult:
        return finish_word(self.state)

    def reset(self) -> None:
        reset_word(self.state)

    def expected_spellings(self) -> tuple[str, ...]:
        unit = self.state.current_unit()
        if unit is None:
            return ()
        return self._table.spellings_for(unit.text)
