from __future__ import annotations

from enum import Enum, auto


class UnitKind(Enum):
    """How a unit of the reading is matched against typed letters."""

    REGULAR = auto()     # spelled through the romanization table
    GEMINATE = auto()    # っ: doubles the next consonant
    NASAL = auto()       # ん: nn / n+consonant / m before labials
    LONG_VOWEL = auto()  # ー: repeats the previous vowel (or "-")


class PushStatus(Enum):
    PENDING = "pending"
    PROGRESSED = "progressed"
    ERROR = "error"
    WORD_COMPLETE = "word_complete"


class CharState(Enum):
    """Per-character highlight state of a reading."""

    CORRECT = "correct"
    CURRENT = "current"
    ERROR = "error"
    UPCOMING = "upcoming"
