# tests/conftest.py
import os

import pytest

# Controllers are QObjects; no display is needed.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from kana_typing.domain.romaji_matcher import MatcherState, begin_word, push_letter
from kana_typing.domain.romaji_table import default_table


@pytest.fixture(scope="session")
def table():
    return default_table()


def type_letters(state: MatcherState, letters: str):
    """Push every letter of `letters`, returning the list of results."""
    return [push_letter(state, ch) for ch in letters]


@pytest.fixture
def typed():
    """Begin a word and type into it: typed("きょう", "kyou") -> (state, results)."""

    def _typed(reading: str, letters: str = "", **kwargs):
        state = begin_word(reading, **kwargs)
        return state, type_letters(state, letters)

    return _typed
