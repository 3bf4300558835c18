from kana_typing.domain.enums import CharState
from kana_typing.domain.romaji_matcher import begin_word, push_letter
from kana_typing.domain.typing_progress import char_states, renderable_progress, romaji_hint


def _typed(reading: str, letters: str):
    state = begin_word(reading)
    for ch in letters:
        push_letter(state, ch)
    return state


def test_progress_counts_units_not_characters():
    state = _typed("きょう", "kyo")
    p = renderable_progress(state)
    assert p.completed_unit_count == 1
    assert p.current_unit_index == 1
    assert p.cursor == 2
    assert p.total_units == 2
    assert not p.error_at_current
    assert not p.complete


def test_progress_when_complete():
    p = renderable_progress(_typed("きょう", "kyou"))
    assert p.completed_unit_count == 2
    assert p.current_unit_index is None
    assert p.complete


def test_progress_reports_error_and_buffer():
    state = _typed("かき", "kax")
    p = renderable_progress(state)
    assert p.error_at_current
    assert p.buffer == ""
    p = renderable_progress(_typed("かき", "kak"))
    assert p.buffer == "k"
    assert not p.error_at_current


def test_progress_does_not_mutate_state():
    state = _typed("ほん", "hon")
    before = (state.cursor, state.buffer, state.last_vowel, state.error_at_cursor)
    renderable_progress(state)
    char_states(state)
    romaji_hint(state)
    assert (state.cursor, state.buffer, state.last_vowel, state.error_at_cursor) == before


def test_char_states():
    state = _typed("きょう", "kyo")
    assert char_states(state) == [CharState.CORRECT, CharState.CORRECT, CharState.CURRENT]
    state = _typed("かき", "kax")
    assert char_states(state) == [CharState.CORRECT, CharState.ERROR]
    assert char_states(_typed("か", "ka")) == [CharState.CORRECT]


def test_romaji_hint_whole_word():
    assert romaji_hint(begin_word("きっぷ")) == "kippu"
    assert romaji_hint(begin_word("ほん")) == "honn"
    assert romaji_hint(begin_word("らーめん")) == "raamenn"
    assert romaji_hint(begin_word("さんぽ")) == "sanpo"
    assert romaji_hint(begin_word("こんや")) == "konnya"
    assert romaji_hint(begin_word("きょう")) == "kyou"


def test_romaji_hint_remainder():
    assert romaji_hint(_typed("きっぷ", "ki")) == "ppu"
    assert romaji_hint(_typed("きょう", "kyou")) == ""


def test_romaji_hint_repeats_vowel_for_long_mark():
    assert romaji_hint(begin_word("こーひー")) == "koohii"
    assert romaji_hint(_typed("らーめん", "ra")) == "amenn"
    assert romaji_hint(_typed("ふぉーく", "fo")) == "oku"


def test_romaji_hint_hint_is_typeable():
    for reading in ("がっこう", "ふぉーく", "でんしゃ", "りょこう", "こーひー"):
        state = begin_word(reading)
        for ch in romaji_hint(state):
            push_letter(state, ch)
        assert state.complete, reading
