import pytest

from kana_typing.domain.enums import UnitKind
from kana_typing.domain.kana_units import (
    attaches_to_previous,
    classify_char,
    normalize_reading,
    previous_unit_start,
    segment_reading,
    unit_at,
    vowel_of_unit,
)


@pytest.mark.parametrize("ch,kind", [
    ("か", UnitKind.REGULAR),
    ("ゃ", UnitKind.REGULAR),
    ("っ", UnitKind.GEMINATE),
    ("ん", UnitKind.NASAL),
    ("ー", UnitKind.LONG_VOWEL),
])
def test_classify_char(ch, kind):
    assert classify_char(ch) is kind


def test_segment_merges_yoon_and_small_vowels():
    assert [u.text for u in segment_reading("きょう")] == ["きょ", "う"]
    assert [u.text for u in segment_reading("ふぉーく")] == ["ふぉ", "ー", "く"]
    assert [u.text for u in segment_reading("きっぷ")] == ["き", "っ", "ぷ"]


def test_segment_kinds_for_ramen():
    units = segment_reading("らーめん")
    assert [u.kind for u in units] == [
        UnitKind.REGULAR,
        UnitKind.LONG_VOWEL,
        UnitKind.REGULAR,
        UnitKind.NASAL,
    ]
    assert [u.start for u in units] == [0, 1, 2, 3]


def test_small_kana_never_attach_to_markers():
    # っ and ん are always one-character units
    assert unit_at("っゃ", 0).text == "っ"
    assert unit_at("んゃ", 0).text == "ん"


def test_leading_small_kana_is_its_own_unit():
    assert [u.text for u in segment_reading("ぁあ")] == ["ぁ", "あ"]


def test_unit_at_bounds():
    assert unit_at("か", 1) is None
    assert unit_at("か", -1) is None
    unit = unit_at("しゃしん", 2)
    assert unit.text == "し" and unit.end == 3 and len(unit) == 1


def test_attaches_to_previous():
    assert attaches_to_previous("ゃ")
    assert attaches_to_previous("ぉ")
    assert not attaches_to_previous("っ")
    assert not attaches_to_previous("か")
    assert not attaches_to_previous(None)


def test_previous_unit_start_steps_over_two_char_units():
    assert previous_unit_start("きょう", 2) == 0
    assert previous_unit_start("きょう", 3) == 2
    assert previous_unit_start("ふぁん", 2) == 0
    assert previous_unit_start("きっぷ", 2) == 1
    assert previous_unit_start("きょう", 0) == 0


def test_normalize_reading_folds_katakana():
    assert normalize_reading("ラーメン") == "らーめん"
    assert normalize_reading("フォーク") == "ふぉーく"
    assert normalize_reading("すし〜") == "すしー"
    assert normalize_reading("") == ""


def test_vowel_of_unit():
    assert vowel_of_unit("きょ") == "o"
    assert vowel_of_unit("か") == "a"
    assert vowel_of_unit("ふぃ") == "i"
    assert vowel_of_unit("ん") is None
    assert vowel_of_unit("") is None
