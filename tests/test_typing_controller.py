import random
from pathlib import Path

import pytest
from PyQt6.QtCore import QEvent, Qt
from PyQt6.QtGui import QKeyEvent

from kana_typing.controllers import TypingController, WordEntry, WordRepository
from kana_typing.domain.romaji_matcher import MalformedReadingError
from kana_typing.services.settings_store import MatcherSettings


def _key(key: Qt.Key, text: str = "") -> QKeyEvent:
    return QKeyEvent(QEvent.Type.KeyPress, key.value, Qt.KeyboardModifier.NoModifier, text)


@pytest.fixture
def controller(qtbot):
    ctrl = TypingController()
    ctrl.start_word(WordEntry(display="今日", reading="きょう"))
    return ctrl


def test_start_word_emits(qtbot):
    ctrl = TypingController()
    entry = WordEntry(display="本", reading="ほん")
    with qtbot.waitSignals([ctrl.word_started, ctrl.progress_changed], timeout=1000):
        ctrl.start_word(entry)
    assert ctrl.current_word == entry
    assert ctrl.progress().completed_unit_count == 0


def test_start_word_rejects_bad_reading(qtbot):
    ctrl = TypingController()
    with pytest.raises(MalformedReadingError):
        ctrl.start_word(WordEntry(display="x", reading="漢"))


def test_typing_completes_word(qtbot, controller):
    units = []
    controller.unit_completed.connect(units.append)
    with qtbot.waitSignal(controller.word_completed, timeout=1000) as blocker:
        assert controller.handle_text("kyou")
    assert blocker.args == [WordEntry(display="今日", reading="きょう")]
    assert units == [1, 2]
    assert controller.matcher.complete


def test_uppercase_is_folded_and_junk_rejected(qtbot, controller):
    assert not controller.handle_text("123")
    assert not controller.handle_text("")
    assert controller.handle_text("KY")
    assert controller.matcher.state.buffer == "ky"


def test_mistype_emits_cursor(qtbot, controller):
    with qtbot.waitSignal(controller.mistyped, timeout=1000) as blocker:
        controller.handle_text("x")
    assert blocker.args == [0]
    assert controller.progress().error_at_current


def test_key_events(qtbot, controller):
    assert controller.handle_key_event(_key(Qt.Key.Key_K, "k"))
    assert controller.handle_key_event(_key(Qt.Key.Key_Y, "y"))
    assert controller.handle_key_event(_key(Qt.Key.Key_Backspace))
    assert controller.matcher.state.buffer == "k"
    assert not controller.handle_key_event(_key(Qt.Key.Key_Shift))


def test_enter_finishes_trailing_n(qtbot):
    ctrl = TypingController()
    ctrl.start_word(WordEntry(display="本", reading="ほん"))
    ctrl.handle_text("hon")
    assert not ctrl.matcher.complete
    with qtbot.waitSignal(ctrl.word_completed, timeout=1000):
        assert ctrl.handle_key_event(_key(Qt.Key.Key_Return))
    assert ctrl.matcher.complete


def test_finish_on_trailing_n_setting(qtbot):
    ctrl = TypingController(settings=MatcherSettings(finish_on_trailing_n=True))
    ctrl.start_word(WordEntry(display="本", reading="ほん"))
    with qtbot.waitSignal(ctrl.word_completed, timeout=1000):
        ctrl.handle_text("hon")


def test_input_ignored_without_word_or_after_completion(qtbot):
    ctrl = TypingController()
    assert ctrl.progress() is None
    assert not ctrl.handle_text("ka")
    assert not ctrl.backspace()
    assert not ctrl.finish_word()
    ctrl.start_word(WordEntry(display="か", reading="か"))
    ctrl.handle_text("ka")
    assert not ctrl.handle_text("k")
    assert not ctrl.backspace()


def test_next_and_skip_use_repository(qtbot, tmp_path: Path):
    p = tmp_path / "words.yaml"
    p.write_text("words:\n  - かき\n  - くけ\n", encoding="utf-8")
    repo = WordRepository(data_path=p)
    ctrl = TypingController(repository=repo, rng=random.Random(1))

    first = ctrl.next_word()
    assert first is not None
    with qtbot.waitSignal(ctrl.word_started, timeout=1000) as blocker:
        second = ctrl.skip_word()
    assert blocker.args == [second]
    assert second != first


def test_next_word_without_repository(qtbot):
    assert TypingController().next_word() is None
