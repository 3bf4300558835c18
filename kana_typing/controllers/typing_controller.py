from __future__ import annotations

import logging
import random
from typing import Optional

from PyQt6.QtCore import QObject, Qt, pyqtSignal
from PyQt6.QtGui import QKeyEvent

from kana_typing.controllers.word_repository import WordEntry, WordRepository
from kana_typing.domain.romaji_matcher import ALPHABET, PushResult, RomajiMatcher
from kana_typing.domain.romaji_table import RomajiTable, table_for
from kana_typing.domain.typing_progress import Progress, renderable_progress
from kana_typing.services.settings_store import MatcherSettings

logger = logging.getLogger(__name__)

_BACKSPACE_KEY = Qt.Key.Key_Backspace.value
_FINISH_KEYS = frozenset(k.value for k in (Qt.Key.Key_Return, Qt.Key.Key_Enter, Qt.Key.Key_Space))


class TypingController(QObject):
    """Feeds keystrokes into the matcher and re-emits its results as signals.

    Owns:
    - the RomajiMatcher for the current word
    - the current WordEntry

    Rendering, sound and scoring live in whoever connects to the signals.
    """

    word_started = pyqtSignal(object)       # WordEntry
    progress_changed = pyqtSignal(object)   # Progress
    unit_completed = pyqtSignal(int)        # completed unit count
    word_completed = pyqtSignal(object)     # WordEntry
    mistyped = pyqtSignal(int)              # cursor of the unit in error

    def __init__(
        self,
        *,
        repository: Optional[WordRepository] = None,
        settings: Optional[MatcherSettings] = None,
        table: Optional[RomajiTable] = None,
        rng: Optional[random.Random] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._settings = settings or MatcherSettings()
        self._table = table if table is not None else table_for(self._settings.table_options())
        self._repository = repository
        self._rng = rng
        self._matcher = RomajiMatcher(
            self._table, finish_on_trailing_n=self._settings.finish_on_trailing_n
        )
        self._current: Optional[WordEntry] = None

    @property
    def matcher(self) -> RomajiMatcher:
        return self._matcher

    @property
    def current_word(self) -> Optional[WordEntry]:
        return self._current

    def progress(self) -> Optional[Progress]:
        if self._current is None:
            return None
        return renderable_progress(self._matcher.state)

    # ---------------------------
    # Word lifecycle
    # ---------------------------

    def start_word(self, entry: WordEntry) -> None:
        """Begin typing `entry`. Raises MalformedReadingError for bad readings."""
        self._matcher.begin(entry.reading)
        self._current = entry
        logger.debug("Started word %r (%s)", entry.display, entry.reading)
        self.word_started.emit(entry)
        self._emit_progress()

    def next_word(self) -> Optional[WordEntry]:
        if self._repository is None:
            return None
        entry = self._repository.pick(self._current, rng=self._rng)
        self.start_word(entry)
        return entry

    def skip_word(self) -> Optional[WordEntry]:
        if self._current is not None:
            logger.info("Skipped word %r", self._current.display)
        return self.next_word()

    # ---------------------------
    # Input
    # ---------------------------

    def handle_text(self, text: str) -> bool:
        """Push typed characters; returns False if nothing was accepted."""
        if self._current is None or self._matcher.complete:
            return False
        letters = [ch for ch in (text or "").lower() if ch in ALPHABET]
        if not letters:
            return False
        for ch in letters:
            result = self._matcher.push(ch)
            self._dispatch(result)
            if result.word_completed:
                break
        return True

    def backspace(self) -> bool:
        if self._current is None or self._matcher.complete:
            return False
        self._matcher.backspace()
        self._emit_progress()
        return True

    def finish_word(self) -> bool:
        if self._current is None or self._matcher.complete:
            return False
        result = self._matcher.finish()
        if result.progressed:
            self._dispatch(result)
        return result.word_completed

    def handle_key_event(self, event: QKeyEvent) -> bool:
        key = int(event.key())
        if key == _BACKSPACE_KEY:
            return self.backspace()
        if key in _FINISH_KEYS:
            return self.finish_word()
        return self.handle_text(event.text())

    # ---------------------------
    # Internal helpers
    # ---------------------------

    def _emit_progress(self) -> None:
        progress = self.progress()
        if progress is not None:
            self.progress_changed.emit(progress)

    def _dispatch(self, result: PushResult) -> None:
        progress = renderable_progress(self._matcher.state)
        if result.error:
            self.mistyped.emit(progress.cursor)
        if result.unit_completed:
            self.unit_completed.emit(progress.completed_unit_count)
        self.progress_changed.emit(progress)
        if result.word_completed and self._current is not None:
            logger.info("Completed word %r", self._current.display)
            self.word_completed.emit(self._current)
