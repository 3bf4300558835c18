"""Terminal drill for the romaji matcher.

Shows a word, reads a line of romaji and feeds it to the matcher one letter
at a time. An empty line skips the word.

    python main.py --count 5 --log-level DEBUG
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import Optional, Sequence, TextIO

from kana_typing.controllers.word_repository import WordEntry, WordRepository
from kana_typing.domain.romaji_matcher import ALPHABET, RomajiMatcher
from kana_typing.domain.romaji_table import table_for
from kana_typing.domain.typing_progress import renderable_progress, romaji_hint
from kana_typing.services.settings_store import SettingsStore

logger = logging.getLogger(__name__)


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Type kana readings in romaji.")
    parser.add_argument("--settings", type=Path, default=None, help="Path to settings.yaml")
    parser.add_argument("--words", type=Path, default=None, help="Path to words.yaml")
    parser.add_argument("--count", type=int, default=3, help="Number of words to practise")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for word order")
    parser.add_argument("--log-level", default=None, help="Override the configured log level")
    parser.add_argument("--hint", action="store_true", help="Show a romaji hint for each word")
    return parser.parse_args(argv)


def type_line(matcher: RomajiMatcher, line: str) -> tuple[bool, int]:
    """Feed `line` into the matcher. Returns (completed, mistakes)."""
    mistakes = 0
    for ch in line.strip().lower():
        if ch not in ALPHABET:
            continue
        result = matcher.push(ch)
        if result.error:
            mistakes += 1
        if result.word_completed:
            return True, mistakes
    return matcher.finish().word_completed, mistakes


def run_drill(
    repo: WordRepository,
    matcher: RomajiMatcher,
    *,
    count: int,
    rng: random.Random,
    show_hint: bool = False,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    completed = 0
    previous: Optional[WordEntry] = None
    for _ in range(max(0, count)):
        entry = repo.pick(previous, rng=rng)
        previous = entry
        state = matcher.begin(entry.reading)
        print("{}  ({})".format(entry.display, entry.reading), file=stdout)
        if show_hint:
            print("  hint: {}".format(romaji_hint(state)), file=stdout)

        while not matcher.complete:
            line = stdin.readline()
            if not line or not line.strip():
                print("  skipped", file=stdout)
                break
            done, mistakes = type_line(matcher, line)
            if done:
                completed += 1
                print("  ok" if not mistakes else "  ok ({} mistakes)".format(mistakes), file=stdout)
                break
            progress = renderable_progress(matcher.state)
            print(
                "  {}/{} units, keep typing".format(progress.completed_unit_count, progress.total_units),
                file=stdout,
            )
    return completed


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    store = SettingsStore(args.settings)
    level = (args.log_level or store.get_log_level()).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = store.get_matcher_settings()
    table = table_for(settings.table_options())
    repo = WordRepository(data_path=args.words, table=table)
    matcher = RomajiMatcher(table, finish_on_trailing_n=settings.finish_on_trailing_n)
    logger.debug("Loaded %d words, %d table units", len(repo), len(table))

    completed = run_drill(
        repo,
        matcher,
        count=args.count,
        rng=random.Random(args.seed),
        show_hint=args.hint,
    )
    print("Completed {}/{} words".format(completed, args.count))
    return 0


if __name__ == "__main__":
    sys.exit(main())
