"""
Controller package exports.

This file provides a stable import surface for the controllers.
"""

from .typing_controller import TypingController  # noqa: F401
from .word_repository import WordEntry, WordRepository  # noqa: F401

__all__ = [
    "TypingController",
    "WordEntry",
    "WordRepository",
]
