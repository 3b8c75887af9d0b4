"""Error taxonomy shared by the ClassicXO core and its web layer."""

from __future__ import annotations


class ClassicXOError(ValueError):
    """Base class for every recoverable error raised by the game core."""


class InvalidMove(ClassicXOError):
    """Occupied cell, out-of-range index, wrong turn or finished game."""


class NoLegalMove(ClassicXOError):
    """The engine was asked for a move on a board with no empty cell."""


class ConfigError(ClassicXOError):
    """Unsupported difficulty, symbol, mode or runtime setting."""
