"""Errors — exception taxonomy shared across the engine.

Geometry and dictionary lookups fail fast with these exceptions.
Parsing and search never raise on routine bad input; they return
``None`` / empty sentinels instead.
"""

from __future__ import annotations


class IsofingerError(Exception):
    """Base class for all engine errors."""


class OutOfRange(IsofingerError, IndexError):
    """Row, column or pad index outside the active grid layout."""


class UnknownQuality(IsofingerError, KeyError):
    """Chord quality, scale type or note name missing from the static tables."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message instead
        return str(self.args[0]) if self.args else ""


class InvalidHandprint(IsofingerError, ValueError):
    """A handprint record that fails validation."""
