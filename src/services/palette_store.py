"""
Palette Store for the Action Wizard.

Immutable, ordered reference palette loaded once per process. The store
only answers queries; matching logic lives in color_matcher.py.

Usage:
    store = get_palette_store()
    entry = store.find_by_code("185 c")
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from src.config.palette import PALETTE_ROWS
from src.lib.color_math import Rgb, hex_to_rgb

logger = logging.getLogger(__name__)


def normalize_code(code: str) -> str:
    """Lower-case a palette code and drop all whitespace ("185 C" -> "185c")."""
    return "".join(code.split()).lower()


@dataclass(frozen=True)
class PaletteEntry:
    """A named reference colour."""

    code: str
    name: str
    hex: str
    rgb: Rgb = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "hex", self.hex.upper())
        object.__setattr__(self, "rgb", hex_to_rgb(self.hex))

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "name": self.name, "hex": self.hex}


class PaletteStore:
    """Ordered, read-only collection of palette entries."""

    def __init__(self, entries: Iterable[PaletteEntry]) -> None:
        self._entries: tuple[PaletteEntry, ...] = tuple(entries)
        if not self._entries:
            raise ValueError("A palette needs at least one entry")
        # First entry wins when two codes normalize the same way
        self._by_code: dict[str, PaletteEntry] = {}
        for entry in self._entries:
            self._by_code.setdefault(normalize_code(entry.code), entry)

    @classmethod
    def from_rows(cls, rows: Iterable[tuple[str, str, str]]) -> PaletteStore:
        """Build a store from (code, name, hex) rows."""
        return cls(PaletteEntry(code=code, name=name, hex=hex_value) for code, name, hex_value in rows)

    @property
    def entries(self) -> tuple[PaletteEntry, ...]:
        return self._entries

    def find_by_code(self, code: str) -> PaletteEntry | None:
        """Exact code lookup, ignoring case and whitespace."""
        return self._by_code.get(normalize_code(code))

    def search(self, query: str) -> list[PaletteEntry]:
        """Entries whose code or name contains the query (case-insensitive)."""
        needle = " ".join(query.split()).lower()
        if not needle:
            return list(self._entries)
        compact = needle.replace(" ", "")
        return [
            entry
            for entry in self._entries
            if needle in entry.code.lower()
            or compact == normalize_code(entry.code)
            or needle in entry.name.lower()
        ]

    def __iter__(self) -> Iterator[PaletteEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


_palette_store: PaletteStore | None = None


def get_palette_store() -> PaletteStore:
    """Get the process-wide palette store, loading it on first use."""
    global _palette_store
    if _palette_store is None:
        _palette_store = PaletteStore.from_rows(PALETTE_ROWS)
        logger.info("Loaded palette with %d entries", len(_palette_store))
    return _palette_store
