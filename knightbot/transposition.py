"""Transposition table keyed by Zobrist hash."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from knightbot.move import Move

INFINITY = 1_000_000_000
_MATE_WINDOW = 256


class Bound(IntEnum):
    """How a stored score relates to the true value."""

    EXACT = 0
    LOWER = 1
    UPPER = 2


@dataclass(frozen=True)
class TranspositionEntry:
    key: int
    move: Move
    depth: int
    score: int
    flag: Bound


class TranspositionTable:
    """A fixed-size, always-replace table (unless the same position is deeper)."""

    def __init__(self, size: int = 1 << 20) -> None:
        if size <= 0 or size & (size - 1):
            raise ValueError(f"table size must be a power of two: {size}")
        self._mask = size - 1
        self._entries: dict[int, TranspositionEntry] = {}

    def _lookup(self, position) -> tuple[int, TranspositionEntry | None]:
        key = int(position.zobrist())
        return key, self._entries.get(key & self._mask)

    def store(self, position, move: Move, depth: int, score: int, flag: Bound) -> None:
        """Store a result unless the slot holds this position at greater depth."""
        key, entry = self._lookup(position)
        if entry is not None and entry.key == key and entry.depth > depth:
            return
        self._entries[key & self._mask] = TranspositionEntry(key, move, depth, score, flag)

    def probe_score(self, position, depth: int, ply: int, alpha: int, beta: int) -> int | None:
        """Return a usable stored score for this window, or None."""
        key, entry = self._lookup(position)
        if entry is None or entry.key != key or entry.depth < depth:
            return None
        score = entry.score
        # Mate scores are stored relative to the root; shift them by ply.
        if score > INFINITY - _MATE_WINDOW:
            score -= ply
        if score < -INFINITY + _MATE_WINDOW:
            score += ply
        if entry.flag is Bound.EXACT:
            return score
        if entry.flag is Bound.UPPER and alpha >= entry.score:
            return score
        if entry.flag is Bound.LOWER and beta <= entry.score:
            return score
        return None

    def probe_move(self, position) -> Move:
        """Return the stored best move for this position, or the null move."""
        key, entry = self._lookup(position)
        if entry is not None and entry.key == key:
            return entry.move
        return Move()