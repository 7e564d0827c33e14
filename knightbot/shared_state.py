"""State shared between the event stream and the challenge handlers."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass

from knightbot.logger import log
from knightbot.piece import PieceColor


@dataclass(frozen=True)
class GameStartEvent:
    start_fen: str
    color: PieceColor
    id: str
    time_per_side: int


class SharedState:
    """A challenge queue and a table of started games, safe across threads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._queue_changed = threading.Condition(self._lock)
        self._game_started = threading.Condition(self._lock)
        self._main_stream_started = threading.Event()
        self._challenges: deque[str] = deque()
        self._game_starts: dict[str, GameStartEvent] = {}

    def enqueue_challenge(self, challenge_id: str) -> None:
        with self._queue_changed:
            self._challenges.append(challenge_id)
            self._queue_changed.notify()

    def remove_challenge(self, challenge_id: str) -> None:
        """Drop a queued challenge, if it is still waiting."""
        with self._lock:
            try:
                self._challenges.remove(challenge_id)
            except ValueError:
                pass

    def await_main_stream_started(self) -> None:
        self._main_stream_started.wait()

    def await_pop_challenge(self) -> str:
        """Block until a challenge is queued, then take the oldest."""
        with self._queue_changed:
            self._queue_changed.wait_for(lambda: self._challenges)
            return self._challenges.popleft()

    def await_game_start(self, game_id: str, max_wait_seconds: float = 10) -> GameStartEvent | None:
        """Wait for a game to start and take its event; None after the timeout."""
        with self._game_started:
            self._game_started.wait_for(lambda: game_id in self._game_starts, max_wait_seconds)
            event = self._game_starts.pop(game_id, None)
        if event is None:
            log(game_id, " failed to start")
        return event

    def notify_main_stream_started(self) -> None:
        self._main_stream_started.set()

    def notify_game_start(self, game_start: GameStartEvent) -> None:
        with self._game_started:
            self._game_starts[game_start.id] = game_start
            self._game_started.notify_all()