"""Listens to the account event stream and dispatches to challenge workers."""

from __future__ import annotations

import json
import threading
import time

from knightbot.challenges import IncomingChallengeHandler, OutgoingChallengeHandler
from knightbot.logger import log
from knightbot.piece import PieceColor
from knightbot.shared_state import GameStartEvent, SharedState
from knightbot.transport import HttpClient

STREAM_EVENTS_URL = "https://lichess.org/api/stream/event"
DECLINE_CHALLENGE_URL = "https://lichess.org/api/challenge/{}/decline"

SUPPORTED_VARIANTS = ("standard",)
SUPPORTED_TIME_CONTROLS = ("rapid", "blitz", "bullet")

NUM_INCOMING_THREADS = 4
NUM_OUTGOING_THREADS = 1

_UNLIMITED_TIME_MS = 1_000_000


class StreamHandler:
    """Reads account events, queues acceptable challenges and announces games."""

    # Workers blocked waiting for work are daemon threads; run() waits at
    # most this long for them after the stream ends.
    join_timeout = 1.0

    def __init__(self, client: HttpClient, state: SharedState | None = None) -> None:
        self._client = client
        self._state = state if state is not None else SharedState()
        self._running = threading.Event()
        self._incoming = [
            IncomingChallengeHandler(self._state, client) for _ in range(NUM_INCOMING_THREADS)
        ]
        self._outgoing = [
            OutgoingChallengeHandler(self._state, client) for _ in range(NUM_OUTGOING_THREADS)
        ]

    def __call__(self) -> None:
        self.run()

    def run(self) -> None:
        """Start the workers, listen until the stream ends, then stop them."""
        self._running.set()
        handlers = [*self._incoming, *self._outgoing]
        threads = [threading.Thread(target=handler, daemon=True) for handler in handlers]
        for thread in threads:
            thread.start()
        self.listen()
        for handler in handlers:
            handler.kill()
        deadline = time.monotonic() + self.join_timeout
        for thread in threads:
            thread.join(max(0.0, deadline - time.monotonic()))

    def kill(self) -> None:
        """Make the stream stop at the next line."""
        self._running.clear()

    def listen(self) -> None:
        """Read the event stream until it closes or the handler is killed."""
        log("Awaiting challenges")
        response = self._client.stream(STREAM_EVENTS_URL, self.handle_line)
        if not response.ok and self._running.is_set():
            log("Failed to reach Lichess server")
        log("Stream handler terminated")

    def handle_line(self, message: str) -> bool:
        """Handle one event line; return False to stop reading."""
        self._state.notify_main_stream_started()
        if not self._running.is_set():
            return False
        if not message.strip():
            return True
        try:
            data = json.loads(message)
        except ValueError:
            return True
        if not isinstance(data, dict):
            return True
        try:
            self._dispatch(data)
        except (KeyError, TypeError) as error:
            log("Malformed event ignored: ", error)
        return True

    def _dispatch(self, data: dict) -> None:
        kind = data.get("type")
        if kind == "gameStart":
            self._on_game_start(data["game"])
        elif kind == "challenge":
            self._on_challenge(data["challenge"])
        elif kind == "challengeCanceled":
            challenge_id = str(data["challenge"]["id"])
            log("Challenge ", challenge_id, " was cancelled, removing from queue")
            self._state.remove_challenge(challenge_id)

    def _on_game_start(self, game: dict) -> None:
        color = PieceColor.WHITE if game["color"] == "white" else PieceColor.BLACK
        seconds_left = game.get("secondsLeft")
        if isinstance(seconds_left, int) and not isinstance(seconds_left, bool):
            time_per_side = seconds_left * 1000
        else:
            time_per_side = _UNLIMITED_TIME_MS
        game_id = str(game["gameId"])
        log("Game ", game_id, " started")
        self._state.notify_game_start(
            GameStartEvent(game["fen"], color, game_id, time_per_side)
        )

    def _on_challenge(self, challenge: dict) -> None:
        challenge_id = str(challenge["id"])
        challenger = (challenge.get("challenger") or {}).get("name", "?")
        log("Received challenge ", challenge_id, " from ", challenger)
        if challenge["variant"]["key"] not in SUPPORTED_VARIANTS:
            log(challenge_id, " has unsupported variant, rejecting")
            self._decline(challenge_id, "variant")
        elif challenge["speed"] not in SUPPORTED_TIME_CONTROLS:
            log(challenge_id, " has unsupported time control, rejecting")
            self._decline(challenge_id, "timeControl")
        else:
            log("Adding ", challenge_id, " to queue")
            self._state.enqueue_challenge(challenge_id)

    def _decline(self, challenge_id: str, reason: str) -> None:
        self._client.post(DECLINE_CHALLENGE_URL.format(challenge_id), {"reason": reason})