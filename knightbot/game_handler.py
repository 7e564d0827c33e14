"""Plays one online game: follows its move stream and answers with engine moves."""

from __future__ import annotations

import json

from knightbot.logger import log
from knightbot.position import Position
from knightbot.search import Searcher
from knightbot.shared_state import GameStartEvent
from knightbot.transport import HttpClient
from knightbot.utils import move_to_str, split, str_to_move

STREAM_GAME_URL = "https://lichess.org/api/bot/game/stream/{}"
MAKE_MOVE_URL = "https://lichess.org/api/bot/game/{}/move/{}"

THINK_MULTIPLIER = 0.005
MAX_THINK_MILLISECONDS = 5000


class GameHandler:
    """Keeps a local copy of one game and sends a move whenever it is our turn."""

    def __init__(
        self,
        game_start: GameStartEvent,
        client: HttpClient,
        searcher: Searcher | None = None,
    ) -> None:
        self.id = game_start.id
        self.color = game_start.color
        self.time_per_side = game_start.time_per_side
        self.position = Position.from_fen(game_start.start_fen)
        self._client = client
        self._searcher = searcher if searcher is not None else Searcher()
        self._num_moves = 0

    def __call__(self) -> None:
        self.run()

    def run(self) -> None:
        """Follow the game stream until the game is over or the stream ends."""
        log("Handling game ", self.id)
        self._num_moves = 0
        self._client.stream(STREAM_GAME_URL.format(self.id), self.handle_line)
        log("Game ", self.id, " finished")

    def handle_line(self, line: str) -> bool:
        """Process one stream line; return False once the game has finished."""
        if not line.strip():
            return True
        try:
            data = json.loads(line)
        except ValueError:
            return True
        if not isinstance(data, dict):
            return True

        kind = data.get("type")
        if kind not in ("gameFull", "gameState"):
            return True
        state = data.get("state", {}) if kind == "gameFull" else data

        if state.get("status") == "finished":
            return False

        moves = split(state.get("moves", ""))
        for text in moves[self._num_moves:]:
            log("Received move ", text)
            self.position.make_move(str_to_move(text))
        self._num_moves = max(self._num_moves, len(moves))

        if self.position.turn() is self.color:
            self.send_move()
        return True

    def think_milliseconds(self) -> int:
        """Return the thinking time for one move, capped at five seconds."""
        return min(MAX_THINK_MILLISECONDS, int(THINK_MULTIPLIER * self.time_per_side))

    def send_move(self) -> bool:
        """Search the current position and send the chosen move to the server."""
        move = self._searcher.get_move(self.position, self.think_milliseconds())
        text = move_to_str(move)
        response = self._client.post(MAKE_MOVE_URL.format(self.id, text))
        if not response.ok:
            log("Failed to reach Lichess server")
            return False
        if response.status_code != 200:
            log("Move ", text, " was invalid, failed to send to server")
            return False
        log("Sent move ", text, " to server")
        return True