"""Workers that accept incoming challenges and send challenges to the AI."""

from __future__ import annotations

import json
import threading
import time

from knightbot.game_handler import GameHandler
from knightbot.logger import log
from knightbot.shared_state import SharedState
from knightbot.transport import HttpClient

ACCEPT_CHALLENGE_URL = "https://lichess.org/api/challenge/{}/accept"
CHALLENGE_AI_URL = "https://lichess.org/api/challenge/ai"
AI_LEVEL = "6"


class IncomingChallengeHandler:
    """Takes queued challenges, accepts them and plays the resulting games."""

    retry_delay = 5.0
    game_start_timeout = 5.0

    def __init__(self, state: SharedState, client: HttpClient) -> None:
        self._state = state
        self._client = client
        self._running = threading.Event()

    def __call__(self) -> None:
        self.run()

    def run(self) -> None:
        """Serve challenges until killed, once the event stream is up."""
        self._running.set()
        self._state.await_main_stream_started()
        while self._running.is_set():
            self.loop()

    def loop(self) -> None:
        """Accept one challenge and play its game if it starts in time."""
        log("Waiting for challenge")
        game_id = self.accept_next()
        event = self._state.await_game_start(game_id, self.game_start_timeout)
        if event is not None:
            GameHandler(event, self._client).run()

    def accept_next(self) -> str:
        """Pop challenges until one is accepted; return its id."""
        while True:
            challenge_id = self._state.await_pop_challenge()
            response = self._client.post(ACCEPT_CHALLENGE_URL.format(challenge_id))
            if response.status_code == 200:
                return challenge_id
            log("Failed to accept challenge, retrying")
            time.sleep(self.retry_delay)

    def kill(self) -> None:
        """Stop after the current iteration."""
        self._running.clear()


class OutgoingChallengeHandler:
    """Repeatedly challenges the server's AI and plays the games."""

    retry_delay = 60.0
    game_start_timeout = 3.0

    def __init__(self, state: SharedState, client: HttpClient) -> None:
        self._state = state
        self._client = client
        self._running = threading.Event()

    def __call__(self) -> None:
        self.run()

    def run(self) -> None:
        """Send challenges until killed, once the event stream is up."""
        self._running.set()
        self._state.await_main_stream_started()
        while self._running.is_set():
            self.loop()

    def loop(self) -> None:
        """Send one challenge and play it, or wait before trying again."""
        log("Sending AI challenge")
        game_id = self.send_ai_challenge()
        if game_id is not None:
            event = self._state.await_game_start(game_id, self.game_start_timeout)
            if event is not None:
                GameHandler(event, self._client).run()
        else:
            log(f"Failed to send AI challenge, trying again in {self.retry_delay:g} seconds")
            time.sleep(self.retry_delay)

    def send_ai_challenge(self) -> str | None:
        """Challenge the AI; return the new game's id, or None on failure."""
        found: dict[str, str] = {}

        def on_line(line: str) -> bool:
            try:
                data = json.loads(line)
            except ValueError:
                return False
            if isinstance(data, dict) and "id" in data:
                found["id"] = str(data["id"])
            return False

        response = self._client.post(CHALLENGE_AI_URL, {"level": AI_LEVEL}, on_line)
        if "id" not in found or response.status_code != 201:
            return None
        return found["id"]

    def kill(self) -> None:
        """Stop after the current iteration."""
        self._running.clear()