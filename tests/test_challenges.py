import json
import threading

import pytest
import responses

from knightbot.challenges import (
    ACCEPT_CHALLENGE_URL,
    CHALLENGE_AI_URL,
    IncomingChallengeHandler,
    OutgoingChallengeHandler,
)
from knightbot.game_handler import STREAM_GAME_URL
from knightbot.piece import PieceColor
from knightbot.shared_state import GameStartEvent, SharedState
from knightbot.transport import HttpClient

FINISHED = json.dumps({"type": "gameFull", "state": {"moves": "", "status": "finished"}})


@pytest.fixture
def client():
    return HttpClient({"Authorization": "Bearer token"})


@pytest.fixture
def state():
    return SharedState()


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def test_accept_next_returns_accepted_id(state, client, mocked):
    mocked.add(responses.POST, ACCEPT_CHALLENGE_URL.format("abc"), status=200)
    state.enqueue_challenge("abc")
    assert IncomingChallengeHandler(state, client).accept_next() == "abc"


def test_accept_next_moves_on_after_failure(state, client, mocked):
    mocked.add(responses.POST, ACCEPT_CHALLENGE_URL.format("abc"), status=400)
    mocked.add(responses.POST, ACCEPT_CHALLENGE_URL.format("def"), status=200)
    state.enqueue_challenge("abc")
    state.enqueue_challenge("def")
    handler = IncomingChallengeHandler(state, client)
    handler.retry_delay = 0
    assert handler.accept_next() == "def"
    assert len(mocked.calls) == 2


def test_incoming_loop_plays_started_game(state, client, mocked):
    mocked.add(responses.POST, ACCEPT_CHALLENGE_URL.format("g1"), status=200)
    mocked.add(responses.GET, STREAM_GAME_URL.format("g1"), body=FINISHED, status=200)
    state.enqueue_challenge("g1")
    state.notify_game_start(GameStartEvent("startpos", PieceColor.BLACK, "g1", 20000))
    IncomingChallengeHandler(state, client).loop()
    assert [call.request.url for call in mocked.calls] == [
        ACCEPT_CHALLENGE_URL.format("g1"),
        STREAM_GAME_URL.format("g1"),
    ]


def test_ai_challenge_returns_game_id(state, client, mocked):
    mocked.add(responses.POST, CHALLENGE_AI_URL, json={"id": "xyz"}, status=201)
    assert OutgoingChallengeHandler(state, client).send_ai_challenge() == "xyz"
    assert mocked.calls[0].request.body == "level=6"


def test_ai_challenge_requires_created_status(state, client, mocked):
    mocked.add(responses.POST, CHALLENGE_AI_URL, json={"id": "xyz"}, status=400)
    assert OutgoingChallengeHandler(state, client).send_ai_challenge() is None


@pytest.mark.parametrize("body", ["not json", json.dumps({"error": "nope"}), ""])
def test_ai_challenge_rejects_bad_body(state, client, mocked, body):
    mocked.add(responses.POST, CHALLENGE_AI_URL, body=body, status=201)
    assert OutgoingChallengeHandler(state, client).send_ai_challenge() is None


def test_outgoing_loop_plays_started_game(state, client, mocked):
    mocked.add(responses.POST, CHALLENGE_AI_URL, json={"id": "g2"}, status=201)
    mocked.add(responses.GET, STREAM_GAME_URL.format("g2"), body=FINISHED, status=200)
    state.notify_game_start(GameStartEvent("startpos", PieceColor.BLACK, "g2", 20000))
    OutgoingChallengeHandler(state, client).loop()
    assert mocked.calls[-1].request.url == STREAM_GAME_URL.format("g2")
    assert len(mocked.calls) == 2


def test_outgoing_loop_waits_after_failure(state, client, mocked, capsys):
    mocked.add(responses.POST, CHALLENGE_AI_URL, status=500)
    handler = OutgoingChallengeHandler(state, client)
    handler.retry_delay = 0
    handler.loop()
    out = capsys.readouterr().out
    assert out.endswith("Failed to send AI challenge, trying again in 60 seconds\n")
    assert len(mocked.calls) == 1
    assert mocked.calls[0].request.body == "level=6"


def test_outgoing_kill_stops_run(state, client, mocked):
    mocked.add(responses.POST, CHALLENGE_AI_URL, status=500)
    handler = OutgoingChallengeHandler(state, client)
    handler.retry_delay = 0.01
    state.notify_main_stream_started()
    thread = threading.Thread(target=handler, daemon=True)
    thread.start()
    while not mocked.calls:
        thread.join(0.01)
    handler.kill()
    thread.join(5)
    assert not thread.is_alive()