import json
import re

import pytest
import responses

from knightbot.game_handler import GameHandler, STREAM_GAME_URL
from knightbot.movegen import generate_legal
from knightbot.piece import PieceColor
from knightbot.position import Position
from knightbot.shared_state import GameStartEvent
from knightbot.transport import HttpClient
from knightbot.utils import str_to_move

MOVE_URL = re.compile(r"https://lichess\.org/api/bot/game/g1/move/\w+")


@pytest.fixture
def client():
    return HttpClient({"Authorization": "Bearer token"})


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def make_handler(client, color=PieceColor.WHITE, time_per_side=20000):
    return GameHandler(GameStartEvent("startpos", color, "g1", time_per_side), client)


def game_full(moves, status="started"):
    return json.dumps({"type": "gameFull", "state": {"moves": moves, "status": status}})


def test_think_time_is_capped(client):
    assert make_handler(client, time_per_side=10_000_000).think_milliseconds() == 5000


def test_think_time_scales_with_clock(client):
    assert make_handler(client, time_per_side=20000).think_milliseconds() == 100


def test_finished_game_stops_stream(client):
    assert make_handler(client).handle_line(game_full("", "finished")) is False


def test_unparseable_and_blank_lines_continue(client):
    handler = make_handler(client)
    assert handler.handle_line("not json") is True
    assert handler.handle_line("") is True
    assert handler.handle_line(json.dumps({"type": "chatLine"})) is True


def test_received_moves_are_applied(client):
    handler = make_handler(client, color=PieceColor.WHITE)
    expected = Position.default()
    expected.make_move(str_to_move("e2e4"))
    assert handler.handle_line(game_full("e2e4")) is True
    assert handler.position.turn() is PieceColor.BLACK
    assert handler.position.zobrist() == expected.zobrist()


def test_moves_are_not_applied_twice(client):
    handler = make_handler(client, color=PieceColor.WHITE)
    handler.handle_line(game_full("e2e4"))
    state = json.dumps({"type": "gameState", "moves": "e2e4", "status": "started"})
    handler.handle_line(state)
    assert handler.position.turn() is PieceColor.BLACK


def test_sends_legal_move_on_our_turn(client, mocked):
    mocked.add(responses.POST, MOVE_URL, status=200)
    handler = make_handler(client, color=PieceColor.WHITE)
    assert handler.handle_line(game_full("")) is True
    assert len(mocked.calls) == 1
    text = mocked.calls[0].request.url.rsplit("/", 1)[1]
    legal, _ = generate_legal(Position.default())
    assert str_to_move(text) in legal


def test_send_move_reports_rejection(client, mocked):
    mocked.add(responses.POST, MOVE_URL, status=400)
    assert make_handler(client).send_move() is False


def test_send_move_reports_success(client, mocked):
    mocked.add(responses.POST, MOVE_URL, status=200)
    assert make_handler(client).send_move() is True


def test_send_move_reports_unreachable_server(client, mocked):
    assert make_handler(client).send_move() is False


def test_run_follows_stream_until_finished(client, mocked):
    body = "\n".join(
        [game_full("e2e4"), json.dumps({"type": "gameState", "moves": "e2e4", "status": "finished"})]
    )
    mocked.add(responses.GET, STREAM_GAME_URL.format("g1"), body=body, status=200)
    handler = make_handler(client, color=PieceColor.WHITE)
    handler.run()
    assert len(mocked.calls) == 1
    assert mocked.calls[0].request.headers["Authorization"] == "Bearer token"
    assert handler.position.turn() is PieceColor.BLACK