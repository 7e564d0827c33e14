# knightbot

knightbot is a chess engine built on 64-bit bitboards, together with the
pieces of a bot client for the Lichess bot API that accepts challenges and
plays them out with the engine.

## The engine

The engine covers the full rules of chess: FEN parsing, legal move generation
(pins, checks, castling, en passant and promotion), Zobrist hashing,
threefold-repetition detection, and an iterative-deepening alpha-beta search
with principal-variation search, quiescence search, a transposition table,
killer moves and a history heuristic. Positions are scored by material plus
piece-square tables.

```python
from knightbot.position import Position
from knightbot.search import Searcher
from knightbot.utils import move_to_str, str_to_move

position = Position.default()
position.make_move(str_to_move("e2e4"))

searcher = Searcher()
reply = searcher.get_move(position, think_milliseconds=500)
print(move_to_str(reply))
```

`Searcher.get_move` works on a copy, so the position passed in is left
untouched. If no move is found in the time given it returns the null move
(`Move.is_null()` is true).

Positions can also be set up from FEN; a malformed string raises `FenError`:

```python
from knightbot.position import FenError, Position

position = Position.from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")

try:
    Position.from_fen("not a fen")
except FenError as error:
    print(error)
```

Legal moves come from `knightbot.movegen.generate_legal(position)`, which
returns the list of moves and whether the side to move is in check. A static
evaluation from the side to move's point of view comes from
`knightbot.evaluator.evaluate`.

## The bot client

The client is made of a few parts that are put together in Python:

- `knightbot.auth.authorization_header()` builds the `Authorization` header
  from the `LICHESS_API_TOKEN` environment variable and raises
  `MissingTokenError` if it is not set;
- `knightbot.transport.HttpClient` sends requests with those headers and feeds
  response bodies line by line to a callback;
- `knightbot.stream.StreamHandler` listens to the account's event stream and
  starts the challenge workers from `knightbot.challenges`;
- `knightbot.game_handler.GameHandler` plays one game.

```python
from knightbot.auth import authorization_header
from knightbot.stream import StreamHandler
from knightbot.transport import HttpClient

client = HttpClient(authorization_header())
StreamHandler(client).run()
```

While running, the client:

- accepts challenges for standard chess at rapid, blitz or bullet speed and
  declines any other variant or time control with the reason `variant` or
  `timeControl`;
- runs four workers that take queued challenges, accept them and play the
  resulting games, and one worker that keeps challenging the level 6 computer
  opponent;
- drops a queued challenge when its challenger cancels it;
- thinks for 0.5% of its remaining clock per move, never more than five
  seconds.

Every line it logs, through `knightbot.logger.log`, carries the local time and
the thread it came from.

## What it does not do

The package installs no command. There is no ready-made program that starts
the bot: it is started from Python as shown above, and a missing token shows
up as a `MissingTokenError` raised by `authorization_header()`. There is no
graphical board either; the engine is used through its Python interface.

## Tests

```sh
pip install ".[test]"
pytest
```