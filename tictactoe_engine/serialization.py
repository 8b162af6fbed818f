"""
JSON shape of a game, shared by every web-facing adapter.

    {"board": ["X", null, "O", ...],          9 cells, null when empty
     "currentPlayer": "X",
     "status": "Ongoing" | "Draw"
             | {"type": "Win", "value": {"player": "X", "line": [0, 1, 2]}}}

This is the only supported encoding. The flattened "WinX"/"WinO" status
string is not accepted.
"""

import json

from .game_logic import (
    CELL_COUNT, WINNING_LINES, Draw, GameEngine, Ongoing, Player,
    TicTacToeError, Win, calculate_status,
)


class StateFormatError(TicTacToeError, ValueError):
    """serialized state is malformed or inconsistent"""


def _player_to_wire(player):
    return None if player is None else player.value


def _player_from_wire(value, allow_empty=False):
    if value is None and allow_empty:
        return None
    try:
        return Player(value)
    except ValueError:
        raise StateFormatError(f"unknown player {value!r}") from None


def status_to_wire(status):
    if isinstance(status, Win):
        return {"type": "Win", "value": {"player": status.player.value, "line": list(status.line)}}
    if isinstance(status, Draw):
        return "Draw"
    return "Ongoing"


def status_from_wire(data):
    if data == "Ongoing":
        return Ongoing()
    if data == "Draw":
        return Draw()
    if not isinstance(data, dict) or data.get("type") != "Win":
        raise StateFormatError(f"unknown status {data!r}")
    value = data.get("value")
    if not isinstance(value, dict):
        raise StateFormatError("Win status needs a value object")
    line = value.get("line")
    # 0.0 and True compare equal to cell indices, so check types first
    if (not isinstance(line, list) or any(type(i) is not int for i in line)
            or tuple(line) not in WINNING_LINES):
        raise StateFormatError(f"{line!r} is not a winning line")
    return Win(_player_from_wire(value.get("player")), tuple(line))


def to_dict(engine):
    """engine -> plain dict in wire shape"""
    return {
        "board": [_player_to_wire(cell) for cell in engine.board],
        "currentPlayer": engine.current_player.value,
        "status": status_to_wire(engine.status),
    }


def from_dict(data):
    """
    rebuild an engine from its wire shape
    raises StateFormatError if the shape is wrong or the status
    doesn't match what the board says
    """
    if not isinstance(data, dict):
        raise StateFormatError("state must be an object")
    missing = {"board", "currentPlayer", "status"} - data.keys()
    if missing:
        raise StateFormatError(f"missing keys: {', '.join(sorted(missing))}")

    raw_board = data["board"]
    if not isinstance(raw_board, list) or len(raw_board) != CELL_COUNT:
        raise StateFormatError(f"board must be a list of {CELL_COUNT} cells")
    board = [_player_from_wire(cell, allow_empty=True) for cell in raw_board]
    current_player = _player_from_wire(data["currentPlayer"])
    status = status_from_wire(data["status"])

    # status is always derivable from the board
    expected = calculate_status(board)
    if status != expected:
        raise StateFormatError(
            f"status {status_to_wire(status)!r} does not match board ({status_to_wire(expected)!r})")
    _check_reachable(board, current_player, expected)

    return GameEngine.restore(board, current_player, expected)


def _check_reachable(board, current_player, status):
    """
    board and turn must come from alternating play, X first
    the last mover keeps the turn once the game is over
    """
    x_count = board.count(Player.X)
    o_count = board.count(Player.O)
    if x_count - o_count not in (0, 1):
        raise StateFormatError(f"impossible mark counts: {x_count} X, {o_count} O")

    last_mover = Player.X if x_count > o_count else Player.O
    to_move = last_mover if status.is_over else last_mover.opposite()
    if current_player is not to_move:
        raise StateFormatError(
            f"currentPlayer {current_player.value!r} should be {to_move.value!r}")

    # only the last mover can own a completed line
    for line in WINNING_LINES:
        owners = {board[i] for i in line}
        if len(owners) == 1 and None not in owners and owners != {last_mover}:
            raise StateFormatError(f"line {list(line)} completed by a player who didn't move last")


def dumps(engine):
    return json.dumps(to_dict(engine), separators=(",", ":"))


def loads(text):
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise StateFormatError(f"invalid JSON: {e}") from e
    return from_dict(data)
