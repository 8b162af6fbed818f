from __future__ import annotations

import json

import pytest

from conftest import play
from tictactoe_engine.game_logic import Draw, GameEngine, Ongoing, Player, Win
from tictactoe_engine.serialization import StateFormatError, dumps, from_dict, loads, to_dict


def test_new_game_shape(engine: GameEngine) -> None:
    assert to_dict(engine) == {
        "board": [None] * 9,
        "currentPlayer": "X",
        "status": "Ongoing",
    }


def test_win_shape(won_engine: GameEngine) -> None:
    assert dumps(won_engine) == (
        '{"board":["X","X","X","O","O",null,null,null,null],'
        '"currentPlayer":"X",'
        '"status":{"type":"Win","value":{"player":"X","line":[0,1,2]}}}'
    )


def test_draw_shape(drawn_engine: GameEngine) -> None:
    data = to_dict(drawn_engine)
    assert data["status"] == "Draw"
    assert data["board"] == ["X", "O", "X", "X", "O", "O", "O", "X", "X"]


@pytest.mark.parametrize("moves", [(), (4,), (0, 3, 1, 4, 2), (0, 1, 2, 4, 3, 5, 7, 6, 8)])
def test_round_trip_is_stable(moves: tuple[int, ...]) -> None:
    original = play(GameEngine(), *moves)
    text = dumps(original)
    restored = loads(text)
    assert dumps(restored) == text
    assert restored.snapshot() == original.snapshot()


def test_restored_engine_keeps_playing() -> None:
    restored = loads(dumps(play(GameEngine(), 0, 3, 1)))
    assert restored.current_player is Player.O
    play(restored, 4, 2)
    assert restored.status == Win(Player.X, (0, 1, 2))


def test_status_types_parse() -> None:
    assert from_dict({"board": [None] * 9, "currentPlayer": "X", "status": "Ongoing"}).status == Ongoing()
    drawn = ["X", "O", "X", "X", "O", "O", "O", "X", "X"]
    assert from_dict({"board": drawn, "currentPlayer": "X", "status": "Draw"}).status == Draw()


@pytest.mark.parametrize(
    "data",
    [
        [],
        {"board": [None] * 9, "currentPlayer": "X"},
        {"board": [None] * 8, "currentPlayer": "X", "status": "Ongoing"},
        {"board": ["Z"] + [None] * 8, "currentPlayer": "X", "status": "Ongoing"},
        {"board": [None] * 9, "currentPlayer": "Q", "status": "Ongoing"},
        {"board": [None] * 9, "currentPlayer": "X", "status": "Paused"},
        # flattened status strings are not part of the format
        {"board": ["X", "X", "X", "O", "O", None, None, None, None], "currentPlayer": "X", "status": "WinX"},
        {"board": [None] * 9, "currentPlayer": "X", "status": {"type": "Win", "value": "X"}},
        {
            "board": ["X", "X", "X", "O", "O", None, None, None, None],
            "currentPlayer": "X",
            "status": {"type": "Win", "value": {"player": "X", "line": [0, 1, 5]}},
        },
    ],
)
def test_malformed_state_is_rejected(data: object) -> None:
    with pytest.raises(StateFormatError):
        from_dict(data)


def test_status_must_match_board() -> None:
    # board shows X's top row but status claims the game goes on
    data = {"board": ["X", "X", "X", "O", "O", None, None, None, None], "currentPlayer": "X", "status": "Ongoing"}
    with pytest.raises(StateFormatError, match="does not match board"):
        from_dict(data)

    data["status"] = {"type": "Win", "value": {"player": "O", "line": [0, 1, 2]}}
    with pytest.raises(StateFormatError):
        from_dict(data)


def test_invalid_json() -> None:
    with pytest.raises(StateFormatError):
        loads("{not json")
    # still a ValueError for generic callers
    with pytest.raises(ValueError):
        loads(json.dumps({"board": []}))


TOP_ROW_WIN = {"type": "Win", "value": {"player": "X", "line": [0, 1, 2]}}


@pytest.mark.parametrize(
    ("board", "current", "status"),
    [
        # winner must keep the turn
        (["X", "X", "X", "O", "O", None, None, None, None], "O", TOP_ROW_WIN),
        # three X and no O
        (["X", "X", None, "X", None, None, None, None, None], "X", "Ongoing"),
        # O ahead of X
        (["O", None, None, None, None, None, None, None, None], "X", "Ongoing"),
        # equal counts means X to move
        (["X", "O", None, None, None, None, None, None, None], "O", "Ongoing"),
        # one more X means O to move
        (["X", None, None, None, None, None, None, None, None], "X", "Ongoing"),
        # X made the ninth move of a draw
        (["X", "O", "X", "X", "O", "O", "O", "X", "X"], "O", "Draw"),
        # X row completed but O moved last
        (["X", "X", "X", "O", "O", "O", None, None, None], "O", TOP_ROW_WIN),
    ],
)
def test_unreachable_state_is_rejected(board: list[str | None], current: str, status: object) -> None:
    with pytest.raises(StateFormatError):
        from_dict({"board": board, "currentPlayer": current, "status": status})


def test_o_win_keeps_o_to_move() -> None:
    engine = from_dict({
        "board": ["X", "X", "O", None, "O", None, "O", None, "X"],
        "currentPlayer": "O",
        "status": {"type": "Win", "value": {"player": "O", "line": [2, 4, 6]}},
    })
    assert engine.current_player is Player.O
    assert engine.status == Win(Player.O, (2, 4, 6))


@pytest.mark.parametrize("line", [[0.0, True, 2], [0, 1, 2.0], ["0", 1, 2]])
def test_win_line_must_hold_ints(line: list[object]) -> None:
    data = {
        "board": ["X", "X", "X", "O", "O", None, None, None, None],
        "currentPlayer": "X",
        "status": {"type": "Win", "value": {"player": "X", "line": line}},
    }
    with pytest.raises(StateFormatError):
        from_dict(data)


def test_loaded_win_line_is_plain_ints(won_engine: GameEngine) -> None:
    restored = loads(dumps(won_engine))
    assert all(type(i) is int for i in restored.status.line)
    assert '"line":[0,1,2]' in dumps(restored)
