from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Union

BOARD_SIZE = 3                      # fixed 3x3 grid
CELL_COUNT = BOARD_SIZE * BOARD_SIZE

# every line that wins, scanned in this order
WINNING_LINES = (
    # rows
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    # cols
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    # diags
    (0, 4, 8), (2, 4, 6),
)


# -----------------------------------------------------------------------------
# ERRORS
# -----------------------------------------------------------------------------

class TicTacToeError(Exception):
    """base for every error raised by the engine"""


class InvalidGameMoveError(TicTacToeError):
    """a move the rules refuse; engine state is left untouched"""


class GameAlreadyWonError(InvalidGameMoveError):
    def __init__(self):
        super().__init__("game is already over")


class SpaceOccupiedError(InvalidGameMoveError):
    def __init__(self, position):
        super().__init__(f"cell {position.index} is already occupied")
        self.position = position


class PositionOutOfRangeError(TicTacToeError, ValueError):
    def __init__(self, value):
        super().__init__(f"position {value!r} is out of range (must be 0-{CELL_COUNT - 1})")
        self.value = value


# -----------------------------------------------------------------------------
# VALUE TYPES
# -----------------------------------------------------------------------------

class Player(Enum):
    """the two marks"""
    X = "X"
    O = "O"

    def opposite(self) -> "Player":
        return Player.O if self is Player.X else Player.X


@dataclass(frozen=True)
class Position:
    """
    board cell index, row-major (row*3+col)
    construction is the only check; a Position is always in range
    """
    index: int

    def __post_init__(self):
        # bool is an int subclass but never a cell
        if isinstance(self.index, bool) or not isinstance(self.index, int):
            raise TypeError(f"position must be an int, got {type(self.index).__name__}")
        if not 0 <= self.index < CELL_COUNT:
            raise PositionOutOfRangeError(self.index)

    @classmethod
    def from_row_col(cls, row, col):
        """build from grid coords, same range gate"""
        if not (0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE):
            raise PositionOutOfRangeError((row, col))
        return cls(row * BOARD_SIZE + col)

    @property
    def row(self) -> int:
        return self.index // BOARD_SIZE

    @property
    def col(self) -> int:
        return self.index % BOARD_SIZE

    def __int__(self):
        return self.index


@dataclass(frozen=True)
class Ongoing:
    is_over = False


@dataclass(frozen=True)
class Draw:
    is_over = True


@dataclass(frozen=True)
class Win:
    """player who completed `line`, the exact triple of cell indices"""
    player: Player
    line: Tuple[int, int, int]
    is_over = True


GameStatus = Union[Ongoing, Draw, Win]


@dataclass(frozen=True)
class PlayMove:
    position: Position


@dataclass(frozen=True)
class Reset:
    pass


GameEvent = Union[PlayMove, Reset]


@dataclass(frozen=True)
class GameSnapshot:
    """read-only view for rendering"""
    board: Tuple[Optional[Player], ...]
    current_player: Player
    status: GameStatus


# -----------------------------------------------------------------------------
# RULES
# -----------------------------------------------------------------------------

def calculate_status(board) -> GameStatus:
    """
    full rescan of all 8 lines; first complete line wins,
    otherwise a full board is a draw
    """
    for line in WINNING_LINES:
        a, b, c = (board[i] for i in line)
        if a is not None and a == b == c:
            return Win(a, line)
    if all(cell is not None for cell in board):
        return Draw()
    return Ongoing()


class GameEngine:
    """
    tic-tac-toe rules and state
    owns the board, whose turn it is and the game status
    """
    def __init__(self):
        self._board: List[Optional[Player]] = [None] * CELL_COUNT   # empty cells
        self._current_player = Player.X                             # X always starts
        self._status: GameStatus = Ongoing()

    def __repr__(self):
        return (f"GameEngine(board={self.board!r}, current_player={self._current_player!r}, "
                f"status={self._status!r})")

    @property
    def board(self) -> Tuple[Optional[Player], ...]:
        return tuple(self._board)

    @property
    def current_player(self) -> Player:
        return self._current_player

    @property
    def status(self) -> GameStatus:
        return self._status

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(self.board, self._current_player, self._status)

    def cell(self, pos: Position) -> Optional[Player]:
        return self._board[pos.index]

    def empty_cells(self) -> List[Position]:
        """cells still playable; none once the game is over"""
        if self._status.is_over:
            return []
        return [Position(i) for i, cell in enumerate(self._board) if cell is None]

    def validate_move(self, pos: Position) -> None:
        """
        raise if `pos` can't be played right now, no side effects
        game over is reported before an occupied cell
        """
        if self._status.is_over:
            raise GameAlreadyWonError()
        if self._board[pos.index] is not None:
            raise SpaceOccupiedError(pos)

    def is_valid_move(self, pos: Position) -> bool:
        try:
            self.validate_move(pos)
        except InvalidGameMoveError:
            return False
        return True

    def play_move(self, pos: Position) -> None:
        """
        place current player's mark at `pos`, then rescore
        turn only passes while the game is still going, so after a
        win current_player is the winner
        """
        self.validate_move(pos)
        self._board[pos.index] = self._current_player
        self._status = calculate_status(self._board)
        if not self._status.is_over:
            self._current_player = self._current_player.opposite()

    def reset(self) -> None:
        """throw everything away, back to a fresh game"""
        fresh = GameEngine()
        self._board = fresh._board
        self._current_player = fresh._current_player
        self._status = fresh._status

    def validate_event(self, event: GameEvent) -> None:
        if isinstance(event, PlayMove):
            self.validate_move(event.position)
        elif not isinstance(event, Reset):
            raise TypeError(f"unknown game event: {event!r}")

    def handle_event(self, event: GameEvent) -> None:
        """single mutation entry point for front ends"""
        if isinstance(event, PlayMove):
            self.play_move(event.position)
        elif isinstance(event, Reset):
            self.reset()
        else:
            raise TypeError(f"unknown game event: {event!r}")

    @classmethod
    def restore(cls, board, current_player, status):
        """rebuild from parts; caller checks they agree (see serialization)"""
        engine = cls()
        engine._board = list(board)
        engine._current_player = current_player
        engine._status = status
        return engine
