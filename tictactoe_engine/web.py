"""
Web front end: a small JSON API over the engine plus a static page that
plays through it.

Each game is a session holding one engine and one lock. Every read or
mutation of that engine happens under the lock, so a validate followed by a
play can't interleave with another request for the same game.

Run with:  uvicorn tictactoe_engine.web:app
"""

import logging
import threading
import uuid
from collections import OrderedDict
from pathlib import Path

from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from .game_logic import (
    GameAlreadyWonError, GameEngine, PlayMove, Position,
    PositionOutOfRangeError, Reset, SpaceOccupiedError, TicTacToeError,
)
from .serialization import to_dict

logger = logging.getLogger(__name__)

APP_TITLE = "tictactoe-engine"
APP_VERSION = "0.1.0"
STATIC_DIR = Path(__file__).resolve().parent / "static"
MAX_SESSIONS = 1000                 # least recently used games are dropped past this
# starlette renamed its 422 constant, use the number
HTTP_UNPROCESSABLE = 422


class GameNotFoundError(TicTacToeError):
    def __init__(self, game_id):
        super().__init__(f"no game with id {game_id!r}")
        self.game_id = game_id


# -----------------------------------------------------------------------------
# SESSIONS
# -----------------------------------------------------------------------------

class GameSession:
    """one engine, one owner at a time"""

    def __init__(self, game_id):
        self.game_id = game_id
        self.engine = GameEngine()
        self.lock = threading.Lock()

    def state(self):
        with self.lock:
            return to_dict(self.engine)

    def is_valid_move(self, pos):
        with self.lock:
            return self.engine.is_valid_move(pos)

    def play(self, pos):
        with self.lock:
            self.engine.handle_event(PlayMove(pos))
            return to_dict(self.engine)

    def reset(self):
        with self.lock:
            self.engine.handle_event(Reset())
            return to_dict(self.engine)


class SessionStore:
    """
    in-memory game id -> GameSession map, least recently used first
    creating past `max_sessions` evicts the oldest game
    """

    def __init__(self, max_sessions=MAX_SESSIONS):
        self.max_sessions = max_sessions
        self._sessions = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self):
        with self._lock:
            return len(self._sessions)

    def create(self):
        session = GameSession(uuid.uuid4().hex)
        with self._lock:
            self._sessions[session.game_id] = session
            evicted = []
            while len(self._sessions) > self.max_sessions:
                evicted.append(self._sessions.popitem(last=False)[0])
        logger.info("created game %s", session.game_id)
        for game_id in evicted:
            logger.info("evicted game %s", game_id)
        return session

    def get(self, game_id):
        with self._lock:
            session = self._sessions.get(game_id)
            if session is not None:
                self._sessions.move_to_end(game_id)
        if session is None:
            raise GameNotFoundError(game_id)
        return session

    def delete(self, game_id):
        with self._lock:
            if self._sessions.pop(game_id, None) is None:
                raise GameNotFoundError(game_id)
        logger.info("deleted game %s", game_id)


# -----------------------------------------------------------------------------
# MODELS
# -----------------------------------------------------------------------------

class MoveRequest(BaseModel):
    position: int


class MoveValidity(BaseModel):
    valid: bool


# -----------------------------------------------------------------------------
# ERRORS
# -----------------------------------------------------------------------------

_ERROR_CODES = (
    # most specific first
    (GameNotFoundError, "GAME_NOT_FOUND", status.HTTP_404_NOT_FOUND),
    (PositionOutOfRangeError, "POSITION_OUT_OF_RANGE", HTTP_UNPROCESSABLE),
    (GameAlreadyWonError, "GAME_ALREADY_WON", status.HTTP_409_CONFLICT),
    (SpaceOccupiedError, "SPACE_OCCUPIED", status.HTTP_409_CONFLICT),
)


def _error_body(code, message, **extra):
    return {"error": {"code": code, "message": message, **extra}}


def register_error_handlers(app):
    """map engine errors and request validation errors to JSON responses"""

    @app.exception_handler(TicTacToeError)
    async def game_error_handler(request: Request, exc: TicTacToeError):
        for error_type, code, http_status in _ERROR_CODES:
            if isinstance(exc, error_type):
                logger.debug("%s on %s: %s", code, request.url.path, exc)
                return JSONResponse(status_code=http_status, content=_error_body(code, str(exc)))
        logger.error("unmapped game error on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body("GAME_ERROR", str(exc)),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.debug("validation error on %s: %s", request.url.path, exc.errors())
        details = [
            {"field": ".".join(str(loc) for loc in e["loc"]), "message": e["msg"]}
            for e in exc.errors()
        ]
        return JSONResponse(
            status_code=HTTP_UNPROCESSABLE,
            content=_error_body("VALIDATION_ERROR", "Invalid request data", details=details),
        )


# -----------------------------------------------------------------------------
# APP
# -----------------------------------------------------------------------------

def get_store(request: Request) -> SessionStore:
    return request.app.state.store


def get_session(game_id: str, store: SessionStore = Depends(get_store)) -> GameSession:
    return store.get(game_id)


def create_app(store=None):
    app = FastAPI(title=APP_TITLE, version=APP_VERSION)
    app.state.store = store if store is not None else SessionStore()
    register_error_handlers(app)

    @app.get("/healthcheck")
    def healthcheck():
        return {"status": "ok"}

    @app.post("/games", status_code=status.HTTP_201_CREATED)
    def create_game(store: SessionStore = Depends(get_store)):
        session = store.create()
        return {"gameId": session.game_id, "state": session.state()}

    @app.get("/games/{game_id}")
    def get_game(session: GameSession = Depends(get_session)):
        return session.state()

    @app.delete("/games/{game_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_game(game_id: str, store: SessionStore = Depends(get_store)):
        store.delete(game_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.post("/games/{game_id}/moves")
    def play_move(payload: MoveRequest, session: GameSession = Depends(get_session)):
        return session.play(Position(payload.position))

    @app.get("/games/{game_id}/moves/{position}/valid", response_model=MoveValidity)
    def is_valid_move(position: int, session: GameSession = Depends(get_session)):
        try:
            pos = Position(position)
        except PositionOutOfRangeError:
            return MoveValidity(valid=False)
        return MoveValidity(valid=session.is_valid_move(pos))

    @app.post("/games/{game_id}/reset")
    def reset_game(session: GameSession = Depends(get_session)):
        return session.reset()

    # browser page, no build step
    if STATIC_DIR.exists():
        app.mount("/ui", StaticFiles(directory=str(STATIC_DIR), html=True), name="ui")

    @app.get("/")
    def root():
        return RedirectResponse(url="/ui/")

    return app


app = create_app()
