"""HTTP routes: thin translation between requests and the ChessService"""

import logging
import random
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from src.api.models import (
    AIMoveRequest,
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    ResetGameRequest,
)
from src.core.config import get_settings
from src.core.exceptions import (
    ChessError,
    GameError,
    InvalidFENError,
    InvalidRequestError,
    RepositoryError,
)
from src.core.shared_types import Difficulty, PieceType
from src.db.database import get_db
from src.db.sql_repository import SQLGameRepository
from src.services.chess_service import ChessService

_log = logging.getLogger(__name__)

router = APIRouter(prefix="/games", tags=["games"])


def get_chess_service(db: Annotated[Session, Depends(get_db)]) -> ChessService:
    settings = get_settings()
    rng = random.Random(settings.ai_seed) if settings.ai_seed is not None else None
    return ChessService(
        SQLGameRepository(db), rng=rng, default_difficulty=settings.default_difficulty
    )


Service = Annotated[ChessService, Depends(get_chess_service)]


@router.post("", response_model=GameResponse, status_code=201)
def create_game(request: CreateGameRequest, service: Service) -> GameResponse:
    return service.create_new_game(request)


@router.get("/{game_id}", response_model=GameResponse)
def get_game(game_id: UUID, service: Service) -> GameResponse:
    return service.get_game_state(GetGameRequest(game_id=game_id))


@router.get("/{game_id}/legal-moves/{square}", response_model=LegalMovesResponse)
def legal_moves(game_id: UUID, square: str, service: Service) -> LegalMovesResponse:
    return service.legal_moves(LegalMovesRequest(game_id=game_id, square=square))


@router.post("/{game_id}/moves", response_model=GameResponse)
def make_move(
    game_id: UUID,
    from_square: str,
    to_square: str,
    service: Service,
    promote_to: PieceType | None = None,
) -> GameResponse:
    request = MoveRequest(
        game_id=game_id,
        from_square=from_square,
        to_square=to_square,
        promote_to=promote_to,
    )
    return service.make_move(request)


@router.post("/{game_id}/ai-move", response_model=GameResponse)
def ai_move(
    game_id: UUID, service: Service, difficulty: Difficulty | None = None
) -> GameResponse:
    return service.ai_move(AIMoveRequest(game_id=game_id, difficulty=difficulty))


@router.post("/{game_id}/reset", response_model=GameResponse)
def reset_game(game_id: UUID, service: Service) -> GameResponse:
    return service.reset_game(ResetGameRequest(game_id=game_id))


@router.delete("/{game_id}", status_code=204)
def delete_game(game_id: UUID, service: Service) -> None:
    service.delete_game(DeleteGameRequest(game_id=game_id))


# --- ERROR TRANSLATION ---
ERROR_STATUS_CODES: list[tuple[type[ChessError], int]] = [
    (RepositoryError, 404),
    (GameError, 409),
    (InvalidRequestError, 422),
    (InvalidFENError, 422),
]


async def handle_chess_error(request: Request, exc: Exception) -> JSONResponse:
    status_code = next(
        (code for error_type, code in ERROR_STATUS_CODES if isinstance(exc, error_type)),
        400,
    )
    _log.debug("%s %s -> %d: %s", request.method, request.url.path, status_code, exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)

    app = FastAPI(title="Chess engine")
    app.include_router(router)
    app.add_exception_handler(ChessError, handle_chess_error)
    return app
