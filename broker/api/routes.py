from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, WebSocket, status

from broker.api.deps import get_engine, get_games
from broker.api.models import ConnectionsResponse, GameSnapshot
from broker.engine import Engine
from broker.tictactoe import GameStore

router = APIRouter()


@router.websocket("/ws")
async def broker_ws(websocket: WebSocket, engine: Engine = Depends(get_engine)) -> None:
    await engine.serve(websocket)


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/connections", response_model=ConnectionsResponse)
async def list_connections_route(engine: Engine = Depends(get_engine)) -> ConnectionsResponse:
    return ConnectionsResponse(connections=await engine.connections.snapshot())


@router.get("/games/{game_id}", response_model=GameSnapshot)
async def get_game_route(game_id: str, games: GameStore = Depends(get_games)) -> GameSnapshot:
    game = await games.get(game_id)
    if game is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Game not found")
    return GameSnapshot.from_game(game)
