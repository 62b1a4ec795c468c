from __future__ import annotations

import asyncio
import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, FastAPI, Query, Request, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse

from src.core.exceptions import ErrorKind, TickerError
from src.core.game.dice import Dice, DiceResult
from src.core.game.snapshot import TradeReceipt, TurnAdvanced, serialize_snapshot
from src.data import close_db, create_tables, get_session_factory, init_db
from src.services import GameService
from src.settings import get_game_settings, get_server_settings

from .hub import RoomHub
from .schemas import (
    CreateRoomRequest,
    DiceDTO,
    DiceRollDTO,
    DiceRollListResponse,
    ErrorResponse,
    JoinRoomRequest,
    PlayerActionRequest,
    RollResponse,
    RoomCreatedResponse,
    RoomInfoResponse,
    RoomJoinedResponse,
    RoomPlayerDTO,
    TradeRequest,
    TradeResponse,
    TransactionDTO,
    TransactionListResponse,
    TurnResponse,
)

logger = logging.getLogger(__name__)

HEARTBEAT_SECONDS = 5

STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.VALIDATION: 400,
    ErrorKind.INSUFFICIENT_FUNDS: 400,
    ErrorKind.INSUFFICIENT_SHARES: 400,
    ErrorKind.UNAUTHORIZED: 403,
    ErrorKind.INTERNAL: 500,
}

# WebSocket close codes
WS_NOT_FOUND = 4404
WS_FORBIDDEN = 4403

router = APIRouter()
ERRORS: Dict[int | str, Dict[str, Any]] = {
    status: {"model": ErrorResponse} for status in sorted(set(STATUS_BY_KIND.values()))
}


# ---- Dependencies ----
def get_game_service(request: Request) -> GameService:
    return request.app.state.service


def get_hub(request: Request) -> RoomHub:
    return request.app.state.hub


# ---- Rooms ----
@router.post("/api/rooms", response_model=RoomCreatedResponse, status_code=201, responses=ERRORS)
async def create_room(req: CreateRoomRequest, service: GameService = Depends(get_game_service)):
    created = await service.create_room(req.name)
    return RoomCreatedResponse(
        room_id=str(created.room_id),
        invite_code=created.invite_code,
        name=created.name,
    )


@router.post("/api/rooms/join", response_model=RoomJoinedResponse, responses=ERRORS)
async def join_room(req: JoinRoomRequest, service: GameService = Depends(get_game_service)):
    joined = await service.join_room(req.invite_code, req.player_name)
    return RoomJoinedResponse(
        room_id=str(joined.room_id),
        player_id=str(joined.player_id),
        player_name=joined.player_name,
        turn_order=joined.turn_order,
    )


@router.get("/api/rooms/{room_id}", response_model=RoomInfoResponse, responses=ERRORS)
async def get_room(room_id: str, service: GameService = Depends(get_game_service)):
    info = await service.get_room_info(room_id)
    return RoomInfoResponse(
        room_id=str(info.room_id),
        name=info.name,
        invite_code=info.invite_code,
        status=info.status.value,
        max_players=info.max_players,
        created_at=info.created_at,
        players=[
            RoomPlayerDTO(
                player_id=str(p.player_id),
                name=p.name,
                turn_order=p.turn_order,
                is_connected=p.is_connected,
            )
            for p in info.players
        ],
    )


@router.post("/api/rooms/{room_id}/start", response_model=TurnResponse, responses=ERRORS)
async def start_game(
    room_id: str,
    service: GameService = Depends(get_game_service),
    hub: RoomHub = Depends(get_hub),
):
    result = await service.start_game(room_id)
    await hub.publish(_room_uuid(room_id), {"type": "game_started", **_turn_payload(result)})
    return _turn_response(result)


# ---- Games ----
@router.get("/api/games/{room_id}/state", responses=ERRORS)
async def get_game_state(room_id: str, service: GameService = Depends(get_game_service)):
    return serialize_snapshot(await service.get_game_state(room_id))


@router.post("/api/games/{room_id}/roll-dice", response_model=RollResponse, responses=ERRORS)
async def roll_dice(
    room_id: str,
    req: PlayerActionRequest,
    service: GameService = Depends(get_game_service),
    hub: RoomHub = Depends(get_hub),
):
    outcome = await service.roll_dice(room_id, req.player_id)
    response = RollResponse(
        dice=_dice_dto(outcome.dice),
        split_occurred=outcome.split_occurred,
        old_price=outcome.old_price,
        new_price=outcome.new_price,
        dividends={str(pid): amount for pid, amount in outcome.dividends.items()},
    )
    await hub.publish(
        _room_uuid(room_id),
        {"type": "dice_rolled", "player_id": req.player_id, **response.model_dump()},
    )
    return response


@router.post("/api/games/{room_id}/buy-stock", response_model=TradeResponse, responses=ERRORS)
async def buy_stock(
    room_id: str,
    req: TradeRequest,
    service: GameService = Depends(get_game_service),
    hub: RoomHub = Depends(get_hub),
):
    receipt = await service.buy_stock(room_id, req.player_id, req.stock_type, req.shares)
    response = _trade_response(receipt)
    await hub.publish(_room_uuid(room_id), {"type": "trade", **response.model_dump()})
    return response


@router.post("/api/games/{room_id}/sell-stock", response_model=TradeResponse, responses=ERRORS)
async def sell_stock(
    room_id: str,
    req: TradeRequest,
    service: GameService = Depends(get_game_service),
    hub: RoomHub = Depends(get_hub),
):
    receipt = await service.sell_stock(room_id, req.player_id, req.stock_type, req.shares)
    response = _trade_response(receipt)
    await hub.publish(_room_uuid(room_id), {"type": "trade", **response.model_dump()})
    return response


@router.post("/api/games/{room_id}/end-turn", response_model=TurnResponse, responses=ERRORS)
async def end_turn(
    room_id: str,
    service: GameService = Depends(get_game_service),
    hub: RoomHub = Depends(get_hub),
):
    result = await service.end_turn(room_id)
    await hub.publish(_room_uuid(room_id), {"type": "turn_ended", **_turn_payload(result)})
    return _turn_response(result)


@router.get("/api/games/{room_id}/transactions", response_model=TransactionListResponse, responses=ERRORS)
async def list_transactions(
    room_id: str,
    player_id: Optional[str] = None,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    service: GameService = Depends(get_game_service),
):
    entries = await service.list_transactions(room_id, player_id=player_id, limit=limit, offset=offset)
    return TransactionListResponse(
        transactions=[
            TransactionDTO(
                sequence_number=e.sequence_number,
                player_id=str(e.player_id),
                turn_number=e.turn_number,
                stock_type=e.stock.value,
                action=e.action,
                shares=e.shares,
                price_per_share=e.price_per_share,
                total_amount=e.total_amount,
                created_at=e.created_at,
            )
            for e in entries
        ],
        limit=limit,
        offset=offset,
    )


@router.get("/api/games/{room_id}/dice-rolls", response_model=DiceRollListResponse, responses=ERRORS)
async def list_dice_rolls(
    room_id: str,
    limit: int = Query(50, ge=1, le=500),
    service: GameService = Depends(get_game_service),
):
    entries = await service.list_dice_rolls(room_id, limit=limit)
    return DiceRollListResponse(
        rolls=[
            DiceRollDTO(
                player_id=str(e.player_id),
                turn_number=e.turn_number,
                dice=_dice_dto(e.dice),
                split_occurred=e.split_occurred,
                created_at=e.created_at,
            )
            for e in entries
        ],
        limit=limit,
    )


@router.get("/health")
async def health():
    return {"status": "ok"}


# ---- WebSocket ----
@router.websocket("/ws/rooms/{room_id}")
async def ws_room(websocket: WebSocket, room_id: str):
    service: GameService = websocket.app.state.service
    hub: RoomHub = websocket.app.state.hub
    player_id = websocket.query_params.get("player_id")

    await websocket.accept()
    try:
        snapshot = await service.get_game_state(room_id)
    except TickerError as e:
        await websocket.close(code=WS_NOT_FOUND, reason=e.code)
        return

    rid = snapshot.room_id
    queue = await hub.subscribe(rid)
    await queue.put({"type": "snapshot", "room_id": str(rid), "snapshot": serialize_snapshot(snapshot)})

    if player_id is not None:
        try:
            await service.set_player_connection(rid, player_id, True)
        except TickerError as e:
            await hub.unsubscribe(rid, queue)
            await websocket.close(code=WS_FORBIDDEN, reason=e.code)
            return

    # Start a task to forward outbound messages
    async def sender():
        try:
            while True:
                msg = await queue.get()
                await websocket.send_json(msg)
        except (WebSocketDisconnect, RuntimeError):
            return

    # Heartbeat pings to keep connection alive
    async def heartbeat():
        while True:
            await asyncio.sleep(HEARTBEAT_SECONDS)
            await queue.put({"type": "heartbeat"})

    sender_task = asyncio.create_task(sender())
    hb_task = asyncio.create_task(heartbeat())
    try:
        # Clients act over HTTP; inbound frames only keep the socket open
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        sender_task.cancel()
        hb_task.cancel()
        await hub.unsubscribe(rid, queue)
        if player_id is not None:
            try:
                await service.set_player_connection(rid, player_id, False)
            except TickerError:
                logger.warning(f"Could not mark player {player_id} disconnected from room {rid}", exc_info=True)


# ---- Helpers ----
def _room_uuid(room_id: str) -> uuid.UUID:
    # Only reached after the service accepted the id
    return uuid.UUID(room_id)


def _dice_dto(dice: DiceResult) -> DiceDTO:
    return DiceDTO(**dice.to_dict())


def _turn_payload(result: TurnAdvanced) -> Dict[str, Any]:
    return _turn_response(result).model_dump()


def _turn_response(result: TurnAdvanced) -> TurnResponse:
    return TurnResponse(
        turn=result.turn,
        current_player_id=str(result.current_player_id) if result.current_player_id else None,
        phase=result.phase.value,
    )


def _trade_response(receipt: TradeReceipt) -> TradeResponse:
    return TradeResponse(
        player_id=str(receipt.player_id),
        stock_type=receipt.stock.value,
        action=receipt.action,
        shares=receipt.shares,
        price_per_share=receipt.price_per_share,
        total_amount=receipt.total_amount,
        cash_after=receipt.cash_after,
        shares_after=receipt.shares_after,
    )


async def ticker_error_handler(request: Request, exc: TickerError) -> JSONResponse:
    return JSONResponse(status_code=STATUS_BY_KIND[exc.kind], content={"detail": exc.to_dict()})


def create_app(database_url: Optional[str] = None) -> FastAPI:
    """
    Build the API application.

    Args:
        database_url: Override for DATABASE_URL (tests, local runs)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifecycle - startup and shutdown."""
        settings = get_server_settings()
        logging.basicConfig(
            level=settings.log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        logger.info("Starting Stock Ticker server")
        await init_db(database_url)
        if settings.create_tables:
            await create_tables()

        game_settings = get_game_settings()
        hub = RoomHub()
        service = GameService(
            get_session_factory(),
            notifier=hub,
            dice=Dice(game_settings.dice_seed),
            config=game_settings.to_config(),
        )

        async def snapshot_provider(rid: uuid.UUID) -> Dict[str, Any]:
            return serialize_snapshot(await service.get_game_state(rid))

        hub.bind(snapshot_provider)
        app.state.hub = hub
        app.state.service = service
        logger.info("Server ready")

        yield

        logger.info("Shutting down server")
        await close_db()

    app = FastAPI(title="Stock Ticker Arena", version="0.1.0", lifespan=lifespan)
    app.add_exception_handler(TickerError, ticker_error_handler)
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    # Convenience entrypoint for running directly: python -m server.app
    import uvicorn

    server_settings = get_server_settings()
    uvicorn.run("server.app:app", host=server_settings.server_host, port=server_settings.server_port)
