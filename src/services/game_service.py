"""
GameService orchestrates the game engine with persistence and notifications.

Every mutating operation runs as one database transaction while holding
the room's lock, and reads the room row FOR UPDATE so separate processes
sharing PostgreSQL serialize too. Subscribers are notified only after the
transaction has committed and the lock is released.
"""

from __future__ import annotations

import logging
import secrets
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional, Protocol, Tuple, Type, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core.exceptions import (
    GameNotFoundError,
    InvalidTransactionError,
    NotFoundError,
    PersistenceError,
    PlayerNotFoundError,
    RoomNotFoundError,
    StockNotFoundError,
    TickerError,
    UnauthorizedError,
    ValidationError,
)
from src.core.game.config import GameConfig
from src.core.game.dice import Dice, DiceAction, DiceResult, StockType, resolve_dice
from src.core.game.phases import (
    ActionType,
    GamePhase,
    RoomStatus,
    legal_actions,
    require_phase,
    transition,
)
from src.core.game.pricing import apply_move, dividend, net_worth, reached_target, split_shares, winners
from src.core.game.snapshot import (
    DiceRollEntry,
    GameSnapshot,
    PlayerSnapshot,
    RollOutcome,
    RoomCreated,
    RoomInfo,
    RoomJoined,
    RoomPlayer,
    TradeReceipt,
    TransactionEntry,
    TurnAdvanced,
)
from src.core.game.trading import TradeAction, validate_buy, validate_sell
from src.data.models import GameState, Holding, Player, Room, Stock
from src.data.repository import RoomRepository
from src.data.session import session_scope
from src.services.locks import RoomLocks

logger = logging.getLogger(__name__)

Identifier = Union[uuid.UUID, str]

STOCK_NAMES: Tuple[str, ...] = tuple(stock.value for stock in StockType)

MAX_ROOM_NAME_LENGTH = 128
MAX_PLAYER_NAME_LENGTH = 64
MAX_HISTORY_LIMIT = 500


class RoomNotifier(Protocol):
    """Receives a signal after a room's state has been committed."""

    async def notify_room_state_changed(self, room_id: uuid.UUID) -> None: ...


class DiceRoller(Protocol):
    def roll(self) -> DiceResult: ...


class GameService:
    """
    Authoritative store for rooms and games.

    Args:
        session_factory: Async session factory bound to the game database
        notifier: Optional subscriber told about committed state changes
        dice: Dice source; anything with a ``roll()`` method
        config: Game rules and limits
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        notifier: Optional[RoomNotifier] = None,
        dice: Optional[DiceRoller] = None,
        config: Optional[GameConfig] = None,
    ):
        self.session_factory = session_factory
        self.notifier = notifier
        self.config = config or GameConfig()
        self.dice = dice or Dice()
        self.locks = RoomLocks()

    # ---- Transactions ----

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[RoomRepository]:
        try:
            async with session_scope(self.session_factory) as session:
                yield RoomRepository(session)
        except SQLAlchemyError as e:
            logger.exception("Database operation failed, transaction rolled back")
            raise PersistenceError("Database operation failed") from e

    @asynccontextmanager
    async def _room_transaction(self, room_id: uuid.UUID) -> AsyncIterator[RoomRepository]:
        async with self.locks.hold(room_id):
            async with self._transaction() as repo:
                yield repo

    async def _notify(self, room_id: uuid.UUID) -> None:
        if self.notifier is None:
            return
        try:
            await self.notifier.notify_room_state_changed(room_id)
        except Exception:
            logger.warning(f"Failed to notify subscribers of room {room_id}", exc_info=True)

    # ---- Rooms ----

    async def create_room(self, name: str) -> RoomCreated:
        """
        Create a room in the waiting state with all stocks at the starting price.

        Raises:
            ValidationError: INVALID_ROOM_NAME for a blank or overlong name
        """
        name = (name or "").strip()
        if not name or len(name) > MAX_ROOM_NAME_LENGTH:
            raise ValidationError(
                f"Room name must be 1-{MAX_ROOM_NAME_LENGTH} characters",
                code="INVALID_ROOM_NAME",
            )

        async with self._transaction() as repo:
            invite_code = await self._unique_invite_code(repo)
            room = await repo.create_room(name, invite_code, self.config.max_players)
            await repo.seed_stocks(room.id, STOCK_NAMES, self.config.starting_price)
            await repo.create_game_state(room.id)
            created = RoomCreated(room_id=room.id, invite_code=invite_code, name=name)

        return created

    async def _unique_invite_code(self, repo: RoomRepository) -> str:
        for _ in range(self.config.invite_code_attempts):
            code = "".join(
                secrets.choice(self.config.invite_code_alphabet)
                for _ in range(self.config.invite_code_length)
            )
            if not await repo.invite_code_exists(code):
                return code
            logger.info(f"Invite code collision on {code}, retrying")
        raise PersistenceError("Could not generate a unique invite code")

    def _normalize_invite_code(self, invite_code: str) -> str:
        code = (invite_code or "").strip().upper()
        alphabet = self.config.invite_code_alphabet
        if len(code) != self.config.invite_code_length or any(c not in alphabet for c in code):
            raise ValidationError(
                f"Invalid invite code: {invite_code!r}", code="INVALID_INVITE_CODE"
            )
        return code

    async def join_room(self, invite_code: str, player_name: str) -> RoomJoined:
        """
        Seat a new player in the room an invite code points to.

        The player gets the starting cash, the next turn order and an
        empty holding in every stock.

        Raises:
            ValidationError: INVALID_INVITE_CODE, INVALID_PLAYER_NAME,
                ROOM_NOT_ACCEPTING, ROOM_FULL or NAME_TAKEN
            RoomNotFoundError: No room uses the code
        """
        code = self._normalize_invite_code(invite_code)
        name = player_name or ""
        if not name.strip() or len(name) > MAX_PLAYER_NAME_LENGTH:
            raise ValidationError(
                f"Player name must be 1-{MAX_PLAYER_NAME_LENGTH} characters",
                code="INVALID_PLAYER_NAME",
            )

        async with self._transaction() as repo:
            room_id = await repo.find_room_id_by_invite_code(code)
        if room_id is None:
            raise RoomNotFoundError(f"No room with invite code {code}")

        async with self._room_transaction(room_id) as repo:
            room = await repo.get_room(room_id, for_update=True)
            if room is None:
                raise RoomNotFoundError(f"No room with invite code {code}")
            if room.status != RoomStatus.WAITING.value:
                raise ValidationError(
                    "Room is not accepting new players", code="ROOM_NOT_ACCEPTING"
                )

            count = await repo.count_players(room.id)
            if count >= room.max_players:
                raise ValidationError(
                    f"Room is full ({room.max_players} players)", code="ROOM_FULL"
                )
            if await repo.player_name_taken(room.id, name):
                raise ValidationError(
                    f"Name '{name}' is already taken in this room", code="NAME_TAKEN"
                )

            player = await repo.add_player(
                room.id, name, count, self.config.starting_cash, STOCK_NAMES
            )
            joined = RoomJoined(
                room_id=room.id,
                player_id=player.id,
                player_name=player.name,
                turn_order=player.turn_order,
            )

        await self._notify(room_id)
        return joined

    async def get_room_info(self, room_id: Identifier) -> RoomInfo:
        rid = _parse_id(room_id, RoomNotFoundError, "Room")
        async with self._transaction() as repo:
            room = await repo.get_room(rid)
            if room is None:
                raise RoomNotFoundError(f"Room {rid} not found")
            players = await repo.list_players(rid)

        return RoomInfo(
            room_id=room.id,
            name=room.name,
            invite_code=room.invite_code,
            status=RoomStatus(room.status),
            max_players=room.max_players,
            players=[
                RoomPlayer(
                    player_id=p.id,
                    name=p.name,
                    turn_order=p.turn_order,
                    is_connected=p.is_connected,
                )
                for p in players
            ],
            created_at=room.created_at,
        )

    async def set_player_connection(
        self, room_id: Identifier, player_id: Identifier, connected: bool
    ) -> None:
        """
        Record whether a player currently has a live connection.

        Only the presence flag is written, so this does not take the room
        lock and cannot clobber a concurrent trade.
        """
        rid = _parse_id(room_id, RoomNotFoundError, "Room")
        pid = _parse_id(player_id, PlayerNotFoundError, "Player")

        async with self._transaction() as repo:
            player = await _load_player(repo, rid, pid)
            await repo.set_player_connected(player.id, connected)

        logger.info(f"Player {pid} {'connected to' if connected else 'disconnected from'} room {rid}")
        await self._notify(rid)

    # ---- Game flow ----

    async def start_game(self, room_id: Identifier) -> TurnAdvanced:
        """
        Start a waiting room: the player with turn order 0 rolls first.

        Raises:
            RoomNotFoundError: Unknown room
            WrongPhaseError: The game already started
            ValidationError: INSUFFICIENT_PLAYERS
        """
        rid = _parse_id(room_id, RoomNotFoundError, "Room")

        async with self._room_transaction(rid) as repo:
            room = await repo.get_room(rid, for_update=True)
            if room is None:
                raise RoomNotFoundError(f"Room {rid} not found")
            state = await repo.get_game_state(rid)
            if state is None:
                raise GameNotFoundError(f"Game state for room {rid} not found")

            phase = transition(GamePhase(state.phase), ActionType.START_GAME)

            players = await repo.list_players(rid)
            if len(players) < self.config.min_players:
                raise ValidationError(
                    f"Need at least {self.config.min_players} players to start, have {len(players)}",
                    code="INSUFFICIENT_PLAYERS",
                )

            await repo.set_room_status(room, RoomStatus.PLAYING.value)
            await repo.update_game_state(
                state, phase=phase.value, current_turn=0, current_player_id=players[0].id
            )
            result = TurnAdvanced(turn=0, current_player_id=players[0].id, phase=phase)
            logger.info(f"Game started in room {rid} with {len(players)} players")

        await self._notify(rid)
        return result

    async def roll_dice(self, room_id: Identifier, player_id: Identifier) -> RollOutcome:
        """
        Roll the dice for the current player and apply the result.

        Records the roll, moves the price, resolves a split or pays a
        dividend, and moves the game to the trading phase. Nothing of this
        is visible unless all of it commits.

        Raises:
            GameNotFoundError: Unknown room or missing game state
            WrongPhaseError: Not in the rolling phase
            UnauthorizedError: PLAYER_NOT_IN_ROOM or NOT_YOUR_TURN
        """
        rid = _parse_id(room_id, GameNotFoundError, "Game")
        pid = _parse_id(player_id, PlayerNotFoundError, "Player")
        cfg = self.config

        async with self._room_transaction(rid) as repo:
            _, state = await _load_game(repo, rid)
            player = await _load_player(repo, rid, pid)
            next_phase = transition(GamePhase(state.phase), ActionType.ROLL_DICE)
            if state.current_player_id != player.id:
                raise UnauthorizedError("It is not your turn", code="NOT_YOUR_TURN")

            dice = self.dice.roll()
            stock = await _load_stock(repo, rid, dice.stock)
            move = apply_move(stock.price, dice.action, dice.amount, cfg.starting_price, cfg.split_price)

            await repo.add_dice_roll(rid, player.id, state.current_turn, dice.to_dict(), move.split)

            if move.split:
                for holding in await repo.list_holders(rid, dice.stock.value):
                    await repo.set_shares(holding, split_shares(holding.shares))
                logger.info(f"Stock split: {dice.stock.value} in room {rid}")
            await repo.set_stock_price(stock, move.new_price)

            dividends: Dict[uuid.UUID, int] = {}
            if dice.action == DiceAction.DIVIDEND:
                dividends = await self._pay_dividends(repo, rid, state.current_turn, dice, move.new_price)

            await repo.update_game_state(state, phase=next_phase.value)

            outcome = RollOutcome(
                dice=dice,
                split_occurred=move.split,
                old_price=move.old_price,
                new_price=move.new_price,
                dividends=dividends,
            )
            logger.info(
                f"Room {rid} turn {state.current_turn}: {dice.stock.value} "
                f"{dice.action.value} {dice.amount} ({move.old_price} -> {move.new_price})"
            )

        await self._notify(rid)
        return outcome

    async def _pay_dividends(
        self,
        repo: RoomRepository,
        room_id: uuid.UUID,
        turn: int,
        dice: DiceResult,
        price: int,
    ) -> Dict[uuid.UUID, int]:
        paid: Dict[uuid.UUID, int] = {}
        for holding in await repo.list_holders(room_id, dice.stock.value):
            payout = dividend(price, holding.shares, dice.amount, self.config.starting_price)
            if payout <= 0:
                continue
            holder = await repo.get_player(holding.player_id)
            await repo.adjust_cash(holder, payout)
            await repo.add_transaction(
                room_id,
                holder.id,
                turn,
                dice.stock.value,
                TradeAction.DIVIDEND.value,
                holding.shares,
                dice.amount,
                payout,
            )
            paid[holder.id] = payout
        return paid

    async def buy_stock(
        self,
        room_id: Identifier,
        player_id: Identifier,
        stock_type: Union[StockType, str],
        shares: int,
    ) -> TradeReceipt:
        """
        Buy a lot of shares at the current price.

        Lot size and affordability are checked against the live row
        values inside the transaction.

        Raises:
            InvalidTransactionError: Bad lot size or not enough cash
            WrongPhaseError: Not in the trading phase
        """
        stock_enum = _parse_stock(stock_type)
        shares = _parse_shares(shares)
        rid = _parse_id(room_id, GameNotFoundError, "Game")
        pid = _parse_id(player_id, PlayerNotFoundError, "Player")

        async with self._room_transaction(rid) as repo:
            _, state = await _load_game(repo, rid)
            player = await _load_player(repo, rid, pid)
            require_phase(GamePhase(state.phase), ActionType.BUY_STOCK)
            stock = await _load_stock(repo, rid, stock_enum)
            holding = await _load_holding(repo, player, stock_enum)

            check = validate_buy(shares, stock.price, player.cash, self.config.lot_sizes)
            if not check.ok:
                raise InvalidTransactionError(check.reason.value, check.message)

            total = shares * stock.price
            await repo.adjust_cash(player, -total)
            await repo.adjust_shares(holding, shares)
            await repo.add_transaction(
                rid,
                player.id,
                state.current_turn,
                stock_enum.value,
                TradeAction.BUY.value,
                shares,
                stock.price,
                total,
            )
            receipt = _receipt(player, holding, stock, stock_enum, TradeAction.BUY, shares, total)
            logger.info(f"Player {player.name} bought {shares} {stock_enum.value} at {stock.price} in room {rid}")

        await self._notify(rid)
        return receipt

    async def sell_stock(
        self,
        room_id: Identifier,
        player_id: Identifier,
        stock_type: Union[StockType, str],
        shares: int,
    ) -> TradeReceipt:
        """
        Sell a lot of shares at the current price.

        Raises:
            InvalidTransactionError: Bad lot size or not enough shares
            WrongPhaseError: Not in the trading phase
        """
        stock_enum = _parse_stock(stock_type)
        shares = _parse_shares(shares)
        rid = _parse_id(room_id, GameNotFoundError, "Game")
        pid = _parse_id(player_id, PlayerNotFoundError, "Player")

        async with self._room_transaction(rid) as repo:
            _, state = await _load_game(repo, rid)
            player = await _load_player(repo, rid, pid)
            require_phase(GamePhase(state.phase), ActionType.SELL_STOCK)
            stock = await _load_stock(repo, rid, stock_enum)
            holding = await _load_holding(repo, player, stock_enum)

            check = validate_sell(shares, holding.shares, self.config.lot_sizes)
            if not check.ok:
                raise InvalidTransactionError(check.reason.value, check.message)

            total = shares * stock.price
            await repo.adjust_cash(player, total)
            await repo.adjust_shares(holding, -shares)
            await repo.add_transaction(
                rid,
                player.id,
                state.current_turn,
                stock_enum.value,
                TradeAction.SELL.value,
                shares,
                stock.price,
                total,
            )
            receipt = _receipt(player, holding, stock, stock_enum, TradeAction.SELL, shares, total)
            logger.info(f"Player {player.name} sold {shares} {stock_enum.value} at {stock.price} in room {rid}")

        await self._notify(rid)
        return receipt

    async def end_turn(self, room_id: Identifier) -> TurnAdvanced:
        """
        Finish the current turn.

        If any player has reached the winning net worth the game ends
        and the turn does not advance. Otherwise the next player in turn
        order starts rolling.

        Raises:
            GameNotFoundError: Unknown room or missing game state
            WrongPhaseError: Game not started or already over
        """
        rid = _parse_id(room_id, GameNotFoundError, "Game")
        target = self.config.win_net_worth

        async with self._room_transaction(rid) as repo:
            room, state = await _load_game(repo, rid)
            phase = GamePhase(state.phase)
            require_phase(phase, ActionType.END_TURN)

            players = await repo.list_players(rid)
            if not players:
                raise PlayerNotFoundError(f"Room {rid} has no players")

            worths = await _net_worths(repo, rid, players) if target is not None else {}
            if target is not None and reached_target(worths.values(), target):
                final = transition(phase, ActionType.FINISH_GAME)
                await repo.set_room_status(room, RoomStatus.FINISHED.value)
                await repo.update_game_state(state, phase=final.value)
                result = TurnAdvanced(
                    turn=state.current_turn,
                    current_player_id=state.current_player_id,
                    phase=final,
                )
                logger.info(f"Game over in room {rid}: winners {winners(worths)}")
            else:
                next_phase = transition(phase, ActionType.END_TURN)
                turn = state.current_turn + 1
                current = players[turn % len(players)]
                await repo.update_game_state(
                    state, phase=next_phase.value, current_turn=turn, current_player_id=current.id
                )
                result = TurnAdvanced(turn=turn, current_player_id=current.id, phase=next_phase)
                logger.info(f"Room {rid} turn {turn}: {current.name} to roll")

        await self._notify(rid)
        return result

    # ---- Reads ----

    async def get_game_state(self, room_id: Identifier) -> GameSnapshot:
        """
        Assemble a consistent view of a room.

        Taken under the room lock so a snapshot never shows half of a roll.

        Raises:
            GameNotFoundError: Unknown room or missing game state
        """
        rid = _parse_id(room_id, GameNotFoundError, "Game")

        async with self._room_transaction(rid) as repo:
            room, state = await _load_game(repo, rid)
            players = await repo.list_players(rid)
            prices = _price_map(await repo.list_stocks(rid))
            holdings = _holdings_by_player(await repo.list_holdings(rid))

        phase = GamePhase(state.phase)
        snapshots = [
            PlayerSnapshot(
                player_id=p.id,
                name=p.name,
                turn_order=p.turn_order,
                cash=p.cash,
                holdings=holdings.get(p.id, {}),
                net_worth=net_worth(p.cash, holdings.get(p.id, {}), prices),
                is_connected=p.is_connected,
            )
            for p in players
        ]
        winner_ids: List[uuid.UUID] = []
        if phase == GamePhase.GAME_OVER:
            winner_ids = winners({p.player_id: p.net_worth for p in snapshots})

        return GameSnapshot(
            room_id=room.id,
            room_status=RoomStatus(room.status),
            current_turn=state.current_turn,
            current_player_id=state.current_player_id,
            phase=phase,
            prices=prices,
            players=snapshots,
            legal_actions=legal_actions(phase),
            winner_ids=winner_ids,
        )

    async def list_transactions(
        self,
        room_id: Identifier,
        player_id: Optional[Identifier] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[TransactionEntry]:
        """Trade and dividend history of a room, newest first."""
        _check_page(limit, offset)
        rid = _parse_id(room_id, RoomNotFoundError, "Room")
        pid = _parse_id(player_id, PlayerNotFoundError, "Player") if player_id is not None else None

        async with self._transaction() as repo:
            if await repo.get_room(rid) is None:
                raise RoomNotFoundError(f"Room {rid} not found")
            records = await repo.list_transactions(rid, player_id=pid, limit=limit, offset=offset)

        return [
            TransactionEntry(
                sequence_number=r.sequence_number,
                player_id=r.player_id,
                turn_number=r.turn_number,
                stock=StockType(r.stock_type),
                action=r.action,
                shares=r.shares,
                price_per_share=r.price_per_share,
                total_amount=r.total_amount,
                created_at=r.created_at,
            )
            for r in records
        ]

    async def list_dice_rolls(self, room_id: Identifier, limit: int = 50) -> List[DiceRollEntry]:
        """Dice history of a room, newest first."""
        _check_page(limit, 0)
        rid = _parse_id(room_id, RoomNotFoundError, "Room")

        async with self._transaction() as repo:
            if await repo.get_room(rid) is None:
                raise RoomNotFoundError(f"Room {rid} not found")
            rolls = await repo.list_dice_rolls(rid, limit=limit)

        return [
            DiceRollEntry(
                player_id=r.player_id,
                turn_number=r.turn_number,
                dice=resolve_dice(r.stock_die, r.action_die, r.amount_die),
                split_occurred=r.split_occurred,
                created_at=r.created_at,
            )
            for r in rolls
        ]


# ---- Helpers ----


def _parse_id(value: Identifier, error: Type[TickerError], what: str) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise error(f"{what} {value} not found") from None


def _parse_stock(value: Union[StockType, str]) -> StockType:
    if isinstance(value, StockType):
        return value
    try:
        return StockType(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(STOCK_NAMES)
        raise ValidationError(
            f"Unknown stock type {value!r}. Must be one of: {allowed}",
            code="INVALID_STOCK_TYPE",
        ) from None


def _parse_shares(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"Shares must be a whole number, got {value!r}", code="INVALID_SHARES")
    return value


def _check_page(limit: int, offset: int) -> None:
    if not 1 <= limit <= MAX_HISTORY_LIMIT or offset < 0:
        raise ValidationError(
            f"limit must be 1-{MAX_HISTORY_LIMIT} and offset non-negative",
            code="INVALID_PAGE",
        )


async def _load_game(repo: RoomRepository, room_id: uuid.UUID) -> Tuple[Room, GameState]:
    room = await repo.get_room(room_id, for_update=True)
    if room is None:
        raise GameNotFoundError(f"Game {room_id} not found")
    state = await repo.get_game_state(room_id)
    if state is None:
        raise GameNotFoundError(f"Game state for room {room_id} not found")
    return room, state


async def _load_player(repo: RoomRepository, room_id: uuid.UUID, player_id: uuid.UUID) -> Player:
    player = await repo.get_player(player_id)
    if player is None:
        raise PlayerNotFoundError(f"Player {player_id} not found")
    if player.room_id != room_id:
        raise UnauthorizedError(
            f"Player {player_id} is not in room {room_id}", code="PLAYER_NOT_IN_ROOM"
        )
    return player


async def _load_stock(repo: RoomRepository, room_id: uuid.UUID, stock: StockType) -> Stock:
    row = await repo.get_stock(room_id, stock.value)
    if row is None:
        raise StockNotFoundError(f"Stock {stock.value} not found in room {room_id}")
    return row


async def _load_holding(repo: RoomRepository, player: Player, stock: StockType) -> Holding:
    holding = await repo.get_holding(player.id, stock.value)
    if holding is None:
        raise NotFoundError(
            f"Portfolio entry for {stock.value} missing for player {player.id}",
            code="PORTFOLIO_NOT_FOUND",
        )
    return holding


def _price_map(stocks: List[Stock]) -> Dict[StockType, int]:
    return {StockType(s.stock_type): s.price for s in stocks}


def _holdings_by_player(rows: List[Holding]) -> Dict[uuid.UUID, Dict[StockType, int]]:
    by_player: Dict[uuid.UUID, Dict[StockType, int]] = {}
    for row in rows:
        by_player.setdefault(row.player_id, {})[StockType(row.stock_type)] = row.shares
    return by_player


async def _net_worths(
    repo: RoomRepository, room_id: uuid.UUID, players: List[Player]
) -> Dict[uuid.UUID, int]:
    prices = _price_map(await repo.list_stocks(room_id))
    holdings = _holdings_by_player(await repo.list_holdings(room_id))
    return {p.id: net_worth(p.cash, holdings.get(p.id, {}), prices) for p in players}


def _receipt(
    player: Player,
    holding: Holding,
    stock: Stock,
    stock_type: StockType,
    action: TradeAction,
    shares: int,
    total: int,
) -> TradeReceipt:
    return TradeReceipt(
        player_id=player.id,
        stock=stock_type,
        action=action.value,
        shares=shares,
        price_per_share=stock.price,
        total_amount=total,
        cash_after=player.cash,
        shares_after=holding.shares,
    )
