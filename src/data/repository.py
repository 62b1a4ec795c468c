"""
Repository pattern for room data operations.

Encapsulates all database queries for rooms, players, holdings, stocks,
game state and the audit logs. Provides a clean interface for the
service layer; it never decides game rules.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.data.models import (
    DiceRoll,
    GameState,
    Holding,
    Player,
    Room,
    Stock,
    TransactionRecord,
)

logger = logging.getLogger(__name__)


class RoomRepository:
    """
    Repository for room-related database operations.

    Every method works inside the caller's session; committing is the
    caller's job so a whole game action lands in one transaction.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository with a database session.

        Args:
            session: Active async SQLAlchemy session
        """
        self.session = session

    # ---- Room Operations ----

    async def create_room(self, name: str, invite_code: str, max_players: int) -> Room:
        """
        Create a new room record in the waiting state.

        Args:
            name: Display name
            invite_code: Public join code (must be unique)
            max_players: Seat limit

        Returns:
            Created Room instance
        """
        room = Room(name=name, invite_code=invite_code, status="waiting", max_players=max_players)

        self.session.add(room)
        await self.session.flush()  # Get the UUID assigned
        logger.info(f"Created room: {name} (code: {invite_code}, UUID: {room.id})")

        return room

    async def invite_code_exists(self, invite_code: str) -> bool:
        stmt = select(func.count(Room.id)).where(Room.invite_code == invite_code)
        result = await self.session.execute(stmt)
        return result.scalar_one() > 0

    async def get_room(self, room_id: uuid.UUID, *, for_update: bool = False) -> Optional[Room]:
        """
        Fetch room by UUID.

        Args:
            room_id: Room UUID
            for_update: Lock the row until the transaction ends

        Returns:
            Room instance or None if not found
        """
        stmt = select(Room).where(Room.id == room_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_room_id_by_invite_code(self, invite_code: str) -> Optional[uuid.UUID]:
        stmt = select(Room.id).where(Room.invite_code == invite_code)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def set_room_status(self, room: Room, status: str) -> Room:
        room.status = status
        await self.session.flush()
        logger.info(f"Room {room.id} status: {status}")
        return room

    # ---- Stock Operations ----

    async def seed_stocks(self, room_id: uuid.UUID, stock_types: Iterable[str], price: int) -> List[Stock]:
        """Create one stock row per type at the given price."""
        stocks = [Stock(room_id=room_id, stock_type=s, price=price) for s in stock_types]
        self.session.add_all(stocks)
        await self.session.flush()
        return stocks

    async def get_stock(self, room_id: uuid.UUID, stock_type: str) -> Optional[Stock]:
        stmt = select(Stock).where(Stock.room_id == room_id, Stock.stock_type == stock_type)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_stocks(self, room_id: uuid.UUID) -> List[Stock]:
        stmt = select(Stock).where(Stock.room_id == room_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def set_stock_price(self, stock: Stock, price: int) -> Stock:
        stock.price = price
        await self.session.flush()
        return stock

    # ---- Game State Operations ----

    async def create_game_state(self, room_id: uuid.UUID) -> GameState:
        state = GameState(room_id=room_id, current_turn=0, current_player_id=None, phase="waiting")
        self.session.add(state)
        await self.session.flush()
        return state

    async def get_game_state(self, room_id: uuid.UUID) -> Optional[GameState]:
        stmt = select(GameState).where(GameState.room_id == room_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_game_state(
        self,
        state: GameState,
        *,
        phase: Optional[str] = None,
        current_turn: Optional[int] = None,
        current_player_id: Optional[uuid.UUID] = None,
    ) -> GameState:
        """
        Update turn bookkeeping.

        Args:
            state: Loaded GameState row
            phase: New phase (waiting | rolling | trading | game_over)
            current_turn: New turn counter
            current_player_id: Player whose turn it is

        Returns:
            Updated GameState instance
        """
        if phase is not None:
            state.phase = phase
        if current_turn is not None:
            state.current_turn = current_turn
        if current_player_id is not None:
            state.current_player_id = current_player_id

        await self.session.flush()
        return state

    # ---- Player Operations ----

    async def add_player(
        self,
        room_id: uuid.UUID,
        name: str,
        turn_order: int,
        cash: int,
        stock_types: Iterable[str],
    ) -> Player:
        """
        Seat a player and give them an empty holding for every stock.

        Args:
            room_id: Room UUID
            name: Display name (unique within the room)
            turn_order: Join sequence (0, 1, 2, ...)
            cash: Starting cash in cents
            stock_types: Every stock type traded in the room

        Returns:
            Created Player instance
        """
        player = Player(room_id=room_id, name=name, turn_order=turn_order, cash=cash, is_connected=False)
        self.session.add(player)
        await self.session.flush()

        self.session.add_all(
            Holding(player_id=player.id, room_id=room_id, stock_type=s, shares=0) for s in stock_types
        )
        await self.session.flush()
        logger.info(f"Added player {turn_order} ({name}) to room {room_id}")

        return player

    async def get_player(self, player_id: uuid.UUID) -> Optional[Player]:
        return await self.session.get(Player, player_id)

    async def list_players(self, room_id: uuid.UUID) -> List[Player]:
        """Players of a room ordered by turn order."""
        stmt = select(Player).where(Player.room_id == room_id).order_by(Player.turn_order)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_players(self, room_id: uuid.UUID) -> int:
        stmt = select(func.count(Player.id)).where(Player.room_id == room_id)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def player_name_taken(self, room_id: uuid.UUID, name: str) -> bool:
        stmt = select(func.count(Player.id)).where(Player.room_id == room_id, Player.name == name)
        result = await self.session.execute(stmt)
        return result.scalar_one() > 0

    async def adjust_cash(self, player: Player, delta: int) -> Player:
        player.cash += delta
        await self.session.flush()
        return player

    async def set_player_connected(self, player_id: uuid.UUID, connected: bool) -> bool:
        """
        Update only the presence flag.

        Issued as a single-column UPDATE so it cannot overwrite cash or
        holdings written by a concurrent game transaction.

        Returns:
            True if a player row was updated
        """
        stmt = update(Player).where(Player.id == player_id).values(is_connected=connected)
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    # ---- Holding Operations ----

    async def get_holding(self, player_id: uuid.UUID, stock_type: str) -> Optional[Holding]:
        stmt = select(Holding).where(Holding.player_id == player_id, Holding.stock_type == stock_type)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_holdings(self, room_id: uuid.UUID) -> List[Holding]:
        stmt = select(Holding).where(Holding.room_id == room_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_holders(self, room_id: uuid.UUID, stock_type: str) -> List[Holding]:
        """Holdings with at least one share of a stock."""
        stmt = (
            select(Holding)
            .where(
                Holding.room_id == room_id,
                Holding.stock_type == stock_type,
                Holding.shares > 0,
            )
            .order_by(Holding.player_id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def adjust_shares(self, holding: Holding, delta: int) -> Holding:
        holding.shares += delta
        await self.session.flush()
        return holding

    async def set_shares(self, holding: Holding, shares: int) -> Holding:
        holding.shares = shares
        await self.session.flush()
        return holding

    # ---- Audit Log Operations ----

    async def get_latest_sequence_number(self, room_id: uuid.UUID) -> int:
        """
        Get the highest transaction sequence number for a room.

        Returns:
            Latest sequence number, or -1 if no transactions exist
        """
        stmt = select(func.max(TransactionRecord.sequence_number)).where(
            TransactionRecord.room_id == room_id
        )
        result = await self.session.execute(stmt)
        max_seq = result.scalar_one_or_none()

        return max_seq if max_seq is not None else -1

    async def add_transaction(
        self,
        room_id: uuid.UUID,
        player_id: uuid.UUID,
        turn_number: int,
        stock_type: str,
        action: str,
        shares: int,
        price_per_share: int,
        total_amount: int,
    ) -> TransactionRecord:
        """
        Append a trade or dividend record.

        Args:
            room_id: Room UUID
            player_id: Player UUID
            turn_number: Turn when the transaction happened
            stock_type: Stock traded
            action: buy | sell | dividend
            shares: Shares traded (or held, for dividends)
            price_per_share: Trade price, or dividend per share
            total_amount: Cash moved in cents

        Returns:
            Created TransactionRecord instance
        """
        record = TransactionRecord(
            room_id=room_id,
            player_id=player_id,
            sequence_number=await self.get_latest_sequence_number(room_id) + 1,
            turn_number=turn_number,
            stock_type=stock_type,
            action=action,
            shares=shares,
            price_per_share=price_per_share,
            total_amount=total_amount,
        )

        self.session.add(record)
        await self.session.flush()

        return record

    async def list_transactions(
        self,
        room_id: uuid.UUID,
        player_id: Optional[uuid.UUID] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[TransactionRecord]:
        """
        Retrieve transactions for a room, newest first.

        Args:
            room_id: Room UUID
            player_id: Filter by player (optional)
            limit: Maximum number of records
            offset: Pagination offset
        """
        stmt = select(TransactionRecord).where(TransactionRecord.room_id == room_id)

        if player_id is not None:
            stmt = stmt.where(TransactionRecord.player_id == player_id)

        stmt = stmt.order_by(TransactionRecord.sequence_number.desc()).limit(limit).offset(offset)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def add_dice_roll(
        self,
        room_id: uuid.UUID,
        player_id: uuid.UUID,
        turn_number: int,
        faces: Dict[str, Any],
        split_occurred: bool,
    ) -> DiceRoll:
        """
        Append a dice roll record.

        Args:
            faces: DiceResult.to_dict() output
        """
        roll = DiceRoll(
            room_id=room_id,
            player_id=player_id,
            turn_number=turn_number,
            stock_die=faces["stock_die"],
            action_die=faces["action_die"],
            amount_die=faces["amount_die"],
            result_stock=faces["stock"],
            result_action=faces["action"],
            result_amount=faces["amount"],
            split_occurred=split_occurred,
        )

        self.session.add(roll)
        await self.session.flush()

        return roll

    async def list_dice_rolls(self, room_id: uuid.UUID, limit: int = 50) -> List[DiceRoll]:
        stmt = (
            select(DiceRoll)
            .where(DiceRoll.room_id == room_id)
            .order_by(DiceRoll.turn_number.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    # ---- Statistics ----

    async def get_table_counts(self) -> Dict[str, int]:
        """Row counts per table, for admin tooling."""
        counts: Dict[str, int] = {}
        for model in (Room, Player, Holding, Stock, GameState, TransactionRecord, DiceRoll):
            result = await self.session.execute(select(func.count()).select_from(model))
            counts[model.__tablename__] = result.scalar_one()
        return counts
