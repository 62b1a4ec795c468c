"""
SQLAlchemy models for Stock Ticker Arena.

Architecture:
- Room: a game lobby reachable by invite code; owns everything below
- Player: a participant with cash and a fixed turn order
- Holding: shares of one stock held by one player (portfolio entry)
- Stock: current price of one stock in one room
- GameState: turn counter, phase and current player of a room
- TransactionRecord / DiceRoll: append-only audit logs, never read back
  to rebuild live state
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    Uuid,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


def utc_now() -> datetime:
    """Generate timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


class Room(Base):
    """
    Game room.

    Created in the waiting state; moves to playing when the game starts
    and to finished when someone reaches the winning net worth.
    """

    __tablename__ = "rooms"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    invite_code: Mapped[str] = mapped_column(
        String(16),
        unique=True,
        nullable=False,
        index=True,
        comment="Public 6-character join code",
    )
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default="waiting",
        index=True,
        comment="waiting | playing | finished",
    )
    max_players: Mapped[int] = mapped_column(Integer, nullable=False, default=6)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    # Relationships
    players: Mapped[List["Player"]] = relationship(
        "Player",
        back_populates="room",
        cascade="all, delete-orphan",
        lazy="raise",  # Loaded explicitly via repository
        passive_deletes=True,
        order_by="Player.turn_order",
    )
    stocks: Mapped[List["Stock"]] = relationship(
        "Stock",
        cascade="all, delete-orphan",
        lazy="raise",
        passive_deletes=True,
    )
    game_state: Mapped[Optional["GameState"]] = relationship(
        "GameState",
        cascade="all, delete-orphan",
        uselist=False,
        lazy="raise",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Room(name={self.name}, code={self.invite_code}, status={self.status})>"


class Player(Base):
    """Player seated in a room."""

    __tablename__ = "players"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    room_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("rooms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    turn_order: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Join sequence within the room (0, 1, 2, ...)",
    )
    cash: Mapped[int] = mapped_column(BigInteger, nullable=False, comment="Cents")
    is_connected: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    room: Mapped["Room"] = relationship("Room", back_populates="players")
    holdings: Mapped[List["Holding"]] = relationship(
        "Holding",
        back_populates="player",
        cascade="all, delete-orphan",
        lazy="raise",
        passive_deletes=True,
    )

    __table_args__ = (
        UniqueConstraint("room_id", "name", name="uq_room_player_name"),
        UniqueConstraint("room_id", "turn_order", name="uq_room_turn_order"),
        CheckConstraint("cash >= 0", name="ck_player_cash_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Player(name={self.name}, turn_order={self.turn_order}, cash={self.cash})>"


class Holding(Base):
    """Shares of one stock owned by one player."""

    __tablename__ = "portfolios"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    player_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("players.id", ondelete="CASCADE"),
        nullable=False,
    )
    room_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("rooms.id", ondelete="CASCADE"),
        nullable=False,
    )
    stock_type: Mapped[str] = mapped_column(String(16), nullable=False)
    shares: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    player: Mapped["Player"] = relationship("Player", back_populates="holdings")

    __table_args__ = (
        UniqueConstraint("player_id", "stock_type", name="uq_holding_player_stock"),
        Index("ix_portfolios_room_stock", "room_id", "stock_type"),
        CheckConstraint("shares >= 0", name="ck_holding_shares_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Holding(player={self.player_id}, stock={self.stock_type}, shares={self.shares})>"


class Stock(Base):
    """Current price of one stock in one room."""

    __tablename__ = "stocks"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    room_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("rooms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    stock_type: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        comment="gold | silver | bonds | oil | industrials | grain",
    )
    price: Mapped[int] = mapped_column(Integer, nullable=False, comment="Cents")

    __table_args__ = (
        UniqueConstraint("room_id", "stock_type", name="uq_room_stock"),
        CheckConstraint("price >= 0", name="ck_stock_price_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Stock(room={self.room_id}, stock={self.stock_type}, price={self.price})>"


class GameState(Base):
    """Turn bookkeeping for a room (one row per room)."""

    __tablename__ = "game_states"

    room_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("rooms.id", ondelete="CASCADE"),
        primary_key=True,
    )
    current_turn: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    current_player_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("players.id", ondelete="SET NULL"),
        nullable=True,
    )
    phase: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default="waiting",
        comment="waiting | rolling | trading | game_over",
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<GameState(room={self.room_id}, turn={self.current_turn}, phase={self.phase})>"


class TransactionRecord(Base):
    """
    Append-only trade and dividend history.

    Used for audit only; live cash and holdings are the source of truth.
    """

    __tablename__ = "transactions"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    room_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("rooms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    player_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("players.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sequence_number: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Per-room sequence (0, 1, 2, ...)",
    )
    turn_number: Mapped[int] = mapped_column(Integer, nullable=False)
    stock_type: Mapped[str] = mapped_column(String(16), nullable=False)
    action: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        comment="buy | sell | dividend",
    )
    shares: Mapped[int] = mapped_column(BigInteger, nullable=False)
    price_per_share: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Trade price, or dividend paid per share",
    )
    total_amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        UniqueConstraint("room_id", "sequence_number", name="uq_room_transaction_sequence"),
    )

    def __repr__(self) -> str:
        return (
            f"<TransactionRecord(room={self.room_id}, seq={self.sequence_number}, "
            f"action={self.action}, shares={self.shares})>"
        )


class DiceRoll(Base):
    """Append-only record of every roll: raw faces plus interpretation."""

    __tablename__ = "dice_rolls"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    room_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("rooms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    player_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("players.id", ondelete="CASCADE"),
        nullable=False,
    )
    turn_number: Mapped[int] = mapped_column(Integer, nullable=False)

    stock_die: Mapped[int] = mapped_column(Integer, nullable=False)
    action_die: Mapped[int] = mapped_column(Integer, nullable=False)
    amount_die: Mapped[int] = mapped_column(Integer, nullable=False)
    result_stock: Mapped[str] = mapped_column(String(16), nullable=False)
    result_action: Mapped[str] = mapped_column(String(16), nullable=False)
    result_amount: Mapped[int] = mapped_column(Integer, nullable=False)

    split_occurred: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        # One roll per turn
        UniqueConstraint("room_id", "turn_number", name="uq_room_roll_turn"),
    )

    def __repr__(self) -> str:
        return (
            f"<DiceRoll(room={self.room_id}, turn={self.turn_number}, "
            f"{self.result_stock} {self.result_action} {self.result_amount})>"
        )
