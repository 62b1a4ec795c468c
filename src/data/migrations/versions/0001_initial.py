"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "rooms",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("invite_code", sa.String(length=16), nullable=False, comment="Public 6-character join code"),
        sa.Column("status", sa.String(length=16), nullable=False, comment="waiting | playing | finished"),
        sa.Column("max_players", sa.Integer(), nullable=False),
        _created_at(),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_rooms_invite_code", "rooms", ["invite_code"], unique=True)
    op.create_index("ix_rooms_status", "rooms", ["status"])

    op.create_table(
        "players",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("room_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.Column("turn_order", sa.Integer(), nullable=False, comment="Join sequence within the room (0, 1, 2, ...)"),
        sa.Column("cash", sa.BigInteger(), nullable=False, comment="Cents"),
        sa.Column("is_connected", sa.Boolean(), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["room_id"], ["rooms.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("room_id", "name", name="uq_room_player_name"),
        sa.UniqueConstraint("room_id", "turn_order", name="uq_room_turn_order"),
        sa.CheckConstraint("cash >= 0", name="ck_player_cash_non_negative"),
    )
    op.create_index("ix_players_room_id", "players", ["room_id"])

    op.create_table(
        "portfolios",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("player_id", sa.Uuid(), nullable=False),
        sa.Column("room_id", sa.Uuid(), nullable=False),
        sa.Column("stock_type", sa.String(length=16), nullable=False),
        sa.Column("shares", sa.BigInteger(), nullable=False),
        sa.ForeignKeyConstraint(["player_id"], ["players.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["room_id"], ["rooms.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("player_id", "stock_type", name="uq_holding_player_stock"),
        sa.CheckConstraint("shares >= 0", name="ck_holding_shares_non_negative"),
    )
    op.create_index("ix_portfolios_room_stock", "portfolios", ["room_id", "stock_type"])

    op.create_table(
        "stocks",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("room_id", sa.Uuid(), nullable=False),
        sa.Column(
            "stock_type",
            sa.String(length=16),
            nullable=False,
            comment="gold | silver | bonds | oil | industrials | grain",
        ),
        sa.Column("price", sa.Integer(), nullable=False, comment="Cents"),
        sa.ForeignKeyConstraint(["room_id"], ["rooms.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("room_id", "stock_type", name="uq_room_stock"),
        sa.CheckConstraint("price >= 0", name="ck_stock_price_non_negative"),
    )
    op.create_index("ix_stocks_room_id", "stocks", ["room_id"])

    op.create_table(
        "game_states",
        sa.Column("room_id", sa.Uuid(), nullable=False),
        sa.Column("current_turn", sa.Integer(), nullable=False),
        sa.Column("current_player_id", sa.Uuid(), nullable=True),
        sa.Column("phase", sa.String(length=16), nullable=False, comment="waiting | rolling | trading | game_over"),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["room_id"], ["rooms.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["current_player_id"], ["players.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("room_id"),
    )

    op.create_table(
        "transactions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("room_id", sa.Uuid(), nullable=False),
        sa.Column("player_id", sa.Uuid(), nullable=False),
        sa.Column("sequence_number", sa.Integer(), nullable=False, comment="Per-room sequence (0, 1, 2, ...)"),
        sa.Column("turn_number", sa.Integer(), nullable=False),
        sa.Column("stock_type", sa.String(length=16), nullable=False),
        sa.Column("action", sa.String(length=16), nullable=False, comment="buy | sell | dividend"),
        sa.Column("shares", sa.BigInteger(), nullable=False),
        sa.Column(
            "price_per_share",
            sa.Integer(),
            nullable=False,
            comment="Trade price, or dividend paid per share",
        ),
        sa.Column("total_amount", sa.BigInteger(), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["room_id"], ["rooms.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["player_id"], ["players.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("room_id", "sequence_number", name="uq_room_transaction_sequence"),
    )
    op.create_index("ix_transactions_room_id", "transactions", ["room_id"])
    op.create_index("ix_transactions_player_id", "transactions", ["player_id"])

    op.create_table(
        "dice_rolls",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("room_id", sa.Uuid(), nullable=False),
        sa.Column("player_id", sa.Uuid(), nullable=False),
        sa.Column("turn_number", sa.Integer(), nullable=False),
        sa.Column("stock_die", sa.Integer(), nullable=False),
        sa.Column("action_die", sa.Integer(), nullable=False),
        sa.Column("amount_die", sa.Integer(), nullable=False),
        sa.Column("result_stock", sa.String(length=16), nullable=False),
        sa.Column("result_action", sa.String(length=16), nullable=False),
        sa.Column("result_amount", sa.Integer(), nullable=False),
        sa.Column("split_occurred", sa.Boolean(), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["room_id"], ["rooms.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["player_id"], ["players.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("room_id", "turn_number", name="uq_room_roll_turn"),
    )
    op.create_index("ix_dice_rolls_room_id", "dice_rolls", ["room_id"])


def downgrade() -> None:
    op.drop_index("ix_dice_rolls_room_id", table_name="dice_rolls")
    op.drop_table("dice_rolls")
    op.drop_index("ix_transactions_player_id", table_name="transactions")
    op.drop_index("ix_transactions_room_id", table_name="transactions")
    op.drop_table("transactions")
    op.drop_table("game_states")
    op.drop_index("ix_stocks_room_id", table_name="stocks")
    op.drop_table("stocks")
    op.drop_index("ix_portfolios_room_stock", table_name="portfolios")
    op.drop_table("portfolios")
    op.drop_index("ix_players_room_id", table_name="players")
    op.drop_table("players")
    op.drop_index("ix_rooms_status", table_name="rooms")
    op.drop_index("ix_rooms_invite_code", table_name="rooms")
    op.drop_table("rooms")
