from src.data.config import get_settings
from src.data.models import (
    Base,
    DiceRoll,
    GameState,
    Holding,
    Player,
    Room,
    Stock,
    TransactionRecord,
)
from src.data.session import (
    build_session_factory,
    init_db,
    close_db,
    session_scope,
    create_tables,
    drop_tables,
    get_engine,
    get_session_factory,
)
from src.data.repository import RoomRepository

__all__ = [
    "get_settings",
    "Base",
    "Room",
    "Player",
    "Holding",
    "Stock",
    "GameState",
    "TransactionRecord",
    "DiceRoll",
    "build_session_factory",
    "init_db",
    "close_db",
    "session_scope",
    "create_tables",
    "drop_tables",
    "get_engine",
    "get_session_factory",
    "RoomRepository",
]
