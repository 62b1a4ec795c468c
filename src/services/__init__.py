"""
Application services layer.

Provides use-case oriented services that glue the game engine with
persistence and state-change notifications.
"""

from .game_service import GameService, RoomNotifier
from .locks import RoomLocks

__all__ = ["GameService", "RoomNotifier", "RoomLocks"]
