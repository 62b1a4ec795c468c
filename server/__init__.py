"""
Server package exposing the FastAPI app and the room broadcast hub.
"""

from .app import app, create_app  # noqa: F401
from .hub import RoomHub  # noqa: F401
