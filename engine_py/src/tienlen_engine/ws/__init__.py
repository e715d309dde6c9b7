"""
WebSocket server and event handling for the Tien Len game.
"""

from .events import *
from .server import app

__all__ = ["app"]
