"""Room registry: per-room state and locks"""

import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from .errors import ROOM_NOT_FOUND, GameError
from .models import RoomState

logger = logging.getLogger(__name__)


@dataclass
class RoomHandle:
    state: RoomState
    lock: threading.RLock = field(default_factory=threading.RLock)


class RoomRegistry:
    """
    Owns every room in the process.

    Rooms are created on first access and removed by reap_idle. Mutations
    must go through locked(), which holds the room's lock for the duration
    of the block.
    """

    def __init__(self):
        self._rooms: Dict[str, RoomHandle] = {}
        self._guard = threading.Lock()

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, room_id: str) -> bool:
        return room_id in self._rooms

    def room_ids(self) -> List[str]:
        with self._guard:
            return list(self._rooms)

    def get_or_create(self, room_id: str) -> RoomHandle:
        with self._guard:
            handle = self._rooms.get(room_id)
            if handle is None:
                handle = RoomHandle(state=RoomState(id=room_id))
                self._rooms[room_id] = handle
                logger.info(f"Created room {room_id}")
            return handle

    def get(self, room_id: str) -> Optional[RoomHandle]:
        with self._guard:
            return self._rooms.get(room_id)

    def require(self, room_id: str) -> RoomHandle:
        handle = self.get(room_id)
        if handle is None:
            raise GameError(ROOM_NOT_FOUND, f"Room {room_id} not found")
        return handle

    @contextmanager
    def locked(self, room_id: str, create: bool = False) -> Iterator[RoomHandle]:
        """Hold the room's lock; the handle's state may be swapped inside."""
        handle = self.get_or_create(room_id) if create else self.require(room_id)
        with handle.lock:
            yield handle

    def reap_idle(self, now: Optional[float] = None, max_age: float = 3600) -> List[str]:
        """
        Remove rooms with no activity for longer than max_age seconds.

        Returns:
            IDs of the removed rooms
        """
        now = time.time() if now is None else now
        reaped = []
        with self._guard:
            for room_id, handle in list(self._rooms.items()):
                if now - handle.state.last_activity > max_age:
                    del self._rooms[room_id]
                    reaped.append(room_id)
        for room_id in reaped:
            logger.info(f"Reaped idle room {room_id}")
        return reaped
