"""
FastAPI WebSocket server for the Tien Len engine.

Relays client intents to the engine and broadcasts every published room
snapshot to the sockets connected to that room. Errors go only to the
socket whose action failed.
"""

import asyncio
import logging
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import Any, Callable, Dict

import orjson
from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from ..engine import TienLenEngine
from ..errors import INTERNAL_ERROR, GameError
from ..scheduler import Scheduler
from ..serialization import get_public_room_info
from .events import (
    INVALID_EVENT, AddAiEvent, ChooseSeatEvent, ForfeitEvent, JoinEvent, PassEvent,
    PlayEvent, RemoveSeatEvent, RequestStateEvent, SetStageEvent, create_error_event,
    create_state_event, parse_inbound_event
)

logger = logging.getLogger(__name__)


class AsyncioScheduler(Scheduler):
    """Schedules callbacks on the running event loop."""

    def after(self, ms: float, fn: Callable[[], None]):
        loop = asyncio.get_running_loop()
        return loop.call_later(max(ms, 0) / 1000.0, fn)


class ConnectionManager:
    """Manages WebSocket connections per room and broadcasting."""

    def __init__(self):
        self.room_connections: Dict[str, Dict[str, WebSocket]] = defaultdict(dict)

    async def connect(self, websocket: WebSocket, room_id: str, identity: str):
        await websocket.accept()
        if identity in self.room_connections[room_id]:
            logger.info(f"{identity} reconnected to room {room_id}; replacing old socket")
        self.room_connections[room_id][identity] = websocket
        logger.info(f"{identity} connected to room {room_id}")

    def disconnect(self, room_id: str, identity: str, websocket: WebSocket) -> bool:
        """
        Drop a closing socket.

        Returns False when the identity has since reconnected on another
        socket, which stays registered.
        """
        connections = self.room_connections.get(room_id, {})
        current = connections.get(identity)
        if current is not None and current is not websocket:
            logger.info(f"Stale socket for {identity} in room {room_id} closed")
            return False

        connections.pop(identity, None)
        if not connections:
            self.room_connections.pop(room_id, None)
        logger.info(f"{identity} disconnected from room {room_id}")
        return True

    def connection_count(self) -> int:
        return sum(len(conns) for conns in self.room_connections.values())

    async def send(self, websocket: WebSocket, payload: Dict[str, Any]):
        await websocket.send_text(orjson.dumps(payload).decode())

    async def send_error(self, websocket: WebSocket, code: str, message: str):
        await self.send(websocket, create_error_event(code, message).model_dump(mode='json'))

    async def broadcast_state(self, room_id: str, state: Dict[str, Any]):
        """Send a snapshot to every connection in a room."""
        payload = create_state_event(state).model_dump(mode='json')
        for identity, websocket in list(self.room_connections.get(room_id, {}).items()):
            try:
                await self.send(websocket, payload)
            except Exception as e:
                logger.error(f"Error broadcasting to {identity}: {e}")
                self.disconnect(room_id, identity, websocket)


manager = ConnectionManager()


def publish(room_id: str, state: Dict[str, Any]):
    """Engine publish sink: queue a broadcast on the running loop."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        logger.debug(f"No running loop; snapshot for room {room_id} not broadcast")
        return
    loop.create_task(manager.broadcast_state(room_id, state))


engine = TienLenEngine(scheduler=AsyncioScheduler(), publisher=publish)


async def reap_idle_rooms_forever():
    """Background sweep removing rooms idle past the configured timeout."""
    while True:
        await asyncio.sleep(engine.config.reap_interval)
        reaped = engine.reap_idle_rooms()
        if reaped:
            logger.info(f"Reaped {len(reaped)} idle rooms")


@asynccontextmanager
async def lifespan(app: FastAPI):
    reaper = asyncio.create_task(reap_idle_rooms_forever())
    try:
        yield
    finally:
        reaper.cancel()


# FastAPI app
app = FastAPI(title="Tien Len Game Engine", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "rooms": len(engine.registry),
        "connections": manager.connection_count()
    }


@app.get("/rooms/{room_id}")
async def room_info(room_id: str):
    """Public summary of a room."""
    state = engine.get_room(room_id)
    if state is None:
        raise HTTPException(status_code=404, detail=f"Room {room_id} not found")
    return get_public_room_info(state)


def handle_event(room_id: str, identity: str, event) -> Dict[str, Any]:
    """Apply an inbound event to the engine and return the new snapshot."""
    if isinstance(event, JoinEvent):
        return engine.join(room_id, identity, event.name)
    if isinstance(event, ChooseSeatEvent):
        return engine.choose_seat(room_id, identity, event.seat)
    if isinstance(event, AddAiEvent):
        return engine.add_ai(room_id, event.persona, event.seat)
    if isinstance(event, RemoveSeatEvent):
        return engine.remove_seat(room_id, event.seat)
    if isinstance(event, SetStageEvent):
        return engine.set_stage(room_id, event.stage)
    if isinstance(event, PlayEvent):
        return engine.submit_play(room_id, identity, event.cards)
    if isinstance(event, PassEvent):
        return engine.pass_turn(room_id, identity)
    if isinstance(event, ForfeitEvent):
        return engine.forfeit(room_id, identity)
    if isinstance(event, RequestStateEvent):
        return engine.get_snapshot(room_id)
    raise ValueError(f"Unhandled event type: {type(event)}")


@app.websocket("/ws/{room_id}/{identity}")
async def websocket_endpoint(websocket: WebSocket, room_id: str, identity: str):
    """Main WebSocket endpoint; one socket per identity per room."""
    await manager.connect(websocket, room_id, identity)

    try:
        engine.join(room_id, identity)
    except GameError as e:
        logger.warning(f"Rejected {identity!r} in room {room_id}: {e.message}")
        await manager.send_error(websocket, e.code, e.message)
        manager.disconnect(room_id, identity, websocket)
        await websocket.close(code=1008)
        return

    try:
        while True:
            raw_data = await websocket.receive_text()

            try:
                event = parse_inbound_event(orjson.loads(raw_data))
                result = handle_event(room_id, identity, event)

                # other events reach this socket through the room broadcast
                if isinstance(event, RequestStateEvent):
                    await manager.send(websocket, create_state_event(result).model_dump(mode='json'))

            except GameError as e:
                await manager.send_error(websocket, e.code, e.message)
            except ValueError as e:
                await manager.send_error(websocket, INVALID_EVENT, str(e))
            except Exception as e:
                logger.error(f"Error handling event: {e}")
                await manager.send_error(websocket, INTERNAL_ERROR, "Internal server error")

    except WebSocketDisconnect:
        logger.info(f"WebSocket for {identity} in room {room_id} closed")
    except Exception as e:
        logger.error(f"WebSocket error: {e}")
    finally:
        if manager.disconnect(room_id, identity, websocket):
            try:
                engine.disconnect(room_id, identity)
            except GameError as e:
                logger.warning(f"Disconnect of {identity} from room {room_id} not applied: {e.message}")
