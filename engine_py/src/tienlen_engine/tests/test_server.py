"""
WebSocket server smoke tests.
"""

import orjson
import pytest
from fastapi.testclient import TestClient

from tienlen_engine.errors import ACTION_NOT_ALLOWED, INVALID_IDENTITY
from tienlen_engine.main import app
from tienlen_engine.ws.events import INVALID_EVENT, parse_inbound_event
from tienlen_engine.ws.server import ConnectionManager, engine


def test_root_and_health():
    with TestClient(app) as client:
        assert client.get("/").json()["message"] == "Tien Len Card Game API"
        health = client.get("/health").json()
        assert health["status"] == "healthy"
        assert client.get("/rooms/no-such-room").status_code == 404


def test_parse_inbound_event_errors():
    with pytest.raises(ValueError):
        parse_inbound_event({"type": "bogus"})
    with pytest.raises(ValueError):
        parse_inbound_event({"type": "play", "cards": ["1x"]})
    with pytest.raises(ValueError):
        parse_inbound_event([])
    assert parse_inbound_event({"type": "choose_seat", "seat": 2}).seat == 2


def test_websocket_seating_flow():
    with TestClient(app) as client:
        with client.websocket_connect("/ws/smoke-room/alice") as ws:
            frame = ws.receive_json()
            assert frame["type"] == "state"
            assert frame["state"]["id"] == "smoke-room"

            ws.send_text(orjson.dumps({"type": "join", "name": "Alice"}).decode())
            frame = ws.receive_json()
            assert frame["state"]["names"]["alice"] == "Alice"

            ws.send_text(orjson.dumps({"type": "choose_seat", "seat": 1}).decode())
            frame = ws.receive_json()
            assert frame["state"]["seats"][1] == "alice"

            ws.send_text(orjson.dumps({"type": "pass"}).decode())
            frame = ws.receive_json()
            assert frame["type"] == "error"
            assert frame["code"] == ACTION_NOT_ALLOWED

            ws.send_text("not json")
            frame = ws.receive_json()
            assert frame["type"] == "error"
            assert frame["code"] == INVALID_EVENT

            ws.send_text(orjson.dumps({"type": "request_state"}).decode())
            frame = ws.receive_json()
            assert frame["type"] == "state"
            assert frame["state"]["seats"][1] == "alice"

            info = client.get("/rooms/smoke-room").json()
            assert info["player_count"] == 1
            assert info["stage"] == "seating"


def test_stale_socket_close_keeps_reconnected_player():
    manager = ConnectionManager()
    old_socket, new_socket = object(), object()
    manager.room_connections["room"]["alice"] = old_socket
    manager.room_connections["room"]["alice"] = new_socket

    assert not manager.disconnect("room", "alice", old_socket)
    assert manager.room_connections["room"]["alice"] is new_socket
    assert manager.connection_count() == 1

    assert manager.disconnect("room", "alice", new_socket)
    assert "room" not in manager.room_connections
    assert manager.disconnect("room", "alice", new_socket)


def test_websocket_rejects_reserved_identity():
    with TestClient(app) as client:
        with client.websocket_connect("/ws/reserved-room/bot:marcus") as ws:
            frame = ws.receive_json()
            assert frame["type"] == "error"
            assert frame["code"] == INVALID_IDENTITY

        assert engine.get_room("reserved-room") is None
        assert client.get("/rooms/reserved-room").status_code == 404
