import pytest

from tienlen_engine.errors import ROOM_NOT_FOUND, GameError
from tienlen_engine.registry import RoomRegistry


def test_get_or_create_is_idempotent():
    registry = RoomRegistry()
    first = registry.get_or_create("alpha")
    assert registry.get_or_create("alpha") is first
    assert "alpha" in registry
    assert len(registry) == 1
    assert registry.room_ids() == ["alpha"]


def test_locked_requires_existing_room():
    registry = RoomRegistry()
    with pytest.raises(GameError) as exc:
        with registry.locked("missing"):
            pass
    assert exc.value.code == ROOM_NOT_FOUND

    with registry.locked("missing", create=True) as handle:
        assert handle.state.id == "missing"


def test_reap_idle_removes_only_stale_rooms():
    registry = RoomRegistry()
    registry.get_or_create("old").state.last_activity = 1000.0
    registry.get_or_create("new").state.last_activity = 4000.0

    reaped = registry.reap_idle(now=5000.0, max_age=3600)
    assert reaped == ["old"]
    assert "old" not in registry
    assert "new" in registry
