import asyncio

import pytest

from config.settings import Settings
from connection_hub import ConnectionHub
from connection_registry import ConnectionRegistry
from relay import SignalingRelay
from room_manager import RoomManager
from room_store import RoomStore

EVICTION_DELAY = 0.05


@pytest.fixture
def hub():
    return ConnectionHub()


@pytest.fixture
async def room_manager(hub):
    manager = RoomManager(RoomStore(), ConnectionRegistry(), hub, max_participants=4, eviction_delay=EVICTION_DELAY)
    yield manager
    await manager.shutdown()


@pytest.fixture
def relay(hub):
    return SignalingRelay(hub)


@pytest.fixture
def settings():
    return Settings(room_eviction_delay=EVICTION_DELAY)


def _drain(hub, connection_handle):
    """Pop every event queued for a connection"""
    queue = hub.channel(connection_handle)
    events = []
    while True:
        try:
            events.append(queue.get_nowait())
        except asyncio.QueueEmpty:
            return events


@pytest.fixture
def drain(hub):
    return lambda connection_handle: _drain(hub, connection_handle)
