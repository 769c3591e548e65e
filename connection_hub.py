import asyncio
from typing import Dict
import logging
import uuid

logger = logging.getLogger(__name__)


class ConnectionHub:
    """
    Outbound channel per live connection.

    Sends never block: events are queued and a writer task owned by the
    WebSocket endpoint drains each queue to its socket.
    """

    def __init__(self):
        self._channels: Dict[str, asyncio.Queue] = {}

    def register(self, connection_handle: str = None) -> str:
        connection_handle = connection_handle or str(uuid.uuid4())
        self._channels[connection_handle] = asyncio.Queue()
        logger.debug(f"Registered outbound channel for {connection_handle}")
        return connection_handle

    def unregister(self, connection_handle: str) -> None:
        if self._channels.pop(connection_handle, None) is not None:
            logger.debug(f"Removed outbound channel for {connection_handle}")

    def channel(self, connection_handle: str) -> asyncio.Queue:
        return self._channels[connection_handle]

    def send(self, connection_handle: str, event: dict) -> bool:
        """Queue an event for one connection, dropping it if the handle is gone"""
        queue = self._channels.get(connection_handle)
        if queue is None:
            logger.debug(f"Dropped {event.get('type')} for unknown connection {connection_handle}")
            return False
        queue.put_nowait(event)
        return True

    def __len__(self) -> int:
        return len(self._channels)
