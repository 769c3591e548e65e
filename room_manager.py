import asyncio
from typing import List, Optional, Set
import logging

from config.settings import DEFAULT_MAX_PARTICIPANTS, DEFAULT_ROOM_EVICTION_DELAY
from connection_hub import ConnectionHub
from connection_registry import Binding, ConnectionRegistry
from errors import RoomFull, RoomNotFound
from room_store import Participant, Room, RoomStore

logger = logging.getLogger(__name__)


class RoomManager:
    """
    Join / leave / mute state machine over the room store and connection registry.

    Every mutation of the two stores happens under one lock, so the
    capacity check and the insert of a join are a single step and the
    registry never points at a participant that is gone.
    """

    def __init__(
        self,
        store: RoomStore,
        registry: ConnectionRegistry,
        hub: ConnectionHub,
        max_participants: int = DEFAULT_MAX_PARTICIPANTS,
        eviction_delay: float = DEFAULT_ROOM_EVICTION_DELAY,
    ):
        self.store = store
        self.registry = registry
        self.hub = hub
        self.max_participants = max_participants
        self.eviction_delay = eviction_delay
        self._lock = asyncio.Lock()
        self._eviction_tasks: Set[asyncio.Task] = set()

    def create_room(self) -> str:
        return self.store.create_room()

    def room_exists(self, room_id: str) -> bool:
        return self.store.room_exists(room_id)

    def participants(self, room_id: str) -> Optional[List[dict]]:
        room = self.store.get_room(room_id)
        if room is None:
            return None
        return [p.to_dict() for p in room.participants.values()]

    def notify(self, room_id: str, event: dict, exclude: str = None) -> None:
        """Send an event to every connection in the room except ``exclude``"""
        room = self.store.get_room(room_id)
        if room is None:
            return
        for participant in room.participants.values():
            if participant.connection_handle != exclude:
                self.hub.send(participant.connection_handle, event)

    async def join(self, connection_handle: str, room_id: str, user_id: str, display_name: str) -> None:
        async with self._lock:
            room = self.store.get_room(room_id)
            if room is None:
                logger.info(f"Join rejected for {user_id}: room {room_id} does not exist")
                raise RoomNotFound()

            current = self.registry.lookup(connection_handle)
            refresh = current == Binding(user_id, room_id)

            # A record that this join replaces frees its own slot
            occupants = set(room.participants)
            occupants.discard(user_id)
            if current is not None and current.room_id == room_id:
                occupants.discard(current.user_id)
            if len(occupants) >= self.max_participants:
                logger.info(f"Join rejected for {user_id}: room {room_id} is full")
                raise RoomFull()

            if current is not None and not refresh:
                self._remove(connection_handle, current)

            previous = room.participants.get(user_id)
            if previous is not None and previous.connection_handle != connection_handle:
                logger.warning(
                    f"User {user_id} rejoined room {room_id} from {connection_handle}, "
                    f"replacing connection {previous.connection_handle}"
                )
                self.registry.unbind(previous.connection_handle)

            room.participants[user_id] = Participant(
                user_id=user_id,
                display_name=display_name,
                connection_handle=connection_handle,
                muted=previous.muted if previous is not None else False,
            )
            self.registry.bind(connection_handle, user_id, room_id)

            self.notify(room_id, {
                "type": "user-joined",
                "userId": user_id,
                "userName": display_name,
            }, exclude=connection_handle)
            self.hub.send(connection_handle, {
                "type": "room-participants",
                "participants": [p.to_dict() for p in room.participants.values()],
                "roomId": room_id,
            })

        logger.info(f"User {display_name} joined room {room_id}")

    async def toggle_mute(self, connection_handle: str, muted: bool) -> None:
        async with self._lock:
            binding = self.registry.lookup(connection_handle)
            if binding is None:
                logger.debug(f"Ignoring mute toggle from unbound connection {connection_handle}")
                return
            room = self.store.get_room(binding.room_id)
            participant = room.participants.get(binding.user_id) if room else None
            if participant is None:
                logger.debug(f"Ignoring mute toggle for {binding.user_id}: not in room {binding.room_id}")
                return

            participant.muted = muted
            self.notify(binding.room_id, {
                "type": "user-mute-updated",
                "userId": binding.user_id,
                "muted": muted,
            })

    async def leave(self, connection_handle: str) -> None:
        async with self._lock:
            binding = self.registry.lookup(connection_handle)
            if binding is None:
                return
            self._remove(connection_handle, binding)

    def _remove(self, connection_handle: str, binding: Binding) -> None:
        self.registry.unbind(connection_handle)
        room = self.store.get_room(binding.room_id)
        if room is None:
            return

        participant = room.participants.get(binding.user_id)
        if participant is None or participant.connection_handle != connection_handle:
            return
        del room.participants[binding.user_id]
        logger.info(f"User {binding.user_id} left room {binding.room_id}")

        self.notify(binding.room_id, {"type": "user-left", "userId": binding.user_id})

        if room.is_empty:
            self._schedule_eviction(room)

    def _schedule_eviction(self, room: Room) -> None:
        logger.debug(f"Room {room.id} is empty, checking again in {self.eviction_delay}s")
        task = asyncio.create_task(self._evict_if_still_empty(room.id))
        self._eviction_tasks.add(task)
        task.add_done_callback(self._eviction_tasks.discard)

    async def _evict_if_still_empty(self, room_id: str) -> None:
        await asyncio.sleep(self.eviction_delay)
        async with self._lock:
            room = self.store.get_room(room_id)
            if room is not None and room.is_empty:
                self.store.delete_room(room_id)

    async def shutdown(self) -> None:
        """Cancel pending eviction checks"""
        tasks = list(self._eviction_tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._eviction_tasks.clear()
