from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional
import logging
import uuid

logger = logging.getLogger(__name__)


@dataclass
class Participant:
    user_id: str
    display_name: str
    connection_handle: str
    muted: bool = False

    def to_dict(self) -> dict:
        return {"id": self.user_id, "name": self.display_name, "muted": self.muted}


@dataclass
class Room:
    id: str
    participants: Dict[str, Participant] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_empty(self) -> bool:
        return not self.participants


class RoomStore:
    """In-memory map of room id to room state"""

    def __init__(self):
        self._rooms: Dict[str, Room] = {}

    def create_room(self) -> str:
        room_id = str(uuid.uuid4())
        self._rooms[room_id] = Room(id=room_id)
        logger.info(f"Created room {room_id}")
        return room_id

    def room_exists(self, room_id: str) -> bool:
        return room_id in self._rooms

    def get_room(self, room_id: str) -> Optional[Room]:
        return self._rooms.get(room_id)

    def delete_room(self, room_id: str) -> bool:
        """Delete the room only if nobody is in it right now"""
        room = self._rooms.get(room_id)
        if room is None:
            return False
        if not room.is_empty:
            logger.debug(f"Room {room_id} not deleted, {len(room.participants)} participants present")
            return False
        del self._rooms[room_id]
        logger.info(f"Room {room_id} deleted")
        return True

    def list_rooms(self) -> List[Room]:
        return list(self._rooms.values())

    def __len__(self) -> int:
        return len(self._rooms)
