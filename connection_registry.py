from typing import Dict, NamedTuple, Optional


class Binding(NamedTuple):
    user_id: str
    room_id: str


class ConnectionRegistry:
    """Tracks which (user, room) each live connection handle is attached to"""

    def __init__(self):
        self._bindings: Dict[str, Binding] = {}

    def bind(self, connection_handle: str, user_id: str, room_id: str) -> None:
        self._bindings[connection_handle] = Binding(user_id, room_id)

    def lookup(self, connection_handle: str) -> Optional[Binding]:
        return self._bindings.get(connection_handle)

    def unbind(self, connection_handle: str) -> Optional[Binding]:
        return self._bindings.pop(connection_handle, None)

    def __len__(self) -> int:
        return len(self._bindings)
