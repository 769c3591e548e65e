class SignalingError(Exception):
    """Error reported to the originating connection as an ``error`` event"""

    message = "Signaling error"

    def __init__(self, message: str = None):
        self.message = message or self.message
        super().__init__(self.message)

    def to_event(self) -> dict:
        return {"type": "error", "message": self.message}


class RoomNotFound(SignalingError):
    message = "Room does not exist"


class RoomFull(SignalingError):
    message = "Room is full"


class InvalidMessage(SignalingError):
    message = "Invalid message"
