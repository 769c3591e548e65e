# models/schemas.py
from pydantic import BaseModel
from typing import Any, List, Optional

# Room-related models
class CreateRoomResponse(BaseModel):
    roomId: str

class RoomExistsResponse(BaseModel):
    exists: bool

class RoomSummary(BaseModel):
    roomId: str
    numParticipants: int
    maxParticipants: int
    createdAt: str

class RoomListResponse(BaseModel):
    rooms: List[RoomSummary]
    total: int

# Participant-related models
class ParticipantInfo(BaseModel):
    id: str
    name: str
    muted: bool

class RoomParticipantsResponse(BaseModel):
    roomId: str
    participants: List[ParticipantInfo]
    total: int

# Inbound WebSocket events, keyed by their "type" field
class JoinRoomEvent(BaseModel):
    roomId: str
    userId: str
    userName: str

class ToggleMuteEvent(BaseModel):
    muted: bool

class OfferEvent(BaseModel):
    target: str
    offer: Any
    sender: Optional[str] = None  # ignored, the relay stamps the real sender

class AnswerEvent(BaseModel):
    target: str
    answer: Any
    sender: Optional[str] = None

class IceCandidateEvent(BaseModel):
    target: str
    candidate: Any
    sender: Optional[str] = None
