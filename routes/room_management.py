from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import JSONResponse
import logging
from models.schemas import (
    CreateRoomResponse,
    ParticipantInfo,
    RoomExistsResponse,
    RoomListResponse,
    RoomParticipantsResponse,
    RoomSummary,
)
from room_manager import RoomManager

logger = logging.getLogger(__name__)
router = APIRouter()


def get_room_manager(request: Request) -> RoomManager:
    return request.app.state.room_manager


@router.post("/room", response_model=CreateRoomResponse)
@router.get("/create-room", response_model=CreateRoomResponse)
async def create_room(request: Request):
    """
    Create a new empty room
    """
    room_id = get_room_manager(request).create_room()
    return CreateRoomResponse(roomId=room_id)


@router.get("/rooms", response_model=RoomListResponse)
async def list_rooms(request: Request):
    """
    List all active rooms
    """
    room_manager = get_room_manager(request)
    room_list = [
        RoomSummary(
            roomId=room.id,
            numParticipants=len(room.participants),
            maxParticipants=room_manager.max_participants,
            createdAt=room.created_at.isoformat(),
        )
        for room in room_manager.store.list_rooms()
    ]
    return RoomListResponse(rooms=room_list, total=len(room_list))


@router.get("/room/{room_id}", response_model=RoomExistsResponse)
async def room_exists(room_id: str, request: Request):
    """
    Check whether a room exists
    """
    if get_room_manager(request).room_exists(room_id):
        return RoomExistsResponse(exists=True)
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"exists": False})


@router.get("/room/{room_id}/participants", response_model=RoomParticipantsResponse)
async def get_room_participants(room_id: str, request: Request):
    """
    Get list of participants in a room
    """
    participants = get_room_manager(request).participants(room_id)
    if participants is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Room '{room_id}' not found"
        )
    return RoomParticipantsResponse(
        roomId=room_id,
        participants=[ParticipantInfo(**p) for p in participants],
        total=len(participants),
    )
