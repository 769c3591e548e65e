from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError
import asyncio
import json
import logging

from connection_hub import ConnectionHub
from errors import InvalidMessage, SignalingError
from models.schemas import AnswerEvent, IceCandidateEvent, JoinRoomEvent, OfferEvent, ToggleMuteEvent

logger = logging.getLogger(__name__)


def parse_message(data: str) -> tuple:
    """Decode a text frame into its event type and validated payload"""
    try:
        message = json.loads(data)
    except (ValueError, RecursionError):
        raise InvalidMessage("Message is not valid JSON")

    if not isinstance(message, dict) or not isinstance(message.get("type"), str):
        raise InvalidMessage("Message is missing its type")

    event_type = message.pop("type")
    schema = EVENT_SCHEMAS.get(event_type)
    if schema is None:
        raise InvalidMessage(f"Unknown message type: {event_type}")

    try:
        return event_type, schema(**message)
    except ValidationError:
        raise InvalidMessage(f"Invalid {event_type} message")


EVENT_SCHEMAS = {
    "join-room": JoinRoomEvent,
    "toggle-mute": ToggleMuteEvent,
    "offer": OfferEvent,
    "answer": AnswerEvent,
    "ice-candidate": IceCandidateEvent,
}


async def dispatch(state, connection_handle: str, event_type: str, event) -> None:
    room_manager = state.room_manager
    relay = state.relay

    if event_type == "join-room":
        await room_manager.join(connection_handle, event.roomId, event.userId, event.userName)
    elif event_type == "toggle-mute":
        await room_manager.toggle_mute(connection_handle, event.muted)
    elif event_type == "offer":
        relay.relay_offer(connection_handle, event.target, event.offer)
    elif event_type == "answer":
        relay.relay_answer(connection_handle, event.target, event.answer)
    elif event_type == "ice-candidate":
        relay.relay_ice_candidate(connection_handle, event.target, event.candidate)


async def write_events(websocket: WebSocket, hub: ConnectionHub, connection_handle: str):
    """Drain one connection's outbound queue to its socket"""
    queue = hub.channel(connection_handle)
    while True:
        event = await queue.get()
        try:
            await websocket.send_text(json.dumps(event))
        except Exception as e:
            logger.debug(f"Stopped writing to {connection_handle}: {e}")
            hub.unregister(connection_handle)
            return


async def receive_frame(websocket: WebSocket) -> str:
    """Wait for the next text frame, rejecting binary ones"""
    message = await websocket.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(message.get("code", 1000))
    if message.get("text") is None:
        raise InvalidMessage("Binary frames are not supported")
    return message["text"]


async def signaling_endpoint(websocket: WebSocket):
    state = websocket.app.state
    hub = state.hub

    await websocket.accept()
    connection_handle = hub.register()
    logger.info(f"User connected: {connection_handle}")

    writer = asyncio.create_task(write_events(websocket, hub, connection_handle))
    hub.send(connection_handle, {"type": "connected", "connectionId": connection_handle})

    failed = False
    try:
        while True:
            try:
                data = await receive_frame(websocket)
                event_type, event = parse_message(data)
                await dispatch(state, connection_handle, event_type, event)
            except SignalingError as e:
                logger.debug(f"Reporting error to {connection_handle}: {e.message}")
                hub.send(connection_handle, e.to_event())
    except WebSocketDisconnect:
        logger.info(f"User disconnected: {connection_handle}")
    except Exception as e:
        failed = True
        logger.error(f"Signaling error for connection {connection_handle}: {e}", exc_info=True)
    finally:
        await state.room_manager.leave(connection_handle)
        hub.unregister(connection_handle)
        writer.cancel()
        await asyncio.gather(writer, return_exceptions=True)

    if failed:
        try:
            await websocket.close(code=1011)
        except Exception as e:
            logger.debug(f"Could not close connection {connection_handle}: {e}")
