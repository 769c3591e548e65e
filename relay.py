from typing import Any
import logging

from connection_hub import ConnectionHub

logger = logging.getLogger(__name__)


class SignalingRelay:
    """
    Forwards negotiation payloads to a single target connection.

    Payloads are passed through untouched. Delivery is fire-and-forget:
    a target that is no longer connected is dropped without telling the
    sender, retries are up to the peers.
    """

    def __init__(self, hub: ConnectionHub):
        self.hub = hub

    def _forward(self, event_type: str, field: str, sender_handle: str, target_handle: str, payload: Any) -> None:
        delivered = self.hub.send(target_handle, {
            "type": event_type,
            field: payload,
            "sender": sender_handle,
        })
        if not delivered:
            logger.debug(f"Relay of {event_type} from {sender_handle} to {target_handle} dropped")

    def relay_offer(self, sender_handle: str, target_handle: str, offer: Any) -> None:
        self._forward("offer", "offer", sender_handle, target_handle, offer)

    def relay_answer(self, sender_handle: str, target_handle: str, answer: Any) -> None:
        self._forward("answer", "answer", sender_handle, target_handle, answer)

    def relay_ice_candidate(self, sender_handle: str, target_handle: str, candidate: Any) -> None:
        self._forward("ice-candidate", "candidate", sender_handle, target_handle, candidate)
