import asyncio

import pytest

from errors import InvalidMessage
from signaling import parse_message, write_events


def test_offer_goes_to_target_only(hub, relay, drain):
    alice = hub.register("alice")
    bob = hub.register("bob")
    carol = hub.register("carol")
    offer = {"type": "offer", "sdp": "v=0..."}

    relay.relay_offer(alice, bob, offer)

    assert drain(bob) == [{"type": "offer", "offer": offer, "sender": "alice"}]
    assert drain(alice) == []
    assert drain(carol) == []


def test_answer_and_candidate_are_forwarded_verbatim(hub, relay, drain):
    hub.register("alice")
    hub.register("bob")
    candidate = {"candidate": "candidate:1 1 udp 2122260223 10.0.0.1 54321 typ host", "sdpMid": "0"}

    relay.relay_answer("bob", "alice", "opaque-answer")
    relay.relay_ice_candidate("bob", "alice", candidate)

    assert drain("alice") == [
        {"type": "answer", "answer": "opaque-answer", "sender": "bob"},
        {"type": "ice-candidate", "candidate": candidate, "sender": "bob"},
    ]


def test_relay_to_missing_target_is_dropped(hub, relay, drain):
    alice = hub.register("alice")

    relay.relay_offer(alice, "gone", {"sdp": "x"})

    assert drain(alice) == []


def test_send_after_unregister_is_dropped(hub):
    handle = hub.register()
    hub.unregister(handle)

    assert hub.send(handle, {"type": "user-left", "userId": "u1"}) is False
    assert len(hub) == 0


class ClosedSocket:
    async def send_text(self, data):
        raise RuntimeError("socket is closed")


async def test_writer_stops_queueing_after_failed_send(hub):
    handle = hub.register()
    writer = asyncio.create_task(write_events(ClosedSocket(), hub, handle))

    hub.send(handle, {"type": "user-left", "userId": "u1"})
    await asyncio.wait_for(writer, timeout=1)

    assert hub.send(handle, {"type": "user-left", "userId": "u2"}) is False
    assert len(hub) == 0


def test_deeply_nested_frame_is_invalid():
    with pytest.raises(InvalidMessage):
        parse_message("[" * 100000 + "]" * 100000)
