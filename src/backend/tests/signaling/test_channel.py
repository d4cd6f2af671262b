# SPDX-FileCopyrightText: 2025 camera-monitor-signaling
#
# SPDX-License-Identifier: MIT
import asyncio
import json
from typing import Any
from unittest.mock import AsyncMock

import pytest

from signaling.channel import WebSocketChannel
from signaling.messages import Registered


class _FakeWebSocket:
    def __init__(self, fail_on_send: bool = False) -> None:
        self.frames: list[str] = []
        self.close_codes: list[int] = []
        self.fail_on_send = fail_on_send

    async def send_text(self, data: str) -> None:
        await asyncio.sleep(0)
        if self.fail_on_send:
            raise RuntimeError("Cannot call send once a close message has been sent")
        self.frames.append(data)

    async def close(self, code: int = 1000, reason: Any = None) -> None:
        self.close_codes.append(code)


async def _flush() -> None:
    for _ in range(10):
        await asyncio.sleep(0)


def _decoded(websocket: _FakeWebSocket) -> list[dict[str, Any]]:
    return [json.loads(frame) for frame in websocket.frames]


@pytest.mark.asyncio
async def test_send_delivers_frames_in_order() -> None:
    websocket = _FakeWebSocket()
    channel = WebSocketChannel(websocket, max_queue=8)  # type: ignore[arg-type]
    channel.start()

    assert channel.send(Registered(id="a")) is True
    assert channel.send(Registered(id="b")) is True
    await _flush()

    assert _decoded(websocket) == [
        {"type": "registered", "id": "a"},
        {"type": "registered", "id": "b"},
    ]
    await channel.aclose()


@pytest.mark.asyncio
async def test_send_does_not_block_before_writer_runs() -> None:
    websocket = _FakeWebSocket()
    channel = WebSocketChannel(websocket, max_queue=8)  # type: ignore[arg-type]
    channel.start()

    channel.send(Registered(id="a"))

    # nothing written until the event loop gets control back
    assert websocket.frames == []
    await _flush()
    assert len(websocket.frames) == 1
    await channel.aclose()


@pytest.mark.asyncio
async def test_drop_policy_discards_overflow_and_stays_open() -> None:
    websocket = _FakeWebSocket()
    channel = WebSocketChannel(  # type: ignore[arg-type]
        websocket, max_queue=2, overflow_policy="drop"
    )

    assert channel.send(Registered(id="a")) is True
    assert channel.send(Registered(id="b")) is True
    assert channel.send(Registered(id="c")) is False
    assert channel.closed is False

    channel.start()
    await _flush()

    assert [m["id"] for m in _decoded(websocket)] == ["a", "b"]
    assert websocket.close_codes == []
    await channel.aclose()


@pytest.mark.asyncio
async def test_close_policy_closes_stalled_connection() -> None:
    websocket = _FakeWebSocket()
    channel = WebSocketChannel(  # type: ignore[arg-type]
        websocket, max_queue=1, overflow_policy="close"
    )

    assert channel.send(Registered(id="a")) is True
    assert channel.send(Registered(id="b")) is False
    assert channel.closed is True
    await _flush()

    assert websocket.close_codes == [1008]
    assert channel.send(Registered(id="c")) is False
    await channel.aclose()


@pytest.mark.asyncio
async def test_failed_write_marks_channel_closed() -> None:
    websocket = _FakeWebSocket(fail_on_send=True)
    channel = WebSocketChannel(websocket, max_queue=8)  # type: ignore[arg-type]
    channel.start()

    channel.send(Registered(id="a"))
    await _flush()

    assert channel.closed is True
    assert channel.send(Registered(id="b")) is False
    assert websocket.close_codes == [1011]
    await channel.aclose()


@pytest.mark.asyncio
async def test_failed_write_tolerates_close_errors() -> None:
    websocket = _FakeWebSocket(fail_on_send=True)
    websocket.close = AsyncMock(side_effect=RuntimeError("already closed"))  # type: ignore[method-assign]
    channel = WebSocketChannel(websocket, max_queue=8)  # type: ignore[arg-type]
    channel.start()

    channel.send(Registered(id="a"))
    await _flush()

    assert channel.closed is True
    websocket.close.assert_awaited_once()
    await channel.aclose()


@pytest.mark.asyncio
async def test_aclose_stops_writer_and_rejects_sends() -> None:
    websocket = _FakeWebSocket()
    channel = WebSocketChannel(websocket, max_queue=8)  # type: ignore[arg-type]
    channel.start()

    await channel.aclose()

    assert channel.send(Registered(id="a")) is False
    await _flush()
    assert websocket.frames == []


def test_unknown_overflow_policy_is_rejected() -> None:
    with pytest.raises(ValueError):
        WebSocketChannel(object(), overflow_policy="block")  # type: ignore[arg-type]
