# SPDX-FileCopyrightText: 2025 camera-monitor-signaling
#
# SPDX-License-Identifier: MIT
"""Bounded, non-blocking outbound side of a WebSocket connection."""

import asyncio
import logging
from contextlib import suppress
from typing import Literal, Optional

from fastapi import WebSocket, WebSocketDisconnect, status

from common.config import config
from common.metrics import SignalingMetrics, get_signaling_metrics
from signaling.messages import ServerMessage

logger = logging.getLogger("signaling.channel")

OverflowPolicy = Literal["close", "drop"]


class WebSocketChannel:
    """Queues outbound frames and writes them from a background task.

    ``send`` never awaits, so routing code can fan out to many peers without
    yielding to the event loop. The queue is bounded: when a peer stops
    reading, further frames either close the connection (``"close"``) or are
    discarded (``"drop"``).
    """

    def __init__(
        self,
        websocket: WebSocket,
        peer: str = "unknown",
        max_queue: int = config.OUTBOUND_QUEUE_SIZE,
        overflow_policy: str = config.OUTBOUND_OVERFLOW_POLICY,
        metrics: Optional[SignalingMetrics] = None,
    ) -> None:
        if overflow_policy not in ("close", "drop"):
            raise ValueError(f"unknown overflow policy: {overflow_policy!r}")
        self._websocket = websocket
        self._queue: asyncio.Queue[str] = asyncio.Queue(maxsize=max_queue)
        self._overflow_policy = overflow_policy
        self._metrics = metrics or get_signaling_metrics()
        self._writer: asyncio.Task[None] | None = None
        self._abort_task: asyncio.Task[None] | None = None
        self._closed = False
        self.peer = peer

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> None:
        """Start the writer task."""
        if self._writer is None:
            self._writer = asyncio.create_task(self._drain())

    def send(self, message: ServerMessage) -> bool:
        if self._closed:
            return False
        try:
            self._queue.put_nowait(message.encode())
        except asyncio.QueueFull:
            self._metrics.dropped_outbound.add(1, {"policy": self._overflow_policy})
            logger.warning(
                "Outbound queue full",
                extra={
                    "peer": self.peer,
                    "queue_size": self._queue.maxsize,
                    "policy": self._overflow_policy,
                },
            )
            if self._overflow_policy == "close":
                self._closed = True
                self._abort_task = asyncio.create_task(self._abort())
            return False
        return True

    async def _drain(self) -> None:
        while True:
            frame = await self._queue.get()
            try:
                await self._websocket.send_text(frame)
            except (WebSocketDisconnect, RuntimeError, OSError) as exc:
                logger.debug(
                    "Outbound write failed",
                    extra={"peer": self.peer, "error": str(exc)},
                )
                self._closed = True
                # Closing ends the receive loop, which unregisters the peer.
                with suppress(WebSocketDisconnect, RuntimeError, OSError):
                    await self._websocket.close(code=status.WS_1011_INTERNAL_ERROR)
                return

    async def _abort(self) -> None:
        if self._writer is not None:
            self._writer.cancel()
            with suppress(asyncio.CancelledError):
                await self._writer
        with suppress(WebSocketDisconnect, RuntimeError, OSError):
            await self._websocket.close(code=status.WS_1008_POLICY_VIOLATION)

    async def aclose(self) -> None:
        """Stop the writer task and discard unsent frames."""
        self._closed = True
        if self._writer is not None:
            self._writer.cancel()
            with suppress(asyncio.CancelledError):
                await self._writer
            self._writer = None
        if self._abort_task is not None:
            with suppress(asyncio.CancelledError):
                await self._abort_task
            self._abort_task = None
