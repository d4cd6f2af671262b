# SPDX-FileCopyrightText: 2025 camera-monitor-signaling
#
# SPDX-License-Identifier: MIT
"""WebSocket entry point of the signaling protocol."""

import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from starlette.types import ASGIApp, Receive, Scope, Send
from starlette.websockets import WebSocketClose

from signaling.channel import WebSocketChannel
from signaling.router import Connection, MessageRouter

logger = logging.getLogger("signaling.gateway")


class UpgradePathGuard:
    """ASGI middleware closing WebSocket upgrades on any path but ``path``.

    The close is sent before the handshake is accepted, so the client gets
    no protocol response.
    """

    def __init__(self, app: ASGIApp, path: str) -> None:
        self.app = app
        self.path = path

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "websocket" and scope["path"] != self.path:
            logger.info("Rejected upgrade", extra={"path": scope["path"]})
            await WebSocketClose(code=status.WS_1008_POLICY_VIOLATION)(
                scope, receive, send
            )
            return
        await self.app(scope, receive, send)


def get_message_router(websocket: WebSocket) -> MessageRouter:
    return websocket.app.state.message_router


def _peer_label(websocket: WebSocket) -> str:
    if websocket.client is None:
        return "unknown"
    return f"{websocket.client.host}:{websocket.client.port}"


async def signaling_endpoint(
    websocket: WebSocket,
    message_router: MessageRouter = Depends(get_message_router),
) -> None:
    """
    WebSocket endpoint for camera/monitor signaling.

    Every frame is handed to the router as it arrives; the close event,
    however it happens, retires the connection's registration.
    """
    await websocket.accept()
    peer = _peer_label(websocket)
    channel = WebSocketChannel(websocket, peer=peer)
    channel.start()
    connection = Connection(channel=channel)
    logger.info("Signaling connection opened", extra={"peer": peer})

    try:
        while True:
            event = await websocket.receive()
            if event["type"] == "websocket.disconnect":
                break
            raw = event.get("text")
            if raw is None:
                raw = event.get("bytes") or b""
            message_router.handle_message(connection, raw)
    except WebSocketDisconnect:
        pass
    finally:
        message_router.handle_close(connection)
        await channel.aclose()
        logger.info(
            "Signaling connection closed",
            extra={"peer": peer, "client_id": connection.client_id},
        )


def build_gateway_router(path: str) -> APIRouter:
    """Router exposing the signaling endpoint at ``path``."""
    router = APIRouter()
    router.add_api_websocket_route(path, signaling_endpoint)
    return router
