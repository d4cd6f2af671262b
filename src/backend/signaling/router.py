# SPDX-FileCopyrightText: 2025 camera-monitor-signaling
#
# SPDX-License-Identifier: MIT
"""Dispatch of inbound signaling messages."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Optional, Union

from common.config import config
from common.metrics import SignalingMetrics, get_signaling_metrics
from signaling.errors import MalformedMessageError
from signaling.identity import generate_client_id
from signaling.messages import (
    CLIENT_MESSAGE_TYPES,
    AnswerMessage,
    IceCandidateMessage,
    OfferMessage,
    Registered,
    RegisterMessage,
    RoutedMessage,
    parse_client_message,
)
from signaling.notifier import LifecycleNotifier
from signaling.registry import Channel, ClientRegistry

logger = logging.getLogger("signaling.router")


@dataclass
class Connection:
    """Per-connection routing state.

    ``client_id`` is None until the connection registers; ``closed`` is set
    once the transport has gone away and never cleared.
    """

    channel: Channel
    client_id: Optional[str] = None
    closed: bool = False


class MessageRouter:
    """Parses inbound frames and routes them between registered clients.

    Handlers never await: each frame is fully processed, including every send
    it triggers, before the event loop runs anything else.
    """

    def __init__(
        self,
        registry: ClientRegistry,
        notifier: LifecycleNotifier,
        id_factory: Callable[..., str] = generate_client_id,
        default_display_name: str = config.DEFAULT_DISPLAY_NAME,
        metrics: Optional[SignalingMetrics] = None,
    ) -> None:
        self._registry = registry
        self._notifier = notifier
        self._id_factory = id_factory
        self._default_display_name = default_display_name
        self._metrics = metrics or get_signaling_metrics()
        self._handlers: dict[type, Callable[[Connection, Any], None]] = {
            RegisterMessage: self._handle_register,
            OfferMessage: self._forward,
            AnswerMessage: self._forward,
            IceCandidateMessage: self._forward,
        }
        missing = set(CLIENT_MESSAGE_TYPES) - set(self._handlers)
        if missing:
            raise TypeError(
                f"no handler for {', '.join(sorted(m.__name__ for m in missing))}"
            )

    def handle_message(self, connection: Connection, raw: Union[str, bytes]) -> None:
        """Process one inbound frame from ``connection``."""
        if connection.closed:
            return

        try:
            message = parse_client_message(raw)
        except MalformedMessageError as exc:
            self._metrics.malformed.add(1)
            logger.warning(
                "Malformed signaling message",
                extra={"client_id": connection.client_id, "error": str(exc)},
            )
            return

        if message is None:
            logger.debug(
                "Ignoring unknown message type",
                extra={"client_id": connection.client_id},
            )
            return

        self._handlers[type(message)](connection, message)

    def handle_close(self, connection: Connection) -> None:
        """Mark ``connection`` closed and retire its registration, if any."""
        if connection.closed:
            return
        connection.closed = True
        if connection.client_id is not None:
            self._notifier.on_disconnected(connection.client_id)

    def _handle_register(self, connection: Connection, message: RegisterMessage) -> None:
        if connection.client_id is not None:
            # Re-registration replaces the connection's previous entry.
            logger.info(
                "Client re-registering, retiring previous id",
                extra={"client_id": connection.client_id},
            )
            self._notifier.on_disconnected(connection.client_id)
            connection.client_id = None

        client_id = self._id_factory(self._registry)
        client = self._registry.insert(
            client_id,
            message.role,
            message.name or self._default_display_name,
            connection.channel,
        )
        connection.client_id = client_id
        connection.channel.send(Registered(id=client_id))
        self._metrics.registrations.add(1, {"role": client.role.value})
        logger.info(
            "Client registered",
            extra={
                "client_id": client_id,
                "role": client.role.value,
                "display_name": client.display_name,
            },
        )

        self._notifier.on_registered(client)

    def _forward(self, connection: Connection, message: RoutedMessage) -> None:
        target = self._registry.get(message.target_id)
        log_extra = {
            "from_id": message.from_id,
            "target_id": message.target_id,
            "message_type": message.type,  # type: ignore[attr-defined]
        }
        if target is None:
            self._metrics.routing_misses.add(1, {"type": log_extra["message_type"]})
            logger.debug("Routing miss, dropping message", extra=log_extra)
            return

        target.channel.send(message.relay())
        self._metrics.forwarded.add(1, {"type": log_extra["message_type"]})
        logger.debug("Forwarded message", extra=log_extra)
