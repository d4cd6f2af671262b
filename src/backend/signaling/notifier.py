# SPDX-FileCopyrightText: 2025 camera-monitor-signaling
#
# SPDX-License-Identifier: MIT
"""Role-scoped notifications fired when clients register or leave."""

import logging
from typing import Optional

from common.metrics import SignalingMetrics, get_signaling_metrics
from signaling.messages import (
    CameraDisconnected,
    MonitorDisconnected,
    RequestOffer,
    Role,
    ServerMessage,
)
from signaling.registry import Client, ClientRegistry

logger = logging.getLogger("signaling.notifier")


class LifecycleNotifier:
    """Tells the other side of the camera/monitor pairing about arrivals and departures.

    Offers always originate from cameras, so every arrival results in
    ``request-offer`` signals sent to cameras: to all existing cameras when a
    monitor arrives, or to the new camera (once per monitor) when a camera
    arrives.
    """

    def __init__(
        self, registry: ClientRegistry, metrics: Optional[SignalingMetrics] = None
    ) -> None:
        self._registry = registry
        self._metrics = metrics or get_signaling_metrics()

    def on_registered(self, client: Client) -> int:
        """Request offers for every camera/monitor pair the new client completes.

        Returns the number of ``request-offer`` messages sent.
        """
        self._metrics.connected_clients.add(1, {"role": client.role.value})

        if client.role == Role.MONITOR:
            cameras = self._registry.list_by_role(Role.CAMERA)
            logger.info(
                "Monitor registered, requesting offers from cameras",
                extra={"client_id": client.id, "cameras": len(cameras)},
            )
            for camera in cameras:
                camera.channel.send(RequestOffer(monitor_id=client.id))
            return len(cameras)

        monitors = self._registry.list_by_role(Role.MONITOR)
        logger.info(
            "Camera registered, requesting offers for monitors",
            extra={"client_id": client.id, "monitors": len(monitors)},
        )
        for monitor in monitors:
            client.channel.send(RequestOffer(monitor_id=monitor.id))
        return len(monitors)

    def on_disconnected(self, client_id: str) -> int:
        """Notify the opposite role that ``client_id`` left, then unregister it.

        Returns the number of notifications sent; zero if the id was not
        registered.
        """
        client = self._registry.get(client_id)
        if client is None:
            return 0

        notice: ServerMessage
        if client.role == Role.CAMERA:
            notice = CameraDisconnected(camera_id=client.id)
            recipients = self._registry.list_by_role(Role.MONITOR)
        else:
            notice = MonitorDisconnected(monitor_id=client.id)
            recipients = self._registry.list_by_role(Role.CAMERA)

        for recipient in recipients:
            recipient.channel.send(notice)
        self._registry.remove(client_id)
        self._metrics.connected_clients.add(-1, {"role": client.role.value})

        logger.info(
            "Client disconnected",
            extra={
                "client_id": client.id,
                "role": client.role.value,
                "notified": len(recipients),
            },
        )
        return len(recipients)
