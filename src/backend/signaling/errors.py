# SPDX-FileCopyrightText: 2025 camera-monitor-signaling
#
# SPDX-License-Identifier: MIT


class SignalingError(Exception):
    """Base class for signaling errors."""


class DuplicateClientIdError(SignalingError):
    """Raised when a client id is inserted twice into the registry."""

    def __init__(self, client_id: str) -> None:
        super().__init__(f"client id already registered: {client_id}")
        self.client_id = client_id


class MalformedMessageError(SignalingError):
    """Raised when an inbound frame is not a valid signaling message."""
