# SPDX-FileCopyrightText: 2025 camera-monitor-signaling
#
# SPDX-License-Identifier: MIT

"""Utilities for picking the listener port."""

import socket
from typing import Optional


def is_port_free(host: str, port: int) -> bool:
    """Return True if ``host:port`` can be bound right now."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind((host, port))
        except OSError:
            return False
    return True


def find_free_port(
    start_port: int = 5000, max_attempts: int = 100, host: str = "0.0.0.0"
) -> Optional[int]:
    """Find a free port starting from start_port.

    Args:
        start_port: Preferred port, tried first
        max_attempts: Maximum number of ports to try
        host: Interface the listener will bind to

    Returns:
        Free port number, or None if no free port found
    """
    for port in range(start_port, start_port + max_attempts):
        if is_port_free(host, port):
            return port
    return None
