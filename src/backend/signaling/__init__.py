# SPDX-FileCopyrightText: 2025 camera-monitor-signaling
#
# SPDX-License-Identifier: MIT
"""WebSocket signaling broker pairing cameras with monitors."""
