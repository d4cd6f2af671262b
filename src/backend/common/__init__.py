# SPDX-FileCopyrightText: 2025 camera-monitor-signaling
#
# SPDX-License-Identifier: MIT
"""Shared configuration, logging and metrics for the signaling service."""

__version__ = "0.1.0"
