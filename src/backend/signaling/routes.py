# SPDX-FileCopyrightText: 2025 camera-monitor-signaling
#
# SPDX-License-Identifier: MIT
"""HTTP API exposing the signaling registry."""

from fastapi import APIRouter, Request

from signaling.messages import Role
from signaling.registry import ClientRegistry

router = APIRouter()


def _registry(request: Request) -> ClientRegistry:
    return request.app.state.registry


@router.get("/health")
async def health(request: Request) -> dict[str, object]:
    """Health check with counts per role."""
    return {
        "status": "ok",
        "service": "signaling",
        "counts": _registry(request).count_by_role(),
    }


@router.get("/clients")
async def list_clients(request: Request) -> dict[str, list[dict[str, str]]]:
    """List registered clients grouped by role."""
    registry = _registry(request)
    return {
        role.value: [client.to_dict() for client in registry.list_by_role(role)]
        for role in Role
    }
