# SPDX-FileCopyrightText: 2025 camera-monitor-signaling
#
# SPDX-License-Identifier: MIT
"""Bootstrap pages for the camera and monitor front ends."""

import logging
from html import escape
from pathlib import Path

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse

logger = logging.getLogger("signaling.pages")
router = APIRouter()

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, max-age=0",
    "Pragma": "no-cache",
    "Expires": "0",
}

# Replaced with the WebSocket path the app serves, so pages follow --path.
SIGNALING_PATH_PLACEHOLDER = "{{ signaling_path }}"


def _render(request: Request, filename: str) -> HTMLResponse:
    # Read on every request so edited templates show up without a restart.
    templates_dir: Path = request.app.state.templates_dir
    path = templates_dir / filename
    try:
        html = path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.error(
            "Failed to read page template",
            extra={"template": str(path), "error": str(exc)},
        )
        raise HTTPException(status_code=500, detail="Page unavailable") from exc
    html = html.replace(
        SIGNALING_PATH_PLACEHOLDER, escape(request.app.state.signaling_path)
    )
    return HTMLResponse(content=html, headers=NO_CACHE_HEADERS)


@router.get("/camera", response_class=HTMLResponse)
async def camera_page(request: Request) -> HTMLResponse:
    return _render(request, "camera.html")


@router.get("/monitor", response_class=HTMLResponse)
async def monitor_page(request: Request) -> HTMLResponse:
    return _render(request, "monitor.html")
