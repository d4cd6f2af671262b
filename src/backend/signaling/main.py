# SPDX-FileCopyrightText: 2025 camera-monitor-signaling
#
# SPDX-License-Identifier: MIT

"""Signaling service main entrypoint."""

# Necessary for running stuff before other imports
# ruff: noqa: E402

from common import __version__
from common.logging_config import configure_logging
from common.metrics import configure_metrics

# Initialize logging early
configure_logging(service_name="signaling", service_version=__version__)
configure_metrics(service_name="signaling", service_version=__version__)

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from common.config import config
from common.metrics import get_signaling_metrics
from signaling.gateway import UpgradePathGuard, build_gateway_router
from signaling.notifier import LifecycleNotifier
from signaling.pages import router as pages_router
from signaling.registry import ClientRegistry
from signaling.router import MessageRouter
from signaling.routes import router as api_router

logger = logging.getLogger("signaling")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Handle startup/shutdown hooks."""
    logger.info(
        "Signaling service started",
        extra={"signaling_path": app.state.signaling_path},
    )
    yield
    logger.info(
        "Signaling service stopping",
        extra={"registered_clients": len(app.state.registry)},
    )


def create_app(
    signaling_path: Optional[str] = None,
    templates_dir: Optional[Path] = None,
) -> FastAPI:
    """FastAPI factory for the signaling service.

    Each app owns a fresh, empty registry.
    """
    signaling_path = signaling_path or config.SIGNALING_PATH
    app = FastAPI(
        title="Camera/Monitor Signaling Service",
        version=__version__,
        description="Relays WebRTC signaling between cameras and monitors",
        lifespan=lifespan,
    )

    metrics = get_signaling_metrics()
    registry = ClientRegistry()
    notifier = LifecycleNotifier(registry, metrics=metrics)
    app.state.registry = registry
    app.state.message_router = MessageRouter(registry, notifier, metrics=metrics)
    app.state.signaling_path = signaling_path
    app.state.templates_dir = templates_dir or config.TEMPLATES_DIR

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(UpgradePathGuard, path=signaling_path)

    app.include_router(api_router)
    app.include_router(pages_router)
    app.include_router(build_gateway_router(signaling_path))
    return app


app = create_app()
