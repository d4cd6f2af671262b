# SPDX-FileCopyrightText: 2025 camera-monitor-signaling
#
# SPDX-License-Identifier: MIT

"""Command line entry point for the signaling service."""

import argparse
import os
import sys
from typing import Optional, Sequence

from common.config import config


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for the signaling service."""
    parser = argparse.ArgumentParser(
        description="WebRTC signaling broker for cameras and monitors"
    )
    parser.add_argument(
        "--host",
        type=str,
        default=config.SIGNALING_HOST,
        help=f"Host to bind the server to (default: {config.SIGNALING_HOST})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=config.SIGNALING_PORT,
        help="Preferred port; the next free port is used if it is taken "
        f"(default: {config.SIGNALING_PORT})",
    )
    parser.add_argument(
        "--path",
        type=str,
        default=config.SIGNALING_PATH,
        help=f"WebSocket signaling path (default: {config.SIGNALING_PATH})",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        default=config.RELOAD,
        help="Enable auto-reload for development",
    )
    args = parser.parse_args(argv)
    if not args.path.startswith("/"):
        parser.error("--path must start with '/'")
    return args


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Start the signaling service."""
    args = parse_arguments(argv)

    # Import here to avoid early initialization
    from common.port_utils import find_free_port

    port = find_free_port(start_port=args.port, host=args.host)
    if port is None:
        print(
            f"ERROR: Could not find a free port in range {args.port}-{args.port + 99}",
            file=sys.stderr,
        )
        sys.exit(1)

    # Set before uvicorn imports the app; the environment covers reload workers
    config.SIGNALING_PATH = args.path
    os.environ["SIGNALING_PATH"] = args.path

    print(f"Starting signaling service on http://{args.host}:{port}")
    print(f"Cameras and monitors connect to ws://{args.host}:{port}{args.path}")

    import uvicorn

    uvicorn.run(
        "signaling.main:app",
        host=args.host,
        port=port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
