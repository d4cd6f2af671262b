# SPDX-FileCopyrightText: 2025 camera-monitor-signaling
#
# SPDX-License-Identifier: MIT
import os
from pathlib import Path
from typing import Optional


_PACKAGE_TEMPLATES = Path(__file__).resolve().parent.parent / "signaling" / "templates"


class Config:
    """Application configuration."""

    # Listener settings
    SIGNALING_HOST: str = os.getenv("SIGNALING_HOST", "0.0.0.0")
    SIGNALING_PORT: int = int(os.getenv("SIGNALING_PORT", "5000"))
    SIGNALING_PATH: str = os.getenv("SIGNALING_PATH", "/ws")
    RELOAD: bool = os.getenv("RELOAD", "false").lower() in ("1", "true", "yes")

    # CORS settings
    CORS_ORIGINS: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")

    # Bootstrap pages
    TEMPLATES_DIR: Path = Path(
        os.getenv("TEMPLATES_DIR", str(_PACKAGE_TEMPLATES))
    ).resolve()

    # Registry settings
    DEFAULT_DISPLAY_NAME: str = os.getenv("DEFAULT_DISPLAY_NAME", "Unknown")

    # Outbound buffering
    OUTBOUND_QUEUE_SIZE: int = int(
        os.getenv("OUTBOUND_QUEUE_SIZE", "256")
    )  # frames buffered per connection before the overflow policy applies
    OUTBOUND_OVERFLOW_POLICY: str = os.getenv(
        "OUTBOUND_OVERFLOW_POLICY", "close"
    ).lower()  # "close" or "drop"

    @classmethod
    def get(cls, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get a configuration value."""
        return os.getenv(key, default)


config = Config()
