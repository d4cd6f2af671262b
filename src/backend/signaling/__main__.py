# SPDX-FileCopyrightText: 2025 camera-monitor-signaling
#
# SPDX-License-Identifier: MIT

"""Allow ``python -m signaling``."""

from signaling.cli import main

if __name__ == "__main__":
    main()
