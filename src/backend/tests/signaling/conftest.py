# SPDX-FileCopyrightText: 2025 camera-monitor-signaling
#
# SPDX-License-Identifier: MIT
import pytest

from signaling.notifier import LifecycleNotifier
from signaling.registry import ClientRegistry
from signaling.router import MessageRouter
from tests.signaling.signaling_helpers import SequentialIds


@pytest.fixture
def registry() -> ClientRegistry:
    return ClientRegistry()


@pytest.fixture
def notifier(registry: ClientRegistry) -> LifecycleNotifier:
    return LifecycleNotifier(registry)


@pytest.fixture
def router(registry: ClientRegistry, notifier: LifecycleNotifier) -> MessageRouter:
    return MessageRouter(registry, notifier, id_factory=SequentialIds())
