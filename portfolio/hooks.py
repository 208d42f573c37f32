"""Named lifecycle stages other modules can hook into while the app is built."""
from __future__ import annotations

from typing import Callable

import structlog
from flask import Flask

logger = structlog.get_logger(__name__)

REGISTER_CONTENT_TYPES = "register_content_types"
REGISTER_ROUTES = "register_routes"
APP_READY = "app_ready"

STAGES = (REGISTER_CONTENT_TYPES, REGISTER_ROUTES, APP_READY)

HookCallback = Callable[[Flask], None]


class HookRegistry:
    """Ordered callbacks per lifecycle stage.

    ``create_app`` runs each stage once, in the order of ``STAGES``;
    callbacks within a stage run in registration order.
    """

    def __init__(self) -> None:
        self._callbacks: dict[str, list[HookCallback]] = {stage: [] for stage in STAGES}

    def register(self, stage: str, callback: HookCallback) -> HookCallback:
        if stage not in self._callbacks:
            raise ValueError(f"Unknown lifecycle stage: {stage}")
        self._callbacks[stage].append(callback)
        return callback

    def on(self, stage: str) -> Callable[[HookCallback], HookCallback]:
        """Decorator form of ``register``."""
        def decorator(callback: HookCallback) -> HookCallback:
            return self.register(stage, callback)
        return decorator

    def callbacks(self, stage: str) -> list[HookCallback]:
        if stage not in self._callbacks:
            raise ValueError(f"Unknown lifecycle stage: {stage}")
        return list(self._callbacks[stage])

    def run(self, stage: str, app: Flask) -> None:
        for callback in self.callbacks(stage):
            logger.debug("lifecycle_hook", stage=stage, callback=getattr(callback, "__qualname__", repr(callback)))
            callback(app)
