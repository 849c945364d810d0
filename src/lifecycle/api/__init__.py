"""Lifecycle domain API package."""

from lifecycle.api.routes import order_router, snapshot_router

__all__ = ["order_router", "snapshot_router"]
