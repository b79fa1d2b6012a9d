"""API routers for CharterBox."""

from charterbox.routers import import_router, webhooks

__all__ = ["import_router", "webhooks"]
