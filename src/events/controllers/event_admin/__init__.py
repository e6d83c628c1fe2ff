"""Event admin controllers package."""

from .tickets import EventAdminTicketsController
from .tiers import EventAdminTiersController

EVENT_ADMIN_CONTROLLERS: list[type] = [
    EventAdminTiersController,
    EventAdminTicketsController,
]

__all__ = [
    "EventAdminTicketsController",
    "EventAdminTiersController",
    "EVENT_ADMIN_CONTROLLERS",
]
