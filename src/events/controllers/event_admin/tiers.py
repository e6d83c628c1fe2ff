from uuid import UUID

from django.db.models import QuerySet
from ninja_extra import api_controller, route
from ninja_jwt.authentication import JWTAuth

from common.schema import ErrorResponse, ValidationErrorResponse
from common.throttling import UserDefaultThrottle, WriteThrottle
from events import models, schema
from events.service import inventory

from .base import EventAdminBaseController


@api_controller("/event-admin/{event_id}", auth=JWTAuth(), tags=["Event Admin"], throttle=WriteThrottle())
class EventAdminTiersController(EventAdminBaseController):
    """Ticket tier management."""

    @route.get(
        "/ticket-tiers",
        url_name="list_ticket_tiers",
        response=list[schema.TicketTierSchema],
        throttle=UserDefaultThrottle(),
    )
    def list_ticket_tiers(self, event_id: UUID) -> QuerySet[models.TicketTier]:
        """List all ticket tiers for an event."""
        return models.TicketTier.objects.filter(event=self.get_one(event_id)).order_by("created_at")

    @route.post(
        "/ticket-tiers",
        url_name="create_ticket_tier",
        response={201: schema.TicketTierSchema, 400: ValidationErrorResponse},
    )
    def create_ticket_tier(self, event_id: UUID, payload: schema.TicketTierCreateSchema) -> tuple[int, models.TicketTier]:
        """Create a ticket tier with its full quantity in stock.

        Every invalid field is reported at once under `errors`.
        """
        return 201, inventory.create_tier(self.get_one(event_id), payload)

    @route.put(
        "/ticket-tiers/{code}",
        url_name="update_ticket_tier",
        response={200: schema.TicketTierSchema, 400: ValidationErrorResponse, 404: ErrorResponse},
    )
    def update_ticket_tier(self, event_id: UUID, code: str, payload: schema.TicketTierPayload) -> models.TicketTier:
        """Replace a tier's attributes.

        `quantity` is the new total stock and may not drop below the number already sold.
        """
        return inventory.update_tier(self.get_one(event_id), code, payload)

    @route.delete(
        "/ticket-tiers/{code}",
        url_name="delete_ticket_tier",
        response={204: None, 404: ErrorResponse},
    )
    def delete_ticket_tier(self, event_id: UUID, code: str) -> tuple[int, None]:
        """Delete a ticket tier. Tickets already issued keep their tier snapshot."""
        inventory.delete_tier(self.get_one(event_id), code)
        return 204, None
