from uuid import UUID

from django.db.models import QuerySet
from ninja import Query
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_jwt.authentication import JWTAuth

from common.schema import ErrorResponse
from common.throttling import UserDefaultThrottle, WriteThrottle
from events import models, schema
from events.service import ticket_service

from .base import EventAdminBaseController


@api_controller("/event-admin/{event_id}", auth=JWTAuth(), tags=["Event Admin"], throttle=UserDefaultThrottle())
class EventAdminTicketsController(EventAdminBaseController):
    """Issued tickets: search, check-in and attendance."""

    @route.get("/tickets/search", url_name="search_tickets", response=list[schema.TicketSchema])
    def search_tickets(self, event_id: UUID, q: str = Query(..., min_length=1)) -> list[models.Ticket]:  # type: ignore[type-arg]
        """Find tickets by code, ticket id or buyer email.

        At most 10 results are returned.
        """
        return ticket_service.search_tickets(self.get_one(event_id), q)

    @route.post(
        "/check-in",
        url_name="check_in_ticket",
        response={200: schema.TicketSchema, 404: ErrorResponse, 409: ErrorResponse},
        throttle=WriteThrottle(),
    )
    def check_in(self, event_id: UUID, payload: schema.CheckInSchema) -> models.Ticket:
        """Redeem a ticket at the door.

        A ticket can be checked in once. A second attempt returns 409 and leaves the ticket unchanged.
        """
        return ticket_service.check_in_ticket(self.get_one(event_id), payload.identifier, self.user())

    @route.get(
        "/check-ins",
        url_name="list_check_ins",
        response=PaginatedResponseSchema[schema.CheckInListItemSchema],
    )
    @paginate(PageNumberPaginationExtra, page_size=20)
    def list_check_ins(self, event_id: UUID) -> QuerySet[models.Ticket]:
        """Tickets already redeemed, most recent first."""
        return ticket_service.checked_in_tickets(self.get_one(event_id))

    @route.get(
        "/buyers",
        url_name="list_ticket_buyers",
        response=PaginatedResponseSchema[schema.TicketBuyerSchema],
    )
    @paginate(PageNumberPaginationExtra, page_size=20)
    def list_buyers(self, event_id: UUID) -> QuerySet[models.Ticket]:
        """One row per ticket sold, with the buyer's contact details."""
        return ticket_service.ticket_buyers(self.get_one(event_id))
