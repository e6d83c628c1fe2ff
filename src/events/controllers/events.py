from uuid import UUID

from django.db.models import QuerySet
from ninja import Query
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate

from common.controllers import UserAwareController
from common.exceptions import NotFoundError
from common.schema import ErrorResponse, ValidationErrorResponse
from common.throttling import PurchaseThrottle
from events import filters, models, schema
from events.service.purchase_service import PurchaseService


@api_controller("/events", tags=["Events"])
class EventController(UserAwareController):
    """Public event pages and checkout."""

    def get_one(self, event_id: UUID) -> models.Event:
        event = models.Event.objects.select_related("host").filter(pk=event_id).first()
        if event is None:
            raise NotFoundError("Event not found.")
        return event

    @route.get("/", url_name="list_events", response=PaginatedResponseSchema[schema.EventSchema])
    @paginate(PageNumberPaginationExtra, page_size=20)
    def list_events(self, params: filters.EventFilterSchema = Query(...)) -> QuerySet[models.Event]:  # type: ignore[type-arg]
        """Browse events, soonest first."""
        return params.filter(models.Event.objects.all()).order_by("start")

    @route.get("/{uuid:event_id}", url_name="get_event", response={200: schema.EventDetailSchema, 404: ErrorResponse})
    def get_event(self, event_id: UUID) -> models.Event:
        """Event details with every ticket tier and its remaining stock."""
        return self.get_one(event_id)

    @route.post(
        "/{uuid:event_id}/purchase",
        url_name="purchase_tickets",
        response={
            201: schema.PurchaseResponseSchema,
            400: ValidationErrorResponse,
            404: ErrorResponse,
            409: ErrorResponse,
        },
        throttle=PurchaseThrottle(),
    )
    def purchase(self, event_id: UUID, payload: schema.PurchaseSchema) -> tuple[int, dict[str, object]]:
        """Record a paid checkout and issue the tickets.

        The payment has already been captured by the gateway; `reference` is its transaction
        reference and must be unique. Each item names a tier and the customer the tickets are
        issued to. If stock runs out for any item nothing is issued.

        `warnings` lists follow-up steps (QR images, confirmation emails) that failed after the
        sale was recorded.
        """
        result = PurchaseService(self.get_one(event_id)).purchase(payload)
        return 201, {"transaction": result.transaction, "tickets": result.tickets, "warnings": result.warnings}
