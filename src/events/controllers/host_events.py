from uuid import UUID

from django.db.models import QuerySet
from ninja import Query
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_jwt.authentication import JWTAuth

from common.schema import ErrorResponse, ValidationErrorResponse
from common.throttling import UserDefaultThrottle, WriteThrottle
from events import filters, models, schema
from events.service import event_service

from .event_admin.base import EventAdminBaseController


@api_controller("/host/events", auth=JWTAuth(), tags=["Host Events"], throttle=UserDefaultThrottle())
class HostEventsController(EventAdminBaseController):
    """Events owned by the authenticated host."""

    @route.get("/", url_name="host_list_events", response=PaginatedResponseSchema[schema.EventSchema])
    @paginate(PageNumberPaginationExtra, page_size=20)
    def list_events(self, params: filters.EventFilterSchema = Query(...)) -> QuerySet[models.Event]:  # type: ignore[type-arg]
        """List your events, soonest first. Filter with `status=live` or `status=past`."""
        return params.filter(models.Event.objects.for_host(self.user())).order_by("start")

    @route.post(
        "/",
        url_name="host_create_event",
        response={201: schema.EventSchema, 400: ValidationErrorResponse},
        throttle=WriteThrottle(),
    )
    def create_event(self, payload: schema.EventCreateSchema) -> tuple[int, models.Event]:
        """Create an event hosted by you."""
        return 201, event_service.create_event(self.user(), payload)

    @route.get(
        "/{uuid:event_id}",
        url_name="host_get_event",
        response={200: schema.EventDetailSchema, 403: ErrorResponse, 404: ErrorResponse},
    )
    def get_event(self, event_id: UUID) -> models.Event:
        return self.get_one(event_id)

    @route.put(
        "/{uuid:event_id}",
        url_name="host_update_event",
        response={200: schema.EventSchema, 400: ValidationErrorResponse, 403: ErrorResponse, 404: ErrorResponse},
        throttle=WriteThrottle(),
    )
    def update_event(self, event_id: UUID, payload: schema.EventUpdateSchema) -> models.Event:
        """Replace the event's details."""
        return event_service.update_event(self.get_one(event_id), payload)
