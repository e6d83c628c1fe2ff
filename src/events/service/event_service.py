import structlog

from accounts.models import BoxOfficeUser
from events.models import Event
from events.schema import EventCreateSchema, EventUpdateSchema
from events.service import update_db_instance

logger = structlog.get_logger(__name__)


def create_event(host: BoxOfficeUser, payload: EventCreateSchema) -> Event:
    event = Event.objects.create(host=host, **payload.model_dump())
    logger.info("event_created", event_id=str(event.id), host_id=str(host.id))
    return event


def update_event(event: Event, payload: EventUpdateSchema) -> Event:
    event = update_db_instance(event, payload, exclude_unset=False)
    logger.info("event_updated", event_id=str(event.id))
    return event
