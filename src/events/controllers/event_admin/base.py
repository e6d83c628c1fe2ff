from uuid import UUID

from common.controllers import UserAwareController
from common.exceptions import AuthorizationError, NotFoundError
from events import models


class EventAdminBaseController(UserAwareController):
    """Base controller for endpoints that act on one of the caller's events."""

    def get_one(self, event_id: UUID) -> models.Event:
        """Fetch the event and make sure the caller hosts it.

        Raises:
            NotFoundError: the event does not exist.
            AuthorizationError: the event belongs to another host.
        """
        event = models.Event.objects.filter(pk=event_id).first()
        if event is None:
            raise NotFoundError("Event not found.")
        if event.host_id != self.user().id:
            raise AuthorizationError("You are not the host of this event.")
        return event
