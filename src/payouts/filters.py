from uuid import UUID

from ninja import Field, FilterSchema

from .models import Payout


class PayoutFilterSchema(FilterSchema):
    status: Payout.Status | None = None
    host_id: UUID | None = Field(None, q="host_id")  # type: ignore[call-overload]


class HostFilterSchema(FilterSchema):
    search: str | None = Field(  # type: ignore[call-overload]
        None, q=["email__icontains", "first_name__icontains", "last_name__icontains"]
    )
