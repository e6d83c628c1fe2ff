"""Domain errors shared by every app.

Each error carries the HTTP status it maps to; the API layer turns any of them into a
``{"detail": ...}`` response.
"""

import typing as t
from decimal import Decimal


class BoxOfficeError(Exception):
    """Base class for expected domain failures."""

    status_code: int = 400
    default_message: str = "Request could not be processed."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, t.Any]:
        return {"detail": self.message}


class InvalidInputError(BoxOfficeError):
    status_code = 400
    default_message = "Invalid input."


class NotFoundError(BoxOfficeError):
    status_code = 404
    default_message = "Not found."


class ConflictError(BoxOfficeError):
    status_code = 409
    default_message = "The resource is in a conflicting state."


class AuthorizationError(BoxOfficeError):
    status_code = 403
    default_message = "You do not have permission to perform this action."


class DependencyError(BoxOfficeError):
    """An external collaborator (mail, storage, broker) failed."""

    status_code = 502
    default_message = "An external service failed."


class MissingBankDetailsError(InvalidInputError):
    default_message = "Please add your bank details before requesting a withdrawal."


class TierNotFoundError(NotFoundError):
    default_message = "Ticket tier not found."


class TicketNotFoundError(NotFoundError):
    default_message = "Ticket not found."


class PayoutNotFoundError(NotFoundError):
    default_message = "Payout not found."


class InsufficientStockError(ConflictError):
    def __init__(self, tier_name: str) -> None:
        self.tier_name = tier_name
        super().__init__(f"Not enough {tier_name} tickets available")


class TicketAlreadyUsedError(ConflictError):
    default_message = "Ticket already used."


class PayoutAlreadyProcessedError(ConflictError):
    default_message = "Payout has already been processed."


class ReservationAlreadyReleasedError(ConflictError):
    default_message = "This reservation is no longer held."


class DuplicatePaymentReferenceError(ConflictError):
    default_message = "A transaction with this payment reference already exists."


class InsufficientBalanceError(ConflictError):
    def __init__(self, balance: Decimal) -> None:
        self.balance = balance
        super().__init__(f"Insufficient balance. Your available balance is {balance:.2f}.")

    def to_dict(self) -> dict[str, t.Any]:
        return {"detail": self.message, "balance": str(self.balance)}
