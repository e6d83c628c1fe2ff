from .event import Event
from .ticket import StockReservation, Ticket, TicketTier
from .transaction import Transaction

__all__ = [
    "Event",
    "StockReservation",
    "Ticket",
    "TicketTier",
    "Transaction",
]
