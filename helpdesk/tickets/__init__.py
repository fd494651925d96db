"""Ticket tracking domain models and services."""

from .errors import (
    InvalidTicketFieldError,
    TicketNotFoundError,
    TicketServiceError,
    TicketStoreCorruptedError,
)
from .models import Ticket, TicketHistoryEvent
from .reporting import TicketSummary, display, report, summarize
from .repository import TicketRepository
from .service import TicketService
from .state import TicketCategory, TicketPriority, TicketStatus

__all__ = [
    "Ticket",
    "TicketHistoryEvent",
    "TicketService",
    "TicketRepository",
    "TicketSummary",
    "TicketServiceError",
    "TicketNotFoundError",
    "InvalidTicketFieldError",
    "TicketStoreCorruptedError",
    "TicketStatus",
    "TicketPriority",
    "TicketCategory",
    "display",
    "report",
    "summarize",
]
