from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .state import TicketCategory, TicketPriority, TicketStatus

SYSTEM_ACTOR = "System"


@dataclass(slots=True, frozen=True)
class TicketHistoryEvent:
    """History entry describing one change made to a ticket."""

    timestamp: datetime
    action: str
    actor: str = SYSTEM_ACTOR


@dataclass(slots=True)
class Ticket:
    """Support request tracked by the help desk."""

    id: str
    requester: str
    email: str
    category: TicketCategory
    subject: str
    description: str
    status: TicketStatus
    priority: TicketPriority
    assigned_to: str
    created_at: datetime
    updated_at: datetime
    history: list[TicketHistoryEvent] = field(default_factory=list)

    @property
    def is_assigned(self) -> bool:
        return bool(self.assigned_to)
