from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable
from uuid import uuid4

from .errors import InvalidTicketFieldError, TicketNotFoundError
from .models import SYSTEM_ACTOR, Ticket, TicketHistoryEvent
from .repository import TicketRepository
from .state import TicketCategory, TicketPriority, TicketStatus

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
_MIN_STEP = timedelta(microseconds=1)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_ticket_id() -> str:
    """Return a short random ticket id; collisions are not checked."""

    return str(uuid4())[:8]


class TicketService:
    """Owns the in-memory ticket collection and mirrors it to a repository."""

    def __init__(
        self,
        repository: TicketRepository,
        tickets: list[Ticket] | None = None,
        *,
        clock: Clock | None = None,
    ) -> None:
        self._repository = repository
        self._tickets: list[Ticket] = list(tickets or [])
        self._clock = clock or _utcnow

    @classmethod
    def open(cls, repository: TicketRepository, *, clock: Clock | None = None) -> TicketService:
        """Load the store behind ``repository`` and return a service over it."""

        return cls(repository, repository.load(), clock=clock)

    @property
    def repository(self) -> TicketRepository:
        return self._repository

    @property
    def tickets(self) -> list[Ticket]:
        return list(self._tickets)

    def reload(self) -> None:
        self._tickets = self._repository.load()

    def create_ticket(
        self,
        requester: str,
        email: str,
        category: TicketCategory | str,
        subject: str,
        description: str,
        priority: TicketPriority | str = TicketPriority.MEDIUM,
    ) -> str:
        resolved_category = TicketCategory.coerce(category)
        if resolved_category is None:
            raise InvalidTicketFieldError("category", category, TicketCategory.labels())
        resolved_priority = TicketPriority.coerce(priority)
        if resolved_priority is None:
            raise InvalidTicketFieldError("priority", priority, TicketPriority.labels())

        now = self._clock()
        ticket = Ticket(
            id=generate_ticket_id(),
            requester=requester,
            email=email,
            category=resolved_category,
            subject=subject,
            description=description,
            status=TicketStatus.initial_state(),
            priority=resolved_priority,
            assigned_to="",
            created_at=now,
            updated_at=now,
            history=[TicketHistoryEvent(timestamp=now, action="Ticket created", actor=SYSTEM_ACTOR)],
        )
        self._tickets.append(ticket)
        self._repository.save(self._tickets)
        logger.info("Created ticket %s (%s, %s) for %s", ticket.id, ticket.category, ticket.priority, requester)
        return ticket.id

    def get_ticket(self, ticket_id: str) -> Ticket | None:
        for ticket in self._tickets:
            if ticket.id == ticket_id:
                return ticket
        return None

    def update_ticket(
        self,
        ticket_id: str,
        *,
        status: TicketStatus | str | None = None,
        priority: TicketPriority | str | None = None,
        assigned_to: str | None = None,
        notes: str | None = None,
        actor: str = SYSTEM_ACTOR,
    ) -> bool:
        """Apply the supplied changes and report whether anything changed.

        Unrecognized ``status`` or ``priority`` values are ignored rather than
        rejected. ``notes`` are recorded only as a history event.
        """

        ticket = self.get_ticket(ticket_id)
        if ticket is None:
            raise TicketNotFoundError(ticket_id)

        actions: list[str] = []

        if status is not None:
            new_status = TicketStatus.coerce(status)
            if new_status is None:
                logger.debug("Ignoring unrecognized status %r for ticket %s", status, ticket_id)
            elif new_status != ticket.status:
                actions.append(f"Status changed from {ticket.status} to {new_status}")
                ticket.status = new_status

        if priority is not None:
            new_priority = TicketPriority.coerce(priority)
            if new_priority is None:
                logger.debug("Ignoring unrecognized priority %r for ticket %s", priority, ticket_id)
            elif new_priority != ticket.priority:
                actions.append(f"Priority changed from {ticket.priority} to {new_priority}")
                ticket.priority = new_priority

        if assigned_to is not None and assigned_to != ticket.assigned_to:
            if assigned_to:
                actions.append(f"Assigned to {assigned_to}")
            else:
                actions.append(f"Unassigned (was {ticket.assigned_to})")
            ticket.assigned_to = assigned_to

        if notes:
            actions.append(f"Note added: {notes}")

        if not actions:
            return False

        # updated_at strictly advances on every accepted change
        now = self._clock()
        if now <= ticket.updated_at:
            now = ticket.updated_at + _MIN_STEP
        ticket.history.extend(TicketHistoryEvent(timestamp=now, action=action, actor=actor) for action in actions)
        ticket.updated_at = now
        self._repository.save(self._tickets)
        logger.info("Updated ticket %s by %s: %s", ticket_id, actor, "; ".join(actions))
        return True

    def list_tickets(
        self,
        *,
        status: TicketStatus | str | None = None,
        priority: TicketPriority | str | None = None,
        assigned_to: str | None = None,
    ) -> list[Ticket]:
        results = list(self._tickets)
        if status is not None:
            wanted_status = TicketStatus.coerce(status)
            results = [ticket for ticket in results if ticket.status == wanted_status]
        if priority is not None:
            wanted_priority = TicketPriority.coerce(priority)
            results = [ticket for ticket in results if ticket.priority == wanted_priority]
        if assigned_to is not None:
            results = [ticket for ticket in results if ticket.assigned_to == assigned_to]
        return results
