from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from opentelemetry import trace
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator, model_validator

from .errors import TicketStoreCorruptedError
from .models import Ticket, TicketHistoryEvent
from .state import TicketCategory, TicketPriority, TicketStatus

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


def _assume_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class HistoryEventDocument(BaseModel):
    """On-disk shape of a history event."""

    model_config = ConfigDict(from_attributes=True)

    timestamp: datetime
    action: str
    actor: str

    @field_validator("timestamp")
    @classmethod
    def _timestamp_in_utc(cls, value: datetime) -> datetime:
        return _assume_utc(value)


class TicketDocument(BaseModel):
    """On-disk shape of a ticket record."""

    id: str
    requester: str
    email: str
    category: TicketCategory
    subject: str
    description: str
    status: TicketStatus
    priority: TicketPriority
    assigned_to: str = ""
    created: datetime
    updated: datetime
    history: list[HistoryEventDocument] = Field(min_length=1)

    @field_validator("created", "updated")
    @classmethod
    def _timestamps_in_utc(cls, value: datetime) -> datetime:
        return _assume_utc(value)

    @model_validator(mode="after")
    def _updated_not_before_created(self) -> TicketDocument:
        if self.updated < self.created:
            raise ValueError("updated precedes created")
        return self

    @classmethod
    def from_ticket(cls, ticket: Ticket) -> TicketDocument:
        return cls(
            id=ticket.id,
            requester=ticket.requester,
            email=ticket.email,
            category=ticket.category,
            subject=ticket.subject,
            description=ticket.description,
            status=ticket.status,
            priority=ticket.priority,
            assigned_to=ticket.assigned_to,
            created=ticket.created_at,
            updated=ticket.updated_at,
            history=[HistoryEventDocument.model_validate(event) for event in ticket.history],
        )

    def to_ticket(self) -> Ticket:
        return Ticket(
            id=self.id,
            requester=self.requester,
            email=self.email,
            category=self.category,
            subject=self.subject,
            description=self.description,
            status=self.status,
            priority=self.priority,
            assigned_to=self.assigned_to,
            created_at=self.created,
            updated_at=self.updated,
            history=[
                TicketHistoryEvent(timestamp=event.timestamp, action=event.action, actor=event.actor)
                for event in self.history
            ],
        )


_STORE_ADAPTER = TypeAdapter(list[TicketDocument])


class TicketRepository:
    """JSON file mirror of the full ticket collection.

    Every save rewrites the whole file. With ``atomic_writes`` enabled the
    payload goes to a sibling temporary file that then replaces the target, so
    a crash mid-write leaves the previous store intact; otherwise the target is
    truncated and rewritten in place.
    """

    def __init__(self, path: str | os.PathLike[str], *, atomic_writes: bool = False) -> None:
        self._path = Path(path)
        self._atomic_writes = atomic_writes

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def load(self) -> list[Ticket]:
        with tracer.start_as_current_span("tickets.repository.load") as span:
            span.set_attribute("tickets.path", str(self._path))
            if not self._path.exists():
                logger.debug("Ticket store %s does not exist; starting empty", self._path)
                return []

            raw = self._path.read_bytes()
            try:
                documents = _STORE_ADAPTER.validate_json(raw.decode("utf-8"))
            except (UnicodeDecodeError, ValidationError) as exc:
                raise TicketStoreCorruptedError(f"Ticket store {self._path} is malformed: {exc}") from exc

            tickets = [document.to_ticket() for document in documents]
            span.set_attribute("tickets.count", len(tickets))
            logger.debug("Loaded %d tickets from %s", len(tickets), self._path)
            return tickets

    def save(self, tickets: Sequence[Ticket]) -> None:
        with tracer.start_as_current_span("tickets.repository.save") as span:
            span.set_attribute("tickets.path", str(self._path))
            span.set_attribute("tickets.count", len(tickets))
            documents = [TicketDocument.from_ticket(ticket).model_dump(mode="json") for ticket in tickets]
            payload = json.dumps(documents, indent=2, ensure_ascii=False)

            self._path.parent.mkdir(parents=True, exist_ok=True)
            if self._atomic_writes:
                self._replace(payload)
            else:
                self._path.write_text(payload, encoding="utf-8")
            logger.debug("Saved %d tickets to %s", len(tickets), self._path)

    def _replace(self, payload: str) -> None:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
