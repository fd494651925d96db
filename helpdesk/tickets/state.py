from __future__ import annotations

from enum import Enum
from typing import TypeVar

_E = TypeVar("_E", bound="_LabelEnum")


class _LabelEnum(str, Enum):
    """String enum whose values are the labels shown to help desk staff."""

    def __str__(self) -> str:
        return self.value

    @classmethod
    def coerce(cls: type[_E], value: object) -> _E | None:
        """Return the member matching ``value`` or ``None`` when unrecognized."""

        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None

    @classmethod
    def labels(cls) -> tuple[str, ...]:
        return tuple(member.value for member in cls)


class TicketStatus(_LabelEnum):
    """Workflow states of a support ticket."""

    NEW = "New"
    IN_PROGRESS = "In Progress"
    WAITING = "Waiting"
    RESOLVED = "Resolved"
    CLOSED = "Closed"

    @classmethod
    def initial_state(cls) -> TicketStatus:
        return cls.NEW


class TicketPriority(_LabelEnum):
    """Urgency classification of a ticket."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class TicketCategory(_LabelEnum):
    """Problem domain a ticket belongs to."""

    HARDWARE = "Hardware"
    SOFTWARE = "Software"
    NETWORK = "Network"
    ACCOUNT = "Account"
    OTHER = "Other"
