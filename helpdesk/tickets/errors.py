from __future__ import annotations


class TicketServiceError(RuntimeError):
    """Base error for ticket store issues."""


class InvalidTicketFieldError(TicketServiceError, ValueError):
    """Raised when a ticket is created with a value outside its enumeration."""

    def __init__(self, field: str, value: object, allowed: tuple[str, ...]) -> None:
        super().__init__(f"Invalid {field} {value!r}; expected one of: {', '.join(allowed)}")
        self.field = field
        self.value = value
        self.allowed = allowed


class TicketNotFoundError(TicketServiceError, LookupError):
    """Raised when an operation targets a non-existent ticket."""

    def __init__(self, ticket_id: str) -> None:
        super().__init__(f"Ticket {ticket_id} not found")
        self.ticket_id = ticket_id


class TicketStoreCorruptedError(TicketServiceError):
    """Raised when the backing file cannot be parsed into tickets."""
