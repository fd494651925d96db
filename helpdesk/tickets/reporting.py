from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Mapping, Sequence, TextIO

from .models import Ticket
from .state import TicketPriority, TicketStatus

logger = logging.getLogger(__name__)

SUBJECT_WIDTH = 30
UNASSIGNED_LABEL = "Unassigned"
NO_TICKETS_MESSAGE = "No tickets found."
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"
SUMMARY_REPORT = "summary"

_COLUMNS = ("ID", "Subject", "Status", "Priority", "Requester", "Assigned To", "Updated")


@dataclass(slots=True)
class TicketSummary:
    """Aggregate counts over a set of tickets."""

    total: int
    by_status: Mapping[TicketStatus, int]
    by_priority: Mapping[TicketPriority, int]
    unassigned: int


def truncate(text: str, width: int = SUBJECT_WIDTH) -> str:
    if len(text) <= width:
        return text
    return text[: width - 3] + "..."


def _row(ticket: Ticket) -> tuple[str, ...]:
    return (
        ticket.id,
        truncate(ticket.subject),
        str(ticket.status),
        str(ticket.priority),
        ticket.requester,
        ticket.assigned_to if ticket.is_assigned else UNASSIGNED_LABEL,
        ticket.updated_at.strftime(TIMESTAMP_FORMAT),
    )


def render_table(tickets: Sequence[Ticket]) -> str:
    if not tickets:
        return NO_TICKETS_MESSAGE

    rows = [_COLUMNS, *(_row(ticket) for ticket in tickets)]
    widths = [max(len(row[index]) for row in rows) for index in range(len(_COLUMNS))]

    def fmt(row: Sequence[str]) -> str:
        return "  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip()

    lines = [fmt(rows[0]), "  ".join("-" * width for width in widths)]
    lines.extend(fmt(row) for row in rows[1:])
    return "\n".join(lines)


def render_ticket(ticket: Ticket) -> str:
    """Render a single ticket with every field and its full history."""

    lines = [
        f"Ticket {ticket.id}: {ticket.subject}",
        f"  Requester:   {ticket.requester} <{ticket.email}>",
        f"  Category:    {ticket.category}",
        f"  Status:      {ticket.status}",
        f"  Priority:    {ticket.priority}",
        f"  Assigned To: {ticket.assigned_to if ticket.is_assigned else UNASSIGNED_LABEL}",
        f"  Created:     {ticket.created_at.strftime(TIMESTAMP_FORMAT)}",
        f"  Updated:     {ticket.updated_at.strftime(TIMESTAMP_FORMAT)}",
        "",
        ticket.description,
        "",
        "History:",
    ]
    for event in ticket.history:
        lines.append(f"  {event.timestamp.strftime(TIMESTAMP_FORMAT)}  {event.action} ({event.actor})")
    return "\n".join(lines)


def summarize(tickets: Sequence[Ticket]) -> TicketSummary:
    by_status = {status: 0 for status in TicketStatus}
    by_priority = {priority: 0 for priority in TicketPriority}
    unassigned = 0
    for ticket in tickets:
        by_status[ticket.status] += 1
        by_priority[ticket.priority] += 1
        if not ticket.is_assigned:
            unassigned += 1
    return TicketSummary(total=len(tickets), by_status=by_status, by_priority=by_priority, unassigned=unassigned)


def render_summary(summary: TicketSummary) -> str:
    lines = ["Ticket Summary", "==============", f"Total tickets: {summary.total}", "", "By status:"]
    lines.extend(f"  {status}: {count}" for status, count in summary.by_status.items())
    lines.extend(["", "By priority:"])
    lines.extend(f"  {priority}: {count}" for priority, count in summary.by_priority.items())
    lines.extend(["", f"Unassigned: {summary.unassigned}"])
    return "\n".join(lines)


def render_report(tickets: Sequence[Ticket], kind: str = SUMMARY_REPORT) -> str:
    if kind == SUMMARY_REPORT:
        return render_summary(summarize(tickets))
    logger.warning("Report type %r requested but not implemented", kind)
    return f"Report type '{kind}' is not implemented yet."


def display(tickets: Sequence[Ticket], stream: TextIO | None = None) -> None:
    print(render_table(tickets), file=stream or sys.stdout)


def report(tickets: Sequence[Ticket], kind: str = SUMMARY_REPORT, stream: TextIO | None = None) -> None:
    print(render_report(tickets, kind), file=stream or sys.stdout)
