"""Command-line driver for the ticket store."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from helpdesk.core.config import Settings, get_settings
from helpdesk.core.logging import configure_logging, tracing
from helpdesk.tickets import (
    TicketCategory,
    TicketPriority,
    TicketRepository,
    TicketService,
    TicketServiceError,
    TicketStatus,
    display,
    report,
)
from helpdesk.tickets.reporting import SUMMARY_REPORT, render_ticket

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="helpdesk", description="Track help desk support tickets.")
    parser.add_argument("--store", default=None, help="Path to the ticket store file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log store loads, saves and ignored values")
    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create", help="Open a new ticket")
    create.add_argument("--requester", required=True)
    create.add_argument("--email", required=True)
    create.add_argument("--category", required=True, help=f"One of: {', '.join(TicketCategory.labels())}")
    create.add_argument("--subject", required=True)
    create.add_argument("--description", required=True)
    create.add_argument("--priority", default=TicketPriority.MEDIUM.value)

    update = sub.add_parser("update", help="Change status, priority or assignment of a ticket")
    update.add_argument("ticket_id")
    update.add_argument("--status", help=f"One of: {', '.join(TicketStatus.labels())}")
    update.add_argument("--priority")
    update.add_argument("--assign", dest="assigned_to", help="Technician name; pass an empty string to unassign")
    update.add_argument("--notes")
    update.add_argument("--actor", default=None)

    show = sub.add_parser("show", help="Show one ticket with its history")
    show.add_argument("ticket_id")

    listing = sub.add_parser("list", help="List tickets matching all given filters")
    listing.add_argument("--status")
    listing.add_argument("--priority")
    listing.add_argument("--assigned-to", dest="assigned_to")

    reporting = sub.add_parser("report", help="Print a report")
    reporting.add_argument("kind", nargs="?", default=SUMMARY_REPORT)

    return parser


def run(args: argparse.Namespace, service: TicketService, settings: Settings) -> int:
    if args.command == "create":
        ticket_id = service.create_ticket(
            args.requester,
            args.email,
            args.category,
            args.subject,
            args.description,
            priority=args.priority,
        )
        print(f"Created ticket {ticket_id}")
    elif args.command == "update":
        changed = service.update_ticket(
            args.ticket_id,
            status=args.status,
            priority=args.priority,
            assigned_to=args.assigned_to,
            notes=args.notes,
            actor=args.actor or settings.default_actor,
        )
        print(f"Ticket {args.ticket_id} updated" if changed else f"No changes made to ticket {args.ticket_id}")
    elif args.command == "show":
        ticket = service.get_ticket(args.ticket_id)
        if ticket is None:
            print(f"Ticket {args.ticket_id} not found", file=sys.stderr)
            return 1
        print(render_ticket(ticket))
    elif args.command == "list":
        display(service.list_tickets(status=args.status, priority=args.priority, assigned_to=args.assigned_to))
    elif args.command == "report":
        report(service.tickets, args.kind)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings, verbose=args.verbose)
    with tracing(settings):
        try:
            repository = TicketRepository(args.store or settings.store_path, atomic_writes=settings.atomic_writes)
            service = TicketService.open(repository)
            return run(args, service, settings)
        except TicketServiceError as exc:
            logger.debug("Command %s failed", args.command, exc_info=True)
            print(f"Error: {exc}", file=sys.stderr)
            return 1
