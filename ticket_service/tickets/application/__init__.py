"""
Ticket Application Layer
=========================

Contains:
- DTOs: Request/response models for the HTTP API
- Filters: Parsing of the filter/where query language
- Repositories: The ticket repository interface
"""

from ticket_service.tickets.application.dto import (
    TicketCreate,
    TicketReplace,
    TicketPatch,
    TicketResponse,
    CountResponse,
    TICKET_EXAMPLE,
)
from ticket_service.tickets.application.filters import (
    TicketFilter,
    Where,
    parse_filter,
    parse_where,
    COMPARISON_OPERATORS,
    LOGICAL_OPERATORS,
)
from ticket_service.tickets.application.repositories import ITicketRepository

__all__ = [
    # DTOs
    "TicketCreate",
    "TicketReplace",
    "TicketPatch",
    "TicketResponse",
    "CountResponse",
    "TICKET_EXAMPLE",
    # Filters
    "TicketFilter",
    "Where",
    "parse_filter",
    "parse_where",
    "COMPARISON_OPERATORS",
    "LOGICAL_OPERATORS",
    # Repository Interfaces
    "ITicketRepository",
]
