"""
Ticket Domain Layer
===================

Framework-agnostic ticket entity and its document mapping.
"""

from ticket_service.tickets.domain.entities import (
    Ticket,
    TicketChanges,
    FIELD_ATTRIBUTES,
    REQUIRED_FIELDS,
    normalize_number,
)

__all__ = [
    "Ticket",
    "TicketChanges",
    "FIELD_ATTRIBUTES",
    "REQUIRED_FIELDS",
    "normalize_number",
]
