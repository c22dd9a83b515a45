"""
Ticket Infrastructure Layer
============================

Contains:
- Models: SQLAlchemy ORM model
- Queries: where/order translation
- Repositories: SQLAlchemy repository implementation
"""

from ticket_service.tickets.infrastructure.models import TicketModel
from ticket_service.tickets.infrastructure.repositories import SQLAlchemyTicketRepository

__all__ = [
    "TicketModel",
    "SQLAlchemyTicketRepository",
]
