"""
Ticket Repository Interface
============================

The capability interface every ticket store implements. Route handlers
depend on this interface, not on a concrete store.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ticket_service.tickets.application.filters import TicketFilter, Where
from ticket_service.tickets.domain import Ticket, TicketChanges


class ITicketRepository(ABC):
    """Interface for ticket persistence operations."""

    @abstractmethod
    async def create(self, ticket: Ticket) -> Ticket:
        """Insert a new ticket and return it with its generated id."""

    @abstractmethod
    async def count(self, where: Optional[Where] = None) -> int:
        """Return the number of tickets matching ``where``."""

    @abstractmethod
    async def find(self, filter: Optional[TicketFilter] = None) -> List[Ticket]:
        """Return tickets matching the filter's where/order/limit/skip."""

    @abstractmethod
    async def find_by_id(self, ticket_id: str) -> Ticket:
        """
        Return a ticket by id.

        Raises:
            ResourceNotFoundException: If no ticket has this id
        """

    @abstractmethod
    async def update_all(self, changes: TicketChanges, where: Optional[Where] = None) -> int:
        """Apply ``changes`` to every matching ticket; return how many were updated."""

    @abstractmethod
    async def update_by_id(self, ticket_id: str, changes: TicketChanges) -> None:
        """
        Apply ``changes`` to one ticket.

        Raises:
            ResourceNotFoundException: If no ticket has this id
        """

    @abstractmethod
    async def replace_by_id(self, ticket_id: str, ticket: Ticket) -> None:
        """
        Replace every field of one ticket, extras included.

        Raises:
            ResourceNotFoundException: If no ticket has this id
        """

    @abstractmethod
    async def delete_by_id(self, ticket_id: str) -> None:
        """
        Delete one ticket.

        Raises:
            ResourceNotFoundException: If no ticket has this id
        """
