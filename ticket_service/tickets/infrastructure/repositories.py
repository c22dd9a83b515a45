"""
Ticket Infrastructure Repositories
====================================

SQLAlchemy implementation of the ticket repository.

Methods flush but never commit: the caller owns the transaction.
"""

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ticket_service.core import RepositoryException, ResourceNotFoundException
from ticket_service.shared.infrastructure.logging import get_logger, log_latency
from ticket_service.tickets.application import ITicketRepository, TicketFilter, Where
from ticket_service.tickets.domain import FIELD_ATTRIBUTES, Ticket, TicketChanges
from ticket_service.tickets.infrastructure.models import TicketModel, generate_ticket_id
from ticket_service.tickets.infrastructure.queries import build_order, build_where

logger = get_logger(__name__)


class SQLAlchemyTicketRepository(ITicketRepository):
    """
    SQLAlchemy implementation of the ticket repository.

    Handles persistence of Ticket entities using async SQLAlchemy.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def _get_model(self, ticket_id: str) -> TicketModel:
        model = await self._session.get(TicketModel, ticket_id)
        if model is None:
            raise ResourceNotFoundException("Ticket", ticket_id)
        return model

    async def _flush(self) -> None:
        try:
            await self._session.flush()
        except IntegrityError as e:
            raise RepositoryException(
                "Ticket could not be stored",
                details={"error": str(e.orig)}
            ) from e

    async def create(self, ticket: Ticket) -> Ticket:
        """Insert a new ticket. Any id on ``ticket`` is replaced."""
        model = TicketModel(id=generate_ticket_id())
        model.assign(ticket)

        self._session.add(model)
        await self._flush()

        logger.debug("Ticket inserted", extra={"ticket_id": model.id})
        return model.to_entity()

    async def count(self, where: Optional[Where] = None) -> int:
        """Count tickets matching ``where``."""
        stmt = select(func.count()).select_from(TicketModel).where(build_where(where))

        with log_latency(logger, "ticket.count"):
            result = await self._session.execute(stmt)
        return result.scalar_one()

    async def find(self, filter: Optional[TicketFilter] = None) -> List[Ticket]:
        """
        Find tickets.

        Applies where, order, limit and skip. Field projection is left to
        the caller since it works on the document form.
        """
        filter = filter or TicketFilter()

        stmt = select(TicketModel).where(build_where(filter.where))
        order = build_order(filter.order_by())
        if order:
            stmt = stmt.order_by(*order)
        if filter.start:
            stmt = stmt.offset(filter.start)
        # limit 0 means no limit
        if filter.limit:
            stmt = stmt.limit(filter.limit)

        with log_latency(logger, "ticket.find", limit=filter.limit, skip=filter.start):
            result = await self._session.execute(stmt)
        return [model.to_entity() for model in result.scalars().all()]

    async def find_by_id(self, ticket_id: str) -> Ticket:
        """Get ticket by id."""
        model = await self._get_model(ticket_id)
        return model.to_entity()

    async def update_all(self, changes: TicketChanges, where: Optional[Where] = None) -> int:
        """
        Apply a partial update to every matching ticket.

        Each row is updated on its own; there is no all-or-nothing guarantee
        beyond the caller's transaction.
        """
        stmt = select(TicketModel).where(build_where(where))

        with log_latency(logger, "ticket.update_all"):
            result = await self._session.execute(stmt)
            models = result.scalars().all()
            for model in models:
                self._apply(model, changes)
            await self._flush()

        return len(models)

    async def update_by_id(self, ticket_id: str, changes: TicketChanges) -> None:
        """Apply a partial update to one ticket."""
        model = await self._get_model(ticket_id)
        self._apply(model, changes)
        await self._flush()

    async def replace_by_id(self, ticket_id: str, ticket: Ticket) -> None:
        """Replace every value of one ticket, dropping extras not in ``ticket``."""
        model = await self._get_model(ticket_id)
        model.assign(ticket)
        await self._flush()

    async def delete_by_id(self, ticket_id: str) -> None:
        """Delete one ticket."""
        model = await self._get_model(ticket_id)
        await self._session.delete(model)
        await self._flush()

        logger.debug("Ticket deleted", extra={"ticket_id": ticket_id})

    @staticmethod
    def _apply(model: TicketModel, changes: TicketChanges) -> None:
        for name, value in changes.fields.items():
            setattr(model, FIELD_ATTRIBUTES[name], value if name == "fecha" else float(value))
        if changes.extra:
            model.extra = {**(model.extra or {}), **changes.extra}
