"""
Ticket Infrastructure Models
=============================

SQLAlchemy ORM model for the ticket store.

Named fields get their own columns; everything else a client sent is kept
in the ``extra`` JSON column (JSONB on PostgreSQL).
"""

from typing import Any, Dict
from uuid import uuid4

from sqlalchemy import JSON, Float, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from ticket_service.infrastructure.database import Base
from ticket_service.tickets.domain import Ticket, normalize_number


def generate_ticket_id() -> str:
    return str(uuid4())


class TicketModel(Base):
    """Database model for the Ticket entity."""
    __tablename__ = "tickets"

    # Primary key, assigned by the store
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_ticket_id)

    # Named fields
    evento_id: Mapped[float] = mapped_column(Float, nullable=False, index=True)
    fecha: Mapped[str] = mapped_column(String(255), nullable=False)
    hora: Mapped[float] = mapped_column(Float, nullable=False)
    duracion: Mapped[float] = mapped_column(Float, nullable=False)
    precio: Mapped[float] = mapped_column(Float, nullable=False)
    silla: Mapped[float] = mapped_column(Float, nullable=False)

    # Open schema side-map
    extra: Mapped[Dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=dict
    )

    def to_entity(self) -> Ticket:
        return Ticket(
            id=self.id,
            evento_id=normalize_number(self.evento_id),
            fecha=self.fecha,
            hora=normalize_number(self.hora),
            duracion=normalize_number(self.duracion),
            precio=normalize_number(self.precio),
            silla=normalize_number(self.silla),
            extra=dict(self.extra or {}),
        )

    def assign(self, ticket: Ticket) -> None:
        """
        Overwrite every stored value (except id) from ``ticket``.

        Numbers go through ``float`` so the in-memory row matches what the
        Float columns hold.
        """
        self.evento_id = float(ticket.evento_id)
        self.fecha = ticket.fecha
        self.hora = float(ticket.hora)
        self.duracion = float(ticket.duracion)
        self.precio = float(ticket.precio)
        self.silla = float(ticket.silla)
        # New dict so the JSON column is flagged dirty
        self.extra = dict(ticket.extra)
