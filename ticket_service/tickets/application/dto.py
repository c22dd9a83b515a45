"""
Ticket Application DTOs
========================

Pydantic models for request/response validation.

Request models accept extra keys: the ticket schema is open, and anything
beyond the six named fields is stored in the ticket's side-map.
"""

import math
from typing import Annotated, Any, Dict, Optional, Union

from pydantic import (
    AllowInfNan,
    BaseModel,
    ConfigDict,
    Field,
    Strict,
    StrictInt,
    StrictStr,
    model_validator,
)

from ticket_service.core import ValidationException
from ticket_service.tickets.domain import Ticket, TicketChanges

# JSON number: ints stay ints; bools, numeric strings, NaN and Infinity are rejected
StrictNumber = Union[StrictInt, Annotated[float, Strict(), AllowInfNan(False)]]


TICKET_EXAMPLE = {
    "eventoId": 1,
    "fecha": "2023-01-01",
    "hora": 1800,
    "duracion": 120,
    "precio": 25.5,
    "silla": 14
}


# ========== Request DTOs ==========

class TicketCreate(BaseModel):
    """Request model for creating (or fully replacing) a ticket."""

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={"example": TICKET_EXAMPLE}
    )

    evento_id: StrictNumber = Field(..., alias="eventoId", description="Event identifier")
    fecha: StrictStr = Field(..., description="Event date (free-form)")
    hora: StrictNumber = Field(..., description="Start time, numerically encoded")
    duracion: StrictNumber = Field(..., description="Duration")
    precio: StrictNumber = Field(..., description="Price")
    silla: StrictNumber = Field(..., description="Seat number")

    @model_validator(mode="after")
    def reject_non_finite_extras(self) -> "TicketCreate":
        _check_finite(self.model_extra)
        return self

    def to_domain(self) -> Ticket:
        """Convert to a new, unsaved Ticket. A client-supplied id is dropped."""
        document = self.model_dump(by_alias=True)
        document.pop("id", None)
        return Ticket.from_document(document)


class TicketReplace(TicketCreate):
    """Request model for PUT /tickets/{id}."""

    def to_domain_for(self, ticket_id: str) -> Ticket:
        """
        Convert to the replacement Ticket for ``ticket_id``.

        Raises:
            ValidationException: If the body carries a different id
        """
        _check_body_id(self.model_dump(by_alias=True).get("id"), ticket_id)
        ticket = self.to_domain()
        ticket.id = ticket_id
        return ticket


class TicketPatch(BaseModel):
    """Request model for partial updates. Only supplied keys are changed."""

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={"example": {"precio": 50}}
    )

    evento_id: Optional[StrictNumber] = Field(None, alias="eventoId")
    fecha: Optional[StrictStr] = None
    hora: Optional[StrictNumber] = None
    duracion: Optional[StrictNumber] = None
    precio: Optional[StrictNumber] = None
    silla: Optional[StrictNumber] = None

    @model_validator(mode="after")
    def reject_null_fields(self) -> "TicketPatch":
        """Named fields are required on the stored ticket, so they can't be nulled."""
        nulled = [
            name for name in self.model_fields_set
            if name in type(self).model_fields and getattr(self, name) is None
        ]
        if nulled:
            aliases = sorted(type(self).model_fields[n].alias or n for n in nulled)
            raise ValueError(f"fields cannot be null: {', '.join(aliases)}")
        return self

    @model_validator(mode="after")
    def reject_non_finite_extras(self) -> "TicketPatch":
        _check_finite(self.model_extra)
        return self

    def to_changes(self, ticket_id: Optional[str] = None) -> TicketChanges:
        """
        Convert to domain changes.

        Args:
            ticket_id: Id of the ticket being patched, or None for bulk updates

        Raises:
            ValidationException: If the body tries to change an id
        """
        document = self.model_dump(by_alias=True, exclude_unset=True)
        body_id = document.pop("id", None)
        if ticket_id is None:
            if body_id is not None:
                raise ValidationException("id cannot be set in a bulk update")
        else:
            _check_body_id(body_id, ticket_id)
        return TicketChanges.from_document(document)


def _is_finite(value: Any) -> bool:
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, dict):
        return all(_is_finite(v) for v in value.values())
    if isinstance(value, list):
        return all(_is_finite(v) for v in value)
    return True


def _check_finite(extra: Optional[Dict[str, Any]]) -> None:
    """Extra values go back out as JSON, which has no NaN or Infinity."""
    bad = sorted(key for key, value in (extra or {}).items() if not _is_finite(value))
    if bad:
        raise ValueError(f"non-finite numbers are not allowed: {', '.join(bad)}")


def _check_body_id(body_id: Any, ticket_id: str) -> None:
    if body_id is not None and body_id != ticket_id:
        raise ValidationException(
            "id cannot be changed",
            details={"id": ticket_id, "body_id": body_id}
        )


# ========== Response DTOs ==========

class TicketResponse(BaseModel):
    """
    A stored ticket.

    Every field is optional because ``filter.fields`` can project them away.
    """

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
        json_schema_extra={"example": {"id": "0b7f5d9e-3f7a-4a1e-9a55-1d1f0c6f7b21", **TICKET_EXAMPLE}}
    )

    id: Optional[str] = None
    evento_id: Optional[Union[int, float]] = Field(None, alias="eventoId")
    fecha: Optional[str] = None
    hora: Optional[Union[int, float]] = None
    duracion: Optional[Union[int, float]] = None
    precio: Optional[Union[int, float]] = None
    silla: Optional[Union[int, float]] = None


class CountResponse(BaseModel):
    """Response model for count and bulk update."""
    count: int = Field(..., ge=0)
