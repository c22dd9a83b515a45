"""
Ticket Domain Entities
======================

The Ticket entity: six named fields, a store-assigned identifier, and a
side-map of additional fields the client chose to store with it.

The JSON document form uses the public field names (``eventoId``...);
the Python attributes use snake_case.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

Number = Union[int, float]

# Public document name -> entity attribute
FIELD_ATTRIBUTES: Dict[str, str] = {
    "id": "id",
    "eventoId": "evento_id",
    "fecha": "fecha",
    "hora": "hora",
    "duracion": "duracion",
    "precio": "precio",
    "silla": "silla",
}

# Named fields a client must supply on create/replace
REQUIRED_FIELDS = ("eventoId", "fecha", "hora", "duracion", "precio", "silla")


def normalize_number(value: Optional[Number]) -> Optional[Number]:
    """Return integral floats as ints so ``25`` does not come back as ``25.0``."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


@dataclass
class Ticket:
    """
    Ticket entity.

    ``id`` is None until the ticket has been stored.
    """
    evento_id: Number
    fecha: str
    hora: Number
    duracion: Number
    precio: Number
    silla: Number
    id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_document(self) -> Dict[str, Any]:
        """Render the ticket as a JSON document: id, named fields, then extras."""
        document: Dict[str, Any] = {}
        if self.id is not None:
            document["id"] = self.id
        for name in REQUIRED_FIELDS:
            value = getattr(self, FIELD_ATTRIBUTES[name])
            document[name] = value if name == "fecha" else normalize_number(value)
        for key, value in self.extra.items():
            document.setdefault(key, value)
        return document

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Ticket":
        """
        Build a ticket from a validated document.

        Keys that are not named fields land in ``extra``.
        """
        extra = {k: v for k, v in document.items() if k not in FIELD_ATTRIBUTES}
        return cls(
            id=document.get("id"),
            evento_id=document["eventoId"],
            fecha=document["fecha"],
            hora=document["hora"],
            duracion=document["duracion"],
            precio=document["precio"],
            silla=document["silla"],
            extra=extra,
        )


@dataclass
class TicketChanges:
    """
    A partial update: the named fields being changed and extra fields to merge.

    Keys in ``fields`` are public document names.
    """
    fields: Dict[str, Any] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.fields and not self.extra

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "TicketChanges":
        return cls(
            fields={k: v for k, v in document.items() if k in REQUIRED_FIELDS},
            extra={k: v for k, v in document.items() if k not in FIELD_ATTRIBUTES},
        )
