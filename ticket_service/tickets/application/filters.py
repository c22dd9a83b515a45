"""
Ticket Query Filters
====================

Parsing of the ``filter`` and ``where`` query parameters.

A filter is a JSON object:

    {
        "where": {"precio": {"gte": 20}, "or": [{"silla": 1}, {"silla": 2}]},
        "fields": {"id": true, "precio": true},
        "order": ["precio DESC", "hora ASC"],
        "limit": 10,
        "skip": 20
    }

Only the shape is checked here; the ``where`` clause is checked when it is
translated into a query by the repository.
"""

import json
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ticket_service.core import ValidationException
from ticket_service.tickets.domain import FIELD_ATTRIBUTES

COMPARISON_OPERATORS = frozenset({
    "eq", "neq", "gt", "gte", "lt", "lte",
    "inq", "nin", "between",
    "like", "nlike", "ilike", "nilike",
})
LOGICAL_OPERATORS = frozenset({"and", "or"})

Where = Dict[str, Any]


class TicketFilter(BaseModel):
    """Parsed ``filter`` query parameter."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    where: Optional[Where] = None
    fields_: Optional[Union[Dict[str, bool], List[str]]] = Field(None, alias="fields")
    order: Optional[Union[str, List[str]]] = None
    limit: Optional[int] = Field(None, ge=0)
    skip: Optional[int] = Field(None, ge=0)
    offset: Optional[int] = Field(None, ge=0)
    include: Optional[Any] = None

    @field_validator("include")
    @classmethod
    def validate_include(cls, v: Any) -> Any:
        """Tickets have no relations, so any inclusion is unknown."""
        if not v:
            return None
        names = v if isinstance(v, list) else [v]
        first = names[0]
        relation = first.get("relation") if isinstance(first, dict) else first
        raise ValueError(f'Relation "{relation}" is not defined for Ticket model')

    @property
    def start(self) -> Optional[int]:
        """Rows to skip; ``skip`` wins over its ``offset`` alias."""
        return self.skip if self.skip is not None else self.offset

    def order_by(self) -> List[Tuple[str, bool]]:
        """
        Parse ``order`` into ``(field, descending)`` pairs.

        Raises:
            ValidationException: On unknown fields or directions
        """
        if not self.order:
            return []

        clauses = [self.order] if isinstance(self.order, str) else self.order
        parsed = []
        for clause in clauses:
            parts = clause.split()
            if not parts or len(parts) > 2:
                raise ValidationException(f"Invalid order clause: '{clause}'")
            name = parts[0]
            direction = parts[1].upper() if len(parts) == 2 else "ASC"
            if name not in FIELD_ATTRIBUTES:
                raise ValidationException(f"Cannot order by unknown field '{name}'")
            if direction not in ("ASC", "DESC"):
                raise ValidationException(f"Invalid order direction: '{parts[1]}'")
            parsed.append((name, direction == "DESC"))
        return parsed

    def project(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply the ``fields`` projection to a ticket document.

        ``{"a": true}`` or ``["a"]`` keep only the listed fields; a map of
        only ``false`` values drops the listed fields.
        """
        if not self.fields_:
            return document

        if isinstance(self.fields_, list):
            keep = set(self.fields_)
            return {k: v for k, v in document.items() if k in keep}

        keep = {k for k, v in self.fields_.items() if v}
        if keep:
            return {k: v for k, v in document.items() if k in keep}
        drop = set(self.fields_)
        return {k: v for k, v in document.items() if k not in drop}


def _load_json_object(raw: str, param: str) -> Dict[str, Any]:
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationException(
            f"Invalid '{param}' parameter: not valid JSON",
            details={"param": param, "error": str(e)}
        ) from e
    if not isinstance(value, dict):
        raise ValidationException(f"Invalid '{param}' parameter: expected a JSON object")
    return value


def parse_filter(raw: Optional[str], exclude_where: bool = False) -> TicketFilter:
    """
    Parse a ``filter`` query parameter.

    Args:
        raw: URL-decoded parameter value, or None when absent
        exclude_where: Drop any ``where`` clause (lookups by id)

    Raises:
        ValidationException: If the value is malformed
    """
    if raw is None or raw.strip() == "":
        return TicketFilter()

    data = _load_json_object(raw, "filter")
    if exclude_where:
        data.pop("where", None)

    try:
        return TicketFilter.model_validate(data)
    except ValidationError as e:
        raise ValidationException(
            "Invalid 'filter' parameter",
            details={"errors": e.errors(include_url=False, include_context=False)}
        ) from e


def parse_where(raw: Optional[str]) -> Optional[Where]:
    """
    Parse a ``where`` query parameter.

    Raises:
        ValidationException: If the value is not a JSON object
    """
    if raw is None or raw.strip() == "":
        return None
    return _load_json_object(raw, "where")
