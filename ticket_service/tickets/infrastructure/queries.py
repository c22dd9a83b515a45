"""
Ticket Query Translation
=========================

Translates a ``where`` clause into a SQLAlchemy boolean expression over
``TicketModel``.

Named fields and ``id`` compare against their columns. Any other name is
looked up in the ``extra`` JSON column, cast according to the type of the
value it is compared with.
"""

from numbers import Number
from typing import Any, List, Tuple

from sqlalchemy import and_, or_, true
from sqlalchemy.sql.elements import ColumnElement

from ticket_service.core import ValidationException
from ticket_service.tickets.application import COMPARISON_OPERATORS, LOGICAL_OPERATORS, Where
from ticket_service.tickets.domain import FIELD_ATTRIBUTES
from ticket_service.tickets.infrastructure.models import TicketModel

STRING_FIELDS = frozenset({"id", "fecha"})
PATTERN_OPERATORS = frozenset({"like", "nlike", "ilike", "nilike"})


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def _operands(op: str, value: Any) -> List[Any]:
    """Return the scalar operands of ``op``, checking list-valued operators."""
    if op in ("inq", "nin"):
        if not isinstance(value, list):
            raise ValidationException(f"Operator '{op}' expects a list")
        return value
    if op == "between":
        if not isinstance(value, list) or len(value) != 2:
            raise ValidationException("Operator 'between' expects a list of two values")
        return value
    return [value]


def _check_named_operands(name: str, op: str, operands: List[Any]) -> None:
    is_string_field = name in STRING_FIELDS
    for operand in operands:
        if operand is None:
            if op in ("eq", "neq"):
                continue
            raise ValidationException(f"Operator '{op}' does not accept null for '{name}'")
        if op in PATTERN_OPERATORS:
            if not (is_string_field and isinstance(operand, str)):
                raise ValidationException(f"Operator '{op}' requires a string field and pattern, got '{name}'")
        elif is_string_field and not isinstance(operand, str):
            raise ValidationException(f"Field '{name}' compares against strings")
        elif not is_string_field and not _is_number(operand):
            raise ValidationException(f"Field '{name}' compares against numbers")


def _extra_expression(name: str, operands: List[Any]) -> ColumnElement:
    """JSON lookup in the side-map, cast by the first non-null operand's type."""
    element = TicketModel.extra[name]
    sample = next((o for o in operands if o is not None), None)
    if isinstance(sample, bool):
        return element.as_boolean()
    if _is_number(sample):
        return element.as_float()
    if sample is None or isinstance(sample, str):
        return element.as_string()
    raise ValidationException(f"Unsupported value type for '{name}': {type(sample).__name__}")


def _compare(column: ColumnElement, op: str, value: Any, nullable: bool) -> ColumnElement:
    if op == "eq":
        return column.is_(None) if value is None else column == value
    if op == "neq":
        if value is None:
            return column.is_not(None)
        return or_(column != value, column.is_(None)) if nullable else column != value
    if op == "gt":
        return column > value
    if op == "gte":
        return column >= value
    if op == "lt":
        return column < value
    if op == "lte":
        return column <= value
    if op == "inq":
        return column.in_(value)
    if op == "nin":
        return or_(column.not_in(value), column.is_(None)) if nullable else column.not_in(value)
    if op == "between":
        return column.between(value[0], value[1])
    if op == "like":
        return column.like(value)
    if op == "nlike":
        return column.not_like(value)
    if op == "ilike":
        return column.ilike(value)
    if op == "nilike":
        return column.not_ilike(value)
    raise ValidationException(f"Unknown operator '{op}'")


def _field_condition(name: str, condition: Any) -> ColumnElement:
    if isinstance(condition, dict):
        if not condition:
            raise ValidationException(f"Empty condition for '{name}'")
        conditions = list(condition.items())
    else:
        conditions = [("eq", condition)]

    clauses = []
    for op, value in conditions:
        if op not in COMPARISON_OPERATORS:
            raise ValidationException(f"Unknown operator '{op}' for '{name}'")
        operands = _operands(op, value)

        if name in FIELD_ATTRIBUTES:
            _check_named_operands(name, op, operands)
            column = getattr(TicketModel, FIELD_ATTRIBUTES[name])
            nullable = False
        else:
            if op in PATTERN_OPERATORS and not isinstance(value, str):
                raise ValidationException(f"Operator '{op}' expects a string pattern")
            column = _extra_expression(name, operands)
            nullable = True

        clauses.append(_compare(column, op, value, nullable))

    return clauses[0] if len(clauses) == 1 else and_(*clauses)


def build_where(where: Where | None) -> ColumnElement:
    """
    Translate a where clause into a boolean expression.

    An empty or missing clause matches every ticket.

    Raises:
        ValidationException: On unknown operators or mistyped operands
    """
    if not where:
        return true()

    if not isinstance(where, dict):
        raise ValidationException("where must be a JSON object")

    clauses = []
    for key, value in where.items():
        if key in LOGICAL_OPERATORS:
            if not isinstance(value, list) or not all(isinstance(w, dict) for w in value):
                raise ValidationException(f"'{key}' expects a list of where objects")
            parts = [build_where(w) for w in value]
            if not parts:
                continue
            clauses.append(and_(*parts) if key == "and" else or_(*parts))
        else:
            clauses.append(_field_condition(key, value))

    if not clauses:
        return true()
    return clauses[0] if len(clauses) == 1 else and_(*clauses)


def build_order(order: List[Tuple[str, bool]]) -> List[ColumnElement]:
    """Translate ``(field, descending)`` pairs into ORDER BY clauses."""
    columns = []
    for name, descending in order:
        column = getattr(TicketModel, FIELD_ATTRIBUTES[name])
        columns.append(column.desc() if descending else column.asc())
    return columns
