"""Filter query parameter parsing tests"""

import pytest

from ticket_service.core import ValidationException
from ticket_service.tickets.application import TicketFilter, parse_filter, parse_where


class TestParseFilter:

    def test_absent_filter(self):
        assert parse_filter(None) == TicketFilter()
        assert parse_filter("  ") == TicketFilter()

    def test_full_filter(self):
        ticket_filter = parse_filter(
            '{"where": {"precio": {"gt": 10}}, "order": "hora DESC", '
            '"limit": 5, "skip": 10, "fields": ["id", "precio"]}'
        )

        assert ticket_filter.where == {"precio": {"gt": 10}}
        assert ticket_filter.limit == 5
        assert ticket_filter.start == 10
        assert ticket_filter.order_by() == [("hora", True)]

    def test_offset_is_alias_of_skip(self):
        assert parse_filter('{"offset": 3}').start == 3
        assert parse_filter('{"offset": 3, "skip": 4}').start == 4

    def test_exclude_where(self):
        assert parse_filter('{"where": {"silla": 1}}', exclude_where=True).where is None

    @pytest.mark.parametrize("raw", [
        "{not json",
        "[1, 2]",
        '{"limit": -1}',
        '{"unknown": 1}',
        '{"include": ["evento"]}',
        '{"include": {"relation": "evento"}}',
    ])
    def test_malformed_filter(self, raw):
        with pytest.raises(ValidationException):
            parse_filter(raw)

    def test_empty_include_is_accepted(self):
        assert parse_filter('{"include": []}').include is None


class TestOrderBy:

    def test_default_direction(self):
        assert TicketFilter(order=["precio", "silla DESC"]).order_by() == [
            ("precio", False), ("silla", True)
        ]

    def test_direction_is_case_insensitive(self):
        assert TicketFilter(order="eventoId desc").order_by() == [("eventoId", True)]

    @pytest.mark.parametrize("order", ["zona ASC", "precio SIDEWAYS", "precio ASC extra", ""])
    def test_invalid_order(self, order):
        ticket_filter = TicketFilter(order=[order])

        with pytest.raises(ValidationException):
            ticket_filter.order_by()


class TestProject:

    DOCUMENT = {"id": "t-1", "precio": 10, "silla": 3, "zona": "A"}

    def test_no_fields(self):
        assert TicketFilter().project(self.DOCUMENT) == self.DOCUMENT

    def test_list_selects(self):
        assert TicketFilter(fields=["id", "zona"]).project(self.DOCUMENT) == {"id": "t-1", "zona": "A"}

    def test_true_map_selects(self):
        projected = TicketFilter(fields={"precio": True, "silla": False}).project(self.DOCUMENT)

        assert projected == {"precio": 10}

    def test_false_map_drops(self):
        projected = TicketFilter(fields={"zona": False}).project(self.DOCUMENT)

        assert projected == {"id": "t-1", "precio": 10, "silla": 3}


class TestParseWhere:

    def test_absent(self):
        assert parse_where(None) is None

    def test_object(self):
        assert parse_where('{"silla": {"inq": [1, 2]}}') == {"silla": {"inq": [1, 2]}}

    @pytest.mark.parametrize("raw", ["nope", '"silla"', "[]"])
    def test_malformed(self, raw):
        with pytest.raises(ValidationException):
            parse_where(raw)
