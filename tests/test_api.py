"""HTTP API tests for the /tickets routes"""

import json

import pytest

from tests.factories import TICKET_PAYLOAD, make_payload


def _create(client, **overrides) -> dict:
    response = client.post("/tickets", json=make_payload(**overrides))
    assert response.status_code == 200, response.text
    return response.json()


def _filter(value: dict) -> dict:
    return {"filter": json.dumps(value)}


class TestCreate:

    def test_create_returns_generated_id(self, client):
        body = _create(client)

        assert body["id"]
        assert {k: v for k, v in body.items() if k != "id"} == TICKET_PAYLOAD

    def test_get_after_create_returns_identical_values(self, client):
        created = _create(client)

        response = client.get(f"/tickets/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    def test_missing_precio_is_unprocessable(self, client):
        payload = make_payload()
        del payload["precio"]

        response = client.post("/tickets", json=payload)

        assert response.status_code == 422

    def test_extra_fields_are_stored(self, client):
        created = _create(client, zona="VIP", meta={"canal": "web"})

        fetched = client.get(f"/tickets/{created['id']}").json()

        assert fetched["zona"] == "VIP"
        assert fetched["meta"] == {"canal": "web"}

    def test_client_id_is_ignored(self, client):
        created = _create(client, id="mine")

        assert created["id"] != "mine"

    @pytest.mark.parametrize("number", ["Infinity", "-Infinity", "NaN"])
    def test_non_finite_number_is_unprocessable(self, client, number):
        body = json.dumps(make_payload()).replace("25.5", number)

        response = client.post(
            "/tickets", content=body, headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 422
        assert client.get("/tickets/count").json() == {"count": 0}

    def test_non_finite_extra_is_unprocessable(self, client):
        body = json.dumps(make_payload(meta={"peso": 1.5})).replace("1.5", "NaN")

        response = client.post(
            "/tickets",
            content=body,
            headers={"Content-Type": "application/json", "X-Correlation-ID": "req-422"},
        )

        assert response.status_code == 422
        assert response.json()["correlation_id"] == "req-422"
        assert isinstance(response.json()["detail"], list)

    def test_large_integer_reads_back_as_created(self, client):
        created = _create(client, eventoId=2**60 + 1)

        fetched = client.get(f"/tickets/{created['id']}").json()

        assert fetched == created
        assert created["eventoId"] == float(2**60 + 1)


class TestFindAndCount:

    def test_count_equals_list_length(self, client):
        for seat in (1, 2, 3):
            _create(client, silla=seat)

        count = client.get("/tickets/count").json()
        tickets = client.get("/tickets").json()

        assert count == {"count": 3}
        assert len(tickets) == 3

    def test_count_with_where(self, client):
        _create(client, silla=1)
        _create(client, silla=2)

        response = client.get("/tickets/count", params={"where": json.dumps({"silla": {"gt": 1}})})

        assert response.json() == {"count": 1}

    def test_find_with_filter(self, client):
        for price in (30, 10, 20):
            _create(client, precio=price)

        response = client.get("/tickets", params=_filter({
            "where": {"precio": {"gte": 20}},
            "order": "precio DESC",
            "fields": {"precio": True},
        }))

        assert response.status_code == 200
        assert response.json() == [{"precio": 30}, {"precio": 20}]

    def test_find_by_id_with_fields(self, client):
        created = _create(client)

        response = client.get(
            f"/tickets/{created['id']}",
            params=_filter({"fields": ["id", "silla"], "where": {"silla": 999}}),
        )

        assert response.json() == {"id": created["id"], "silla": 14}

    @pytest.mark.parametrize("params", [
        {"filter": "{broken"},
        {"filter": json.dumps({"where": {"precio": {"regexp": "x"}}})},
        {"filter": json.dumps({"order": "zona ASC"})},
        {"filter": json.dumps({"include": ["evento"]})},
    ])
    def test_malformed_filter_is_bad_request(self, client, params):
        response = client.get("/tickets", params=params)

        assert response.status_code == 400
        assert "detail" in response.json()

    def test_limit_zero_returns_everything(self, client):
        for seat in (1, 2):
            _create(client, silla=seat)

        response = client.get("/tickets", params=_filter({"limit": 0}))

        assert len(response.json()) == 2

    def test_malformed_where_is_bad_request(self, client):
        response = client.get("/tickets/count", params={"where": "[1]"})

        assert response.status_code == 400


class TestUpdate:

    def test_patch_by_id(self, client):
        created = _create(client)

        response = client.patch(f"/tickets/{created['id']}", json={"precio": 50})

        assert response.status_code == 204
        fetched = client.get(f"/tickets/{created['id']}").json()
        assert fetched == {**created, "precio": 50}

    def test_patch_missing_ticket(self, client):
        response = client.patch("/tickets/nope", json={"precio": 50})

        assert response.status_code == 404
        assert "not found" in response.json()["detail"]

    def test_patch_null_named_field(self, client):
        created = _create(client)

        response = client.patch(f"/tickets/{created['id']}", json={"precio": None})

        assert response.status_code == 422

    def test_patch_nan_is_unprocessable(self, client):
        created = _create(client)

        response = client.patch(
            f"/tickets/{created['id']}",
            content='{"precio": NaN}',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 422

    def test_patch_cannot_change_id(self, client):
        created = _create(client)

        response = client.patch(f"/tickets/{created['id']}", json={"id": "other"})

        assert response.status_code == 400

    def test_patch_all_with_where(self, client):
        _create(client, eventoId=1)
        _create(client, eventoId=1)
        _create(client, eventoId=2)

        response = client.patch(
            "/tickets",
            params={"where": json.dumps({"eventoId": 1})},
            json={"precio": 0},
        )

        assert response.status_code == 200
        assert response.json() == {"count": 2}
        count = client.get("/tickets/count", params={"where": json.dumps({"precio": 0})}).json()
        assert count == {"count": 2}

    def test_put_replaces(self, client):
        created = _create(client, zona="VIP")
        replacement = make_payload(precio=5, silla=1)

        response = client.put(f"/tickets/{created['id']}", json=replacement)

        assert response.status_code == 204
        fetched = client.get(f"/tickets/{created['id']}").json()
        assert fetched == {"id": created["id"], **replacement}

    def test_put_requires_full_ticket(self, client):
        created = _create(client)

        response = client.put(f"/tickets/{created['id']}", json={"precio": 5})

        assert response.status_code == 422

    def test_put_missing_ticket(self, client):
        response = client.put("/tickets/nope", json=TICKET_PAYLOAD)

        assert response.status_code == 404


class TestDelete:

    def test_delete_then_get_is_not_found(self, client):
        created = _create(client)

        assert client.delete(f"/tickets/{created['id']}").status_code == 204
        assert client.get(f"/tickets/{created['id']}").status_code == 404

    def test_delete_missing_ticket(self, client):
        assert client.delete("/tickets/nope").status_code == 404


class TestApplication:

    def test_health(self, client):
        body = client.get("/health").json()

        assert body["status"] == "healthy"
        assert body["checks"] == {"database": "connected"}

    def test_root_lists_endpoints(self, client):
        body = client.get("/").json()

        assert "POST /tickets - Create ticket" in body["endpoints"]

    def test_correlation_id_is_echoed(self, client):
        response = client.get("/tickets", headers={"X-Correlation-ID": "req-123"})

        assert response.headers["X-Correlation-ID"] == "req-123"

    def test_correlation_id_is_generated(self, client):
        response = client.get("/tickets")

        assert response.headers["X-Correlation-ID"]

    def test_error_body_carries_correlation_id(self, client):
        response = client.get("/tickets/nope", headers={"X-Correlation-ID": "req-404"})

        assert response.json()["correlation_id"] == "req-404"
