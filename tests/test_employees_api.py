"""
HTTP-level tests for the /api/v1/emps routes.
"""

import pytest
from sqlalchemy.exc import OperationalError

from src.empservice.routes import employees_api

EMPS = "/api/v1/emps"


def _store_down(*args, **kwargs):
    raise OperationalError("SELECT 1", {}, Exception("connection lost"))


async def _async_store_down(*args, **kwargs):
    _store_down()


async def _connection_refused(*args, **kwargs):
    raise ConnectionRefusedError(111, "Connection refused")


def _create(client, payload) -> dict:
    resp = client.post(EMPS, json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestCreateAndRead:
    def test_create_then_get_returns_same_fields(self, client, thea):
        created = _create(client, thea)
        assert isinstance(created["id"], int)
        assert created["firstname"] == "Thea"
        assert created["lastname"] == "Queen"
        assert created["doj"] == "2014-10-19T23:08:24Z"
        assert created["skills"] == "Go,C,Ruby"

        resp = client.get(f"{EMPS}/{created['id']}")
        assert resp.status_code == 200
        assert resp.json() == created

    def test_skills_with_quotes_round_trip_unescaped(self, client, thea):
        thea["skills"] = "['Go', 'C', 'Ruby']"
        created = _create(client, thea)
        assert created["skills"] == "['Go', 'C', 'Ruby']"

        fetched = client.get(f"{EMPS}/{created['id']}").json()
        assert fetched["skills"] == "['Go', 'C', 'Ruby']"

    def test_client_supplied_id_is_ignored(self, client, thea):
        thea["id"] = 4242
        created = _create(client, thea)
        assert created["id"] != 4242

    def test_missing_doj_is_allowed(self, client):
        created = _create(client, {"firstname": "Oliver", "lastname": "Queen"})
        assert created["doj"] is None
        assert created["skills"] == ""

    @pytest.mark.parametrize("payload", [
        {"firstname": "", "lastname": "Queen"},
        {"firstname": "Thea", "lastname": ""},
        {"skills": "Go"},
        {},
    ])
    def test_create_with_empty_names_is_rejected(self, client, payload):
        resp = client.post(EMPS, json=payload)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Fields are empty"}
        assert client.get(EMPS).json() == []

    def test_create_with_unbindable_body_is_rejected(self, client):
        resp = client.post(EMPS, content=b"not json", headers={"Content-Type": "application/json"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Fields are empty"}

    def test_list_is_empty_then_in_id_order(self, client, thea):
        assert client.get(EMPS).json() == []

        first = _create(client, thea)
        second = _create(client, {**thea, "firstname": "Oliver"})

        rows = client.get(EMPS).json()
        assert [r["id"] for r in rows] == [first["id"], second["id"]]
        assert rows[1]["firstname"] == "Oliver"

    def test_get_unknown_id_is_404(self, client):
        resp = client.get(f"{EMPS}/999999")
        assert resp.status_code == 404
        assert resp.json() == {"error": "employee not found"}

    def test_get_non_integer_id_is_404(self, client, thea):
        _create(client, thea)
        resp = client.get(f"{EMPS}/abc")
        assert resp.status_code == 404
        assert resp.json() == {"error": "employee not found"}

    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
    @pytest.mark.parametrize("raw_id", ["99999999999999999999", "%207", "1_0", "1abc", "\u0667"])
    def test_loose_or_out_of_range_ids_are_404_without_prefix_coercion(self, client, thea, method, raw_id):
        # rows 1..10 exist, so a loose parse of any of these would hit one
        for _ in range(10):
            _create(client, thea)
        resp = client.request(method, f"{EMPS}/{raw_id}", json=thea)
        assert resp.status_code == 404
        assert resp.json() == {"error": "employee not found"}
        assert len(client.get(EMPS).json()) == 10

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("7", 7),
            ("+7", 7),
            ("-3", -3),
            ("9223372036854775807", 2 ** 63 - 1),
            ("-9223372036854775808", -(2 ** 63)),
            ("9223372036854775808", 0),
            (" 7", 0),
            ("7\n", 0),
            ("", 0),
        ],
    )
    def test_parse_id(self, raw, expected):
        assert employees_api._parse_id(raw) == expected


class TestUpdate:
    def test_update_overwrites_fields(self, client, thea):
        created = _create(client, thea)
        new = {"firstname": "Thea", "lastname": "Merlyn", "doj": "2011-10-19T23:08:24Z", "skills": "C,Go,Rails"}

        resp = client.put(f"{EMPS}/{created['id']}", json=new)
        assert resp.status_code == 200
        assert resp.json() == {"id": created["id"], **new}

        assert client.get(f"{EMPS}/{created['id']}").json() == {"id": created["id"], **new}

    def test_update_unknown_id_is_404_and_creates_nothing(self, client, thea):
        resp = client.put(f"{EMPS}/12345", json=thea)
        assert resp.status_code == 404
        assert resp.json() == {"error": "employee not found"}
        assert client.get(EMPS).json() == []

    def test_update_unknown_id_checks_existence_before_fields(self, client):
        resp = client.put(f"{EMPS}/12345", json={"firstname": ""})
        assert resp.status_code == 404

    def test_update_with_empty_names_leaves_row_unchanged(self, client, thea):
        created = _create(client, thea)

        resp = client.put(f"{EMPS}/{created['id']}", json={"firstname": "", "lastname": "Merlyn"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "fields are empty"}

        assert client.get(f"{EMPS}/{created['id']}").json() == created

    def test_update_when_row_vanishes_before_write_is_404(self, client, thea, monkeypatch):
        created = _create(client, thea)

        async def vanished(db, emp_id, data):
            return False

        monkeypatch.setattr(employees_api, "update_employee", vanished)
        resp = client.put(f"{EMPS}/{created['id']}", json=thea)
        assert resp.status_code == 404


class TestDelete:
    def test_delete_removes_row(self, client, thea):
        created = _create(client, thea)

        resp = client.delete(f"{EMPS}/{created['id']}")
        assert resp.status_code == 200
        assert resp.json() == {f"id #{created['id']}": "deleted"}

        assert client.get(f"{EMPS}/{created['id']}").status_code == 404

    def test_delete_unknown_id_is_404(self, client):
        resp = client.delete(f"{EMPS}/999999")
        assert resp.status_code == 404
        assert resp.json() == {"error": "employee not found"}


class TestStoreFailures:
    def test_list_store_failure_is_404(self, client, monkeypatch):
        monkeypatch.setattr(employees_api, "list_employees", _async_store_down)
        resp = client.get(EMPS)
        assert resp.status_code == 404
        assert resp.json() == {"error": "no employee(s) into the table"}

    def test_get_store_failure_is_404(self, client, monkeypatch):
        monkeypatch.setattr(employees_api, "get_employee", _async_store_down)
        resp = client.get(f"{EMPS}/1")
        assert resp.status_code == 404
        assert resp.json() == {"error": "employee not found"}

    def test_insert_failure_is_500_and_service_keeps_running(self, client, thea, monkeypatch):
        monkeypatch.setattr(employees_api, "create_employee", _async_store_down)
        resp = client.post(EMPS, json=thea)
        assert resp.status_code == 500
        assert resp.json() == {"error": "employee could not be created"}
        assert resp.headers["access-control-allow-origin"] == "*"

        monkeypatch.undo()
        assert client.get(EMPS).status_code == 200

    def test_update_failure_is_500(self, client, thea, monkeypatch):
        created = _create(client, thea)
        monkeypatch.setattr(employees_api, "update_employee", _async_store_down)
        resp = client.put(f"{EMPS}/{created['id']}", json=thea)
        assert resp.status_code == 500
        assert resp.json() == {"error": "employee could not be updated"}

    def test_delete_failure_is_500(self, client, thea, monkeypatch):
        created = _create(client, thea)
        monkeypatch.setattr(employees_api, "delete_employee", _async_store_down)
        resp = client.delete(f"{EMPS}/{created['id']}")
        assert resp.status_code == 500
        assert resp.json() == {"error": "employee could not be deleted"}

        monkeypatch.undo()
        assert client.get(f"{EMPS}/{created['id']}").status_code == 200

    @pytest.mark.parametrize(
        "crud_fn, method, path, status, message",
        [
            ("list_employees", "GET", "", 404, "no employee(s) into the table"),
            ("get_employee", "GET", "/1", 404, "employee not found"),
            ("create_employee", "POST", "", 500, "employee could not be created"),
            ("update_employee", "PUT", "/1", 500, "employee could not be updated"),
            ("delete_employee", "DELETE", "/1", 500, "employee could not be deleted"),
        ],
    )
    def test_unreachable_driver_maps_to_typed_error(self, client, thea, monkeypatch, crud_fn, method, path, status, message):
        _create(client, thea)
        monkeypatch.setattr(employees_api, crud_fn, _connection_refused)
        resp = client.request(method, EMPS + path, json=thea)
        assert resp.status_code == status
        assert resp.json() == {"error": message}
        assert resp.headers["access-control-allow-origin"] == "*"
