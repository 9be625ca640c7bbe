"""
Unit tests for the PostgREST-backed store.

The requests.Session is replaced with a MagicMock, so these tests check the
wire format (URLs, query params, headers, bodies) and error translation.
"""

import json
from unittest.mock import MagicMock

import pytest
import requests

from sysnav.core.exceptions import RowNotFoundError, StoreError
from sysnav.store import RestEntityStore


def _response(status=200, body=None, text=None):
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 300
    if body is None and text is None:
        response.content = b""
        response.json.side_effect = ValueError("no body")
        response.text = ""
    elif body is not None:
        response.content = json.dumps(body).encode()
        response.json.return_value = body
        response.text = json.dumps(body)
    else:
        response.content = text.encode()
        response.json.side_effect = ValueError("not json")
        response.text = text
    return response


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def store(session):
    return RestEntityStore("https://demo.example.co/", api_key="anon-key", timeout=5.0, session=session)


def _call(session):
    args, kwargs = session.request.call_args
    return args[0], args[1], kwargs


class TestRequestShape:

    def test_base_url_and_headers(self, store, session):
        session.request.return_value = _response(body=[])
        store.select("systems")

        method, url, kwargs = _call(session)
        assert method == "GET"
        assert url == "https://demo.example.co/rest/v1/systems"
        assert kwargs["headers"]["apikey"] == "anon-key"
        assert kwargs["headers"]["Authorization"] == "Bearer anon-key"
        assert kwargs["timeout"] == 5.0

    def test_no_auth_headers_without_key(self, session):
        session.request.return_value = _response(body=[])
        RestEntityStore("https://demo.example.co", session=session).select("systems")

        _, _, kwargs = _call(session)
        assert "apikey" not in kwargs["headers"]
        assert "Authorization" not in kwargs["headers"]

    def test_lazy_session_is_real(self):
        store = RestEntityStore("https://demo.example.co")
        assert isinstance(store.session, requests.Session)


class TestReads:

    def test_select_filters_and_order(self, store, session):
        session.request.return_value = _response(body=[{"id": "C1"}])

        result = store.select("systems", {"parent_id": "R"}, order_by="created_at", descending=True)

        assert result.unwrap() == [{"id": "C1"}]
        _, _, kwargs = _call(session)
        assert kwargs["params"] == [
            ("select", "*"),
            ("parent_id", "eq.R"),
            ("order", "created_at.desc"),
        ]

    def test_select_membership_and_null(self, store, session):
        session.request.return_value = _response(body=[])
        store.select("systems", {"id": ["a", "b"], "parent_id": None})

        _, _, kwargs = _call(session)
        assert ("id", "in.(a,b)") in kwargs["params"]
        assert ("parent_id", "is.null") in kwargs["params"]

    def test_select_any_builds_or_clause(self, store, session):
        session.request.return_value = _response(body=[])
        store.select_any("interfaces", ["system1_id", "system2_id"], ["R", "C1"])

        _, url, kwargs = _call(session)
        assert url.endswith("/rest/v1/interfaces")
        assert ("or", "(system1_id.in.(R,C1),system2_id.in.(R,C1))") in kwargs["params"]

    def test_select_any_with_no_values_skips_request(self, store, session):
        assert store.select_any("interfaces", ["system1_id"], []).unwrap() == []
        session.request.assert_not_called()

    def test_reserved_characters_are_quoted(self, store, session):
        session.request.return_value = _response(body=[])
        store.select("systems", {"name": ["a,b", "c"]})

        _, _, kwargs = _call(session)
        assert ("name", 'in.("a,b",c)') in kwargs["params"]

    def test_get_uses_single_object_accept(self, store, session):
        session.request.return_value = _response(body={"id": "R", "name": "Root"})

        assert store.get("systems", "R").unwrap()["name"] == "Root"
        _, _, kwargs = _call(session)
        assert kwargs["headers"]["Accept"] == "application/vnd.pgrst.object+json"
        assert ("id", "eq.R") in kwargs["params"]

    def test_get_406_is_row_not_found(self, store, session):
        session.request.return_value = _response(status=406, body={"message": "JSON object requested, multiple (or no) rows returned"})

        result = store.get("systems", "ghost")
        assert result.is_err()
        assert isinstance(result.error, RowNotFoundError)

    def test_http_error_becomes_err(self, store, session):
        session.request.return_value = _response(status=500, body={"message": "database is down"})

        result = store.select("systems")
        assert result.is_err()
        assert result.error.status_code == 500
        assert "database is down" in str(result.error)

    def test_network_error_becomes_err(self, store, session):
        session.request.side_effect = requests.ConnectionError("unreachable")

        result = store.select("systems")
        assert result.is_err()
        assert result.error.status_code is None

    def test_non_json_error_body(self, store, session):
        session.request.return_value = _response(status=502, text="Bad Gateway")
        assert str(store.select("systems").error) == "Bad Gateway"


class TestWrites:

    def test_insert_requests_representation(self, store, session):
        session.request.return_value = _response(status=201, body=[{"id": "n", "name": "N"}])

        created = store.insert("systems", {"name": "N"})

        assert created == {"id": "n", "name": "N"}
        method, _, kwargs = _call(session)
        assert method == "POST"
        assert kwargs["json"] == [{"name": "N"}]
        assert kwargs["headers"]["Prefer"] == "return=representation"

    def test_update_missing_row(self, store, session):
        session.request.return_value = _response(body=[])
        with pytest.raises(RowNotFoundError):
            store.update("systems", "ghost", {"name": "x"})

    def test_delete(self, store, session):
        session.request.return_value = _response(status=204)
        store.delete("systems", "R")

        method, _, kwargs = _call(session)
        assert method == "DELETE"
        assert kwargs["params"] == [("id", "eq.R")]

    def test_write_errors_raise(self, store, session):
        session.request.return_value = _response(status=409, body={"message": "violates foreign key"})
        with pytest.raises(StoreError) as exc:
            store.insert("interfaces", {"system1_id": "ghost"})
        assert exc.value.status_code == 409


class TestRpc:

    def test_rpc_posts_params_and_drops_none(self, store, session):
        session.request.return_value = _response(body="new-id")

        result = store.rpc("create_system_with_history", {
            "system_name": "A", "system_category": "B", "system_parent_id": None,
        })

        assert result == "new-id"
        method, url, kwargs = _call(session)
        assert method == "POST"
        assert url == "https://demo.example.co/rest/v1/rpc/create_system_with_history"
        assert kwargs["json"] == {"system_name": "A", "system_category": "B"}

    def test_rpc_rejects_unknown_params_without_request(self, store, session):
        with pytest.raises(StoreError):
            store.rpc("restore_revision", {"id": "r1"})
        session.request.assert_not_called()

    def test_rpc_failure_raises(self, store, session):
        session.request.return_value = _response(status=400, body={"message": "Cannot delete"})
        with pytest.raises(StoreError, match="Cannot delete"):
            store.rpc("delete_system_with_history", {"system_id": "R"})
