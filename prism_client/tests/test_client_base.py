from unittest.mock import MagicMock

import pytest
import requests

from prism_client.client.base import BaseClient, param_value
from prism_client.shared.errors import PrismError


def make_response(status=200, payload=None, content=b"x", reason="OK"):
    response = MagicMock()
    response.ok = 200 <= status < 300
    response.status_code = status
    response.reason = reason
    response.content = content
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def client(session):
    return BaseClient("http://api.test", session=session)


class TestParamValue:
    @pytest.mark.parametrize(
        "value,expected",
        [(True, "true"), (False, "false"), (5, "5"), ("x", "x")],
    )
    def test_param_value(self, value, expected):
        assert param_value(value) == expected


class TestBuildUrl:
    def test_trailing_slash_added(self, client):
        assert client.base_url == "http://api.test/"

    def test_join(self, client):
        assert client.build_url("/dt/schemas") == "http://api.test/dt/schemas"

    def test_base_path_kept(self, session):
        client = BaseClient("http://api.test/v1/", session=session)
        assert client.build_url("/public/users") == "http://api.test/v1/public/users"

    def test_params(self, client):
        url = client.build_url("/public/users", {"limit": 10, "active": True, "name": None})
        assert url == "http://api.test/public/users?limit=10&active=true"

    def test_all_params_none(self, client):
        assert client.build_url("/x", {"a": None}) == "http://api.test/x"


class TestInit:
    def test_mounts_retrying_adapter(self, session):
        BaseClient("http://api.test", retries=5, session=session)
        mounted = {call.args[0] for call in session.mount.call_args_list}
        assert mounted == {"http://", "https://"}
        adapter = session.mount.call_args_list[0].args[1]
        assert adapter.max_retries.total == 5

    def test_default_session(self):
        client = BaseClient("http://api.test")
        assert isinstance(client.session, requests.Session)
        assert client.session.headers["Content-Type"] == "application/json"
        client.close()

    def test_extra_headers(self):
        client = BaseClient("http://api.test", headers={"X-Trace": "1"})
        assert client.session.headers["X-Trace"] == "1"
        client.close()


class TestRequest:
    def test_get(self, client, session):
        session.request.return_value = make_response(payload=[{"id": 1}])

        assert client.get("/public/users", params={"limit": 1}) == [{"id": 1}]
        session.request.assert_called_once_with(
            "GET",
            "http://api.test/public/users?limit=1",
            json=None,
            headers=None,
            timeout=10.0,
        )

    def test_post_sends_json(self, client, session):
        session.request.return_value = make_response(payload={"id": 1})

        client.post("/public/users", {"email": "a@b.c"}, headers={"X-Trace": "1"})

        args, kwargs = session.request.call_args
        assert args[0] == "POST"
        assert kwargs["json"] == {"email": "a@b.c"}
        assert kwargs["headers"] == {"X-Trace": "1"}

    @pytest.mark.parametrize("method", ["put", "delete"])
    def test_methods(self, client, session, method):
        session.request.return_value = make_response(payload={})
        getattr(client, method)("/public/users", params={"id": "1"})
        assert session.request.call_args.args[0] == method.upper()

    def test_empty_body(self, client, session):
        session.request.return_value = make_response(status=204, content=b"")
        assert client.delete("/public/users") is None

    def test_http_error_with_details(self, client, session):
        session.request.return_value = make_response(
            status=404, payload={"detail": "not found"}, reason="Not Found"
        )

        with pytest.raises(PrismError) as exc_info:
            client.get("/public/missing")

        error = exc_info.value
        assert str(error) == "HTTP error 404: Not Found"
        assert error.code == "HTTP_ERROR"
        assert error.status == 404
        assert error.details == {"detail": "not found"}

    def test_http_error_without_json(self, client, session):
        session.request.return_value = make_response(
            status=500, payload=ValueError("no json"), reason="Internal Server Error"
        )

        with pytest.raises(PrismError) as exc_info:
            client.get("/boom")
        assert exc_info.value.details is None
        assert exc_info.value.status == 500

    def test_network_error(self, client, session):
        session.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(PrismError) as exc_info:
            client.get("/health")
        assert exc_info.value.code == "NETWORK_ERROR"

    def test_invalid_json(self, client, session):
        session.request.return_value = make_response(payload=ValueError("bad"))

        with pytest.raises(PrismError) as exc_info:
            client.get("/health")
        assert exc_info.value.code == "INVALID_RESPONSE"


class TestContextManager:
    def test_closes_session(self, session):
        with BaseClient("http://api.test", session=session) as client:
            assert client.session is session
        session.close.assert_called_once()
