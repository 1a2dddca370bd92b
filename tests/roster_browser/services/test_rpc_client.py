from __future__ import annotations

import json

import httpx

from roster_browser.services.rpc_client import HttpRpcClient


def _make_client(handler) -> HttpRpcClient:
    return HttpRpcClient(
        "https://db.example.org/",
        "secret-key",
        transport=httpx.MockTransport(handler),
    )


def test_call_posts_params_to_rpc_endpoint():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["headers"] = request.headers
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=[{"id": 1}])

    client = _make_client(handler)
    response = client.call("get_all_branches", {"p_limit": 5})

    assert response.ok
    assert response.data == [{"id": 1}]
    assert seen["url"] == "https://db.example.org/rest/v1/rpc/get_all_branches"
    assert seen["headers"]["apikey"] == "secret-key"
    assert seen["headers"]["authorization"] == "Bearer secret-key"
    assert seen["body"] == {"p_limit": 5}


def test_error_status_uses_backend_message():
    client = _make_client(lambda request: httpx.Response(400, json={"message": "bad status"}))

    response = client.call("update_payment_status_bulk", {})

    assert not response.ok
    assert response.error == "bad status"


def test_error_status_without_json_body():
    client = _make_client(lambda request: httpx.Response(503, text="unavailable"))

    assert client.call("get_all_programs").error == "HTTP 503"


def test_transport_failure_becomes_error_response():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    response = _make_client(handler).call("get_all_programs")

    assert not response.ok
    assert "connection refused" in response.error


def test_empty_body_is_ok_without_data():
    client = _make_client(lambda request: httpx.Response(204))

    response = client.call("delete_student", {"_id": "1"})

    assert response.ok
    assert response.data is None


def test_invalid_json_is_an_error():
    client = _make_client(lambda request: httpx.Response(200, text="<html>"))

    response = client.call("get_all_programs")

    assert not response.ok
    assert "invalid JSON" in response.error
