import asyncio
import json

import httpx
import pytest

from conftest import make_state
from request_dispatch import (
    TransportError,
    dispatch,
    format_response_body,
    normalize_url,
    prepare_request,
)


def test_normalize_url_adds_scheme():
    assert normalize_url("api.test/x") == "http://api.test/x"
    assert normalize_url("https://api.test") == "https://api.test"
    assert normalize_url("  http://a.test ") == "http://a.test"


def test_prepare_sets_host_token_and_length(tmp_path):
    st = make_state(tmp_path)
    st.url = "api.test/x"
    st.body = "héllo"
    prepared = prepare_request(st)

    assert st.url == "http://api.test/x"
    assert st.headers["Host"] == "api.test"
    assert st.headers["Content-Length"] == str(len("héllo".encode("utf-8")))
    assert st.headers["Random-Token"]
    assert prepared.url == "http://api.test/x"
    assert prepared.headers["Host"] == "api.test"
    assert prepared.method == "GET"


def test_random_token_changes_per_send(tmp_path):
    st = make_state(tmp_path)
    st.url = "http://api.test"
    first = prepare_request(st).headers["Random-Token"]
    second = prepare_request(st).headers["Random-Token"]
    assert first != second


def test_disabled_headers_are_not_sent(tmp_path):
    st = make_state(tmp_path, headers={"Accept": "*/*", "X-Debug": "1"})
    st.url = "http://api.test"
    st.header_enabled["X-Debug"] = False
    prepared = prepare_request(st)
    assert "X-Debug" not in prepared.headers
    assert prepared.headers["Accept"] == "*/*"
    assert "X-Debug" in st.headers


def test_derived_headers_replace_placeholder_values(tmp_path):
    st = make_state(tmp_path, headers={"Content-Length": "<calculated>", "Host": "<from url>"})
    st.url = "http://api.test"
    prepared = prepare_request(st)
    assert prepared.headers["Content-Length"] == "0"
    assert prepared.headers["Host"] == "api.test"


def test_format_response_body_pretty_prints_json():
    out = format_response_body("application/json; charset=utf-8", '{"a":1}')
    assert out == json.dumps({"a": 1}, indent=2)
    assert format_response_body("application/json", "not json") == "not json"
    assert format_response_body("text/plain", '{"a":1}') == '{"a":1}'


def test_dispatch_with_mock_transport():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["body"] = request.content
        seen["x"] = request.headers.get("X-Test")
        return httpx.Response(201, json={"ok": True})

    result = asyncio.run(
        dispatch(
            "POST",
            "http://api.test/items",
            {"X-Test": "yes"},
            '{"a": 1}',
            transport=httpx.MockTransport(handler),
        )
    )

    assert seen == {"method": "POST", "body": b'{"a": 1}', "x": "yes"}
    assert result.status == 201
    assert result.status_text == "201 Created"
    assert json.loads(result.body) == {"ok": True}
    assert result.size_bytes == len(result.body.encode("utf-8"))
    assert result.elapsed_ms >= 0


def test_dispatch_connect_error_becomes_transport_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(TransportError):
        asyncio.run(
            dispatch("GET", "http://down.test", {}, "", transport=httpx.MockTransport(handler))
        )


def test_dispatch_timeout_becomes_transport_error():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(TransportError, match="timed out"):
        asyncio.run(
            dispatch("GET", "http://slow.test", {}, "", transport=httpx.MockTransport(handler))
        )
