# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import asyncio
import base64
import hashlib

import httpx
import pytest

from fetchbuilder.builder import HTTPRequestBuilder
from fetchbuilder.config import HttpSettings
from fetchbuilder.errors import AbortError, ErrorCategory, IntegrityError, RedirectError, categorize_exception
from fetchbuilder.http.abort import AbortController
from fetchbuilder.http.context import fetch_context
from fetchbuilder.http.httpx_client import HttpxFetch
from fetchbuilder.http.models import BuildSettings, HTTPMethod, RequestDescription


def _sri(algorithm: str, body: bytes) -> str:
    digest = hashlib.new(algorithm, body).digest()
    return f"{algorithm}-{base64.b64encode(digest).decode('ascii')}"


class Recorder:
    def __init__(self, handler=None):
        self.requests: list[httpx.Request] = []
        self._handler = handler or (lambda request: httpx.Response(200, json={"ok": True}))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)


def _fetch(recorder, **settings) -> HttpxFetch:
    return HttpxFetch(HttpSettings(user_agent="UA/1.0", **settings), transport=httpx.MockTransport(recorder))


@pytest.mark.asyncio
async def test_httpx_fetch_sends_description_and_reads_body():
    recorder = Recorder()
    fetch = _fetch(recorder)

    response = await fetch(
        "http://api.example/items",
        RequestDescription(method="POST", headers={"X-Count": 3, "X-Skip": None}, body='{"a": 1}'),
    )

    sent = recorder.requests[0]
    assert sent.method == "POST"
    assert str(sent.url) == "http://api.example/items"
    assert sent.content == b'{"a": 1}'
    assert sent.headers["x-count"] == "3"
    assert "x-skip" not in sent.headers
    assert sent.headers["user-agent"] == "UA/1.0"

    assert response.ok is True
    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert response.header("Content-Type") == "application/json"
    assert response.meta["body_truncated"] is False


@pytest.mark.asyncio
async def test_httpx_fetch_keeps_caller_user_agent():
    recorder = Recorder()
    await _fetch(recorder)("http://api.example/", RequestDescription(headers={"user-agent": "Mine/2"}))
    assert recorder.requests[0].headers["user-agent"] == "Mine/2"


@pytest.mark.asyncio
async def test_httpx_fetch_returns_error_statuses():
    recorder = Recorder(lambda request: httpx.Response(503, text="down"))
    response = await _fetch(recorder)("http://api.example/", RequestDescription())
    assert response.ok is True
    assert response.status_code == 503
    assert response.is_success is False
    assert response.text == "down"


@pytest.mark.asyncio
async def test_httpx_fetch_truncates_large_bodies():
    recorder = Recorder(lambda request: httpx.Response(200, content=b"x" * 100))
    response = await _fetch(recorder, max_body_bytes=10)("http://api.example/", RequestDescription())
    assert response.content == b"x" * 10
    assert response.meta["body_truncated"] is True
    assert response.meta["body_bytes_limit"] == 10


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "cache, expected",
    [
        ("no-store", {"cache-control": "no-cache", "pragma": "no-cache"}),
        ("reload", {"cache-control": "no-cache", "pragma": "no-cache"}),
        ("no-cache", {"cache-control": "max-age=0"}),
    ],
)
async def test_httpx_fetch_cache_mode_headers(cache, expected):
    recorder = Recorder()
    await _fetch(recorder)("http://api.example/", RequestDescription(cache=cache))
    sent = recorder.requests[0].headers
    for name, value in expected.items():
        assert sent[name] == value


@pytest.mark.asyncio
async def test_httpx_fetch_cache_mode_keeps_explicit_header():
    recorder = Recorder()
    await _fetch(recorder)(
        "http://api.example/",
        RequestDescription(cache="no-store", headers={"Cache-Control": "max-age=60"}),
    )
    assert recorder.requests[0].headers["cache-control"] == "max-age=60"


@pytest.mark.asyncio
async def test_httpx_fetch_referrer_becomes_referer_header():
    recorder = Recorder()
    fetch = _fetch(recorder)
    await fetch("http://api.example/", RequestDescription(referrer="http://app.example/page"))
    await fetch("http://api.example/", RequestDescription(referrer="about:client"))
    assert recorder.requests[0].headers["referer"] == "http://app.example/page"
    assert "referer" not in recorder.requests[1].headers


def _redirecting(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/old":
        return httpx.Response(302, headers={"Location": "http://api.example/new"})
    return httpx.Response(200, text="new")


@pytest.mark.asyncio
async def test_httpx_fetch_redirect_follow_and_manual():
    recorder = Recorder(_redirecting)
    fetch = _fetch(recorder)

    followed = await fetch("http://api.example/old", RequestDescription(redirect="follow"))
    manual = await fetch("http://api.example/old", RequestDescription(redirect="manual"))

    assert followed.status_code == 200
    assert followed.url == "http://api.example/new"
    assert manual.status_code == 302
    assert manual.header("location") == "http://api.example/new"


@pytest.mark.asyncio
async def test_httpx_fetch_redirect_default_uses_settings():
    recorder = Recorder(_redirecting)
    response = await _fetch(recorder, allow_redirects=False)("http://api.example/old", RequestDescription())
    assert response.status_code == 302


@pytest.mark.asyncio
async def test_httpx_fetch_redirect_error_raises():
    recorder = Recorder(_redirecting)
    with pytest.raises(RedirectError):
        await _fetch(recorder)("http://api.example/old", RequestDescription(redirect="error"))


@pytest.mark.asyncio
async def test_httpx_fetch_integrity_match_and_mismatch():
    body = b"payload"
    recorder = Recorder(lambda request: httpx.Response(200, content=body))
    fetch = _fetch(recorder)

    response = await fetch("http://api.example/", RequestDescription(integrity=f"sha512-bogus {_sri('sha256', body)}"))
    assert response.content == body

    with pytest.raises(IntegrityError):
        await fetch("http://api.example/", RequestDescription(integrity=_sri("sha384", b"other")))

    # Unsupported algorithms alone do not block the response.
    unchecked = await fetch("http://api.example/", RequestDescription(integrity="md5-abc"))
    assert unchecked.status_code == 200


@pytest.mark.asyncio
async def test_httpx_fetch_already_aborted_signal_skips_io():
    recorder = Recorder()
    controller = AbortController()
    controller.abort("user left")

    with pytest.raises(AbortError) as excinfo:
        await _fetch(recorder)("http://api.example/", RequestDescription(signal=controller.signal))

    assert excinfo.value.reason == "user left"
    assert recorder.requests == []


@pytest.mark.asyncio
async def test_httpx_fetch_abort_during_request():
    started = asyncio.Event()

    class SlowTransport(httpx.AsyncBaseTransport):
        async def handle_async_request(self, request):
            started.set()
            await asyncio.sleep(10)
            return httpx.Response(200)

    controller = AbortController()
    fetch = HttpxFetch(HttpSettings(), transport=SlowTransport())
    task = asyncio.ensure_future(fetch("http://api.example/", RequestDescription(signal=controller.signal)))
    await started.wait()
    controller.abort("stop")

    with pytest.raises(AbortError):
        await task


@pytest.mark.asyncio
async def test_httpx_fetch_signal_not_triggered_returns_response():
    recorder = Recorder()
    controller = AbortController()
    response = await _fetch(recorder)("http://api.example/", RequestDescription(signal=controller.signal))
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_httpx_fetch_with_injected_client():
    recorder = Recorder()
    client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    fetch = HttpxFetch(HttpSettings(), client=client)
    response = await fetch("http://api.example/a", RequestDescription(method="DELETE"))
    await fetch.aclose()
    assert response.status_code == 200
    assert recorder.requests[0].method == "DELETE"
    assert client.is_closed


@pytest.mark.asyncio
async def test_httpx_fetch_reads_settings_from_context():
    recorder = Recorder()
    fetch = HttpxFetch(transport=httpx.MockTransport(recorder))
    with fetch_context(settings=HttpSettings(user_agent="Ctx/1")):
        await fetch("http://api.example/", RequestDescription())
    assert recorder.requests[0].headers["user-agent"] == "Ctx/1"


@pytest.mark.asyncio
async def test_builder_with_httpx_fetch_end_to_end():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/missing":
            return httpx.Response(404, json={"detail": "nope"})
        raise httpx.ConnectError("connection refused", request=request)

    fetch = HttpxFetch(HttpSettings(), transport=httpx.MockTransport(handler))
    builder = HTTPRequestBuilder("http://api.example/api", {"Accept": "application/json"}, fetch=fetch)

    missing = builder.build(BuildSettings(endpoint="/missing", method=HTTPMethod.GET))
    response, err = await missing()
    assert err is None
    assert response.status_code == 404
    assert response.json() == {"detail": "nope"}

    broken = builder.define_request("/down")
    response, err = await broken(None, HTTPMethod.GET)
    assert isinstance(err, httpx.ConnectError)
    assert categorize_exception(err) is ErrorCategory.CONNECTION_ERROR
    assert response.ok is False
    assert response.error_type == "ConnectError"


@pytest.mark.asyncio
async def test_builder_captures_abort_from_signal():
    controller = AbortController()
    controller.abort()
    fetch = HttpxFetch(HttpSettings(), transport=httpx.MockTransport(Recorder()))
    handle = HTTPRequestBuilder("http://api.example", fetch=fetch).define_request("/x", {"signal": controller.signal})

    response, err = await handle(None, HTTPMethod.GET)

    assert isinstance(err, AbortError)
    assert categorize_exception(err) is ErrorCategory.ABORTED
    assert response.ok is False
