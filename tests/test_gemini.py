import json
from typing import Any, Callable

import httpx
import pytest

from domain.errors import (
    CredentialError,
    GenerationError,
    GenerationTimeout,
    QuotaError,
    UpstreamError,
)
from domain.gemini import BASE_URL, GeminiClient, classify_error, text_from_payload


Handler = Callable[[httpx.Request], httpx.Response]


def gemini_client(handler: Handler, token: str = "test-key", **kwargs: Any) -> GeminiClient:
    http_client = httpx.AsyncClient(
        base_url=BASE_URL, transport=httpx.MockTransport(handler)
    )
    return GeminiClient(token=token, client=http_client, **kwargs)


def ok(*texts: str) -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "candidates": [
                {"content": {"role": "model", "parts": [{"text": t} for t in texts]}}
            ]
        },
    )


def error(status_code: int, message: str, status: str, reason: str | None = None) -> httpx.Response:
    body: dict[str, Any] = {
        "error": {"code": status_code, "message": message, "status": status}
    }
    if reason is not None:
        body["error"]["details"] = [
            {"@type": "type.googleapis.com/google.rpc.ErrorInfo", "reason": reason}
        ]
    return httpx.Response(status_code, json=body)


@pytest.mark.asyncio
async def test_generate_request() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return ok("# Omelette")

    client = gemini_client(handler, model="gemini-test")
    got = await client.generate("make me lunch")
    await client.aclose()

    assert got == "# Omelette"
    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/v1beta/models/gemini-test:generateContent"
    assert request.headers["x-goog-api-key"] == "test-key"
    assert json.loads(request.content) == {
        "contents": [{"role": "user", "parts": [{"text": "make me lunch"}]}]
    }


@pytest.mark.asyncio
async def test_generate_joins_parts() -> None:
    client = gemini_client(lambda r: ok("# Soup\n", "Boil water."))
    assert await client.generate("soup") == "# Soup\nBoil water."


@pytest.mark.asyncio
async def test_missing_key_fails_before_request(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return ok("never")

    http_client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    client = GeminiClient(client=http_client)
    with pytest.raises(CredentialError):
        await client.generate("soup")
    assert calls == []


def test_key_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "from-env")
    assert GeminiClient().token == "from-env"


@pytest.mark.parametrize(
    "response,expected",
    (
        (
            error(
                400,
                "API key not valid. Please pass a valid API key.",
                "INVALID_ARGUMENT",
                reason="API_KEY_INVALID",
            ),
            CredentialError,
        ),
        (error(403, "Permission denied.", "PERMISSION_DENIED"), CredentialError),
        (
            error(429, "Resource has been exhausted (e.g. check quota).", "RESOURCE_EXHAUSTED"),
            QuotaError,
        ),
        (error(500, "An internal error has occurred.", "INTERNAL"), UpstreamError),
        (error(503, "The model is overloaded.", "UNAVAILABLE"), UpstreamError),
        (httpx.Response(502, text="Bad Gateway"), UpstreamError),
        (httpx.Response(200, text="not json"), UpstreamError),
        (httpx.Response(200, json={"candidates": []}), UpstreamError),
        (
            httpx.Response(
                200, json={"candidates": [], "promptFeedback": {"blockReason": "SAFETY"}}
            ),
            UpstreamError,
        ),
        (httpx.Response(200, json={"candidates": [{"finishReason": "STOP"}]}), UpstreamError),
        (httpx.Response(200, json=[]), UpstreamError),
    ),
)
@pytest.mark.asyncio
async def test_generate_failures(
    response: httpx.Response, expected: type[GenerationError]
) -> None:
    client = gemini_client(lambda r: response)
    with pytest.raises(expected):
        await client.generate("soup")


@pytest.mark.asyncio
async def test_timeout() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = gemini_client(handler, timeout=5)
    with pytest.raises(GenerationTimeout):
        await client.generate("soup")


@pytest.mark.asyncio
async def test_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = gemini_client(handler)
    with pytest.raises(UpstreamError):
        await client.generate("soup")


@pytest.mark.parametrize(
    "message,kwargs,expected",
    (
        ("[GoogleGenerativeAI Error]: API_KEY_INVALID", {}, CredentialError),
        ("API key expired. Please renew the API key.", {}, CredentialError),
        ("boom", {"status_code": 401}, CredentialError),
        ("boom", {"reasons": {"API_KEY_INVALID"}}, CredentialError),
        ("You exceeded your current quota", {}, QuotaError),
        ("Quota exceeded for metric", {}, QuotaError),
        ("boom", {"status": "RESOURCE_EXHAUSTED"}, QuotaError),
        ("boom", {"status_code": 429}, QuotaError),
        ("fetch failed", {}, UpstreamError),
        ("boom", {"status_code": 500}, UpstreamError),
    ),
)
def test_classify_error(
    message: str, kwargs: dict[str, Any], expected: type[GenerationError]
) -> None:
    got = classify_error(message, **kwargs)
    assert type(got) is expected
    assert str(got) == message


def test_text_from_payload() -> None:
    payload = {"candidates": [{"content": {"parts": [{"text": "a"}, {"text": "b"}]}}]}
    assert text_from_payload(payload) == "ab"
