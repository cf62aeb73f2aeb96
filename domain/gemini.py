import asyncio
import logging
import os
from typing import Any

import httpx

from domain.errors import (
    CredentialError,
    GenerationError,
    GenerationTimeout,
    QuotaError,
    UpstreamError,
)


logger = logging.getLogger(__name__)


BASE_URL = "https://generativelanguage.googleapis.com/v1beta/"
DEFAULT_MODEL = "gemini-1.5-flash"

CREDENTIAL_MARKERS = ("API_KEY", "API key")
CREDENTIAL_REASONS = {"API_KEY_INVALID", "API_KEY_SERVICE_BLOCKED"}
QUOTA_MARKER = "quota"


def classify_error(
    message: str,
    *,
    status_code: int | None = None,
    status: str | None = None,
    reasons: set[str] | None = None,
) -> GenerationError:
    """Turn an upstream failure into one of the generation error kinds."""
    reasons = set() if reasons is None else reasons
    if (
        status_code in (401, 403)
        or reasons & CREDENTIAL_REASONS
        or any(marker in message for marker in CREDENTIAL_MARKERS)
    ):
        return CredentialError(message, status_code=status_code)
    if (
        status_code == 429
        or status == "RESOURCE_EXHAUSTED"
        or QUOTA_MARKER in message.lower()
    ):
        return QuotaError(message, status_code=status_code)
    return UpstreamError(message, status_code=status_code)


def error_from_response(resp: httpx.Response) -> GenerationError:
    try:
        data = resp.json()
    except ValueError:
        return classify_error(resp.text, status_code=resp.status_code)

    error = data.get("error", {}) if isinstance(data, dict) else {}
    if not isinstance(error, dict):
        error = {"message": str(error)}
    reasons = {
        d["reason"]
        for d in error.get("details") or []
        if isinstance(d, dict) and "reason" in d
    }
    return classify_error(
        str(error.get("message") or resp.text),
        status_code=resp.status_code,
        status=error.get("status"),
        reasons=reasons,
    )


def text_from_payload(data: Any) -> str:
    """Pull the generated text out of a generateContent response envelope."""
    try:
        candidates = data.get("candidates") or []
        if not candidates:
            feedback = data.get("promptFeedback", {})
            reason = feedback.get("blockReason", "no candidates returned")
            raise UpstreamError(f"Empty generation response: {reason}")
        parts = candidates[0]["content"]["parts"]
        text = "".join(p.get("text", "") for p in parts)
    except (AttributeError, KeyError, IndexError, TypeError) as e:
        raise UpstreamError(f"Malformed generation response: {data!r}") from e
    if not text:
        raise UpstreamError(f"Generation response has no text: {data!r}")
    return text


class GeminiClient:
    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        token: str | None = None,
        base_url: str = BASE_URL,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.model = model
        self.token = os.environ.get("GEMINI_API_KEY") if token is None else token
        self.timeout = timeout
        self.aclient = (
            httpx.AsyncClient(base_url=base_url, timeout=timeout)
            if client is None
            else client
        )

    def payload(self, prompt: str) -> dict[str, Any]:
        return {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}

    async def generate(self, prompt: str) -> str:
        if not self.token:
            raise CredentialError("GEMINI_API_KEY is not set.")

        try:
            resp = await self.aclient.post(
                f"models/{self.model}:generateContent",
                headers={"x-goog-api-key": self.token},
                json=self.payload(prompt),
            )
        except httpx.TimeoutException as e:
            raise GenerationTimeout(
                f"No response from {self.model} within {self.timeout}s."
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"Could not reach generation service: {e!r}") from e

        if resp.is_error:
            logger.warning("%s returned HTTP %d", self.model, resp.status_code)
            raise error_from_response(resp)

        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamError(f"Generation response is not JSON: {resp.text}") from e
        return text_from_payload(data)

    async def aclose(self) -> None:
        await self.aclient.aclose()


async def main() -> None:
    cl = GeminiClient()

    while True:
        qu = input("Qu: ")
        if qu.lower() in ("q", "quit", "exit"):
            break
        print(await cl.generate(qu))
    await cl.aclose()


if __name__ == "__main__":
    from rich import print

    asyncio.run(main())
