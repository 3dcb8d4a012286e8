"""Retry and idempotency middleware for the REST runtime.

If the API has a brief hiccup (any 5xx response), a request is attempted
again until the API answers differently or the attempt limit is reached.
Transport failures (no response at all) are never retried here.

Writes that are not idempotent at the server (``POST`` and ``DELETE``) carry an
``Idempotency-Key`` header. The key is generated once per logical request and
reused by every attempt of that request, so the server can tell a retried
write from a second, similar-looking write.

Both concerns are plain senders wrapping another sender::

    send = IdempotencySender(RetryingSender(http_client.send))
"""

from __future__ import annotations

import asyncio
import base64
import logging
import secrets
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from .request import RestRequest, RestResponse, Sender

logger = logging.getLogger(__name__)

# One initial attempt plus up to two retries
ATTEMPT_LIMIT = 3
# Seconds between attempts when the response carries no usable Retry-After
RETRY_DELAY = 2.0

IDEMPOTENCY_HEADER = "Idempotency-Key"


@dataclass(frozen=True)
class RetryPolicy:
    """Decides whether and when a response is attempted again.

    Attributes:
        attempt_limit: Total number of attempts, including the first
        retry_delay: Fallback delay in seconds
    """

    attempt_limit: int = ATTEMPT_LIMIT
    retry_delay: float = RETRY_DELAY

    def __post_init__(self) -> None:
        if self.attempt_limit < 1:
            raise ValueError("attempt_limit must be at least 1")
        if self.retry_delay < 0:
            raise ValueError("retry_delay cannot be negative")

    def should_retry(self, response: RestResponse, attempt: int) -> bool:
        return response.status // 100 == 5 and attempt < self.attempt_limit - 1

    def delay_for(self, response: RestResponse) -> float:
        retry_after = parse_retry_after(response.header("Retry-After"))
        return self.retry_delay if retry_after is None else retry_after


def parse_retry_after(value: str | None) -> float | None:
    """Parse a ``Retry-After`` header holding a delay in whole seconds.

    HTTP-date values and anything else that is not a plain integer yield ``None``.
    """
    if value is None:
        return None
    value = value.strip()
    if not (value.isascii() and value.isdigit()):
        return None
    return float(int(value))


def generate_idempotency_key() -> str:
    """Return a random 24-character idempotency key (144 bits of entropy)."""
    return base64.b64encode(secrets.token_bytes(18)).decode("ascii")


class RetryingSender:
    """Sender re-attempting requests answered with a 5xx status."""

    def __init__(
        self,
        send: Sender,
        policy: RetryPolicy | None = None,
        *,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        self._send = send
        self.policy = policy or RetryPolicy()
        self._sleep = sleep

    async def __call__(self, request: RestRequest) -> RestResponse:
        while True:
            response = await self._send(request)
            if not self.policy.should_retry(response, request.attempt):
                if response.status // 100 == 5:
                    logger.error(
                        "request_retries_exhausted",
                        extra={
                            "method": request.method.value,
                            "path": request.path,
                            "attempts": request.attempt + 1,
                            "status": response.status,
                        },
                    )
                return response

            delay = self.policy.delay_for(response)
            logger.warning(
                "request_retry_scheduled",
                extra={
                    "method": request.method.value,
                    "path": request.path,
                    "attempt": request.attempt,
                    "status": response.status,
                    "delay_s": delay,
                },
            )
            await self._sleep(delay)
            request = request.next_attempt()


class IdempotencySender:
    """Sender attaching an idempotency key to non-idempotent requests.

    Must wrap the retrying layer (not sit beneath it) so that the key is drawn
    once per logical request.
    """

    def __init__(
        self,
        send: Sender,
        *,
        key_factory: Callable[[], str] = generate_idempotency_key,
    ) -> None:
        self._send = send
        self._key_factory = key_factory

    async def __call__(self, request: RestRequest) -> RestResponse:
        if not request.method.idempotent and not _has_header(request, IDEMPOTENCY_HEADER):
            request = request.with_headers({IDEMPOTENCY_HEADER: self._key_factory()})
        return await self._send(request)


def _has_header(request: RestRequest, name: str) -> bool:
    lowered = name.lower()
    return any(key.lower() == lowered for key in request.headers)
