"""
Bounded retry for remote gate calls.

Only transport-classified failures are retried. Business rejections and
anything unclassified surface on the first attempt, and the last error is
re-raised unchanged once attempts run out.
"""

import re
from typing import Awaitable, Callable, TypeVar

import anyio
import httpx

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.service.gate_client.domain.gate_client_error import (
    DuplicateScanError,
    GateTransportError,
    TicketVerificationError,
)


T = TypeVar('T')

BACKOFF_MULTIPLIER = 1.5

_RETRYABLE_MESSAGE = re.compile(
    r'network|timed?[ -]?out|connection (?:refused|reset|aborted|error|failed|closed)'
    r'|failed to fetch|fetch failed|temporarily unavailable',
    re.IGNORECASE,
)


def is_retryable(error: BaseException) -> bool:
    if isinstance(error, (TicketVerificationError, DuplicateScanError)):
        return False
    if isinstance(error, (GateTransportError, httpx.TransportError)):
        return True
    return bool(_RETRYABLE_MESSAGE.search(str(error)))


def backoff_delay(*, attempt: int, base_delay: float) -> float:
    """Delay before the attempt following ``attempt`` (1-based)"""
    return base_delay * BACKOFF_MULTIPLIER ** (attempt - 1)


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = settings.GATE_RETRY_MAX_ATTEMPTS,
    base_delay: float = settings.GATE_RETRY_BASE_DELAY_SECONDS,
    sleep: Callable[[float], Awaitable[None]] = anyio.sleep,
    label: str = 'gate call',
) -> T:
    if max_attempts < 1:
        raise ValueError('max_attempts must be at least 1')

    attempt = 1
    while True:
        try:
            return await operation()
        except Exception as e:
            if attempt >= max_attempts or not is_retryable(e):
                raise

            delay = backoff_delay(attempt=attempt, base_delay=base_delay)
            Logger.base.warning(
                f'🔁 [RETRY] {label} {attempt}/{max_attempts} failed: {e!r}; retry in {delay:.2f}s'
            )
            await sleep(delay)
            attempt += 1
