"""
Postboard — Read Retry Policy
===============================

What:  Retries idempotent reads (list, get, count) on transient database
       failures. Writes are never passed through here.
How:   Tenacity AsyncRetrying with exponential backoff + jitter. Before each
       retry the session is rolled back so the next attempt starts on a
       clean transaction (and a fresh pooled connection).
Who:   Services, via read_with_retry(db, operation). The policy travels on
       the session (session.info["read_retry"]), set by Database from
       Settings, so services stay stateless.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from postboard.config import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

SESSION_INFO_KEY = "read_retry"

# Connection drops, failovers, pool timeouts. Constraint or SQL errors are
# not transient and are never retried.
TRANSIENT_ERRORS = (OperationalError, InterfaceError, ConnectionError, TimeoutError)


@dataclass(frozen=True)
class ReadRetry:
    max_attempts: int = 3
    min_wait: float = 0.1
    max_wait: float = 2.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "ReadRetry":
        return cls(
            max_attempts=settings.retry_max_attempts,
            min_wait=settings.retry_min_wait,
            max_wait=settings.retry_max_wait,
        )

    def retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.min_wait, max=self.max_wait)
            + wait_random(0, self.min_wait),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )


DEFAULT_READ_RETRY = ReadRetry()


def policy_for(db: AsyncSession) -> ReadRetry:
    info = getattr(db, "info", None)
    if isinstance(info, dict):
        return info.get(SESSION_INFO_KEY, DEFAULT_READ_RETRY)
    return DEFAULT_READ_RETRY


async def read_with_retry(db: AsyncSession, operation: Callable[[], Awaitable[T]]) -> T:
    """
    Run `operation` (a read against `db`) under the session's retry policy.

    The last exception is re-raised unchanged once attempts are exhausted.
    """
    async for attempt in policy_for(db).retrying():
        with attempt:
            try:
                return await operation()
            except TRANSIENT_ERRORS:
                await db.rollback()
                raise
    raise RuntimeError("unreachable: retrying() always returns or raises")
