"""Bounded, fixed-interval retry for search requests."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)
from typing_extensions import TypeAliasType

from search_dal.errors import ConfigError, TransportError

logger = logging.getLogger(__name__)

Sleep = TypeAliasType("Sleep", Callable[[float], Awaitable[None]])


T = TypeVar("T")


class PageFetcher(Generic[T]):
    """Runs a search request up to `max_attempts` times.

    Only exceptions in `retry_on` are retried, each after a fixed
    `backoff_ms` wait; anything else propagates from the first attempt.
    When every attempt fails the last failure is raised as TransportError.
    Cancelling the calling task during a wait aborts the remaining attempts.
    """

    __slots__ = ("_backoff_ms", "_max_attempts", "_retry_on", "_sleep")

    def __init__(
        self,
        max_attempts: int,
        backoff_ms: int,
        retry_on: tuple[type[BaseException], ...],
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._max_attempts = max_attempts
        self._backoff_ms = backoff_ms
        self._retry_on = retry_on
        self._sleep = sleep

    async def execute(self, request: Callable[[], Awaitable[T]]) -> T:
        if self._max_attempts <= 0:
            msg = f"max connection attempts must be > 0, got {self._max_attempts}"
            raise ConfigError(msg)
        if self._backoff_ms < 0:
            msg = f"connection retry backoff must be >= 0, got {self._backoff_ms}"
            raise ConfigError(msg)

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_fixed(self._backoff_ms / 1000),
            retry=retry_if_exception_type(self._retry_on),
            sleep=self._sleep,
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        try:
            return await retrying(request)
        except self._retry_on as e:
            msg = f"Search failed after {self._max_attempts} attempt(s): {e}"
            raise TransportError(msg, attempts=self._max_attempts, source=e) from e
