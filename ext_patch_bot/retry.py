from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional, TypeVar

import click

logger = logging.getLogger(__name__)

T = TypeVar("T")

RetryDecision = Callable[[Exception], bool]


def prompt_operator(exc: Exception) -> bool:
    return click.confirm("Do you want to retry?", default=False)


def never_retry(exc: Exception) -> bool:
    return False


async def retry_until_declined(
    fn: Callable[[], Awaitable[T]],
    *,
    should_retry: RetryDecision = prompt_operator,
    label: str = "operation",
) -> Optional[T]:
    """
    Await ``fn`` until it succeeds or ``should_retry`` declines.

    Every retry starts ``fn`` from scratch. Returns None when abandoned;
    KeyboardInterrupt is left to stop the run.
    """
    while True:
        try:
            return await fn()
        except Exception as exc:
            logger.exception("%s failed: %s", label, exc)
            if not should_retry(exc):
                logger.info("Abandoning %s", label)
                return None
            logger.info("Retrying %s", label)
