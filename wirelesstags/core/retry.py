"""Bounded retry for operations whose effect shows up with a delay."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from ..const import ARM_RETRY_ATTEMPTS, ARM_RETRY_DELAY
from .exceptions import OperationIncompleteError, RetryUnsuccessfulError

_LOGGER = logging.getLogger(__name__)


async def retry_until(
    action: Callable[[], Awaitable[Any]],
    success: Callable[[Any, int], Any],
    attempts: int = ARM_RETRY_ATTEMPTS,
    delay: float = ARM_RETRY_DELAY,
    obj: Any = None,
    operation: Optional[str] = None,
) -> Any:
    """Repeat ``action`` until ``success`` accepts its result.

    Every attempt first waits ``delay`` seconds, then awaits ``action()``
    and passes the result and the 1-based attempt number to ``success``.
    The check signals "not yet" by raising ``RetryUnsuccessfulError`` or
    by returning a false value. Any other exception, from the action or
    the check, propagates unchanged.

    Args:
        action: Coroutine function fetching fresh state
        success: Check applied to each result
        attempts: Maximum number of attempts
        delay: Seconds to wait before each attempt
        obj: Object the operation applies to, for error messages
        operation: Name of the operation, for error messages

    Returns:
        The first result the check accepted

    Raises:
        OperationIncompleteError: If no attempt succeeded
    """
    last_error: Optional[RetryUnsuccessfulError] = None
    for attempt in range(1, attempts + 1):
        await asyncio.sleep(delay)
        result = await action()
        try:
            if success(result, attempt):
                return result
            last_error = RetryUnsuccessfulError(None, obj, operation, attempt)
        except RetryUnsuccessfulError as err:
            last_error = err
        _LOGGER.debug("Attempt %d/%d of %s not confirmed yet", attempt, attempts, operation or "operation")

    _LOGGER.warning("Giving up on %s after %d attempts", operation or "operation", attempts)
    raise OperationIncompleteError(
        f"state unchanged after {attempts} attempts", obj, operation
    ) from last_error
