"""Tests for the bounded retry helper."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from wirelesstags.core.exceptions import OperationIncompleteError, RetryUnsuccessfulError
from wirelesstags.core.retry import retry_until


@pytest.fixture(autouse=True)
def mock_sleep():
    with patch("wirelesstags.core.retry.asyncio.sleep", new_callable=AsyncMock) as sleep:
        yield sleep


@pytest.mark.asyncio
async def test_returns_first_accepted_result(mock_sleep):
    action = AsyncMock(side_effect=["a", "b", "c"])
    result = await retry_until(action, lambda value, attempt: value == "b", attempts=3, delay=2.0)
    assert result == "b"
    assert action.await_count == 2
    assert mock_sleep.await_count == 2
    mock_sleep.assert_awaited_with(2.0)


@pytest.mark.asyncio
async def test_passes_attempt_numbers():
    seen = []

    def check(value, attempt):
        seen.append(attempt)
        return attempt == 3

    await retry_until(AsyncMock(return_value=None), check, attempts=3)
    assert seen == [1, 2, 3]


@pytest.mark.asyncio
async def test_exhaustion_chains_last_failure():
    """Test the last failed check becomes the cause of the final error."""

    def check(value, attempt):
        raise RetryUnsuccessfulError("still off", "sensor", "arm", attempt)

    with pytest.raises(OperationIncompleteError) as exc_info:
        await retry_until(AsyncMock(return_value={}), check, attempts=2, obj="sensor", operation="arm")

    error = exc_info.value
    assert not isinstance(error, RetryUnsuccessfulError)
    assert error.operation == "arm"
    assert isinstance(error.__cause__, RetryUnsuccessfulError)
    assert error.__cause__.attempt == 2
    assert "retrying 2 times" in str(error.__cause__)


@pytest.mark.asyncio
async def test_false_result_counts_as_failure():
    with pytest.raises(OperationIncompleteError) as exc_info:
        await retry_until(AsyncMock(return_value=1), lambda value, attempt: False, attempts=1)
    assert exc_info.value.__cause__.attempt == 1


@pytest.mark.asyncio
async def test_other_errors_propagate():
    action = AsyncMock(side_effect=KeyError("boom"))
    with pytest.raises(KeyError):
        await retry_until(action, lambda value, attempt: True)
    assert action.await_count == 1
