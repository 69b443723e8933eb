"""Tests for the HTTP API client."""

from __future__ import annotations

import asyncio
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from wirelesstags.config import PlatformConfig
from wirelesstags.core.api_client import WirelessTagApiClient
from wirelesstags.core.exceptions import (
    ApiCallError,
    TagDidNotRespondError,
    TagManagerOfflineError,
    UnauthorizedAccessError,
)

BASE_URL = "https://tags.example.com"


def _response(status: int = 200, payload: Any = None, json_error: Exception | None = None) -> MagicMock:
    """Build a fake aiohttp response usable as an async context manager."""
    response = MagicMock()
    response.status = status
    if json_error is not None:
        response.json = AsyncMock(side_effect=json_error)
    else:
        response.json = AsyncMock(return_value=payload)
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=response)
    context.__aexit__ = AsyncMock(return_value=False)
    return context


@pytest.fixture
def session() -> MagicMock:
    return MagicMock()


@pytest.fixture
def client(session) -> WirelessTagApiClient:
    return WirelessTagApiClient(session, PlatformConfig(base_url=BASE_URL, retry_base_delay=0.5))


@pytest.fixture
def mock_sleep():
    with patch("wirelesstags.core.api_client.asyncio.sleep", new_callable=AsyncMock) as sleep:
        yield sleep


@pytest.mark.asyncio
async def test_unwraps_payload(client, session):
    """Test the d envelope is removed and the body is posted as JSON."""
    session.post.return_value = _response(payload={"d": [{"mac": "AA"}]})

    result = await client.call_api("/ethAccount.asmx/GetTagManagers", {"x": 1})

    assert result == [{"mac": "AA"}]
    args, kwargs = session.post.call_args
    assert args[0] == f"{BASE_URL}/ethAccount.asmx/GetTagManagers"
    assert kwargs["json"] == {"x": 1}
    assert "X-Set-Mac" not in kwargs["headers"]
    assert kwargs["headers"]["Content-Type"].startswith("application/json")


@pytest.mark.asyncio
async def test_routes_by_mac(client, session):
    session.post.return_value = _response(payload={"d": None})
    assert await client.call_api("/ethClient.asmx/GetTagForSlaveId", None, mac="0123AB") is None
    kwargs = session.post.call_args.kwargs
    assert kwargs["headers"]["X-Set-Mac"] == "0123AB"
    assert kwargs["json"] == {}


@pytest.mark.asyncio
async def test_absolute_url_passes_through(client, session):
    session.post.return_value = _response(payload={"d": True})
    await client.call_api("https://other.example.com/api")
    assert session.post.call_args.args[0] == "https://other.example.com/api"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("exception_type", "error_class"),
    [
        ("MyTagList.ethClient+TagDidNotRespondException", TagDidNotRespondError),
        ("MyTagList.TagManagerOfflineException", TagManagerOfflineError),
        ("MyTagList.UnauthorizedAccessException", UnauthorizedAccessError),
        ("System.ArgumentException", ApiCallError),
    ],
)
async def test_maps_exception_type(client, session, exception_type, error_class):
    """Test error responses raise the class named by ExceptionType."""
    session.post.return_value = _response(
        500, {"ExceptionType": exception_type, "Message": "went wrong"}
    )
    with pytest.raises(error_class) as exc_info:
        await client.call_api("/ethClient.asmx/Arm", {"id": 1})
    assert type(exc_info.value) is error_class
    assert exc_info.value.status == 500
    assert "went wrong" in str(exc_info.value)
    assert session.post.call_count == 1


@pytest.mark.asyncio
async def test_unauthorized_status(client, session):
    session.post.return_value = _response(401, None)
    with pytest.raises(UnauthorizedAccessError) as exc_info:
        await client.call_api("/ethAccount.asmx/IsSignedIn")
    assert "Unauthorized" in str(exc_info.value)


@pytest.mark.asyncio
async def test_client_error_not_retried(client, session):
    session.post.return_value = _response(404, None)
    with pytest.raises(ApiCallError) as exc_info:
        await client.call_api("/nope")
    assert exc_info.value.status == 404
    assert session.post.call_count == 1


@pytest.mark.asyncio
async def test_server_error_retried(client, session, mock_sleep):
    """Test 5xx responses without ExceptionType are retried with backoff."""
    session.post.side_effect = [_response(503, None), _response(payload={"d": 7})]
    assert await client.call_api("/ethClient.asmx/GetTagForSlaveId") == 7
    mock_sleep.assert_awaited_once_with(0.5)


@pytest.mark.asyncio
async def test_timeouts_exhaust_retries(client, session, mock_sleep):
    """Test network errors are retried, then raised as ApiCallError."""
    session.post.side_effect = asyncio.TimeoutError()
    with pytest.raises(ApiCallError) as exc_info:
        await client.call_api("/ethClient.asmx/GetTagForSlaveId")
    assert isinstance(exc_info.value.__cause__, asyncio.TimeoutError)
    assert session.post.call_count == 3
    assert [c.args[0] for c in mock_sleep.await_args_list] == [0.5, 1.0]


@pytest.mark.asyncio
async def test_disconnect_then_success(client, session, mock_sleep):
    session.post.side_effect = [aiohttp.ServerDisconnectedError(), _response(payload={"d": "ok"})]
    assert await client.call_api("/x") == "ok"


@pytest.mark.asyncio
async def test_other_client_errors_not_retried(client, session, mock_sleep):
    session.post.side_effect = aiohttp.ClientPayloadError("truncated")
    with pytest.raises(ApiCallError):
        await client.call_api("/x")
    assert session.post.call_count == 1
    mock_sleep.assert_not_awaited()


@pytest.mark.asyncio
async def test_invalid_json(client, session):
    session.post.return_value = _response(json_error=ValueError("bad json"))
    with pytest.raises(ApiCallError) as exc_info:
        await client.call_api("/x")
    assert "Invalid JSON" in str(exc_info.value)


@pytest.mark.asyncio
async def test_tag_did_not_respond_not_retried_by_default(client, session, mock_sleep):
    session.post.return_value = _response(
        500, {"ExceptionType": "MyTagList.TagDidNotRespondException"}
    )
    with pytest.raises(TagDidNotRespondError):
        await client.call_api("/ethClient.asmx/RequestImmediatePostback", {"id": 1})
    mock_sleep.assert_not_awaited()


@pytest.mark.asyncio
async def test_retry_on_error(session, mock_sleep):
    """Test an unresponsive tag is retried once when enabled."""
    client = WirelessTagApiClient(session, PlatformConfig(retry_on_error=True, wait_before_retry=2.0))
    session.post.side_effect = [
        _response(500, {"ExceptionType": "MyTagList.TagDidNotRespondException"}),
        _response(payload={"d": {"slaveId": 1}}),
    ]
    assert await client.call_api("/ethClient.asmx/RequestImmediatePostback", {"id": 1}) == {"slaveId": 1}
    mock_sleep.assert_awaited_once_with(2.0)
