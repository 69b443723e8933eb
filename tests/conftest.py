"""Pytest configuration and fixtures for Wireless Tags tests."""

from __future__ import annotations

import copy
from typing import Any
from unittest.mock import AsyncMock

import pytest

from wirelesstags.entities.tag import WirelessTag

MOTION_TAG_DATA: dict[str, Any] = {
    "uuid": "0d2a7e5c-motion",
    "slaveId": 1,
    "tagType": 13,
    "rev": 14,
    "version1": 2,
    "name": "Garage",
    "alive": True,
    "postBackInterval": 600,
    "rssiMode": False,
    "eventState": 1,
    "temperature": 20.0,
    "tempEventState": 1,
    "cap": 50.0,
    "capEventState": 2,
    "batteryVolt": 3.0167,
    "enLBN": True,
    "LBTh": 2.5,
    "OutOfRange": False,
    "oorGrace": 2,
    "signaldBm": -79.5,
    "lastComm": 132223104000000000,
}

KUMOSTAT_TAG_DATA: dict[str, Any] = {
    "uuid": "5b1c9a20-kumostat",
    "slaveId": 5,
    "tagType": 62,
    "rev": 0,
    "name": "Living room",
    "alive": True,
    "temperature": 21.5,
    "tempEventState": 1,
    "thermostat": {
        "fanOn": False,
        "turnOff": False,
        "th_low": 20.0,
        "th_high": 25.0,
        "disableLocal": False,
        "targetUuid": "5b1c9a20-kumostat",
        "nest_id": None,
    },
}

TEMP_CONFIG_DATA: dict[str, Any] = {
    "__type": "MyTagList.TempSensorConfig",
    "temp_unit": 1,
    "th_low": 10.0,
    "th_low_delay": 2,
    "th_high": 30.0,
    "th_high_delay": 2,
    "th_window": 1.0,
    "interval": 300,
    "threshold_q": 0.5,
    "email": "someone@example.com",
    "send_email": True,
    "beep_pc": False,
}


@pytest.fixture
def motion_tag_data() -> dict[str, Any]:
    """Raw record of a motion/temperature/humidity tag."""
    return copy.deepcopy(MOTION_TAG_DATA)


@pytest.fixture
def kumostat_tag_data() -> dict[str, Any]:
    """Raw record of a Kumostat virtual thermostat."""
    return copy.deepcopy(KUMOSTAT_TAG_DATA)


@pytest.fixture
def temp_config_data() -> dict[str, Any]:
    """Raw temperature monitoring config as loaded from the cloud."""
    return copy.deepcopy(TEMP_CONFIG_DATA)


@pytest.fixture
def call_api() -> AsyncMock:
    """Mock of the call_api collaborator."""
    return AsyncMock(return_value={})


@pytest.fixture
def motion_tag(motion_tag_data, call_api) -> WirelessTag:
    """Motion tag wired to the mocked collaborator."""
    return WirelessTag(None, motion_tag_data, call_api)


@pytest.fixture
def kumostat_tag(kumostat_tag_data, call_api) -> WirelessTag:
    """Kumostat tag wired to the mocked collaborator."""
    return WirelessTag(None, kumostat_tag_data, call_api)


@pytest.fixture
def endpoints_called():
    """Names of the endpoints passed to a mocked call_api, in call order."""

    def _endpoints(mock: AsyncMock) -> list[str]:
        return [call.args[0].rsplit("/", 1)[-1] for call in mock.await_args_list]

    return _endpoints
