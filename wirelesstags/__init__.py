"""Async client library for Wireless Sensor Tags (mytaglist.com)."""

from __future__ import annotations

from .config import PlatformConfig
from .core.api_client import WirelessTagApiClient
from .core.exceptions import (
    ApiCallError,
    DuplicateEthCmdError,
    InvalidOperationError,
    OperationIncompleteError,
    OperationUnsupportedError,
    RetryUnsuccessfulError,
    TagDidNotRespondError,
    TagManagerOfflineError,
    TagManagerTimedOutError,
    UnauthorizedAccessError,
    WirelessTagException,
)
from .entities import (
    Kumostat,
    MonitoringConfig,
    WirelessTag,
    WirelessTagManager,
    WirelessTagSensor,
)
from .models import SensorType
from .platform import WirelessTagPlatform
from .updater import TimedTagUpdater

__version__ = "0.1.0"

__all__ = [
    "ApiCallError",
    "DuplicateEthCmdError",
    "InvalidOperationError",
    "Kumostat",
    "MonitoringConfig",
    "OperationIncompleteError",
    "OperationUnsupportedError",
    "PlatformConfig",
    "RetryUnsuccessfulError",
    "SensorType",
    "TagDidNotRespondError",
    "TagManagerOfflineError",
    "TagManagerTimedOutError",
    "TimedTagUpdater",
    "UnauthorizedAccessError",
    "WirelessTag",
    "WirelessTagApiClient",
    "WirelessTagException",
    "WirelessTagManager",
    "WirelessTagPlatform",
    "WirelessTagSensor",
]
