"""Core building blocks: API access, property mapping, retry and events."""

from .api_client import WirelessTagApiClient
from .events import EventSource
from .exceptions import (
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
from .property_map import MappedGroup, MappedPropertiesMixin, PropertySpec
from .retry import retry_until

__all__ = [
    "ApiCallError",
    "DuplicateEthCmdError",
    "EventSource",
    "InvalidOperationError",
    "MappedGroup",
    "MappedPropertiesMixin",
    "OperationIncompleteError",
    "OperationUnsupportedError",
    "PropertySpec",
    "RetryUnsuccessfulError",
    "TagDidNotRespondError",
    "TagManagerOfflineError",
    "TagManagerTimedOutError",
    "UnauthorizedAccessError",
    "WirelessTagApiClient",
    "WirelessTagException",
    "retry_until",
]
