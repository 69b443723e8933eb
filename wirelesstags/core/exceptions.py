"""Custom exceptions for the Wireless Tags client library."""

import json
from typing import Any, Optional


class WirelessTagException(Exception):
    """Base exception for the Wireless Tags client library."""

    pass


class ApiCallError(WirelessTagException):
    """Exception for a failed call to the cloud API.

    Args:
        message: Reason given by the API or the transport
        status: HTTP status code, if a response was received
        url: Full URL of the endpoint called
        request_body: JSON body sent with the request
    """

    def __init__(
        self,
        message: Optional[str] = None,
        status: Optional[int] = None,
        url: Optional[str] = None,
        request_body: Optional[Any] = None,
    ) -> None:
        self.status = status
        self.url = url
        self.request_body = request_body
        text = f"{message}\n" if message else ""
        text += f"Calling {url or 'WirelessTag API'}"
        if request_body:
            text += f" with body {json.dumps(request_body, default=str)}"
        text += f" failed with status {status}"
        super().__init__(text)


class TagDidNotRespondError(ApiCallError):
    """The tag needed to respond to the call but did not."""

    pass


class DuplicateEthCmdError(ApiCallError):
    """The same command was sent again before the first one got a response."""

    pass


class TagManagerOfflineError(ApiCallError):
    """The tag manager is offline."""

    pass


class TagManagerTimedOutError(ApiCallError):
    """The tag manager needed to respond but timed out."""

    pass


class UnauthorizedAccessError(ApiCallError):
    """The signed-in account is not authorized for the call."""

    pass


class InvalidOperationError(ApiCallError):
    """The requested operation is not valid."""

    pass


def _describe(obj: Any) -> str:
    name = getattr(obj, "name", None)
    return str(name) if name is not None else type(obj).__name__


class OperationUnsupportedError(WirelessTagException):
    """The object does not support the requested operation.

    Not retryable; check ``can_arm()``/``can_disarm()`` first to avoid it.
    """

    def __init__(
        self, message: Optional[str] = None, obj: Any = None, operation: Optional[str] = None
    ) -> None:
        self.object = obj
        self.operation = operation
        text = f"{message}\n" if message else ""
        text += f"{_describe(obj) if obj is not None else 'object'} does not support "
        text += operation or "operation"
        super().__init__(text)


class OperationIncompleteError(WirelessTagException):
    """The API call succeeded, but the object's state failed to reflect it."""

    def __init__(
        self, message: Optional[str] = None, obj: Any = None, operation: Optional[str] = None
    ) -> None:
        self.object = obj
        self.operation = operation
        super().__init__(self._compose(message))

    def _compose(self, message: Optional[str], suffix: str = " remains incomplete.") -> str:
        text = f"{message}\n" if message else ""
        text += "Operation"
        if self.operation:
            text += f" '{self.operation}'"
        if self.object is not None:
            text += f" on {_describe(self.object)}"
        return text + suffix


class RetryUnsuccessfulError(OperationIncompleteError):
    """One confirmation attempt found the state unchanged.

    Raised by success checks passed to ``retry_until()``, which turns the
    last one into an ``OperationIncompleteError`` once attempts run out.
    """

    def __init__(
        self,
        message: Optional[str] = None,
        obj: Any = None,
        operation: Optional[str] = None,
        attempt: Optional[int] = None,
    ) -> None:
        self.attempt = attempt
        super().__init__(message, obj, operation)
        if attempt:
            self.args = (
                self._compose(message, f" remains incomplete, despite retrying {attempt} times."),
            )


# vendor ExceptionType suffix -> error class
API_ERROR_TYPES = {
    "TagDidNotRespondException": TagDidNotRespondError,
    "DuplicateEthCmdException": DuplicateEthCmdError,
    "TagManagerOfflineException": TagManagerOfflineError,
    "TagManagerTimedOutException": TagManagerTimedOutError,
    "UnauthorizedAccessException": UnauthorizedAccessError,
    "InvalidOperationException": InvalidOperationError,
}
