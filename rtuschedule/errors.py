"""
Error taxonomy.

Every failure surfaced by the package is one of:

    ValidationError       bad caller input, raised before any network access
    TransportError        network failure, timeout or non-2xx status
    InvalidResponseError  upstream answered without a body where data was expected
    DiscoveryError        anything that went wrong while discovering periods/programs

None of them is retried internally.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional


class ScheduleError(Exception):
    """Base class for all rtuschedule errors."""


class ValidationError(ScheduleError, ValueError):
    """A parameter was missing or out of range."""

    def __init__(self, operation: str, parameter: str, value: Any) -> None:
        self.operation = operation
        self.parameter = parameter
        self.value = value
        super().__init__(f"{operation}: invalid {parameter} {value!r}")


class TransportError(ScheduleError):
    """The HTTP request itself failed (connection, timeout, status code)."""

    def __init__(
        self,
        operation: str,
        params: Optional[Mapping[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.operation = operation
        self.params = dict(params or {})
        self.cause = cause
        super().__init__(f"{operation}: request failed ({cause})")


class InvalidResponseError(ScheduleError):
    """The upstream returned an empty or null body."""

    def __init__(self, operation: str, params: Optional[Mapping[str, Any]] = None) -> None:
        self.operation = operation
        self.params = dict(params or {})
        super().__init__(f"{operation}: invalid response data for {self.params}")


class DiscoveryError(ScheduleError):
    """Fetching or parsing the landing page failed."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        self.cause = cause
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
