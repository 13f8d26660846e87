"""Classified prediction failures.

Failures are exceptions so callers can ``raise`` them, but the client
returns them inside a ``PredictionResult`` instead of raising.
"""

from __future__ import annotations

from enum import StrEnum


class FailureKind(StrEnum):
    CONNECTION = "connection"
    TIMEOUT = "timeout"
    SERVER_ERROR = "server_error"
    DECODE = "decode"


class PredictionFailure(Exception):
    """Base class for every failure a prediction request can end in."""

    kind: FailureKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConnectionFailure(PredictionFailure):
    """Transport-level failure before any response was received."""

    kind = FailureKind.CONNECTION


class Timeout(PredictionFailure):
    """The configured deadline elapsed before a complete response arrived."""

    kind = FailureKind.TIMEOUT

    def __init__(self, timeout: float) -> None:
        super().__init__(f"No complete response within {timeout:g}s")
        self.timeout = timeout


class ServerError(PredictionFailure):
    """The server answered with a non-success HTTP status."""

    kind = FailureKind.SERVER_ERROR

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Server returned HTTP {status_code}")
        self.status_code = status_code
        self.body = body


class DecodeFailure(PredictionFailure):
    """The response body was not a JSON array of class/prob objects."""

    kind = FailureKind.DECODE

    def __init__(self, detail: str, body: str) -> None:
        super().__init__(f"Could not decode prediction response: {detail}")
        self.detail = detail
        self.body = body
