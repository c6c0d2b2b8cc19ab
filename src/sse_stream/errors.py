"""Error hierarchy for the SSE stream parser."""

from __future__ import annotations

from dataclasses import dataclass


class SSEStreamError(Exception):
    """Base error for all parser errors."""

    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class InvalidInputError(SSEStreamError, TypeError):
    """The configured source is not an async-iterable stream."""


class ConfigurationError(SSEStreamError):
    """Parser misconfiguration."""


class UpstreamReadError(SSEStreamError):
    """The source or the decoding stage failed during a read."""


class ReaderLockedError(SSEStreamError):
    """The stream reader is already held by another consumer."""


class ResponseError(SSEStreamError):
    """HTTP response that cannot be consumed as an event stream."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        body: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause=cause)
        self.status_code = status_code
        self.body = body


# --- Non-fatal issues ---


@dataclass(frozen=True)
class MalformedLineWarning:
    """A field line without a key/value separator. The line is skipped."""

    line: str
    message: str
