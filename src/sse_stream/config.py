"""Parser configuration."""

from __future__ import annotations

import codecs
import os
from collections.abc import Mapping
from dataclasses import dataclass

from sse_stream.errors import ConfigurationError

DEFAULT_EVENT_SEPARATOR = "\n\n"
DEFAULT_LINE_SEPARATOR = "\n"
DEFAULT_FIELD_SEPARATOR = ":"


@dataclass(frozen=True)
class ParserConfig:
    """Separators and text decoding settings for the default pipeline."""

    event_separator: str = DEFAULT_EVENT_SEPARATOR
    line_separator: str = DEFAULT_LINE_SEPARATOR
    field_separator: str = DEFAULT_FIELD_SEPARATOR
    encoding: str = "utf-8"
    decode_errors: str = "replace"  # "strict", "replace", "ignore"

    def __post_init__(self) -> None:
        for name in ("event_separator", "line_separator", "field_separator"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise ConfigurationError(f"{name} must be a non-empty string, got {value!r}")

        if self.line_separator == self.event_separator:
            raise ConfigurationError("line_separator and event_separator must differ")

        try:
            codecs.lookup(self.encoding)
        except LookupError as e:
            raise ConfigurationError(f"Unknown encoding: {self.encoding!r}", cause=e) from e

        try:
            codecs.lookup_error(self.decode_errors)
        except LookupError as e:
            raise ConfigurationError(
                f"Unknown decode error handler: {self.decode_errors!r}", cause=e
            ) from e

    @classmethod
    def from_env(cls, *, environ: Mapping[str, str] | None = None) -> ParserConfig:
        """Build a config from SSE_STREAM_* environment variables."""
        env = environ if environ is not None else os.environ
        overrides: dict[str, str] = {}

        encoding = env.get("SSE_STREAM_ENCODING")
        if encoding:
            overrides["encoding"] = encoding

        decode_errors = env.get("SSE_STREAM_DECODE_ERRORS")
        if decode_errors:
            overrides["decode_errors"] = decode_errors

        return cls(**overrides)
