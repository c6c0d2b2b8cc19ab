"""Tests for ParserConfig."""

import pytest

from sse_stream.config import ParserConfig
from sse_stream.errors import ConfigurationError


class TestParserConfig:
    def test_defaults(self):
        config = ParserConfig()
        assert config.event_separator == "\n\n"
        assert config.line_separator == "\n"
        assert config.field_separator == ":"
        assert config.encoding == "utf-8"
        assert config.decode_errors == "replace"

    def test_is_frozen(self):
        config = ParserConfig()
        with pytest.raises(AttributeError):
            config.encoding = "latin-1"  # type: ignore[misc]

    @pytest.mark.parametrize("field", ["event_separator", "line_separator", "field_separator"])
    def test_empty_separator_rejected(self, field):
        with pytest.raises(ConfigurationError, match=field):
            ParserConfig(**{field: ""})

    def test_equal_line_and_event_separators_rejected(self):
        with pytest.raises(ConfigurationError, match="must differ"):
            ParserConfig(event_separator="\n", line_separator="\n")

    def test_unknown_encoding_rejected(self):
        with pytest.raises(ConfigurationError, match="Unknown encoding") as excinfo:
            ParserConfig(encoding="no-such-codec")
        assert isinstance(excinfo.value.cause, LookupError)


    def test_unknown_decode_error_handler_rejected(self):
        with pytest.raises(ConfigurationError, match="decode error handler") as excinfo:
            ParserConfig(decode_errors="bogus")
        assert isinstance(excinfo.value.cause, LookupError)

    def test_known_decode_error_handlers_accepted(self):
        for handler in ("strict", "ignore", "replace"):
            assert ParserConfig(decode_errors=handler).decode_errors == handler


class TestFromEnv:
    def test_reads_overrides(self):
        config = ParserConfig.from_env(
            environ={"SSE_STREAM_ENCODING": "latin-1", "SSE_STREAM_DECODE_ERRORS": "strict"}
        )
        assert config.encoding == "latin-1"
        assert config.decode_errors == "strict"

    def test_empty_environment_uses_defaults(self):
        assert ParserConfig.from_env(environ={}) == ParserConfig()

    def test_invalid_encoding_from_env(self):
        with pytest.raises(ConfigurationError):
            ParserConfig.from_env(environ={"SSE_STREAM_ENCODING": "bogus-codec"})
