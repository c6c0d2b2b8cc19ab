"""Parsing pipeline: source -> text chunks -> stage -> outputs."""

from __future__ import annotations

from typing import Any, AsyncIterator, Generic, Iterable, Protocol, TypeVar

from sse_stream.config import ParserConfig
from sse_stream.decoding import decode_chunks
from sse_stream.errors import ConfigurationError, InvalidInputError
from sse_stream.fields import EventFieldParser, FieldMap
from sse_stream.splitter import EventBlockSplitter
from sse_stream.stream import SSEStream

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class Stage(Protocol[T_co]):
    """Transform text chunks into output values.

    ``feed`` is called once per text chunk in arrival order and ``flush``
    once when the source is exhausted. Both must be synchronous.
    """

    def feed(self, chunk: str) -> Iterable[T_co]: ...

    def flush(self) -> Iterable[T_co]: ...


class FieldMapStage:
    """Default stage: event block splitting followed by field parsing."""

    def __init__(self, config: ParserConfig | None = None):
        config = config or ParserConfig()
        self.splitter = EventBlockSplitter(config.event_separator)
        self.parser = EventFieldParser(
            line_separator=config.line_separator,
            field_separator=config.field_separator,
        )

    def feed(self, chunk: str) -> list[FieldMap]:
        return self._parse_all(self.splitter.feed(chunk))

    def flush(self) -> list[FieldMap]:
        return self._parse_all(self.splitter.flush())

    def _parse_all(self, blocks: list[str]) -> list[FieldMap]:
        results: list[FieldMap] = []
        for block in blocks:
            fields = self.parser.parse(block)
            if fields is not None:
                results.append(fields)
        return results


def validate_source(source: Any) -> None:
    """Reject anything that is not an async-iterable stream."""
    if isinstance(source, (str, bytes, bytearray)) or not hasattr(source, "__aiter__"):
        raise InvalidInputError(
            f"The source must be an async iterable of bytes or str, got {type(source).__name__}"
        )


def _validate_stage(stage: Any) -> None:
    for method in ("feed", "flush"):
        if not callable(getattr(stage, method, None)):
            raise ConfigurationError(
                f"Stage {type(stage).__name__} has no callable {method}() method"
            )


class ParsingPipeline(Generic[T]):
    """Compose a source of chunks with a parsing stage.

    When ``stage`` is given it replaces the default splitter and parser
    entirely. The source is validated here, before anything is read.
    """

    def __init__(
        self,
        source: Any,
        stage: Stage[T] | None = None,
        *,
        config: ParserConfig | None = None,
    ):
        validate_source(source)
        if stage is not None:
            _validate_stage(stage)

        self._config = config or ParserConfig()
        self._source = source
        self.stage: Stage[Any] = stage if stage is not None else FieldMapStage(self._config)

    def __aiter__(self) -> AsyncIterator[T]:
        return self._run()

    async def _run(self) -> AsyncIterator[T]:
        chunks = decode_chunks(
            self._source,
            encoding=self._config.encoding,
            errors=self._config.decode_errors,
        )
        async for chunk in chunks:
            for value in self.stage.feed(chunk):
                yield value

        for value in self.stage.flush():
            yield value


def parse_stream(
    source: Any,
    stage: Stage[Any] | None = None,
    *,
    config: ParserConfig | None = None,
) -> SSEStream[Any]:
    """Parse an async byte (or text) stream into an ``SSEStream``.

    With no ``stage`` the values are field maps such as
    ``{"event": "message", "data": "hi"}``.
    """
    return SSEStream(ParsingPipeline(source, stage, config=config))
