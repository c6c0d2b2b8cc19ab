"""Incremental Server-Sent Events parser with pull, push and collect consumption."""

from sse_stream.config import ParserConfig
from sse_stream.decoding import decode_chunks
from sse_stream.errors import (
    ConfigurationError,
    InvalidInputError,
    MalformedLineWarning,
    ReaderLockedError,
    ResponseError,
    SSEStreamError,
    UpstreamReadError,
)
from sse_stream.fields import EventFieldParser, FieldMap
from sse_stream.client import connect
from sse_stream.pipeline import FieldMapStage, ParsingPipeline, Stage, parse_stream
from sse_stream.splitter import EventBlockSplitter
from sse_stream.stream import (
    ReadResult,
    SSEStream,
    StreamReader,
    Subscription,
    SubscriptionState,
)

__all__ = [
    "ConfigurationError",
    "EventBlockSplitter",
    "EventFieldParser",
    "FieldMap",
    "FieldMapStage",
    "InvalidInputError",
    "MalformedLineWarning",
    "ParserConfig",
    "ParsingPipeline",
    "ReadResult",
    "ReaderLockedError",
    "ResponseError",
    "SSEStream",
    "SSEStreamError",
    "Stage",
    "StreamReader",
    "Subscription",
    "SubscriptionState",
    "UpstreamReadError",
    "connect",
    "decode_chunks",
    "parse_stream",
]
