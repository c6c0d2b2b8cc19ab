"""Parse one SSE event block into a field map."""

from __future__ import annotations

import logging

from sse_stream.config import DEFAULT_FIELD_SEPARATOR, DEFAULT_LINE_SEPARATOR
from sse_stream.errors import MalformedLineWarning

logger = logging.getLogger(__name__)

FieldMap = dict[str, str]


class EventFieldParser:
    """Turn event blocks into ordered ``{key: value}`` maps.

    Keys are usually ``event``, ``data``, ``id`` and ``retry``, but any
    non-empty key is kept.

    - Each line is split at the *first* field separator only, so values such
      as URLs keep their colons.
    - Values are stripped of surrounding whitespace.
    - Lines without a separator are recorded in ``warnings`` and skipped.
    - Blank lines and lines with a blank key are skipped silently.
    - A repeated key overwrites the earlier value.
    """

    def __init__(
        self,
        *,
        line_separator: str = DEFAULT_LINE_SEPARATOR,
        field_separator: str = DEFAULT_FIELD_SEPARATOR,
    ):
        self._line_separator = line_separator
        self._field_separator = field_separator
        self.warnings: list[MalformedLineWarning] = []

    def parse(self, block: str) -> FieldMap | None:
        """Return the field map for ``block``, or None if it has no fields."""
        fields: FieldMap = {}

        for line in block.split(self._line_separator):
            if not line.strip():
                continue
            key, sep, value = line.partition(self._field_separator)
            if not sep:
                self._report_malformed(line)
                continue
            if not key.strip():
                continue
            fields[key] = value.strip()

        return fields or None

    def _report_malformed(self, line: str) -> None:
        message = f"{self._field_separator!r} is not found in the SSE line"
        self.warnings.append(MalformedLineWarning(line=line, message=message))
        logger.warning("Skipping malformed SSE line %r: %s", line, message)
