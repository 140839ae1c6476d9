"""
HL7 v2 parsing.

Provides:
- parse: raw text -> ParseResult holding a Message or a ParseError
- parse_or_raise: same, raising the ParseError instead of returning it
- decompose_field: the repeat/component/subcomponent split of one field
- looks_like_hl7: cheap check that text could be an HL7 v2 message

Escape sequences are not interpreted. A delimiter character preceded by the
escape character is split like any other delimiter.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, cast

from .delimiters import encoding_block, resolve_delimiters
from .exceptions import ErrorKind, ParseError
from .model import (
    HEADER_NAME,
    SEGMENT_DELIMITER,
    Component,
    Delimiters,
    Field,
    Message,
    Repeat,
    Segment,
    Subcomponent,
)

LOG = logging.getLogger(__name__)

SEGMENT_NAME_RE = re.compile(r"^[A-Z][A-Z0-9]{2}$")
SNIPPET_LENGTH = 50
BYTE_ORDER_MARK = "\ufeff"


@dataclass(frozen=True)
class ParseResult:
    """
    Outcome of a parse: exactly one of ``message`` and ``error`` is set.
    """

    message: Optional[Message] = None
    error: Optional[ParseError] = None

    def __post_init__(self) -> None:
        if (self.message is None) == (self.error is None):
            raise ValueError("ParseResult needs exactly one of message or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Message:
        """Return the message, or raise the carried ParseError."""
        if self.error is not None:
            raise self.error
        return cast(Message, self.message)


# ------------------------------------------------------------------------------
# helpers
# ------------------------------------------------------------------------------


def normalize_line_endings(text: str) -> str:
    """Turn ``\\r\\n`` and ``\\n`` into the ``\\r`` segment delimiter."""
    return text.replace("\r\n", SEGMENT_DELIMITER).replace("\n", SEGMENT_DELIMITER)


def trim_message(text: str) -> str:
    """Strip surrounding whitespace and any byte-order mark."""
    return text.strip().strip(BYTE_ORDER_MARK).strip()


def split_segments(raw: str) -> List[str]:
    """Trim, normalize line endings and split into non-empty segment lines."""
    normalized = normalize_line_endings(trim_message(raw))
    return [line for line in normalized.split(SEGMENT_DELIMITER) if line]


def decompose_field(text: str, delimiters: Delimiters, index: int) -> Field:
    """
    Split one field's text into repeats, components and subcomponents.

    Each level always yields at least one element, so ``""`` becomes one
    repeat with one component with one empty subcomponent.
    """
    repeats = []
    for repeat_text in text.split(delimiters.repeat):
        components = []
        for component_text in repeat_text.split(delimiters.component):
            subcomponents = tuple(
                Subcomponent(value=v)
                for v in component_text.split(delimiters.subcomponent)
            )
            components.append(Component(subcomponents=subcomponents))
        repeats.append(Repeat(components=tuple(components)))
    return Field(index=index, repeats=tuple(repeats))


def _parse_header(line: str, delimiters: Delimiters) -> Segment:
    # MSH-1 is the field delimiter itself and MSH-2 is kept as one literal
    # leaf even though it contains delimiter characters.
    block = encoding_block(line, delimiters.field)
    fields = [
        Field.from_value(delimiters.field, 1),
        Field.from_value(block, 2),
    ]

    rest_start = len(HEADER_NAME) + 1 + len(block)
    if rest_start < len(line):
        remaining = line[rest_start + 1 :].split(delimiters.field)
        for i, token in enumerate(remaining, start=3):
            fields.append(decompose_field(token, delimiters, i))

    return Segment(name=HEADER_NAME, fields=tuple(fields))


def _parse_segment(line: str, delimiters: Delimiters, segment_index: int) -> Segment:
    parts = line.split(delimiters.field)
    name = parts[0]
    if not SEGMENT_NAME_RE.match(name):
        raise ParseError(
            ErrorKind.INVALID_SEGMENT_NAME,
            f'Invalid segment name: "{name}"',
            segment_index=segment_index,
            segment_name=name,
            snippet=line[:SNIPPET_LENGTH],
        )

    fields = tuple(
        decompose_field(token, delimiters, i) for i, token in enumerate(parts[1:], start=1)
    )
    return Segment(name=name, fields=fields)


# ------------------------------------------------------------------------------
# public API
# ------------------------------------------------------------------------------


def parse(raw: str) -> ParseResult:
    """
    Parse raw HL7 v2 text into the message tree.

    Parameters
    ----------
    raw : str
        Message text. Segments may be separated by CR, LF or CRLF; a trailing
        separator, surrounding whitespace and a leading byte-order mark are
        ignored.

    Returns
    -------
    ParseResult
        ``ok`` with the Message on success, otherwise the first ParseError
        found. No partial tree is returned.

    Raises
    ------
    TypeError
        If raw is not a string.
    """
    if not isinstance(raw, str):
        raise TypeError(f"raw must be str, got {type(raw).__name__}")

    lines = split_segments(raw)

    if not lines:
        return _failed(ParseError(ErrorKind.EMPTY_INPUT, "No segments found in input"))

    header_line = lines[0]
    if not header_line.startswith(HEADER_NAME):
        return _failed(
            ParseError(
                ErrorKind.MISSING_HEADER,
                f"HL7 message must start with {HEADER_NAME} segment",
                segment_index=0,
                snippet=header_line[:SNIPPET_LENGTH],
            )
        )

    try:
        delimiters = resolve_delimiters(header_line)
    except ParseError as e:
        return _failed(
            ParseError(
                ErrorKind.MALFORMED_HEADER,
                str(e),
                segment_index=0,
                segment_name=HEADER_NAME,
                snippet=header_line[:SNIPPET_LENGTH],
            )
        )

    segments = [_parse_header(header_line, delimiters)]
    try:
        for i, line in enumerate(lines[1:], start=1):
            segments.append(_parse_segment(line, delimiters, i))
    except ParseError as e:
        return _failed(e)

    LOG.debug("Parsed %d segment(s)", len(segments))
    return ParseResult(message=Message(delimiters=delimiters, segments=tuple(segments)))


def parse_or_raise(raw: str) -> Message:
    """
    Parse raw HL7 v2 text, raising instead of returning a failed result.

    Raises
    ------
    ParseError
        If the text is not a structurally valid HL7 v2 message.
    TypeError
        If raw is not a string.
    """
    return parse(raw).unwrap()


def looks_like_hl7(text: str) -> bool:
    """Return True if text starts with an MSH segment long enough to parse."""
    normalized = normalize_line_endings(trim_message(text))
    return normalized.startswith(HEADER_NAME) and len(normalized) > 8


def _failed(error: ParseError) -> ParseResult:
    LOG.debug("Parse failed (%s): %s", error.kind.value, error)
    return ParseResult(error=error)
