"""
Delimiter discovery.

HL7 v2 messages declare their own delimiters: the character after ``MSH`` is
the field delimiter, and MSH-2 lists the component, repeat, escape and
subcomponent characters in that order.
"""

from __future__ import annotations

import logging

from .exceptions import ErrorKind, ParseError
from .model import DEFAULT_DELIMITERS, HEADER_NAME, Delimiters

LOG = logging.getLogger(__name__)

# "MSH" + field delimiter + four encoding characters
MIN_HEADER_LENGTH = 8

_ENCODING_SLOTS = ("component", "repeat", "escape", "subcomponent")


def encoding_block(header_line: str, field_delimiter: str) -> str:
    """
    Return the MSH-2 text of a header line.

    The block starts after the field delimiter and runs to the next field
    delimiter, or to the end of the line when there is none.
    """
    start = len(HEADER_NAME) + 1
    end = header_line.find(field_delimiter, start)
    if end < 0:
        return header_line[start:]
    return header_line[start:end]


def resolve_delimiters(header_line: str) -> Delimiters:
    """
    Read the delimiters declared by a header segment.

    Parameters
    ----------
    header_line : str
        The first segment of a message, already split from the rest.

    Returns
    -------
    Delimiters
        The resolved delimiter record. Encoding slots missing from a short
        MSH-2 fall back to the conventional ``^~\\&`` characters.

    Raises
    ------
    ParseError
        With kind MALFORMED_HEADER if the line does not start with ``MSH`` or
        is too short to hold a field delimiter and four encoding characters.
    """
    if not header_line.startswith(HEADER_NAME) or len(header_line) < MIN_HEADER_LENGTH:
        raise ParseError(
            ErrorKind.MALFORMED_HEADER,
            f"Could not extract delimiters from {HEADER_NAME} segment",
            segment_name=HEADER_NAME,
            snippet=header_line[:50],
        )

    field_delimiter = header_line[len(HEADER_NAME)]
    block = encoding_block(header_line, field_delimiter)

    if len(block) < len(_ENCODING_SLOTS):
        LOG.warning(
            "Incomplete encoding characters %r; using defaults for missing slots",
            block,
        )

    slots = {}
    for pos, name in enumerate(_ENCODING_SLOTS):
        slots[name] = block[pos] if pos < len(block) else getattr(DEFAULT_DELIMITERS, name)

    return Delimiters(field=field_delimiter, **slots)
