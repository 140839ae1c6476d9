"""
Custom exceptions for hl7_v2_codec.

All exceptions inherit from HL7CodecError so that callers can catch
codec-specific errors without grabbing unrelated built-in exceptions.
"""

from __future__ import annotations

import enum
from typing import Optional


class ErrorKind(str, enum.Enum):
    """Structural problems that abort a parse."""

    EMPTY_INPUT = "EmptyInput"
    MISSING_HEADER = "MissingHeader"
    MALFORMED_HEADER = "MalformedHeader"
    INVALID_SEGMENT_NAME = "InvalidSegmentName"


class HL7CodecError(Exception):
    """Base class for all hl7_v2_codec exceptions."""

    pass


class ParseError(HL7CodecError):
    """
    Describes why an HL7 v2 message could not be parsed.

    Instances are normally returned inside a ParseResult rather than raised;
    ParseResult.unwrap() raises them for callers that prefer exceptions.

    Attributes
    ----------
    kind : ErrorKind
        Category of the failure.
    segment_index : int or None
        0-based position of the offending segment, when known.
    segment_name : str or None
        Name token of the offending segment, when known.
    snippet : str or None
        First characters of the offending line, for diagnostics.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        segment_index: Optional[int] = None,
        segment_name: Optional[str] = None,
        snippet: Optional[str] = None,
    ) -> None:
        self.kind = kind
        self.segment_index = segment_index
        self.segment_name = segment_name
        self.snippet = snippet
        super().__init__(message)

    def __repr__(self) -> str:
        return (
            f"ParseError(kind={self.kind.value}, message={str(self)!r}, "
            f"segment_index={self.segment_index!r}, "
            f"segment_name={self.segment_name!r})"
        )


class EditError(HL7CodecError):
    """Raised when an edit targets a position that does not exist."""

    pass
