"""
hl7_v2_codec: HL7 v2 message parser and serializer.

This package provides:
- A parser from pipe-and-hat text to a Message -> Segment -> Field -> Repeat
  -> Component -> Subcomponent tree, reading delimiters from the MSH segment.
- A serializer from that tree back to text.
- Field-level re-parsing, copy-on-write edits and change detection for
  editors built on the tree.
- A CLI (hl7-codec) for parsing, normalizing and comparing messages.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .delimiters import resolve_delimiters
from .exceptions import EditError, ErrorKind, HL7CodecError, ParseError
from .field_reparse import reparse_field
from .model import (
    Component,
    Delimiters,
    Field,
    Message,
    Repeat,
    Segment,
    Subcomponent,
)
from .parser import ParseResult, parse, parse_or_raise
from .serializer import serialize, serialize_field, serialize_segment

__all__ = [
    "__version__",
    "Component",
    "Delimiters",
    "EditError",
    "ErrorKind",
    "Field",
    "HL7CodecError",
    "Message",
    "ParseError",
    "ParseResult",
    "Repeat",
    "Segment",
    "Subcomponent",
    "parse",
    "parse_or_raise",
    "reparse_field",
    "resolve_delimiters",
    "serialize",
    "serialize_field",
    "serialize_segment",
]
