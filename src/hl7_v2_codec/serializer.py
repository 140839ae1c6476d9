"""
HL7 v2 serialization.

Provides:
- serialize: Message -> raw text (CR-separated segments)
- serialize_segment: one segment, for callers re-rendering a single line
- serialize_field: one field, joined with its message's delimiters
- trim_trailing_delimiters: optional cleanup of trailing empty fields

Leaf values are written as-is; no escaping is applied.
"""

from __future__ import annotations

from operator import attrgetter
from typing import Iterable, List

from .model import HEADER_NAME, Delimiters, Field, Message, Segment


def serialize_field(field: Field, delimiters: Delimiters) -> str:
    """Join a field's repeats, components and subcomponents back into text."""
    return delimiters.repeat.join(
        delimiters.component.join(
            delimiters.subcomponent.join(sub.value for sub in comp.subcomponents)
            for comp in rep.components
        )
        for rep in field.repeats
    )


def _join_fields(fields: Iterable[Field], delimiters: Delimiters, last_index: int) -> str:
    # Missing indices are written as bare field delimiters so that every field
    # keeps its HL7 position.
    out: List[str] = []
    for f in sorted(fields, key=attrgetter("index")):
        out.append(delimiters.field * (f.index - last_index - 1))
        out.append(delimiters.field)
        out.append(serialize_field(f, delimiters))
        last_index = f.index
    return "".join(out)


def _serialize_header(segment: Segment, delimiters: Delimiters) -> str:
    # MSH-1 is the delimiter written right after the name, so it is never
    # emitted as its own token. MSH-2 follows with no delimiter in between.
    msh2 = segment.get_field(2)
    encoding = (
        serialize_field(msh2, delimiters)
        if msh2 is not None
        else delimiters.encoding_characters
    )
    rest = (f for f in segment.fields if f.index > 2)
    return segment.name + delimiters.field + encoding + _join_fields(rest, delimiters, 2)


def serialize_segment(
    segment: Segment, delimiters: Delimiters, is_header: bool = False
) -> str:
    """
    Serialize one segment without a segment delimiter.

    Parameters
    ----------
    segment : Segment
        Segment to render.
    delimiters : Delimiters
        Delimiters of the owning message.
    is_header : bool, default False
        Apply the MSH-1/MSH-2 special case.

    Returns
    -------
    str
        Segment text, e.g. ``PID|1||12345``.
    """
    if is_header:
        return _serialize_header(segment, delimiters)
    return segment.name + _join_fields(segment.fields, delimiters, 0)


def serialize(message: Message, include_trailing_delimiter: bool = True) -> str:
    """
    Serialize a message back to HL7 v2 text.

    Parameters
    ----------
    message : Message
        Parsed (and possibly edited) message.
    include_trailing_delimiter : bool, default True
        Append a final ``\\r`` after the last segment.

    Returns
    -------
    str
        Segments joined by the segment delimiter, using the message's own
        delimiters throughout.
    """
    delimiters = message.delimiters
    lines = [
        serialize_segment(
            seg, delimiters, is_header=(i == 0 and seg.name == HEADER_NAME)
        )
        for i, seg in enumerate(message.segments)
    ]
    text = delimiters.segment.join(lines)
    if include_trailing_delimiter:
        text += delimiters.segment
    return text


def trim_trailing_delimiters(serialized: str, delimiters: Delimiters) -> str:
    """
    Drop trailing empty fields from every non-header segment of serialized text.

    The header is left alone: its trailing delimiter may be MSH-1 itself.
    """
    trimmed = []
    for line in serialized.split(delimiters.segment):
        if not line.startswith(HEADER_NAME):
            line = line.rstrip(delimiters.field)
        trimmed.append(line)
    return delimiters.segment.join(trimmed)
