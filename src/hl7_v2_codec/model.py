"""
HL7 v2 message data model.

The hierarchy is Message -> Segment -> Field -> Repeat -> Component ->
Subcomponent. Every container below Segment is a non-empty tuple, so even a
scalar field is one repeat holding one component holding one subcomponent.
Consumers can recurse through the tree without checking for missing levels.

Nodes are frozen pydantic models. Edits build new nodes along the path to the
changed leaf (see hl7_v2_codec.edit) and leave any earlier tree untouched.
"""

from __future__ import annotations

from typing import Literal, Optional, Tuple

import pydantic
from pydantic import BaseModel, ConfigDict

__all__ = [
    "HEADER_NAME",
    "SEGMENT_DELIMITER",
    "Delimiters",
    "DEFAULT_DELIMITERS",
    "Subcomponent",
    "Component",
    "Repeat",
    "Field",
    "Segment",
    "Message",
    "format_path",
]

HEADER_NAME = "MSH"
SEGMENT_DELIMITER = "\r"


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class Delimiters(_Node):
    """
    The delimiter characters a message was written with.

    Attributes
    ----------
    field, component, repeat, escape, subcomponent : str
        Single characters read from the header. The escape character is
        recorded but never interpreted.
    segment : str
        Always a carriage return; it is not read from the message.
    """

    field: str = pydantic.Field(default="|", min_length=1, max_length=1)
    component: str = pydantic.Field(default="^", min_length=1, max_length=1)
    repeat: str = pydantic.Field(default="~", min_length=1, max_length=1)
    escape: str = pydantic.Field(default="\\", min_length=1, max_length=1)
    subcomponent: str = pydantic.Field(default="&", min_length=1, max_length=1)
    segment: Literal["\r"] = SEGMENT_DELIMITER

    @property
    def encoding_characters(self) -> str:
        """MSH-2 text for these delimiters, e.g. ``^~\\&``."""
        return self.component + self.repeat + self.escape + self.subcomponent


DEFAULT_DELIMITERS = Delimiters()


class Subcomponent(_Node):
    """Leaf value. An empty string is a present-but-empty element."""

    value: str = ""


class Component(_Node):
    subcomponents: Tuple[Subcomponent, ...] = pydantic.Field(min_length=1)


class Repeat(_Node):
    components: Tuple[Component, ...] = pydantic.Field(min_length=1)


class Field(_Node):
    """
    One field of a segment.

    ``index`` is the 1-based HL7 position and is authoritative; the order of
    fields inside ``Segment.fields`` is not.
    """

    index: int = pydantic.Field(ge=1)
    repeats: Tuple[Repeat, ...] = pydantic.Field(min_length=1)

    @classmethod
    def from_value(cls, value: str, index: int) -> "Field":
        """Build a field holding a single leaf."""
        leaf = Component(subcomponents=(Subcomponent(value=value),))
        return cls(index=index, repeats=(Repeat(components=(leaf,)),))


class Segment(_Node):
    name: str = pydantic.Field(pattern=r"^[A-Z][A-Z0-9]{2}$")
    fields: Tuple[Field, ...] = ()

    def get_field(self, index: int) -> Optional[Field]:
        """Return the field with HL7 index ``index``, or None."""
        for f in self.fields:
            if f.index == index:
                return f
        return None


class Message(_Node):
    delimiters: Delimiters = DEFAULT_DELIMITERS
    segments: Tuple[Segment, ...] = pydantic.Field(min_length=1)

    @property
    def header(self) -> Segment:
        return self.segments[0]


def format_path(
    segment_name: str,
    field_index: int,
    repeat_index: Optional[int] = None,
    component_index: Optional[int] = None,
    subcomponent_index: Optional[int] = None,
) -> str:
    """
    Render a location in HL7 notation, e.g. ``PID-5[1].2.1``.

    Repeat, component and subcomponent indices are taken 0-based and shown
    1-based.
    """
    path = f"{segment_name}-{field_index}"
    if repeat_index is not None:
        path += f"[{repeat_index + 1}]"
    if component_index is not None:
        path += f".{component_index + 1}"
    if subcomponent_index is not None:
        path += f".{subcomponent_index + 1}"
    return path
