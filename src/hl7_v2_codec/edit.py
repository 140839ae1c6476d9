"""
Copy-on-write edits of a parsed message.

Every function returns a new Message and leaves its input untouched, so an
"original" tree can be kept and compared against the edited one (see
hl7_v2_codec.diff). Only the nodes on the path from the message to the edited
leaf are rebuilt; untouched segments and fields are shared.

Scheduling re-serialization after edits (debouncing etc.) is the caller's
concern.
"""

from __future__ import annotations

from operator import attrgetter
from typing import Optional, Sequence, Tuple, TypeVar

from .exceptions import EditError
from .field_reparse import reparse_field
from .model import Component, Field, Message, Repeat, Segment, Subcomponent

T = TypeVar("T")

_EMPTY_COMPONENT = Component(subcomponents=(Subcomponent(value=""),))
_EMPTY_REPEAT = Repeat(components=(_EMPTY_COMPONENT,))


# ------------------------------------------------------------------------------
# helpers
# ------------------------------------------------------------------------------


def _replaced(seq: Sequence[T], index: int, item: T) -> Tuple[T, ...]:
    return tuple(seq[:index]) + (item,) + tuple(seq[index + 1 :])


def _padded(seq: Sequence[T], index: int, filler: T) -> Tuple[T, ...]:
    """Extend seq with filler until position index exists."""
    missing = index + 1 - len(seq)
    return tuple(seq) + (filler,) * max(missing, 0)


def _segment_at(message: Message, segment_index: int) -> Segment:
    if not 0 <= segment_index < len(message.segments):
        raise EditError(
            f"segment index {segment_index} out of range "
            f"(message has {len(message.segments)} segments)"
        )
    return message.segments[segment_index]


def _check_position(**positions: int) -> None:
    for name, value in positions.items():
        if value < 0:
            raise EditError(f"{name} must be non-negative, got {value}")


def _check_field_index(field_index: int) -> None:
    if field_index < 1:
        raise EditError(f"field_index must be >= 1, got {field_index}")


def _with_segment(message: Message, segment_index: int, segment: Segment) -> Message:
    segments = _replaced(message.segments, segment_index, segment)
    return message.model_copy(update={"segments": segments})


# ------------------------------------------------------------------------------
# selectors
# ------------------------------------------------------------------------------


def get_field(message: Message, segment_index: int, field_index: int) -> Optional[Field]:
    """Return the field at (segment, HL7 field index), or None if absent."""
    if not 0 <= segment_index < len(message.segments):
        return None
    return message.segments[segment_index].get_field(field_index)


def get_leaf_value(
    message: Message,
    segment_index: int,
    field_index: int,
    repeat_index: int,
    component_index: int,
    subcomponent_index: int,
) -> str:
    """Return a leaf value, or "" when any level on the way is absent."""
    value = leaf_at(
        message, segment_index, field_index, repeat_index, component_index, subcomponent_index
    )
    return "" if value is None else value


def leaf_at(
    message: Message,
    segment_index: int,
    field_index: int,
    repeat_index: int,
    component_index: int,
    subcomponent_index: int,
) -> Optional[str]:
    """
    Return a leaf value, or None when any level on the way is absent.

    Negative positions name no leaf; they do not count from the end.
    """
    field = get_field(message, segment_index, field_index)
    if field is None:
        return None
    if not 0 <= repeat_index < len(field.repeats):
        return None
    rep = field.repeats[repeat_index]
    if not 0 <= component_index < len(rep.components):
        return None
    comp = rep.components[component_index]
    if not 0 <= subcomponent_index < len(comp.subcomponents):
        return None
    return comp.subcomponents[subcomponent_index].value


# ------------------------------------------------------------------------------
# edits
# ------------------------------------------------------------------------------


def with_field(message: Message, segment_index: int, field: Field) -> Message:
    """
    Return a copy of message with ``field`` placed in the given segment.

    A field with the same index is replaced in place; otherwise the new field
    is inserted and the segment's fields are ordered by index.

    Raises
    ------
    EditError
        If segment_index does not name a segment.
    """
    segment = _segment_at(message, segment_index)
    fields = list(segment.fields)
    for pos, existing in enumerate(fields):
        if existing.index == field.index:
            fields[pos] = field
            break
    else:
        fields.append(field)
        fields.sort(key=attrgetter("index"))
    return _with_segment(
        message, segment_index, segment.model_copy(update={"fields": tuple(fields)})
    )


def with_field_text(
    message: Message, segment_index: int, field_index: int, text: str
) -> Message:
    """
    Re-parse flat field text and place the result with with_field().

    Raises
    ------
    EditError
        If segment_index does not name a segment or field_index is below 1.
    """
    _check_field_index(field_index)
    field = reparse_field(text, message.delimiters, field_index)
    return with_field(message, segment_index, field)


def with_leaf_value(
    message: Message,
    segment_index: int,
    field_index: int,
    repeat_index: int,
    component_index: int,
    subcomponent_index: int,
    value: str,
) -> Message:
    """
    Return a copy of message with one leaf set to ``value``.

    Missing levels are created: an absent field is added, and repeats,
    components and subcomponents are padded with empty leaves up to the
    requested positions.

    Raises
    ------
    EditError
        If segment_index does not name a segment, field_index is below 1 or a
        sub-index is negative.
    """
    _check_field_index(field_index)
    _check_position(
        repeat_index=repeat_index,
        component_index=component_index,
        subcomponent_index=subcomponent_index,
    )
    segment = _segment_at(message, segment_index)
    field = segment.get_field(field_index) or Field.from_value("", field_index)

    repeats = _padded(field.repeats, repeat_index, _EMPTY_REPEAT)
    rep = repeats[repeat_index]
    components = _padded(rep.components, component_index, _EMPTY_COMPONENT)
    comp = components[component_index]
    subcomponents = _padded(comp.subcomponents, subcomponent_index, Subcomponent(value=""))

    subcomponents = _replaced(subcomponents, subcomponent_index, Subcomponent(value=value))
    comp = Component(subcomponents=subcomponents)
    rep = Repeat(components=_replaced(components, component_index, comp))
    field = Field(index=field_index, repeats=_replaced(repeats, repeat_index, rep))

    return with_field(message, segment_index, field)
