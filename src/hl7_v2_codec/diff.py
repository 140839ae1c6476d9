"""
Change detection between two versions of a message.

Fields are compared by their flattened text, each side rendered with its own
message's delimiters, so two trees that serialize a field identically are
treated as unchanged.
"""

from __future__ import annotations

from typing import Optional, Set, Tuple

from .edit import get_field, leaf_at
from .model import Message
from .serializer import serialize_field


def has_field_changed(
    original: Optional[Message],
    current: Optional[Message],
    segment_index: int,
    field_index: int,
) -> bool:
    """
    Return True if a field differs between original and current.

    A field present on only one side counts as changed. Returns False when
    either message is None.
    """
    if original is None or current is None:
        return False

    before = get_field(original, segment_index, field_index)
    after = get_field(current, segment_index, field_index)
    if before is None and after is None:
        return False
    if before is None or after is None:
        return True
    return serialize_field(before, original.delimiters) != serialize_field(
        after, current.delimiters
    )


def has_leaf_changed(
    original: Optional[Message],
    current: Optional[Message],
    segment_index: int,
    field_index: int,
    repeat_index: int,
    component_index: int,
    subcomponent_index: int,
) -> bool:
    if original is None or current is None:
        return False
    # leaf_at gives None, unlike get_leaf_value's "", so that an absent leaf
    # differs from an empty one.
    position = (segment_index, field_index, repeat_index, component_index, subcomponent_index)
    return leaf_at(original, *position) != leaf_at(current, *position)


def changed_fields(
    original: Optional[Message], current: Optional[Message]
) -> Set[Tuple[int, int]]:
    """
    Return ``(segment_index, field_index)`` for every field that changed.
    """
    changed: Set[Tuple[int, int]] = set()
    if original is None or current is None:
        return changed

    for seg_idx in range(max(len(original.segments), len(current.segments))):
        indices = set()
        for msg in (original, current):
            if seg_idx < len(msg.segments):
                indices.update(f.index for f in msg.segments[seg_idx].fields)
        for field_idx in indices:
            if has_field_changed(original, current, seg_idx, field_idx):
                changed.add((seg_idx, field_idx))
    return changed

