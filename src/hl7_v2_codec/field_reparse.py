"""
Field-level helpers for editors.

An editor that shows a whole field as one flat string (``DOE^JOHN~SMITH^JANE``)
uses these to turn the edited text back into structure, and to render a
field as that flat string in the first place.
"""

from __future__ import annotations

from typing import Optional

from .model import Delimiters, Field
from .parser import decompose_field
from .serializer import serialize_field


def reparse_field(field_text: str, delimiters: Delimiters, field_index: int) -> Field:
    """Parse one field's text with the same split the message parser uses."""
    return decompose_field(field_text, delimiters, field_index)


def contains_delimiters(value: str, delimiters: Delimiters) -> bool:
    """True if value holds a repeat, component or subcomponent delimiter."""
    return (
        delimiters.repeat in value
        or delimiters.component in value
        or delimiters.subcomponent in value
    )


def field_display_string(field: Field, delimiters: Delimiters) -> str:
    return serialize_field(field, delimiters)


def simple_field(value: str, field_index: int) -> Field:
    """Field with exactly one repeat, component and subcomponent."""
    return Field.from_value(value, field_index)


def is_simple_field(field: Field) -> bool:
    return (
        len(field.repeats) == 1
        and len(field.repeats[0].components) == 1
        and len(field.repeats[0].components[0].subcomponents) == 1
    )


def simple_field_value(field: Field) -> Optional[str]:
    """Return the single leaf of a simple field, or None for structured fields."""
    if not is_simple_field(field):
        return None
    return field.repeats[0].components[0].subcomponents[0].value


def field_from_text(text: str, delimiters: Delimiters, field_index: int) -> Field:
    """
    Build a field from edited text, re-parsing only when it needs structure.
    """
    if contains_delimiters(text, delimiters):
        return reparse_field(text, delimiters, field_index)
    return simple_field(text, field_index)
