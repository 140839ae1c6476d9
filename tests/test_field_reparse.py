"""
Tests for hl7_v2_codec.field_reparse.
"""

import pytest

from hl7_v2_codec.field_reparse import (
    contains_delimiters,
    field_display_string,
    field_from_text,
    is_simple_field,
    reparse_field,
    simple_field,
    simple_field_value,
)
from hl7_v2_codec.model import DEFAULT_DELIMITERS, Delimiters
from hl7_v2_codec.parser import parse_or_raise

CUSTOM = Delimiters(field="#", component="!", repeat="@", escape="$", subcomponent="%")


def test_reparse_field_splits_repeats():
    f = reparse_field("SMITH^JOHN~DOE^JANE", DEFAULT_DELIMITERS, 5)
    assert f.index == 5
    assert len(f.repeats) == 2
    assert [c.subcomponents[0].value for c in f.repeats[1].components] == ["DOE", "JANE"]


def test_reparse_field_matches_message_parser(all_delimiters_text):
    msg = parse_or_raise(all_delimiters_text)
    pid5 = msg.segments[1].get_field(5)
    assert reparse_field("DOE^JOHN&JR~SMITH^JANE&SR", msg.delimiters, 5) == pid5


def test_reparse_field_uses_given_delimiters():
    f = reparse_field("A!B@C", CUSTOM, 1)
    assert len(f.repeats) == 2
    assert field_display_string(f, CUSTOM) == "A!B@C"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("plain", False),
        ("A^B", True),
        ("A~B", True),
        ("A&B", True),
        ("A|B", False),  # field delimiter is not a sub-field delimiter
        ("A\\B", False),
    ],
)
def test_contains_delimiters(value, expected):
    assert contains_delimiters(value, DEFAULT_DELIMITERS) is expected


def test_field_display_string_round_trip():
    text = "12345^^^HOSP^MR"
    assert field_display_string(reparse_field(text, DEFAULT_DELIMITERS, 3), DEFAULT_DELIMITERS) == text


def test_simple_field_helpers():
    f = simple_field("M", 8)
    assert is_simple_field(f)
    assert simple_field_value(f) == "M"


def test_structured_field_is_not_simple():
    f = reparse_field("DOE^JOHN", DEFAULT_DELIMITERS, 5)
    assert not is_simple_field(f)
    assert simple_field_value(f) is None


def test_simple_field_holding_delimiters_stays_simple():
    f = simple_field("A^B", 2)
    assert is_simple_field(f)
    assert field_display_string(f, DEFAULT_DELIMITERS) == "A^B"


def test_field_from_text_chooses_shape():
    assert field_from_text("plain", DEFAULT_DELIMITERS, 4) == simple_field("plain", 4)
    structured = field_from_text("A^B", DEFAULT_DELIMITERS, 4)
    assert len(structured.repeats[0].components) == 2
