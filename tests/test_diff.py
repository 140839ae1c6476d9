"""
Tests for hl7_v2_codec.diff.
"""

import pytest

from hl7_v2_codec.diff import changed_fields, has_field_changed, has_leaf_changed
from hl7_v2_codec.edit import with_field_text, with_leaf_value
from hl7_v2_codec.parser import parse_or_raise


@pytest.fixture
def original(simple_message_text):
    return parse_or_raise(simple_message_text)


def test_no_changes(original, simple_message_text):
    again = parse_or_raise(simple_message_text)
    assert changed_fields(original, again) == set()
    assert not has_field_changed(original, again, 1, 5)


def test_leaf_edit_marks_field(original):
    current = with_leaf_value(original, 1, 5, 0, 0, 0, "ROE")
    assert has_field_changed(original, current, 1, 5)
    assert has_leaf_changed(original, current, 1, 5, 0, 0, 0)
    assert not has_leaf_changed(original, current, 1, 5, 0, 1, 0)
    assert changed_fields(original, current) == {(1, 5)}


def test_added_field_counts_as_changed(original):
    current = with_leaf_value(original, 1, 13, 0, 0, 0, "555")
    assert changed_fields(original, current) == {(1, 13)}


def test_padded_empty_leaf_is_a_leaf_change(original):
    current = with_leaf_value(original, 1, 8, 0, 0, 1, "")
    assert has_leaf_changed(original, current, 1, 8, 0, 0, 1)


def test_negative_leaf_position_is_not_a_change():
    before = parse_or_raise("MSH|^~\\&|A\rPID|1||X~Y")
    after = parse_or_raise("MSH|^~\\&|A\rPID|1||X~Z")
    assert not has_leaf_changed(before, after, 1, 3, -1, 0, 0)
    assert has_leaf_changed(before, after, 1, 3, 1, 0, 0)


def test_added_segment_fields_count_as_changed(original, simple_message_text):
    longer = parse_or_raise(simple_message_text + "\rPV1|1|I")
    assert changed_fields(original, longer) == {(2, 1), (2, 2)}


def test_same_text_different_structure_is_unchanged(original):
    # PID-5 rebuilt from identical text has the same flattened value
    current = with_field_text(original, 1, 5, "DOE^JOHN^Q")
    assert changed_fields(original, current) == set()


def test_none_messages(original):
    assert changed_fields(None, original) == set()
    assert not has_field_changed(original, None, 1, 5)
    assert not has_leaf_changed(None, None, 1, 5, 0, 0, 0)
