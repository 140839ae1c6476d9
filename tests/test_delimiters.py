"""
Tests for hl7_v2_codec.delimiters.
"""

import logging

import pytest

from hl7_v2_codec.delimiters import encoding_block, resolve_delimiters
from hl7_v2_codec.exceptions import ErrorKind, ParseError
from hl7_v2_codec.model import DEFAULT_DELIMITERS, Delimiters


# ------------------------------------------------------------------------------
# resolve_delimiters
# ------------------------------------------------------------------------------


def test_resolve_standard_delimiters():
    d = resolve_delimiters("MSH|^~\\&|SEND|FAC")
    assert d == DEFAULT_DELIMITERS
    assert d.segment == "\r"


def test_resolve_custom_delimiters():
    d = resolve_delimiters("MSH#!@$%#SEND#FAC")
    assert d.field == "#"
    assert d.component == "!"
    assert d.repeat == "@"
    assert d.escape == "$"
    assert d.subcomponent == "%"


def test_resolve_minimal_header_without_trailing_field():
    d = resolve_delimiters("MSH|^~\\&")
    assert d == DEFAULT_DELIMITERS


def test_resolve_short_encoding_block_falls_back_per_slot(caplog):
    # Only component and repeat are declared; escape/subcomponent default.
    with caplog.at_level(logging.WARNING, logger="hl7_v2_codec.delimiters"):
        d = resolve_delimiters("MSH|!@|SEND|FAC|RECV")
    assert d == Delimiters(field="|", component="!", repeat="@", escape="\\", subcomponent="&")
    assert "Incomplete encoding characters" in caplog.text


def test_resolve_empty_encoding_block_uses_all_defaults():
    d = resolve_delimiters("MSH||SEND|FAC")
    assert d == DEFAULT_DELIMITERS


def test_resolve_rejects_non_header():
    with pytest.raises(ParseError, match=r"^Could not extract delimiters") as e:
        resolve_delimiters("PID|^~\\&|123")
    assert e.value.kind is ErrorKind.MALFORMED_HEADER


def test_resolve_rejects_short_header():
    with pytest.raises(ParseError) as e:
        resolve_delimiters("MSH|^~")
    assert e.value.kind is ErrorKind.MALFORMED_HEADER
    assert e.value.segment_name == "MSH"


def test_resolve_rejects_seven_character_header():
    with pytest.raises(ParseError, match=r"^Could not extract delimiters") as e:
        resolve_delimiters("MSH|^~\\")
    assert e.value.kind is ErrorKind.MALFORMED_HEADER


def test_resolve_accepts_eight_character_header():
    assert resolve_delimiters("MSH|^~\\&") == DEFAULT_DELIMITERS


# ------------------------------------------------------------------------------
# encoding_block
# ------------------------------------------------------------------------------


def test_encoding_block_stops_at_next_field_delimiter():
    assert encoding_block("MSH|^~\\&|A|B", "|") == "^~\\&"


def test_encoding_block_runs_to_end_of_line():
    assert encoding_block("MSH|^~\\&", "|") == "^~\\&"
