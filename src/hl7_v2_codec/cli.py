"""
Command-line interface for hl7_v2_codec.

Subcommands
-----------
parse
    Parse an HL7 v2 message and print one segment per line, or the whole
    tree as JSON with --json.

normalize
    Parse and re-serialize a message into canonical form, written to stdout
    or to a file.

delimiters
    Print the delimiters a message declares in its MSH segment.

diff
    Compare two versions of a message field by field.

Exit codes
----------
0  success
1  handled, expected error (HL7CodecError or KeyboardInterrupt)
2  CLI usage error (argparse)
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional

import yaml

from . import __version__
from .config import LINE_ENDINGS, AppConfig, load_config
from .diff import changed_fields
from .edit import get_field
from .exceptions import HL7CodecError
from .logging_utils import configure_logging
from .model import Message, format_path
from .parser import parse_or_raise
from .serializer import serialize, serialize_field, serialize_segment, trim_trailing_delimiters

# ------------------------------------------------------------------------------
# globals
# ------------------------------------------------------------------------------

LOG = logging.getLogger("hl7_v2_codec")

EXIT_OK = 0
EXIT_ERR = 1
EXIT_CLI = 2

# ------------------------------------------------------------------------------
# Parser construction
# ------------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """
    Build and return the top-level argparse parser and subcommands.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser with subcommands: parse, normalize, delimiters, diff.
    """
    parser = argparse.ArgumentParser(
        prog="hl7-codec",
        description="Parse, normalize and compare HL7 v2 messages.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to YAML config file (overrides defaults).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v, -vv).",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log warnings and errors.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"hl7-codec {__version__}",
    )

    sub = parser.add_subparsers(dest="cmd", required=True)

    # parse
    s1 = sub.add_parser("parse", help="Parse an HL7 v2 message file.")
    s1.add_argument(
        "path",
        type=Path,
        help='Path to HL7 v2 message file. Use "-" to read from stdin.',
    )
    s1.add_argument(
        "--json",
        action="store_true",
        help="Print the parsed tree as JSON.",
    )

    # normalize
    s2 = sub.add_parser("normalize", help="Re-serialize a message canonically.")
    s2.add_argument(
        "path",
        type=Path,
        help='Path to HL7 v2 message file. Use "-" to read from stdin.',
    )
    s2.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Write to this file instead of stdout.",
    )
    s2.add_argument(
        "--no-trailing",
        action="store_true",
        help="Do not end the output with a segment delimiter.",
    )
    s2.add_argument(
        "--trim",
        action="store_true",
        help="Drop trailing empty fields from non-MSH segments.",
    )
    s2.add_argument(
        "--line-ending",
        choices=sorted(LINE_ENDINGS),
        default=None,
        help="Segment separator for output (defaults to config line_ending).",
    )

    # delimiters
    s3 = sub.add_parser("delimiters", help="Show the delimiters a message declares.")
    s3.add_argument(
        "path",
        type=Path,
        help='Path to HL7 v2 message file. Use "-" to read from stdin.',
    )

    # diff
    s4 = sub.add_parser("diff", help="List fields that differ between two messages.")
    s4.add_argument("original", type=Path, help="Original message file.")
    s4.add_argument("current", type=Path, help="Edited message file.")

    return parser


# ------------------------------------------------------------------------------
# Input helpers
# ------------------------------------------------------------------------------


def _validate_existing_file(path: Path, allow_stdin: bool = False) -> None:
    """
    Validate that a path exists and is a readable file, or is "-" when
    allow_stdin is True.

    Raises
    ------
    HL7CodecError
        If the path does not exist, is not a file, or is not readable.
    """
    if allow_stdin and str(path) == "-":
        return
    if not path.exists():
        raise HL7CodecError(f"File not found: {path}")
    if not path.is_file():
        raise HL7CodecError(f"Not a file: {path}")
    if not os.access(path, os.R_OK):
        raise HL7CodecError(f"File is not readable: {path}")


def _read_text_input(path: Path) -> str:
    """
    Read text either from a file or from stdin when path is "-".

    Line endings are read untranslated so CR-only messages survive.

    Raises
    ------
    HL7CodecError
        On missing files, permission errors, or OS read failures.
    """
    try:
        if str(path) == "-":
            return sys.stdin.read()
        with path.open("r", encoding="utf-8", newline="") as fh:
            return fh.read()
    except FileNotFoundError:
        raise HL7CodecError(f"File not found: {path}")
    except PermissionError:
        raise HL7CodecError(f"Permission denied: {path}")
    except OSError as e:
        raise HL7CodecError(f"Failed to read {path}: {e}") from e


def _load_app_config(path: Optional[Path]) -> AppConfig:
    """
    Load the config file, reporting problems as HL7CodecError.
    """
    try:
        return load_config(path)
    except (OSError, TypeError, ValueError, yaml.YAMLError) as e:
        raise HL7CodecError(f"Invalid config {path}: {e}") from e


def _load_message(path: Path) -> Message:
    _validate_existing_file(path, allow_stdin=True)
    message = parse_or_raise(_read_text_input(path))
    LOG.debug("Loaded %s (%d segments)", path, len(message.segments))
    return message


def _write_text_output(text: str, output: Optional[Path]) -> None:
    """
    Write text to a file, or to stdout when output is None.

    Raises
    ------
    HL7CodecError
        If the file cannot be written.
    """
    if output is None:
        sys.stdout.write(text)
        sys.stdout.flush()
        return
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        with output.open("w", encoding="utf-8", newline="") as fh:
            fh.write(text)
    except OSError as e:
        raise HL7CodecError(f"Failed to write {output}: {e}") from e
    LOG.info("Wrote %s", output)


# ------------------------------------------------------------------------------
# Command handlers
# ------------------------------------------------------------------------------


def _cmd_parse(path: Path, as_json: bool) -> int:
    message = _load_message(path)
    if as_json:
        print(message.model_dump_json(indent=2))
        return EXIT_OK
    # parse guarantees segment 0 is MSH
    for i, seg in enumerate(message.segments):
        print(serialize_segment(seg, message.delimiters, is_header=(i == 0)))
    return EXIT_OK


def _cmd_normalize(
    path: Path,
    cfg: AppConfig,
    output: Optional[Path],
    no_trailing: bool,
    trim: bool,
    line_ending: Optional[str],
) -> int:
    """
    Normalize: parse and re-serialize a message.

    Command-line flags take precedence over the config file.
    """
    message = _load_message(path)
    include_trailing = cfg.include_trailing_delimiter and not no_trailing
    text = serialize(message, include_trailing_delimiter=include_trailing)
    if trim or cfg.trim_trailing_fields:
        text = trim_trailing_delimiters(text, message.delimiters)

    separator = LINE_ENDINGS[line_ending] if line_ending else cfg.segment_separator
    if separator != message.delimiters.segment:
        text = text.replace(message.delimiters.segment, separator)

    _write_text_output(text, output)
    return EXIT_OK


def _cmd_delimiters(path: Path) -> int:
    d = _load_message(path).delimiters
    print(
        json.dumps(
            {
                "field": d.field,
                "component": d.component,
                "repeat": d.repeat,
                "escape": d.escape,
                "subcomponent": d.subcomponent,
                "segment": d.segment,
            },
            indent=2,
        )
    )
    return EXIT_OK


def _cmd_diff(original_path: Path, current_path: Path) -> int:
    original = _load_message(original_path)
    current = _load_message(current_path)

    changes = sorted(changed_fields(original, current))
    if not changes:
        LOG.info("No field changes")
        return EXIT_OK

    for seg_idx, field_idx in changes:
        seg = (
            current.segments[seg_idx]
            if seg_idx < len(current.segments)
            else original.segments[seg_idx]
        )
        before = get_field(original, seg_idx, field_idx)
        after = get_field(current, seg_idx, field_idx)
        old = serialize_field(before, original.delimiters) if before is not None else None
        new = serialize_field(after, current.delimiters) if after is not None else None
        print(f"{format_path(seg.name, field_idx)}: {old!r} -> {new!r}")
    return EXIT_OK


# ------------------------------------------------------------------------------
# Entrypoint
# ------------------------------------------------------------------------------


def main(argv: Optional[list[str]] = None) -> int:
    """
    CLI entrypoint.

    Parameters
    ----------
    argv : list[str] or None, default None
        Argument list for testing; None uses sys.argv[1:].

    Returns
    -------
    int
        Process exit code (EXIT_OK, EXIT_ERR, or EXIT_CLI).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose, quiet=args.quiet)

    try:
        if args.cmd == "parse":
            return _cmd_parse(args.path, as_json=bool(args.json))
        if args.cmd == "normalize":
            return _cmd_normalize(
                path=args.path,
                cfg=_load_app_config(args.config),
                output=args.output,
                no_trailing=bool(args.no_trailing),
                trim=bool(args.trim),
                line_ending=args.line_ending,
            )
        if args.cmd == "delimiters":
            return _cmd_delimiters(args.path)
        if args.cmd == "diff":
            return _cmd_diff(args.original, args.current)
        parser.error("Unknown command")
        return EXIT_CLI

    except HL7CodecError as e:
        LOG.error("%s", e)
        return EXIT_ERR
    except KeyboardInterrupt:
        LOG.error("Interrupted")
        return EXIT_ERR


if __name__ == "__main__":
    raise SystemExit(main())
