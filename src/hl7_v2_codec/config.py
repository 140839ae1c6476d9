"""
Configuration utilities for hl7_v2_codec.

Provides a dataclass-based configuration object for the command-line tool and
a loader that reads YAML configuration files when present.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

LINE_ENDINGS = {
    "cr": "\r",
    "lf": "\n",
    "crlf": "\r\n",
}


@dataclass(frozen=True)
class AppConfig:
    """
    Immutable application configuration.

    Attributes
    ----------
    include_trailing_delimiter : bool
        Write a segment delimiter after the last segment.
    trim_trailing_fields : bool
        Drop trailing empty fields from non-header segments on output.
    line_ending : str
        Segment separator used when writing text: "cr", "lf" or "crlf".
    """

    include_trailing_delimiter: bool = True
    trim_trailing_fields: bool = False
    line_ending: str = "cr"

    @property
    def segment_separator(self) -> str:
        return LINE_ENDINGS[self.line_ending]


def _require_bool(data: Mapping[str, Any], key: str, default: bool, path: Path) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise TypeError(
            f"Config key {key!r} must be a boolean, got {type(value).__name__}. "
            f"Config file: {path}"
        )
    return value


def load_config(path: Optional[Path]) -> AppConfig:
    """
    Load application configuration from a YAML file.

    Parameters
    ----------
    path : Path or None
        Path to a YAML config file. If None, defaults are used.

    Returns
    -------
    AppConfig
        The loaded configuration.

    Raises
    ------
    TypeError
        If the YAML file does not parse to a mapping at the top level, or a
        value has the wrong type.
    ValueError
        If line_ending is not one of "cr", "lf" or "crlf".
    yaml.YAMLError
        If the file is not valid YAML.
    """
    if path is None:
        return AppConfig()

    data: Any = yaml.safe_load(path.read_text())

    if data is None:
        return AppConfig()

    if not isinstance(data, Mapping):
        raise TypeError(
            f"Config file must contain a mapping at top level, "
            f"got {type(data).__name__}. "
            f"Config file: {path}"
        )

    line_ending = str(data.get("line_ending", "cr")).lower()
    if line_ending not in LINE_ENDINGS:
        raise ValueError(
            f"line_ending must be one of {sorted(LINE_ENDINGS)}, got {line_ending!r}. "
            f"Config file: {path}"
        )

    return AppConfig(
        include_trailing_delimiter=_require_bool(
            data, "include_trailing_delimiter", True, path
        ),
        trim_trailing_fields=_require_bool(data, "trim_trailing_fields", False, path),
        line_ending=line_ending,
    )
