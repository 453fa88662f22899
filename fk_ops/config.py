"""Named defaults and per-family option structures."""
from __future__ import annotations

import os
import re
from dataclasses import dataclass, fields
from typing import Any, ClassVar, Dict, Mapping, Optional, Type, TypeVar

from .errors import OptionsError

DEFAULT_ENCODING = "utf-8"
DEFAULT_MIME_TYPE = "application/octet-stream"
DEFAULT_DELIMITER = ","
DEFAULT_QUOTE_CHAR = '"'
DEFAULT_ROOT_NAME = "root"
DEFAULT_INDENT = 2
DEFAULT_MAX_DEPTH = 64
DEFAULT_MAX_INPUT_BYTES = 2_000_000

NO_DATA_HTML = "<p>No data to display</p>"
NO_ITEMS_HTML = "<p>No items to display</p>"


# ------------------------------
# Format family
# ------------------------------
@dataclass(frozen=True)
class CsvOptions:
    delimiter: str = DEFAULT_DELIMITER
    include_headers: bool = True
    quote_char: str = DEFAULT_QUOTE_CHAR
    escape_char: str = DEFAULT_QUOTE_CHAR
    skip_empty_lines: bool = True
    trim: bool = True
    cast: bool = True

    ALIASES: ClassVar[Dict[str, str]] = {
        "headers": "include_headers",
        "csv_headers": "include_headers",
        "csv_delimiter": "delimiter",
        "quote": "quote_char",
        "escape": "escape_char",
    }


@dataclass(frozen=True)
class MarkdownOptions:
    title: Optional[str] = None
    max_depth: int = DEFAULT_MAX_DEPTH


@dataclass(frozen=True)
class ExtractOptions:
    field_path: str = ""
    template: str = ""
    indent: int = DEFAULT_INDENT

    ALIASES: ClassVar[Dict[str, str]] = {"indent_size": "indent"}


# ------------------------------
# HTML family
# ------------------------------
@dataclass(frozen=True)
class HtmlTableOptions:
    table_class: str = ""
    header_class: str = ""
    row_class: str = ""
    cell_class: str = ""
    include_index: bool = False


# ------------------------------
# String family
# ------------------------------
@dataclass(frozen=True)
class CleanFilenameOptions:
    max_length: int = 255
    replacement: str = "_"
    preserve_extension: bool = True


@dataclass(frozen=True)
class SlugifyOptions:
    separator: str = "-"
    lowercase: bool = True
    strict: bool = False


@dataclass(frozen=True)
class TitleCaseOptions:
    preserve_all_caps: bool = False


@dataclass(frozen=True)
class WhitespaceOptions:
    collapse_spaces: bool = True
    trim_lines: bool = True
    remove_empty_lines: bool = False


@dataclass(frozen=True)
class SpecialCharsOptions:
    keep_spaces: bool = True
    keep_numbers: bool = True
    keep_filename_chars: bool = False
    keep_basic_punctuation: bool = False
    keep_file_extension: bool = False
    custom_allowed: str = ""


@dataclass(frozen=True)
class CapitalizeOptions:
    lower_rest: bool = False


@dataclass(frozen=True)
class TruncateOptions:
    length: int = 100
    suffix: str = "..."
    preserve_words: bool = True


@dataclass(frozen=True)
class PadOptions:
    length: int = 10
    pad_char: str = " "
    side: str = "right"

    ALIASES: ClassVar[Dict[str, str]] = {"pad_length": "length", "pad_side": "side"}


# ------------------------------
# Building options from loose records
# ------------------------------
T = TypeVar("T")

_CAMEL_RE = re.compile(r"(?<=[a-z0-9])([A-Z])")


def snake_case_key(key: str) -> str:
    return _CAMEL_RE.sub(r"_\1", key).lower()


def build_options(cls: Type[T], mapping: Optional[Mapping[str, Any]] = None) -> T:
    """Turn a host option record (camelCase or snake_case keys) into ``cls``.

    ``None`` gives the defaults, an instance of ``cls`` passes through, and an
    unrecognized key raises ``OptionsError``.
    """
    if mapping is None:
        return cls()
    if isinstance(mapping, cls):
        return mapping
    known = {f.name for f in fields(cls)}
    aliases: Dict[str, str] = getattr(cls, "ALIASES", {})
    kwargs: Dict[str, Any] = {}
    for key, value in mapping.items():
        name = snake_case_key(key)
        name = aliases.get(name, name)
        if name not in known:
            raise OptionsError(cls.__name__, f"unrecognized option '{key}'")
        kwargs[name] = value
    return cls(**kwargs)


# ------------------------------
# Process settings
# ------------------------------
@dataclass(frozen=True)
class EngineSettings:
    log_level: str = "INFO"
    max_depth: int = DEFAULT_MAX_DEPTH
    max_input_bytes: int = DEFAULT_MAX_INPUT_BYTES

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineSettings":
        env = os.environ if environ is None else environ
        return cls(
            log_level=env.get("FK_LOG_LEVEL", "INFO").upper(),
            max_depth=int(env.get("FK_MAX_DEPTH", DEFAULT_MAX_DEPTH)),
            max_input_bytes=int(env.get("FK_MAX_INPUT_BYTES", DEFAULT_MAX_INPUT_BYTES)),
        )
