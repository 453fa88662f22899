from __future__ import annotations

import csv
import io
import json
import logging
import re
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Union
from xml.parsers.expat import ExpatError

import xmltodict
import yaml

from .config import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_ROOT_NAME,
    CsvOptions,
    ExtractOptions,
    MarkdownOptions,
    build_options,
)
from .errors import (
    DepthLimitError,
    FieldNotFoundError,
    FormatError,
    OptionsError,
    ParseError,
    UnknownOperationError,
)

logger = logging.getLogger(__name__)

_INT_RE = re.compile(r"^[+-]?\d+$")
_FLOAT_RE = re.compile(r"^[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DATETIME_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}:?\d{2})?$"
)
_PATH_TOKEN_RE = re.compile(r"([^.\[\]]+)|\[(-?\d+)\]")
_PLACEHOLDER_RE = re.compile(r"\{\{\s*([^{}]+?)\s*\}\}")


# ------------------------------
# Shared helpers
# ------------------------------
def display_value(value: Any, none: str = "") -> str:
    """String form of a scalar the way it reads in a document or table cell."""
    if value is None:
        return none
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
    return str(value)


def check_depth(value: Any, max_depth: int, operation: str) -> None:
    """Raise ``DepthLimitError`` if containers nest deeper than ``max_depth``.

    The root container sits at depth 0. The walk is iterative.
    """
    stack = [(value, 0)]
    while stack:
        node, depth = stack.pop()
        if isinstance(node, Mapping):
            children = node.values()
        elif isinstance(node, list):
            children = node
        else:
            continue
        if depth > max_depth:
            raise DepthLimitError(operation, f"input nested deeper than {max_depth} levels")
        stack.extend((child, depth + 1) for child in children)


def _plain(node: Any) -> Any:
    # xmltodict may hand back OrderedDicts depending on version
    if isinstance(node, Mapping):
        return {k: _plain(v) for k, v in node.items()}
    if isinstance(node, list):
        return [_plain(v) for v in node]
    return node


# ------------------------------
# XML
# ------------------------------
def structured_to_xml(value: Any, root_name: str = DEFAULT_ROOT_NAME) -> str:
    if isinstance(value, list):
        value = {"item": value}
    try:
        return xmltodict.unparse(
            {root_name or DEFAULT_ROOT_NAME: value},
            pretty=True,
            indent="  ",
            expand_iter="item",
        )
    except (TypeError, ValueError) as e:
        raise FormatError("structured_to_xml", f"Failed to build XML: {e}") from e


def _lower_names(path, key, value):
    return key.lower(), value


def xml_to_structured(text: str) -> Any:
    """Parse XML into nested dicts.

    Attributes sit next to child elements without a prefix and a tag seen once
    is not wrapped in a list, so ``<a><b/></a>`` and ``<a><b/><b/></a>`` give
    different shapes for ``b``.
    """
    try:
        parsed = xmltodict.parse(
            text,
            attr_prefix="",
            cdata_key="#text",
            postprocessor=_lower_names,
        )
    except (ExpatError, ValueError) as e:
        raise ParseError("xml_to_structured", f"Failed to parse XML: {e}") from e
    return _plain(parsed)


# ------------------------------
# YAML
# ------------------------------
class _BlockDumper(yaml.SafeDumper):
    def ignore_aliases(self, data):
        return True

    def increase_indent(self, flow=False, indentless=False):
        # indent sequences under their parent key
        return super().increase_indent(flow, False)


def structured_to_yaml(value: Any) -> str:
    try:
        return yaml.dump(
            value,
            Dumper=_BlockDumper,
            indent=2,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
            width=float("inf"),
        )
    except yaml.YAMLError as e:
        raise FormatError("structured_to_yaml", f"Failed to dump YAML: {e}") from e


def yaml_to_structured(text: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ParseError("yaml_to_structured", f"Failed to parse YAML: {e}") from e


# ------------------------------
# CSV
# ------------------------------
def _dialect(opts: CsvOptions) -> Dict[str, Any]:
    for name in ("delimiter", "quote_char"):
        if len(getattr(opts, name)) != 1:
            raise OptionsError("CsvOptions", f"{name} must be a single character")
    kwargs: Dict[str, Any] = {"delimiter": opts.delimiter, "quotechar": opts.quote_char}
    if opts.escape_char and opts.escape_char != opts.quote_char:
        kwargs.update(doublequote=False, escapechar=opts.escape_char)
    else:
        kwargs["doublequote"] = True
    return kwargs


def cast_value(text: str) -> Union[str, int, float, date, datetime]:
    if _INT_RE.match(text):
        return int(text)
    if _FLOAT_RE.match(text):
        return float(text)
    try:
        if _DATE_RE.match(text):
            return date.fromisoformat(text)
        if _DATETIME_RE.match(text):
            return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        # looks like a date but is not one (e.g. month 13); keep the text
        return text
    return text


def structured_to_csv(rows: Any, options: Optional[Mapping[str, Any]] = None) -> str:
    opts = build_options(CsvOptions, options)
    if not isinstance(rows, list):
        rows = [rows]
    check_depth(rows, DEFAULT_MAX_DEPTH, "structured_to_csv")
    if not rows:
        return ""

    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n", **_dialect(opts))
    first = rows[0]
    if isinstance(first, dict):
        header = list(first.keys())
        if opts.include_headers:
            writer.writerow(header)
        for index, row in enumerate(rows):
            if not isinstance(row, dict):
                raise FormatError("structured_to_csv", f"row {index} is not a mapping")
            extra = [k for k in row if k not in first]
            if extra:
                logger.warning("structured_to_csv: row %d keys outside the header dropped: %s", index, extra)
            writer.writerow([display_value(row.get(key)) for key in header])
    else:
        for row in rows:
            cells = row if isinstance(row, list) else [row]
            writer.writerow([display_value(c) for c in cells])
    return buf.getvalue()


def csv_to_structured(text: str, options: Optional[Mapping[str, Any]] = None) -> List[Any]:
    opts = build_options(CsvOptions, options)
    if text.startswith("\ufeff"):
        text = text[1:]
    reader = csv.reader(io.StringIO(text, newline=""), strict=True, **_dialect(opts))
    records: List[List[str]] = []
    try:
        for row in reader:
            if opts.trim:
                row = [cell.strip() for cell in row]
            if opts.skip_empty_lines and (not row or row == [""]):
                continue
            records.append(row)
    except csv.Error as e:
        raise ParseError("csv_to_structured", f"line {reader.line_num}: {e}") from e

    if not records:
        return []
    convert = cast_value if opts.cast else str
    if not opts.include_headers:
        return [[convert(cell) for cell in row] for row in records]

    header, body = records[0], records[1:]
    out = []
    for number, row in enumerate(body, start=2):
        if len(row) != len(header):
            raise ParseError(
                "csv_to_structured",
                f"record {number} has {len(row)} fields, header has {len(header)}",
            )
        out.append({key: convert(cell) for key, cell in zip(header, row)})
    return out


# ------------------------------
# Markdown
# ------------------------------
def _md_cell(value: Any) -> str:
    return display_value(value).replace("|", "\\|").replace("\n", " ")


def markdown_table(rows: List[Any]) -> str:
    """GFM pipe table; the first row's keys are the header."""
    headers = list(rows[0].keys())
    lines = [
        "| " + " | ".join(_md_cell(h) for h in headers) + " |",
        "| " + " | ".join("---" for _ in headers) + " |",
    ]
    for row in rows:
        cells = [_md_cell(row.get(h)) if isinstance(row, dict) else "" for h in headers]
        lines.append("| " + " | ".join(cells) + " |")
    return "\n".join(lines) + "\n"


def _render_markdown(value: Any, depth: int, max_depth: int) -> str:
    if depth > max_depth:
        raise DepthLimitError("structured_to_markdown", f"input nested deeper than {max_depth} levels")
    if isinstance(value, list):
        if value and isinstance(value[0], dict):
            return markdown_table(value)
        return "".join(f"- {display_value(item, 'null')}\n" for item in value)
    if isinstance(value, dict):
        parts = []
        for key, item in value.items():
            if isinstance(item, (dict, list)):
                parts.append(f"## {key}\n\n")
                section = _render_markdown(item, depth + 1, max_depth)
                if not section.endswith("\n\n"):
                    section += "\n"
                parts.append(section)
            else:
                parts.append(f"**{key}:** {display_value(item, 'null')}\n\n")
        return "".join(parts)
    return display_value(value, "null")


def structured_to_markdown(value: Any, options: Optional[Mapping[str, Any]] = None) -> str:
    opts = build_options(MarkdownOptions, options)
    head = f"# {opts.title}\n\n" if opts.title else ""
    check_depth(value, int(opts.max_depth), "structured_to_markdown")
    return head + _render_markdown(value, 0, int(opts.max_depth))


def csv_to_markdown(text: str, options: Optional[Mapping[str, Any]] = None) -> str:
    opts = replace(build_options(CsvOptions, options), include_headers=True)
    rows = csv_to_structured(text, opts)
    if not rows:
        return ""
    return markdown_table(rows)


# ------------------------------
# String extraction
# ------------------------------
def _walk_path(value: Any, path: str) -> Any:
    current = value
    for m in _PATH_TOKEN_RE.finditer(path):
        key, index = m.groups()
        if key is not None:
            if isinstance(current, dict) and key in current:
                current = current[key]
                continue
            if isinstance(current, list) and key.isdigit() and int(key) < len(current):
                current = current[int(key)]
                continue
            raise FieldNotFoundError("structured_to_extracted_string", path, key)
        i = int(index)
        if isinstance(current, list) and -len(current) <= i < len(current):
            current = current[i]
            continue
        raise FieldNotFoundError("structured_to_extracted_string", path, f"[{index}]")
    return current


def structured_to_extracted_string(
    value: Any, mode: str = "pretty", options: Optional[Mapping[str, Any]] = None
) -> str:
    opts = build_options(ExtractOptions, options)
    mode = (mode or "pretty").lower()
    if mode == "pretty":
        return json.dumps(value, indent=int(opts.indent), ensure_ascii=False, default=str)
    if mode == "compact":
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
    if mode == "field":
        found = _walk_path(value, opts.field_path) if opts.field_path else value
        return display_value(found, "null")
    if mode == "template":
        fields = value if isinstance(value, dict) else {}

        def fill(m):
            name = m.group(1)
            return display_value(fields[name], "null") if name in fields else m.group(0)

        return _PLACEHOLDER_RE.sub(fill, opts.template)
    raise UnknownOperationError("structured_to_extracted_string", f"unknown extraction mode '{mode}'")
