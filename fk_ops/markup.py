from __future__ import annotations

import logging
import re
from html import escape
from typing import Any, List, Mapping, Optional

from markdown_it import MarkdownIt
from markdownify import ATX, MarkdownConverter

from .config import (
    DEFAULT_MAX_DEPTH,
    NO_DATA_HTML,
    NO_ITEMS_HTML,
    CsvOptions,
    HtmlTableOptions,
    build_options,
)
from .errors import DepthLimitError
from .formats import check_depth, csv_to_structured, display_value

logger = logging.getLogger(__name__)

_BLANK_RUN_RE = re.compile(r"\n{3,}")


# ------------------------------
# Tables and lists
# ------------------------------
def _class_attr(name: str) -> str:
    return f' class="{escape(name)}"' if name else ""


def structured_to_html_table(rows: Any, options: Optional[Mapping[str, Any]] = None) -> str:
    opts = build_options(HtmlTableOptions, options)
    if rows is None or rows == [] or rows == {}:
        return NO_DATA_HTML
    check_depth(rows, DEFAULT_MAX_DEPTH, "structured_to_html_table")
    if not isinstance(rows, list):
        rows = [rows]

    first = rows[0]
    tabular = isinstance(first, dict)
    headers = list(first.keys()) if tabular else ["value"]
    th, tr, td = _class_attr(opts.header_class), _class_attr(opts.row_class), _class_attr(opts.cell_class)

    lines = [f"<table{_class_attr(opts.table_class)}>", "  <thead>", "    <tr>"]
    if opts.include_index:
        lines.append(f"      <th{th}>#</th>")
    lines += [f"      <th{th}>{escape(str(h))}</th>" for h in headers]
    lines += ["    </tr>", "  </thead>", "  <tbody>"]

    for index, row in enumerate(rows, start=1):
        if tabular:
            if isinstance(row, dict) and any(k not in first for k in row):
                logger.warning("structured_to_html_table: row %d has keys outside the header", index)
            cells = [row.get(h) if isinstance(row, dict) else None for h in headers]
        else:
            cells = [row]
        lines.append(f"    <tr{tr}>")
        if opts.include_index:
            lines.append(f"      <td{td}>{index}</td>")
        lines += [f"      <td{td}>{escape(display_value(c))}</td>" for c in cells]
        lines.append("    </tr>")

    lines += ["  </tbody>", "</table>"]
    return "\n".join(lines)


def _render_list(items: Any, ordered: bool, depth: int, max_depth: int) -> str:
    if depth > max_depth:
        raise DepthLimitError("structured_to_html_list", f"input nested deeper than {max_depth} levels")
    if not isinstance(items, list):
        items = [items]
    if not items:
        return NO_ITEMS_HTML

    tag = "ol" if ordered else "ul"
    parts: List[str] = [f"<{tag}>"]
    for item in items:
        if isinstance(item, list):
            parts += ["  <li>", _render_list(item, ordered, depth + 1, max_depth), "  </li>"]
        elif isinstance(item, dict):
            parts += ["  <li>", "    <dl>"]
            for key, value in item.items():
                parts.append(f"      <dt>{escape(str(key))}</dt>")
                parts.append(f"      <dd>{escape(display_value(value, 'null'))}</dd>")
            parts += ["    </dl>", "  </li>"]
        else:
            parts.append(f"  <li>{escape(display_value(item, 'null'))}</li>")
    parts.append(f"</{tag}>")
    return "\n".join(parts)


def structured_to_html_list(value: Any, ordered: bool = False, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
    check_depth(value, int(max_depth), "structured_to_html_list")
    return _render_list(value, ordered, 0, int(max_depth))


def csv_to_html_table(
    text: str,
    table_options: Optional[Mapping[str, Any]] = None,
    csv_options: Optional[Mapping[str, Any]] = None,
) -> str:
    rows = csv_to_structured(text, build_options(CsvOptions, csv_options))
    return structured_to_html_table(rows, table_options)


# ------------------------------
# Markdown <-> HTML
# ------------------------------
def markdown_to_html(text: str) -> str:
    md = MarkdownIt("commonmark", {"breaks": True, "html": True, "xhtmlOut": False})
    md.enable(["table", "strikethrough"])
    return md.render(text or "")


def _cell_text(cell) -> str:
    return " ".join(cell.get_text(" ").split()).replace("|", "\\|")


def _pipe_row(cells: List[str]) -> str:
    return "| " + " | ".join(cells) + " |"


class GfmTableConverter(MarkdownConverter):
    """markdownify converter that rebuilds every ``<table>`` as a GFM pipe table.

    Only rows that belong to the table itself are used; a table nested in a
    cell is flattened into that cell's text. The first row becomes the header
    and the ``---`` separator row is always emitted.
    """

    def convert_table(self, el, text, *args, **kwargs):
        rows = []
        for row in el.find_all("tr"):
            if row.find_parent("table") is not el:
                continue
            cells = [_cell_text(c) for c in row.find_all(["th", "td"], recursive=False)]
            if any(cells):
                rows.append(cells)
        if not rows:
            return ""
        width = max(len(r) for r in rows)
        rows = [r + [""] * (width - len(r)) for r in rows]
        lines = [_pipe_row(rows[0]), _pipe_row(["---"] * width)]
        lines += [_pipe_row(r) for r in rows[1:]]
        return "\n\n" + "\n".join(lines) + "\n\n"


def html_to_markdown(text: str) -> str:
    if not text:
        return ""
    converter = GfmTableConverter(heading_style=ATX, bullets="-")
    markdown = converter.convert(text)
    return _BLANK_RUN_RE.sub("\n\n", markdown).strip()
