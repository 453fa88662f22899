"""Operation registry and the (resource, operation) dispatch boundary."""
from __future__ import annotations

import logging
from dataclasses import MISSING, dataclass, field, fields
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from . import b64, binary, encoding, formats, markup, strings
from .config import (
    DEFAULT_ENCODING,
    DEFAULT_MAX_DEPTH,
    DEFAULT_MIME_TYPE,
    DEFAULT_ROOT_NAME,
    CapitalizeOptions,
    CleanFilenameOptions,
    ExtractOptions,
    HtmlTableOptions,
    MarkdownOptions,
    PadOptions,
    SlugifyOptions,
    SpecialCharsOptions,
    TitleCaseOptions,
    TruncateOptions,
    WhitespaceOptions,
    snake_case_key,
)
from .errors import OptionsError, UnknownOperationError
from .resources import (
    OPERATIONS,
    Base64Op,
    BinaryOp,
    EncodingOp,
    FormatOp,
    HtmlOp,
    Resource,
    StringOp,
)

logger = logging.getLogger(__name__)


# ------------------------------
# Operation registry
# ------------------------------
@dataclass
class Operation:
    resource: Resource
    key: Enum
    name: str
    fn: Callable[[Any, Dict[str, Any]], Any]
    params_schema: Dict[str, Any] = field(default_factory=dict)
    input_hint: str = "text"  # "text" | "json" | "bytes"
    output_hint: str = "text"  # "text" | "json" | "bytes"


OPS: Dict[Tuple[Resource, Enum], Operation] = {}


def register(op: Operation):
    OPS[(op.resource, op.key)] = op


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _schema(cls: Type[Any]) -> Dict[str, Any]:
    out = {}
    for f in fields(cls):
        default = f.default if f.default is not MISSING else None
        out[_camel(f.name)] = "" if default is None else default
    return out


def _only(p: Dict[str, Any], operation: str, *allowed: str) -> Dict[str, Any]:
    unknown = [k for k in p if k not in allowed]
    if unknown:
        raise OptionsError(operation, f"unrecognized option(s): {', '.join(sorted(unknown))}")
    return p


def _split(p: Dict[str, Any], cls: Type[Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    known = {f.name for f in fields(cls)} | set(getattr(cls, "ALIASES", {}))
    mine = {k: v for k, v in p.items() if snake_case_key(k) in known}
    rest = {k: v for k, v in p.items() if k not in mine}
    return mine, rest


def _as_record(value: Any) -> Any:
    return value.to_dict() if hasattr(value, "to_dict") else value


# ------------------------------
# Adapters: loose option record -> pure function call
# ------------------------------
def _build_data_url(data, p):
    _only(p, "buildDataUrl", "mimeType")
    return b64.build_data_url(data, p.get("mimeType", DEFAULT_MIME_TYPE))


def _bytes_to_text(data, p):
    _only(p, "bytesToText", "encoding")
    return binary.bytes_to_text(data, p.get("encoding", DEFAULT_ENCODING))


def _text_to_bytes(text, p):
    _only(p, "textToBytes", "encoding")
    return binary.text_to_bytes(text, p.get("encoding", DEFAULT_ENCODING))


def _structured_to_xml(value, p):
    _only(p, "structuredToXml", "rootName")
    return formats.structured_to_xml(value, p.get("rootName", DEFAULT_ROOT_NAME))


def _extract(value, p):
    rest = dict(p)
    mode = rest.pop("mode", "pretty")
    return formats.structured_to_extracted_string(value, mode, rest)


def _csv_to_html_table(text, p):
    table_opts, csv_opts = _split(p, HtmlTableOptions)
    return markup.csv_to_html_table(text, table_opts, csv_opts)


def _html_list(value, p):
    _only(p, "structuredToHtmlList", "ordered", "maxDepth")
    return markup.structured_to_html_list(
        value, bool(p.get("ordered", False)), p.get("maxDepth", DEFAULT_MAX_DEPTH)
    )


def _apply_multiple(text, p):
    _only(p, "applyMultiple", "steps")
    return _as_record(strings.apply_multiple(text, p.get("steps") or []))


def _no_params(fn, operation):
    def call(payload, p):
        _only(p, operation)
        return fn(payload)
    return call


def _string_step(op: StringOp):
    def call(text, p):
        return _as_record(strings.TRANSFORMS[op](text, p or None))
    return call


# --- Base64 ---
register(Operation(Resource.BASE64, Base64Op.TEXT_TO_BASE64, "Text → Base64", _no_params(b64.text_to_base64, "textToBase64")))
register(Operation(Resource.BASE64, Base64Op.BASE64_TO_TEXT, "Base64 → Text", _no_params(b64.base64_to_text, "base64ToText")))
register(Operation(Resource.BASE64, Base64Op.BYTES_TO_BASE64, "Bytes → Base64", _no_params(b64.bytes_to_base64, "bytesToBase64"), input_hint="bytes"))
register(Operation(Resource.BASE64, Base64Op.BASE64_TO_BYTES, "Base64 → Bytes", _no_params(b64.base64_to_bytes, "base64ToBytes"), output_hint="bytes"))
register(Operation(Resource.BASE64, Base64Op.STRUCTURED_TO_BASE64, "JSON → Base64", _no_params(b64.structured_to_base64, "structuredToBase64"), input_hint="json"))
register(Operation(Resource.BASE64, Base64Op.BASE64_TO_STRUCTURED, "Base64 → JSON", _no_params(b64.base64_to_structured, "base64ToStructured"), output_hint="json"))
register(Operation(Resource.BASE64, Base64Op.BUILD_DATA_URL, "Create Data URL", _build_data_url, params_schema={"mimeType": DEFAULT_MIME_TYPE}))
register(Operation(Resource.BASE64, Base64Op.PARSE_DATA_URL, "Parse Data URL", _no_params(lambda url: b64.parse_data_url(url).to_dict(), "parseDataUrl"), output_hint="json"))

# --- Binary ---
register(Operation(Resource.BINARY, BinaryOp.STRUCTURED_TO_BYTES, "JSON → Bytes", _no_params(binary.structured_to_bytes, "structuredToBytes"), input_hint="json", output_hint="bytes"))
register(Operation(Resource.BINARY, BinaryOp.BYTES_TO_STRUCTURED, "Bytes → JSON", _no_params(binary.bytes_to_structured, "bytesToStructured"), input_hint="bytes", output_hint="json"))
register(Operation(Resource.BINARY, BinaryOp.TEXT_TO_BYTES, "Text → Bytes", _text_to_bytes, params_schema={"encoding": DEFAULT_ENCODING}, output_hint="bytes"))
register(Operation(Resource.BINARY, BinaryOp.BYTES_TO_TEXT, "Bytes → Text", _bytes_to_text, params_schema={"encoding": DEFAULT_ENCODING}, input_hint="bytes"))

# --- Encoding ---
register(Operation(Resource.ENCODING, EncodingOp.URL_ENCODE, "URL Encode", _no_params(encoding.url_encode, "urlEncode")))
register(Operation(Resource.ENCODING, EncodingOp.URL_DECODE, "URL Decode", _no_params(encoding.url_decode, "urlDecode")))
register(Operation(Resource.ENCODING, EncodingOp.HTML_ENCODE, "HTML Encode", _no_params(encoding.html_encode, "htmlEncode")))
register(Operation(Resource.ENCODING, EncodingOp.HTML_DECODE, "HTML Decode", _no_params(encoding.html_decode, "htmlDecode")))
register(Operation(Resource.ENCODING, EncodingOp.HEX_ENCODE, "Hex Encode", _no_params(encoding.hex_encode, "hexEncode")))
register(Operation(Resource.ENCODING, EncodingOp.HEX_DECODE_TO_TEXT, "Hex Decode", _no_params(encoding.hex_decode_to_text, "hexDecodeToText")))

# --- Format ---
_CSV_SCHEMA = {"delimiter": ",", "includeHeaders": True}
register(Operation(Resource.FORMAT, FormatOp.STRUCTURED_TO_XML, "JSON → XML", _structured_to_xml, params_schema={"rootName": DEFAULT_ROOT_NAME}, input_hint="json"))
register(Operation(Resource.FORMAT, FormatOp.XML_TO_STRUCTURED, "XML → JSON", _no_params(formats.xml_to_structured, "xmlToStructured"), output_hint="json"))
register(Operation(Resource.FORMAT, FormatOp.STRUCTURED_TO_YAML, "JSON → YAML", _no_params(formats.structured_to_yaml, "structuredToYaml"), input_hint="json"))
register(Operation(Resource.FORMAT, FormatOp.YAML_TO_STRUCTURED, "YAML → JSON", _no_params(formats.yaml_to_structured, "yamlToStructured"), output_hint="json"))
register(Operation(Resource.FORMAT, FormatOp.STRUCTURED_TO_CSV, "JSON → CSV", formats.structured_to_csv, params_schema=dict(_CSV_SCHEMA), input_hint="json"))
register(Operation(Resource.FORMAT, FormatOp.CSV_TO_STRUCTURED, "CSV → JSON", formats.csv_to_structured, params_schema=dict(_CSV_SCHEMA), output_hint="json"))
register(Operation(Resource.FORMAT, FormatOp.STRUCTURED_TO_MARKDOWN, "JSON → Markdown", formats.structured_to_markdown, params_schema=_schema(MarkdownOptions), input_hint="json"))
register(Operation(Resource.FORMAT, FormatOp.STRUCTURED_TO_EXTRACTED_STRING, "JSON → String", _extract, params_schema={"mode": ["pretty", "compact", "field", "template"], **_schema(ExtractOptions)}, input_hint="json"))
register(Operation(Resource.FORMAT, FormatOp.CSV_TO_MARKDOWN, "CSV → Markdown", formats.csv_to_markdown, params_schema={"delimiter": ","}))

# --- HTML ---
register(Operation(Resource.HTML, HtmlOp.STRUCTURED_TO_HTML_TABLE, "JSON → HTML Table", markup.structured_to_html_table, params_schema=_schema(HtmlTableOptions), input_hint="json"))
register(Operation(Resource.HTML, HtmlOp.STRUCTURED_TO_HTML_LIST, "JSON → HTML List", _html_list, params_schema={"ordered": False, "maxDepth": DEFAULT_MAX_DEPTH}, input_hint="json"))
register(Operation(Resource.HTML, HtmlOp.CSV_TO_HTML_TABLE, "CSV → HTML Table", _csv_to_html_table, params_schema={**_schema(HtmlTableOptions), "delimiter": ","}))
register(Operation(Resource.HTML, HtmlOp.MARKDOWN_TO_HTML, "Markdown → HTML", _no_params(markup.markdown_to_html, "markdownToHtml")))
register(Operation(Resource.HTML, HtmlOp.HTML_TO_MARKDOWN, "HTML → Markdown", _no_params(markup.html_to_markdown, "htmlToMarkdown")))

# --- String ---
STRING_OPTIONS: Dict[StringOp, Optional[Type[Any]]] = {
    StringOp.CLEAN_FILENAME: CleanFilenameOptions,
    StringOp.SLUGIFY: SlugifyOptions,
    StringOp.TO_TITLE_CASE: TitleCaseOptions,
    StringOp.TO_CAMEL_CASE: None,
    StringOp.TO_KEBAB_CASE: None,
    StringOp.TO_SNAKE_CASE: None,
    StringOp.TO_UPPER_CASE: None,
    StringOp.TO_LOWER_CASE: None,
    StringOp.NORMALIZE_WHITESPACE: WhitespaceOptions,
    StringOp.REMOVE_SPECIAL_CHARS: SpecialCharsOptions,
    StringOp.CAPITALIZE_FIRST: CapitalizeOptions,
    StringOp.REVERSE: None,
    StringOp.TRUNCATE: TruncateOptions,
    StringOp.PAD_TEXT: PadOptions,
    StringOp.PARSE_EMAIL_ADDRESS: None,
}

for _op, _cls in STRING_OPTIONS.items():
    register(Operation(
        Resource.STRING, _op, _op.value, _string_step(_op),
        params_schema=_schema(_cls) if _cls else {},
        output_hint="json" if _op is StringOp.PARSE_EMAIL_ADDRESS else "text",
    ))
register(Operation(Resource.STRING, StringOp.APPLY_MULTIPLE, "Apply Multiple Operations", _apply_multiple, params_schema={"steps": []}))


# ------------------------------
# Dispatch
# ------------------------------
def get_operation(resource: Any, operation: Any) -> Operation:
    """Resolve host tags into a registered operation, once, at the boundary."""
    try:
        res = Resource(resource)
    except ValueError as e:
        raise UnknownOperationError("dispatch", f"unknown resource '{resource}'") from e
    try:
        key = OPERATIONS[res](operation)
    except ValueError as e:
        raise UnknownOperationError("dispatch", f"unknown operation '{operation}' for resource '{res.value}'") from e
    return OPS[(res, key)]


def list_operations(resource: Any = None) -> List[Operation]:
    if resource is None:
        return list(OPS.values())
    try:
        res = Resource(resource)
    except ValueError as e:
        raise UnknownOperationError("dispatch", f"unknown resource '{resource}'") from e
    return [op for (r, _), op in OPS.items() if r is res]


def run(resource: Any, operation: Any, payload: Any, options: Optional[Dict[str, Any]] = None) -> Any:
    op = get_operation(resource, operation)
    logger.debug("dispatch %s.%s", op.resource.value, op.key.value)
    return op.fn(payload, dict(options or {}))
