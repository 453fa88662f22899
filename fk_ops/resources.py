"""Resource and operation tags, in the vocabulary hosts send."""
from __future__ import annotations

from enum import Enum
from typing import Dict, Type


class Resource(str, Enum):
    BASE64 = "base64"
    BINARY = "binary"
    ENCODING = "encoding"
    FORMAT = "format"
    HTML = "html"
    STRING = "string"


class Base64Op(str, Enum):
    TEXT_TO_BASE64 = "textToBase64"
    BASE64_TO_TEXT = "base64ToText"
    BYTES_TO_BASE64 = "bytesToBase64"
    BASE64_TO_BYTES = "base64ToBytes"
    STRUCTURED_TO_BASE64 = "structuredToBase64"
    BASE64_TO_STRUCTURED = "base64ToStructured"
    BUILD_DATA_URL = "buildDataUrl"
    PARSE_DATA_URL = "parseDataUrl"


class BinaryOp(str, Enum):
    STRUCTURED_TO_BYTES = "structuredToBytes"
    BYTES_TO_STRUCTURED = "bytesToStructured"
    TEXT_TO_BYTES = "textToBytes"
    BYTES_TO_TEXT = "bytesToText"


class EncodingOp(str, Enum):
    URL_ENCODE = "urlEncode"
    URL_DECODE = "urlDecode"
    HTML_ENCODE = "htmlEncode"
    HTML_DECODE = "htmlDecode"
    HEX_ENCODE = "hexEncode"
    HEX_DECODE_TO_TEXT = "hexDecodeToText"


class FormatOp(str, Enum):
    STRUCTURED_TO_XML = "structuredToXml"
    XML_TO_STRUCTURED = "xmlToStructured"
    STRUCTURED_TO_YAML = "structuredToYaml"
    YAML_TO_STRUCTURED = "yamlToStructured"
    STRUCTURED_TO_CSV = "structuredToCsv"
    CSV_TO_STRUCTURED = "csvToStructured"
    STRUCTURED_TO_MARKDOWN = "structuredToMarkdown"
    STRUCTURED_TO_EXTRACTED_STRING = "structuredToExtractedString"
    CSV_TO_MARKDOWN = "csvToMarkdown"


class HtmlOp(str, Enum):
    STRUCTURED_TO_HTML_TABLE = "structuredToHtmlTable"
    STRUCTURED_TO_HTML_LIST = "structuredToHtmlList"
    CSV_TO_HTML_TABLE = "csvToHtmlTable"
    MARKDOWN_TO_HTML = "markdownToHtml"
    HTML_TO_MARKDOWN = "htmlToMarkdown"


class StringOp(str, Enum):
    CLEAN_FILENAME = "cleanFilename"
    SLUGIFY = "slugify"
    TO_TITLE_CASE = "toTitleCase"
    TO_CAMEL_CASE = "toCamelCase"
    TO_KEBAB_CASE = "toKebabCase"
    TO_SNAKE_CASE = "toSnakeCase"
    TO_UPPER_CASE = "toUpperCase"
    TO_LOWER_CASE = "toLowerCase"
    NORMALIZE_WHITESPACE = "normalizeWhitespace"
    REMOVE_SPECIAL_CHARS = "removeSpecialChars"
    CAPITALIZE_FIRST = "capitalizeFirst"
    REVERSE = "reverse"
    TRUNCATE = "truncate"
    PAD_TEXT = "padText"
    PARSE_EMAIL_ADDRESS = "parseEmailAddress"
    APPLY_MULTIPLE = "applyMultiple"


OPERATIONS: Dict[Resource, Type[Enum]] = {
    Resource.BASE64: Base64Op,
    Resource.BINARY: BinaryOp,
    Resource.ENCODING: EncodingOp,
    Resource.FORMAT: FormatOp,
    Resource.HTML: HtmlOp,
    Resource.STRING: StringOp,
}
