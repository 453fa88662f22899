from __future__ import annotations

import binascii
import re
import urllib.parse
from typing import Union

from .binary import to_bytes
from .errors import FormatError

# encodeURIComponent leaves these alone on top of letters and digits
URL_SAFE_CHARS = "-_.!~*'()"

HTML_ENCODE_MAP = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#39;",
    "/": "&#x2F;",
    "`": "&#x60;",
    "=": "&#x3D;",
}
HTML_NAMED_ENTITIES = {"amp": "&", "lt": "<", "gt": ">", "quot": '"', "apos": "'"}

_HTML_ENCODE_RE = re.compile(r"[&<>\"'/`=]")
_HTML_ENTITY_RE = re.compile(r"&(?:(amp|lt|gt|quot|apos)|#(\d+)|#[xX]([0-9a-fA-F]+));")
_BAD_PERCENT_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_NON_HEX_RE = re.compile(r"[^0-9a-fA-F]")


# ------------------------------
# URL
# ------------------------------
def url_encode(text: str) -> str:
    try:
        return urllib.parse.quote(text, safe=URL_SAFE_CHARS)
    except UnicodeEncodeError as e:
        raise FormatError("url_encode", f"URL encode failed: {e}") from e


def url_decode(text: str) -> str:
    bad = _BAD_PERCENT_RE.search(text)
    if bad:
        raise FormatError("url_decode", f"URL decode failed: malformed escape at position {bad.start()}")
    try:
        return urllib.parse.unquote(text, errors="strict")
    except UnicodeDecodeError as e:
        raise FormatError("url_decode", f"URL decode failed: {e}") from e


# ------------------------------
# HTML entities
# ------------------------------
def html_encode(text: str) -> str:
    return _HTML_ENCODE_RE.sub(lambda m: HTML_ENCODE_MAP[m.group(0)], text)


def _resolve_entity(m: "re.Match[str]") -> str:
    name, dec, hx = m.groups()
    if name:
        return HTML_NAMED_ENTITIES[name]
    code = int(dec) if dec else int(hx, 16)
    # surrogates and out-of-range code points have no UTF-8 form
    if code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
        return m.group(0)
    return chr(code)


def html_decode(text: str) -> str:
    """Resolve entities in one left-to-right pass.

    Output of a substitution is never scanned again, so ``&amp;lt;`` decodes
    to ``&lt;`` and not ``<``.
    """
    return _HTML_ENTITY_RE.sub(_resolve_entity, text)


# ------------------------------
# Hex
# ------------------------------
def hex_encode(data: Union[str, bytes]) -> str:
    return binascii.hexlify(to_bytes(data)).decode("ascii")


def hex_decode_to_bytes(s: str) -> bytes:
    clean = _NON_HEX_RE.sub("", s)
    if len(clean) % 2:
        raise FormatError("hex_decode_to_bytes", f"Invalid hex string length ({len(clean)} digits)")
    return binascii.unhexlify(clean)


def hex_decode_to_text(s: str) -> str:
    try:
        raw = hex_decode_to_bytes(s)
    except FormatError as e:
        raise FormatError("hex_decode_to_text", e.message) from e
    return raw.decode("utf-8", errors="replace")
