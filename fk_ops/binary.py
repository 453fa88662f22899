from __future__ import annotations

import codecs
import json
import logging
from typing import Any

from .config import DEFAULT_ENCODING, DEFAULT_MAX_INPUT_BYTES
from .errors import EncodingError, FormatError, ParseError

logger = logging.getLogger(__name__)

# Names other runtimes use that Python's codec registry does not know.
ENCODING_ALIASES = {
    "ucs2": "utf-16-le",
    "ucs-2": "utf-16-le",
    "utf16le": "utf-16-le",
    "binary": "latin-1",
}


# ------------------------------
# Utilities
# ------------------------------
def clamp_bytes(b: bytes, max_len: int = DEFAULT_MAX_INPUT_BYTES) -> bytes:
    if len(b) > max_len:
        return b[:max_len]
    return b


def to_bytes(x: Any, encoding: str = DEFAULT_ENCODING) -> bytes:
    if isinstance(x, (bytes, bytearray)):
        return bytes(x)
    return str(x).encode(encoding, errors="replace")


def try_decode_utf8(b: bytes) -> str:
    try:
        return b.decode("utf-8")
    except UnicodeDecodeError:
        return b.decode("latin-1", errors="replace")


def resolve_encoding(encoding: str, operation: str) -> str:
    """Return the canonical codec name for ``encoding`` or raise ``EncodingError``."""
    name = ENCODING_ALIASES.get((encoding or "").strip().lower(), encoding or DEFAULT_ENCODING)
    try:
        info = codecs.lookup(name)
    except LookupError as e:
        raise EncodingError(operation, f"unsupported encoding '{encoding}'") from e
    # hex_codec, base64_codec etc. are bytes-to-bytes and not usable for text
    if not getattr(info, "_is_text_encoding", True):
        raise EncodingError(operation, f"'{encoding}' is not a text encoding")
    return info.name


# ------------------------------
# Codec
# ------------------------------
def bytes_to_structured(data: bytes) -> Any:
    try:
        return json.loads(bytes(data).decode("utf-8"))
    except UnicodeDecodeError as e:
        raise ParseError("bytes_to_structured", f"payload is not UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise ParseError("bytes_to_structured", f"invalid JSON: {e}") from e


def structured_to_bytes(value: Any) -> bytes:
    try:
        text = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise FormatError("structured_to_bytes", f"value is not JSON serializable: {e}") from e
    return text.encode("utf-8")


def bytes_to_text(data: bytes, encoding: str = DEFAULT_ENCODING) -> str:
    codec = resolve_encoding(encoding, "bytes_to_text")
    logger.debug("decoding %d bytes as %s", len(data), codec)
    return bytes(data).decode(codec, errors="replace")


def text_to_bytes(text: str, encoding: str = DEFAULT_ENCODING) -> bytes:
    codec = resolve_encoding(encoding, "text_to_bytes")
    return text.encode(codec, errors="replace")
