from __future__ import annotations

import base64
import binascii
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Union

from .binary import structured_to_bytes, to_bytes
from .config import DEFAULT_MIME_TYPE
from .errors import FormatError, ParseError

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")
_DATA_URL_RE = re.compile(r"^data:([^,]*?)(;base64)?,(.*)$", re.DOTALL)


@dataclass(frozen=True)
class DataUrl:
    mime_type: str
    is_base64: bool
    data: str

    def to_dict(self) -> Dict[str, Any]:
        return {"mimeType": self.mime_type, "isBase64": self.is_base64, "data": self.data}


def _b64decode(s: Union[str, bytes], operation: str) -> bytes:
    if isinstance(s, bytes):
        s = s.decode("ascii", errors="replace")
    s = _WHITESPACE_RE.sub("", s)
    # accept the URL-safe alphabet and missing padding
    s = s.replace("-", "+").replace("_", "/")
    s += "=" * (-len(s) % 4)
    try:
        return base64.b64decode(s, validate=True)
    except (binascii.Error, ValueError) as e:
        raise FormatError(operation, f"Base64 decode failed: {e}") from e


# ------------------------------
# Text / bytes / structured
# ------------------------------
def text_to_base64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def base64_to_text(s: str) -> str:
    return _b64decode(s, "base64_to_text").decode("utf-8", errors="replace")


def bytes_to_base64(data: bytes) -> str:
    return base64.b64encode(bytes(data)).decode("ascii")


def base64_to_bytes(s: str) -> bytes:
    return _b64decode(s, "base64_to_bytes")


def structured_to_base64(value: Any) -> str:
    return bytes_to_base64(structured_to_bytes(value))


def base64_to_structured(s: str) -> Any:
    raw = _b64decode(s, "base64_to_structured")
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ParseError("base64_to_structured", f"decoded payload is not valid JSON: {e}") from e


# ------------------------------
# Data URLs
# ------------------------------
def build_data_url(data: Union[bytes, str], mime_type: str = DEFAULT_MIME_TYPE) -> str:
    return f"data:{mime_type or DEFAULT_MIME_TYPE};base64,{bytes_to_base64(to_bytes(data))}"


def parse_data_url(url: str) -> DataUrl:
    """Split a data URL into its parts. The payload is returned as-is, not decoded."""
    m = _DATA_URL_RE.match(url.strip())
    if m is None:
        raise FormatError("parse_data_url", "Invalid data URL format")
    mime, b64_flag, payload = m.groups()
    return DataUrl(mime_type=mime or DEFAULT_MIME_TYPE, is_base64=bool(b64_flag), data=payload)
