"""Error taxonomy for the conversion engine.

Every error names the operation that failed and the cause text, so a host can
report ``str(err)`` as-is. The root class derives from ``ValueError`` so callers
that only care about "bad input" can keep catching that.
"""
from __future__ import annotations

from typing import Optional


class ConversionError(ValueError):
    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(f"{operation}: {message}")


class ParseError(ConversionError):
    """Malformed JSON / YAML / CSV / XML input."""


class FormatError(ConversionError):
    """Malformed Base64, data URL, percent-encoding, hex or similar payload."""


class EncodingError(ConversionError):
    """Unknown or non-text character encoding name."""


class FieldNotFoundError(ConversionError):
    def __init__(self, operation: str, path: str, segment: Optional[str] = None):
        self.path = path
        self.segment = segment
        detail = f"field '{path}' not found"
        if segment is not None and segment != path:
            detail += f" (missing segment '{segment}')"
        super().__init__(operation, detail)


class TypeMismatchError(ConversionError):
    """A text-only step was scheduled after the running value became structured."""


class OptionsError(ConversionError):
    """Unrecognized key in an options record."""


class UnknownOperationError(ConversionError):
    """Unknown resource, operation or chain step tag."""


class DepthLimitError(ConversionError):
    """Structured input nested deeper than the configured render depth."""


__all__ = [
    "ConversionError",
    "ParseError",
    "FormatError",
    "EncodingError",
    "FieldNotFoundError",
    "TypeMismatchError",
    "OptionsError",
    "UnknownOperationError",
    "DepthLimitError",
]
