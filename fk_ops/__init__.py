"""FormatKitchen: pure conversions between data formats, plus text transforms."""

from .b64 import DataUrl
from .errors import (
    ConversionError,
    DepthLimitError,
    EncodingError,
    FieldNotFoundError,
    FormatError,
    OptionsError,
    ParseError,
    TypeMismatchError,
    UnknownOperationError,
)
from .registry import OPS, Operation, get_operation, list_operations, run
from .resources import Resource
from .strings import EmailParts, Step, apply_multiple

__all__ = [
    "run",
    "get_operation",
    "list_operations",
    "Operation",
    "OPS",
    "Resource",
    "DataUrl",
    "EmailParts",
    "Step",
    "apply_multiple",
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
