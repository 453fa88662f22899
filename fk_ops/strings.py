from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Union

import regex  # \p{L} / \p{N} classes

from .config import (
    CapitalizeOptions,
    CleanFilenameOptions,
    PadOptions,
    SlugifyOptions,
    SpecialCharsOptions,
    TitleCaseOptions,
    TruncateOptions,
    WhitespaceOptions,
    build_options,
)
from .errors import FormatError, OptionsError, TypeMismatchError, UnknownOperationError
from .resources import StringOp

logger = logging.getLogger(__name__)

MINOR_WORDS = frozenset(
    ["a", "an", "the", "and", "but", "or", "for", "nor", "as", "at", "by", "in", "of", "on", "to", "up", "with"]
)
RESERVED_FILENAMES = frozenset(
    ["CON", "PRN", "AUX", "NUL"]
    + [f"COM{i}" for i in range(1, 10)]
    + [f"LPT{i}" for i in range(1, 10)]
)
FILENAME_CHARS = "-_."
BASIC_PUNCTUATION = ".,!?;:"
PAD_SIDES = ("left", "right", "both")

_WS_RE = regex.compile(r"\s+")
_CAMEL_BOUNDARY_RE = regex.compile(r"(?:^\w|[A-Z]|\b\w)")
_EMAIL_RE = regex.compile(
    r"^\s*(?:(?P<name>[^<>]*?)\s*<\s*(?P<addr>[^<>\s]+)\s*>|(?P<bare>[^<>\s]+))\s*$"
)


def _class_escape(chars: str) -> str:
    return "".join("\\" + c if c in "\\]^-[" else c for c in chars)


def _collapse_and_trim(s: str, sep: str) -> str:
    if not sep:
        return s
    e = regex.escape(sep)
    s = regex.sub(f"(?:{e})+", lambda _: sep, s)
    return regex.sub(f"^(?:{e})|(?:{e})$", "", s)


@dataclass(frozen=True)
class EmailParts:
    name: str
    email: str
    local_part: str
    domain: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "email": self.email, "localPart": self.local_part, "domain": self.domain}


# ------------------------------
# Filenames and slugs
# ------------------------------
def clean_filename(filename: str, options: Optional[Mapping[str, Any]] = None) -> str:
    opts = build_options(CleanFilenameOptions, options)
    rep = opts.replacement
    name, extension = filename, ""
    if opts.preserve_extension:
        dot = filename.rfind(".")
        if dot > 0:
            name, extension = filename[:dot], filename[dot:]
            extension = regex.sub(r'[<>:"/\\|?*\x00-\x1f\s]', lambda _: rep, extension)

    name = regex.sub(r'[<>:"/\\|?*\x00-\x1f]', lambda _: rep, name)
    name = regex.sub(r"[\x80-\xff]", lambda _: rep, name)
    name = regex.sub(r"\s+", lambda _: rep, name)
    name = regex.sub(r"\.+", lambda _: rep, name)
    name = _collapse_and_trim(name, rep)

    if name.upper() in RESERVED_FILENAMES:
        name = f"{name}{rep}file"
    if not name:
        name = "unnamed"

    max_name = int(opts.max_length) - len(extension)
    if len(name) > max_name:
        name = name[: max(max_name, 0)]
    return name + extension


def slugify(text: str, options: Optional[Mapping[str, Any]] = None) -> str:
    opts = build_options(SlugifyOptions, options)
    sep = opts.separator
    s = _WS_RE.sub(lambda _: sep, text.strip())
    s = regex.sub(r"[^\w\-_.~]", lambda _: "" if opts.strict else sep, s, flags=regex.ASCII)
    s = _collapse_and_trim(s, sep)
    return s.lower() if opts.lowercase else s


# ------------------------------
# Case styles
# ------------------------------
def to_title_case(text: str, options: Optional[Mapping[str, Any]] = None) -> str:
    opts = build_options(TitleCaseOptions, options)
    words = text.split()
    last = len(words) - 1
    out = []
    for i, word in enumerate(words):
        if opts.preserve_all_caps and len(word) > 1 and word.isupper():
            out.append(word)
            continue
        lower = word.lower()
        if i in (0, last) or lower not in MINOR_WORDS:
            out.append(lower[:1].upper() + lower[1:])
        else:
            out.append(lower)
    return " ".join(out)


def to_camel_case(text: str) -> str:
    s = regex.sub(r"[\s_\-]+", " ", text).strip()
    s = _CAMEL_BOUNDARY_RE.sub(
        lambda m: m.group(0).lower() if m.start() == 0 else m.group(0).upper(), s
    )
    s = _WS_RE.sub("", s)
    return regex.sub(r"[^\w]", "", s)


def to_kebab_case(text: str) -> str:
    s = regex.sub(r"([a-z])([A-Z])", r"\1-\2", text)
    s = regex.sub(r"[\s_]+", "-", s)
    s = regex.sub(r"[^\w\-]", "", s)
    return s.strip("-").lower()


def to_snake_case(text: str) -> str:
    s = regex.sub(r"([a-z])([A-Z])", r"\1_\2", text)
    s = regex.sub(r"[\s\-]+", "_", s)
    s = regex.sub(r"[^\w]", "", s)
    return s.strip("_").lower()


def to_upper_case(text: str) -> str:
    return text.upper()


def to_lower_case(text: str) -> str:
    return text.lower()


def capitalize_first(text: str, options: Optional[Mapping[str, Any]] = None) -> str:
    opts = build_options(CapitalizeOptions, options)
    if not text:
        return text
    rest = text[1:].lower() if opts.lower_rest else text[1:]
    return text[0].upper() + rest


# ------------------------------
# Whitespace and character classes
# ------------------------------
def normalize_whitespace(text: str, options: Optional[Mapping[str, Any]] = None) -> str:
    opts = build_options(WhitespaceOptions, options)
    result = text
    if opts.trim_lines:
        result = "\n".join(line.strip() for line in result.split("\n"))
    if opts.remove_empty_lines:
        result = "\n".join(line for line in result.split("\n") if line.strip())
    if opts.collapse_spaces:
        result = regex.sub(r"[ \t]+", " ", result)
    return result.strip()


def remove_special_chars(text: str, options: Optional[Mapping[str, Any]] = None) -> str:
    """Drop every character outside the allowlist; letters are always kept."""
    opts = build_options(SpecialCharsOptions, options)
    body, extension = text, ""
    if opts.keep_file_extension:
        dot = text.rfind(".")
        if dot > 0:
            body, extension = text[:dot], text[dot:]

    allowed = [r"\p{L}"]
    if opts.keep_numbers:
        allowed.append(r"\p{N}")
    if opts.keep_spaces:
        allowed.append(" ")
    if opts.keep_filename_chars:
        allowed.append(_class_escape(FILENAME_CHARS))
    if opts.keep_basic_punctuation:
        allowed.append(_class_escape(BASIC_PUNCTUATION))
    if opts.custom_allowed:
        allowed.append(_class_escape(opts.custom_allowed))
    return regex.sub("[^" + "".join(allowed) + "]", "", body) + extension


def reverse(text: str) -> str:
    return text[::-1]


# ------------------------------
# Length
# ------------------------------
def truncate(text: str, options: Optional[Mapping[str, Any]] = None) -> str:
    opts = build_options(TruncateOptions, options)
    length = int(opts.length)
    if len(text) <= length:
        return text
    cut = text[: max(length - len(opts.suffix), 0)]
    if opts.preserve_words:
        last_space = cut.rfind(" ")
        # only back off when that keeps more than half the target length
        if last_space > length * 0.5:
            cut = cut[:last_space]
    return cut + opts.suffix


def pad_text(text: str, options: Optional[Mapping[str, Any]] = None) -> str:
    opts = build_options(PadOptions, options)
    if not opts.pad_char:
        raise FormatError("pad_text", "pad character must not be empty")
    if opts.side not in PAD_SIDES:
        raise FormatError("pad_text", f"pad side must be one of {', '.join(PAD_SIDES)}, got '{opts.side}'")
    length = int(opts.length)
    if len(text) >= length:
        return text

    def fill(n: int) -> str:
        return (opts.pad_char * n)[:n]

    n = length - len(text)
    if opts.side == "left":
        return fill(n) + text
    if opts.side == "both":
        left = n // 2
        return fill(left) + text + fill(n - left)
    return text + fill(n)


# ------------------------------
# E-mail
# ------------------------------
def parse_email_address(text: str) -> EmailParts:
    m = _EMAIL_RE.match(text)
    addr = (m.group("addr") or m.group("bare")) if m else None
    if not addr or addr.count("@") != 1:
        raise FormatError("parse_email_address", f"Invalid email address: '{text}'")
    local, domain = addr.split("@")
    if not local or not domain:
        raise FormatError("parse_email_address", f"Invalid email address: '{text}'")
    name = (m.group("name") or "").strip().strip("\"'").strip()
    return EmailParts(name=name, email=addr, local_part=local, domain=domain)


# ------------------------------
# Chains
# ------------------------------
def _without_options(fn: Callable[[str], Any]) -> Callable[[str, Optional[Mapping[str, Any]]], Any]:
    def step(text: str, options: Optional[Mapping[str, Any]] = None) -> Any:
        if options:
            raise OptionsError(fn.__name__, f"takes no options, got {sorted(options)}")
        return fn(text)

    step.__name__ = fn.__name__
    return step


TRANSFORMS: Dict[StringOp, Callable[[str, Optional[Mapping[str, Any]]], Any]] = {
    StringOp.CLEAN_FILENAME: clean_filename,
    StringOp.SLUGIFY: slugify,
    StringOp.TO_TITLE_CASE: to_title_case,
    StringOp.TO_CAMEL_CASE: _without_options(to_camel_case),
    StringOp.TO_KEBAB_CASE: _without_options(to_kebab_case),
    StringOp.TO_SNAKE_CASE: _without_options(to_snake_case),
    StringOp.TO_UPPER_CASE: _without_options(to_upper_case),
    StringOp.TO_LOWER_CASE: _without_options(to_lower_case),
    StringOp.NORMALIZE_WHITESPACE: normalize_whitespace,
    StringOp.REMOVE_SPECIAL_CHARS: remove_special_chars,
    StringOp.CAPITALIZE_FIRST: capitalize_first,
    StringOp.REVERSE: _without_options(reverse),
    StringOp.TRUNCATE: truncate,
    StringOp.PAD_TEXT: pad_text,
    StringOp.PARSE_EMAIL_ADDRESS: _without_options(parse_email_address),
}


@dataclass(frozen=True)
class Step:
    op: StringOp
    options: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_record(cls, record: Union["Step", Mapping[str, Any]]) -> "Step":
        """Accept ``{"op": ..., "options": {...}}`` (``type`` works as well as ``op``).

        Keys other than the tag and ``options`` are read as inline options.
        """
        if isinstance(record, Step):
            return record
        data = dict(record)
        tag = data.pop("op", None)
        alt = data.pop("type", None)
        options = dict(data.pop("options", None) or {})
        options.update(data)
        return cls(op=resolve_step(tag or alt), options=options)


def resolve_step(tag: Any) -> StringOp:
    try:
        op = StringOp(tag)
    except ValueError as e:
        raise UnknownOperationError("apply_multiple", f"unknown step '{tag}'") from e
    if op not in TRANSFORMS:
        raise UnknownOperationError("apply_multiple", f"'{op.value}' cannot be used as a step")
    return op


def run_step(value: Union[str, EmailParts], step: Step, index: int = 1) -> Union[str, EmailParts]:
    if not isinstance(value, str):
        raise TypeMismatchError(
            "apply_multiple",
            f"step {index} ({step.op.value}) expects text but the running value is {type(value).__name__}",
        )
    return TRANSFORMS[step.op](value, step.options)


def apply_multiple(
    text: str, steps: Iterable[Union[Step, Mapping[str, Any]]]
) -> Union[str, EmailParts]:
    """Run the steps left to right, each on the previous step's output."""
    value: Union[str, EmailParts] = text
    for index, record in enumerate(steps, start=1):
        step = Step.from_record(record)
        logger.debug("apply_multiple: step %d %s", index, step.op.value)
        value = run_step(value, step, index)
    return value
