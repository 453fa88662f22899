import pytest

from fk_ops.errors import FormatError, OptionsError, TypeMismatchError, UnknownOperationError
from fk_ops.strings import (
    EmailParts,
    Step,
    apply_multiple,
    capitalize_first,
    clean_filename,
    normalize_whitespace,
    pad_text,
    parse_email_address,
    remove_special_chars,
    resolve_step,
    reverse,
    slugify,
    to_camel_case,
    to_kebab_case,
    to_snake_case,
    to_title_case,
    truncate,
)


# ---------------------------------------------------------------------------
# Filenames and slugs
# ---------------------------------------------------------------------------

def test_clean_filename():
    assert clean_filename("my:file?.txt") == "my_file.txt"
    assert clean_filename("con.txt") == "con_file.txt"
    assert clean_filename("???") == "unnamed"

def test_clean_filename_max_length_keeps_extension():
    assert clean_filename("abcdefgh.txt", {"maxLength": 6}) == "ab.txt"

def test_slugify():
    assert slugify("Hello, World!") == "hello-world"
    assert slugify("a b", {"separator": "_"}) == "a_b"
    assert slugify("Keep Case", {"lowercase": False}) == "Keep-Case"
    assert slugify("Café au lait", {"strict": True}) == "caf-au-lait"


# ---------------------------------------------------------------------------
# Case styles
# ---------------------------------------------------------------------------

def test_title_case_minor_words():
    assert to_title_case("the lord of the rings") == "The Lord of the Rings"

def test_title_case_preserve_all_caps():
    assert to_title_case("NASA and the moon") == "Nasa and the Moon"
    assert to_title_case("NASA and the moon", {"preserveAllCaps": True}) == "NASA and the Moon"

def test_camel_kebab_snake():
    assert to_camel_case("hello world-foo_bar") == "helloWorldFooBar"
    assert to_camel_case("Hello World") == "helloWorld"
    assert to_kebab_case("helloWorld") == "hello-world"
    assert to_kebab_case("Hello_World!!") == "hello-world"
    assert to_snake_case("helloWorld Foo-bar") == "hello_world_foo_bar"

def test_capitalize_first_and_reverse():
    assert capitalize_first("hELLO") == "HELLO"
    assert capitalize_first("hELLO", {"lowerRest": True}) == "Hello"
    assert capitalize_first("") == ""
    assert reverse("abc") == "cba"


# ---------------------------------------------------------------------------
# Whitespace and character classes
# ---------------------------------------------------------------------------

def test_normalize_whitespace():
    text = "  a   b  \n\n  c\t\td  "
    assert normalize_whitespace(text) == "a b\n\nc d"
    assert normalize_whitespace(text, {"removeEmptyLines": True}) == "a b\nc d"

def test_normalize_whitespace_is_idempotent():
    text = " x \t y \n   \n z "
    once = normalize_whitespace(text)
    assert normalize_whitespace(once) == once

def test_remove_special_chars():
    assert remove_special_chars("Héllo, wörld #1!") == "Héllo wörld 1"
    assert remove_special_chars("a1 b2", {"keepNumbers": False, "keepSpaces": False}) == "ab"
    assert remove_special_chars("a#b!", {"customAllowed": "#"}) == "a#b"

def test_remove_special_chars_file_extension():
    assert remove_special_chars("my report (v2).pdf", {"keepFileExtension": True}) == "my report v2.pdf"


# ---------------------------------------------------------------------------
# Length
# ---------------------------------------------------------------------------

def test_truncate_backs_off_to_word():
    text = "The quick brown fox jumps over the lazy dog"
    assert truncate(text, {"length": 20}) == "The quick brown..."
    assert truncate(text, {"length": 20, "preserveWords": False}) == "The quick brown f..."
    assert truncate("short", {"length": 20}) == "short"

def test_truncate_keeps_cut_when_space_is_early():
    assert truncate("The quick brown fox", {"length": 12, "suffix": "...", "preserveWords": True}) == "The quick..."

def test_pad_text():
    assert pad_text("hi", {"length": 7, "side": "both", "padChar": "*"}) == "**hi***"
    assert pad_text("x", {"length": 4, "padChar": "ab", "side": "left"}) == "abax"
    assert pad_text("already long", {"length": 3}) == "already long"

def test_pad_text_bad_options():
    with pytest.raises(FormatError):
        pad_text("x", {"padChar": ""})
    with pytest.raises(FormatError):
        pad_text("x", {"side": "middle"})


# ---------------------------------------------------------------------------
# E-mail
# ---------------------------------------------------------------------------

def test_parse_email_with_name():
    parts = parse_email_address('"Ann Lee" <ann@example.com>')
    assert parts == EmailParts(name="Ann Lee", email="ann@example.com", local_part="ann", domain="example.com")

def test_parse_bare_email():
    assert parse_email_address("bob@x.org").to_dict() == {
        "name": "", "email": "bob@x.org", "localPart": "bob", "domain": "x.org",
    }

def test_parse_email_invalid():
    for bad in ("not-an-email", "a@b@c", "@x.org"):
        with pytest.raises(FormatError):
            parse_email_address(bad)


# ---------------------------------------------------------------------------
# Chains
# ---------------------------------------------------------------------------

def test_apply_multiple_in_order():
    steps = [{"op": "normalizeWhitespace"}, {"op": "toSnakeCase"}, {"op": "toUpperCase"}]
    assert apply_multiple("  Hello World  ", steps) == "HELLO_WORLD"

def test_apply_multiple_inline_options_and_type_tag():
    assert apply_multiple("abcdefgh", [{"type": "truncate", "length": 5, "suffix": "~"}]) == "abcd~"
    assert apply_multiple("abcdefgh", [Step.from_record({"op": "reverse"})]) == "hgfedcba"

def test_apply_multiple_empty():
    assert apply_multiple("same", []) == "same"

def test_apply_multiple_email_is_terminal():
    assert isinstance(apply_multiple("ann@x.org", [{"op": "parseEmailAddress"}]), EmailParts)
    with pytest.raises(TypeMismatchError):
        apply_multiple("ann@x.org", [{"op": "parseEmailAddress"}, {"op": "toUpperCase"}])

def test_apply_multiple_unknown_steps():
    with pytest.raises(UnknownOperationError):
        apply_multiple("x", [{"op": "rot13"}])
    with pytest.raises(UnknownOperationError):
        apply_multiple("x", [{"op": "applyMultiple"}])

def test_step_without_options_rejects_them():
    with pytest.raises(OptionsError):
        apply_multiple("x", [{"op": "reverse", "options": {"twice": True}}])

def test_resolve_step():
    assert resolve_step("slugify").value == "slugify"
    for bad in ("rot13", None, "applyMultiple"):
        with pytest.raises(UnknownOperationError):
            resolve_step(bad)
