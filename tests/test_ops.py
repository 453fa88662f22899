import pytest

from fk_ops import OPS, Resource, UnknownOperationError, get_operation, list_operations, run
from fk_ops.errors import OptionsError
from fk_ops.resources import OPERATIONS


def test_every_operation_is_registered():
    for resource, ops in OPERATIONS.items():
        for op in ops:
            assert (resource, op) in OPS

def test_b64_roundtrip():
    enc = run("base64", "textToBase64", "FormatKitchen")
    assert run("base64", "base64ToText", enc) == "FormatKitchen"

def test_bytes_roundtrip():
    data = b"hello\x00world"
    enc = run("base64", "bytesToBase64", data)
    assert run("base64", "base64ToBytes", enc) == data

def test_parse_data_url_returns_record():
    out = run("base64", "parseDataUrl", "data:image/png;base64,iVBORw0KG==")
    assert out == {"mimeType": "image/png", "isBase64": True, "data": "iVBORw0KG=="}

def test_text_to_bytes_with_encoding():
    assert run("binary", "textToBytes", "é", {"encoding": "latin-1"}) == b"\xe9"

def test_csv_options_camel_case():
    out = run("format", "structuredToCsv", [{"a": 1}], {"delimiter": ";", "includeHeaders": False})
    assert out == '"1"\n'

def test_extract_mode_passed_through():
    assert run("format", "structuredToExtractedString", {"a": {"b": 7}}, {"mode": "field", "fieldPath": "a.b"}) == "7"

def test_csv_to_html_table_splits_options():
    out = run("html", "csvToHtmlTable", "x;y\n1;2\n", {"delimiter": ";", "tableClass": "grid"})
    assert '<table class="grid">' in out
    assert "<td>2</td>" in out

def test_apply_multiple_via_dispatch():
    steps = [{"op": "normalizeWhitespace"}, {"op": "toKebabCase"}]
    assert run("string", "applyMultiple", "  Hello_World!!  ", {"steps": steps}) == "hello-world"

def test_parse_email_via_dispatch_is_record():
    out = run("string", "parseEmailAddress", "Ann <ann@example.com>")
    assert out["domain"] == "example.com"

def test_pad_text_host_aliases():
    assert run("string", "padText", "hi", {"padLength": 5, "padSide": "left", "padChar": "*"}) == "***hi"

def test_unknown_resource():
    with pytest.raises(UnknownOperationError):
        run("crypto", "hash", "abc")

def test_unknown_operation():
    with pytest.raises(UnknownOperationError) as exc:
        get_operation("format", "jsonToToml")
    assert "jsonToToml" in str(exc.value)

def test_unexpected_option_rejected():
    with pytest.raises(OptionsError):
        run("encoding", "urlEncode", "a b", {"strict": True})

def test_list_operations_by_resource():
    ops = list_operations(Resource.HTML)
    assert {op.key.value for op in ops} == {
        "structuredToHtmlTable", "structuredToHtmlList", "csvToHtmlTable", "markdownToHtml", "htmlToMarkdown",
    }

def test_output_hints():
    assert get_operation("base64", "base64ToBytes").output_hint == "bytes"
    assert get_operation("format", "yamlToStructured").output_hint == "json"
