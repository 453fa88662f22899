import pytest

from fk_ops.config import NO_DATA_HTML, NO_ITEMS_HTML
from fk_ops.errors import DepthLimitError, OptionsError
from fk_ops.markup import (
    csv_to_html_table,
    html_to_markdown,
    markdown_to_html,
    structured_to_html_list,
    structured_to_html_table,
)


def test_html_table_placeholder():
    for empty in (None, [], {}):
        assert structured_to_html_table(empty) == NO_DATA_HTML

def test_html_table_layout_and_escaping():
    out = structured_to_html_table([{"a": "<x>", "b": 1}], {"tableClass": "t"})
    assert out == "\n".join([
        '<table class="t">',
        "  <thead>",
        "    <tr>",
        "      <th>a</th>",
        "      <th>b</th>",
        "    </tr>",
        "  </thead>",
        "  <tbody>",
        "    <tr>",
        "      <td>&lt;x&gt;</td>",
        "      <td>1</td>",
        "    </tr>",
        "  </tbody>",
        "</table>",
    ])

def test_html_table_index_and_classes():
    out = structured_to_html_table(
        [{"a": 1}, {"a": 2}], {"includeIndex": True, "cellClass": "c", "rowClass": 'r"x'}
    )
    assert "<th>#</th>" in out
    assert '<td class="c">2</td>' in out
    assert '<tr class="r&quot;x">' in out

def test_html_table_scalars_use_value_column():
    out = structured_to_html_table(["x", None])
    assert "<th>value</th>" in out
    assert "<td>x</td>" in out
    assert "<td></td>" in out

def test_html_table_single_mapping():
    assert "<td>Ann</td>" in structured_to_html_table({"name": "Ann"})

def test_html_table_unknown_option():
    with pytest.raises(OptionsError):
        structured_to_html_table([{"a": 1}], {"border": 1})

def test_html_list():
    out = structured_to_html_list(["a", {"k": True}, ["b"]])
    assert out.startswith("<ul>\n  <li>a</li>")
    assert "<dt>k</dt>" in out and "<dd>true</dd>" in out
    assert "  <li>b</li>" in out
    assert out.endswith("</ul>")

def test_html_list_ordered_and_empty():
    assert structured_to_html_list([1, 2], ordered=True).startswith("<ol>")
    assert structured_to_html_list([]) == NO_ITEMS_HTML

def test_html_list_depth_limit():
    with pytest.raises(DepthLimitError):
        structured_to_html_list([[[1]]], max_depth=1)

def test_csv_to_html_table():
    out = csv_to_html_table("name,qty\nbolt,4\n", {"tableClass": "inv"})
    assert '<table class="inv">' in out
    assert "<th>qty</th>" in out
    assert "<td>4</td>" in out
    assert csv_to_html_table("") == NO_DATA_HTML

def test_markdown_to_html():
    out = markdown_to_html("# Title\n\n**bold** ~~gone~~")
    assert "<h1>Title</h1>" in out
    assert "<strong>bold</strong>" in out
    assert "<s>gone</s>" in out

def test_markdown_to_html_tables_and_breaks():
    out = markdown_to_html("| a | b |\n| --- | --- |\n| 1 | 2 |\n")
    assert "<table>" in out and "<td>1</td>" in out
    assert "<br>" in markdown_to_html("a\nb")

def test_html_to_markdown_basics():
    assert html_to_markdown("<h1>Title</h1><p>Some <strong>bold</strong></p>") == "# Title\n\nSome **bold**"
    assert html_to_markdown("<ul><li>a</li><li>b</li></ul>") == "- a\n- b"
    assert html_to_markdown("") == ""

def test_html_to_markdown_table():
    html = "<table><tr><th>a</th><th>b</th></tr><tr><td>1</td><td>x|y</td></tr></table>"
    assert html_to_markdown(html) == "| a | b |\n| --- | --- |\n| 1 | x\\|y |"

def test_html_to_markdown_pads_ragged_rows():
    html = "<table><tr><td>a</td><td>b</td></tr><tr><td>1</td></tr></table>"
    assert html_to_markdown(html) == "| a | b |\n| --- | --- |\n| 1 |  |"

def _nested_lists(n):
    value = 1
    for _ in range(n):
        value = [value]
    return value

def test_html_list_deep_mapping_value_raises_depth_limit():
    with pytest.raises(DepthLimitError):
        structured_to_html_list([{"k": _nested_lists(5000)}])

def test_html_table_deep_cell_raises_depth_limit():
    with pytest.raises(DepthLimitError):
        structured_to_html_table([{"k": _nested_lists(5000)}])
