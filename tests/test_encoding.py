import pytest

from fk_ops.encoding import (
    hex_decode_to_bytes,
    hex_decode_to_text,
    hex_encode,
    html_decode,
    html_encode,
    url_decode,
    url_encode,
)
from fk_ops.errors import FormatError


def test_url_encode_component_rules():
    assert url_encode("a b&c=d/é") == "a%20b%26c%3Dd%2F%C3%A9"
    assert url_encode("-_.!~*'()") == "-_.!~*'()"

def test_url_decode():
    assert url_decode("a%20b%2Bc+d") == "a b+c+d"
    assert url_decode("%C3%A9") == "é"

def test_url_decode_malformed():
    with pytest.raises(FormatError):
        url_decode("100%")
    with pytest.raises(FormatError):
        url_decode("%zz")
    with pytest.raises(FormatError):
        url_decode("%C3")

def test_html_encode_exact_set():
    assert html_encode("<a href=\"x\">'`/&</a>") == (
        "&lt;a href&#x3D;&quot;x&quot;&gt;&#39;&#x60;&#x2F;&amp;&lt;&#x2F;a&gt;"
    )
    assert html_encode("é ©") == "é ©"

def test_html_decode_named_and_numeric():
    assert html_decode("&lt;p&gt; &quot;hi&quot; &apos;x&#39; &#x2F;&#X3D;&#96;") == "<p> \"hi\" 'x' /=`"

def test_html_decode_single_pass():
    assert html_decode("&amp;lt;") == "&lt;"
    assert html_decode("&amp;#39;") == "&#39;"

def test_html_decode_leaves_unknown():
    assert html_decode("&nbsp; &#99999999;") == "&nbsp; &#99999999;"

def test_html_roundtrip():
    text = "<b>Tom & \"Jerry\" = 'friends'</b>"
    assert html_decode(html_encode(text)) == text

def test_hex_encode():
    assert hex_encode("hi") == "6869"
    assert hex_encode(b"\x00\xff") == "00ff"

def test_hex_decode_strips_noise():
    assert hex_decode_to_bytes("68 69\n0A") == b"hi\n"
    assert hex_decode_to_text("x68:69") == "hi"

def test_hex_decode_odd_length():
    with pytest.raises(FormatError) as exc:
        hex_decode_to_text("abc")
    assert exc.value.operation == "hex_decode_to_text"

def test_url_encode_lone_surrogate():
    with pytest.raises(FormatError) as exc:
        url_encode("\ud800")
    assert exc.value.operation == "url_encode"

def test_html_decode_leaves_surrogates():
    assert html_decode("&#xD800; &#55296;") == "&#xD800; &#55296;"
    assert html_decode("&#xD7FF;") == "\ud7ff"
