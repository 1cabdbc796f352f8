"""
Tests for preview document assembly.
"""

from napkin2web.rendering.preview_renderer import build_preview_document, extract_body_markup


def test_extract_body_from_full_document():
    code = """<!DOCTYPE html>
<html>
<head><title>Login</title></head>
<body><form><input type="email"></form></body>
</html>"""

    assert extract_body_markup(code) == '<form><input type="email"/></form>'


def test_extract_fragment_without_body():
    code = "<html><head><title>x</title></head><main><p>Hi</p></main></html>"

    markup = extract_body_markup(code)

    assert "<title>" not in markup
    assert "<html>" not in markup
    assert "<main><p>Hi</p></main>" in markup


def test_extract_empty():
    assert extract_body_markup("") == ""


def test_build_preview_document():
    document = build_preview_document("<body><button>Go</button></body>")

    assert document.startswith("<!DOCTYPE html>")
    assert "https://cdn.tailwindcss.com" in document
    assert "lucide.createIcons();" in document
    assert "<button>Go</button>" in document
    assert "font-family: 'Inter', sans-serif;" in document


def test_build_preview_document_falls_back():
    document = build_preview_document(None, "<p>canonical</p>")

    assert "<p>canonical</p>" in document
