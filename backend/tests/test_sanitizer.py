from prompthub.utils.sanitizer import (
    MAX_CODE_LENGTH,
    MAX_TEXT_LENGTH,
    sanitize_code,
    sanitize_html,
    sanitize_text,
    sanitize_url,
)


class TestSanitizeHtml:
    def test_keeps_allowed_tags(self):
        assert sanitize_html("<b>bold</b> <em>em</em>") == "<b>bold</b> <em>em</em>"

    def test_strips_script(self):
        out = sanitize_html("<p>hi</p><script>alert(1)</script>")
        assert "<script" not in out
        assert "<p>hi</p>" in out

    def test_drops_disallowed_attributes(self):
        out = sanitize_html('<a href="https://example.com" onclick="x()">link</a>')
        assert 'href="https://example.com"' in out
        assert "onclick" not in out

    def test_drops_javascript_href(self):
        out = sanitize_html('<a href="javascript:alert(1)">x</a>')
        assert "javascript:" not in out


class TestSanitizeText:
    def test_strips_tags(self):
        assert sanitize_text("<b>Hello</b> world") == "Hello world"

    def test_removes_js_protocol_and_handlers(self):
        out = sanitize_text("javascript:doit() onload=boom")
        assert "javascript:" not in out.lower()
        assert "onload=" not in out

    def test_trims(self):
        assert sanitize_text("  blog post ideas  ") == "blog post ideas"

    def test_length_cap(self):
        assert len(sanitize_text("a" * (MAX_TEXT_LENGTH + 50))) == MAX_TEXT_LENGTH

    def test_no_angle_brackets_survive(self):
        out = sanitize_text("a < b > c")
        assert "<" not in out and ">" not in out


class TestSanitizeCode:
    def test_removes_script_and_iframe_blocks(self):
        code = "print('x')\n<script>evil()</script>\n<iframe src='x'></iframe>\nend"
        out = sanitize_code(code)
        assert "<script" not in out
        assert "<iframe" not in out
        assert "print('x')" in out

    def test_keeps_formatting(self):
        code = "def f():\n    return 1 < 2\n"
        assert sanitize_code(code) == code

    def test_length_cap(self):
        assert len(sanitize_code("x" * (MAX_CODE_LENGTH + 1))) == MAX_CODE_LENGTH


class TestSanitizeUrl:
    def test_https(self):
        assert sanitize_url("https://example.com/a?b=1") == "https://example.com/a?b=1"

    def test_rejects_javascript(self):
        assert sanitize_url("javascript:alert(1)") == ""

    def test_rejects_ftp(self):
        assert sanitize_url("ftp://example.com/file") == ""

    def test_rejects_garbage(self):
        assert sanitize_url("not a url") == ""
        assert sanitize_url("") == ""
