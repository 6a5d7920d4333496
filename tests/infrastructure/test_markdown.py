from markupsafe import Markup

from valportal.infrastructure.rendering import render_markdown
from valportal.infrastructure.rendering.markdown import is_safe_url


def test_renders_tables_and_fenced_code():
    html = render_markdown(
        "# Title\n\n| a | b |\n|---|---|\n| 1 | 2 |\n\n```sql\nSELECT 1;\n```\n"
    )

    assert isinstance(html, Markup)
    assert "<h1>Title</h1>" in html
    assert "<table>" in html
    assert "<code" in html and "SELECT 1;" in html


def test_empty_content_renders_nothing():
    assert render_markdown(None) == ""
    assert render_markdown("") == ""


def test_raw_html_is_escaped():
    html = render_markdown(
        'Hello <script>alert(1)</script>\n\n<img src="x" onerror="alert(1)">\n'
    )

    assert "<script>" not in html
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
    assert "<img" not in html


def test_unsafe_link_schemes_are_dropped():
    html = render_markdown(
        "[run](javascript:alert(1)) [mail](mailto:ops@thinkval.com) "
        "[site](https://www.thinkval.com) [tab](/lag?tab=Sales)"
    )

    assert "javascript:" not in html
    assert 'href="mailto:ops@thinkval.com"' in html
    assert 'href="https://www.thinkval.com"' in html
    assert 'href="/lag?tab=Sales"' in html


def test_is_safe_url():
    assert is_safe_url("https://lag.thinkval.io")
    assert is_safe_url("#")
    assert not is_safe_url("JavaScript:alert(1)")
    assert not is_safe_url("java\tscript:alert(1)")
    assert not is_safe_url("data:text/html;base64,PHNjcmlwdD4=")
