"""Markdown rendering for portal content and documentation.

Raw HTML in the source is shown as text, and links or images whose URL uses a
scheme other than ``http``, ``https`` or ``mailto`` lose that URL.
"""

from __future__ import annotations

from urllib.parse import urlsplit

import markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor
from markupsafe import Markup

SAFE_URL_SCHEMES = frozenset({"", "http", "https", "mailto"})


def is_safe_url(url: str) -> bool:
    # Browsers ignore control characters and whitespace inside a scheme.
    cleaned = "".join(ch for ch in url if ch.isprintable() and not ch.isspace())
    try:
        scheme = urlsplit(cleaned).scheme
    except ValueError:
        return False
    return scheme.lower() in SAFE_URL_SCHEMES


class _UnsafeUrlStripper(Treeprocessor):
    def run(self, root):
        for element in root.iter():
            for attribute in ("href", "src"):
                value = element.get(attribute)
                if value is not None and not is_safe_url(value):
                    element.set(attribute, "")
        return None


class EscapeHtmlExtension(Extension):
    """Treat raw HTML as text and drop unsafe link targets."""

    def extendMarkdown(self, md):
        md.preprocessors.deregister("html_block")
        md.inlinePatterns.deregister("html")
        md.treeprocessors.register(_UnsafeUrlStripper(md), "strip_unsafe_urls", 0)


MARKDOWN_EXTENSIONS = ["tables", "fenced_code", "sane_lists", EscapeHtmlExtension()]


def render_markdown(text: str | None) -> Markup:
    """Render markdown to HTML that templates can embed without escaping."""
    if not text:
        return Markup("")
    return Markup(markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS))
