from .markdown import MARKDOWN_EXTENSIONS, render_markdown

__all__ = ["MARKDOWN_EXTENSIONS", "render_markdown"]
