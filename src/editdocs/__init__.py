"""editdocs - serve a directory of Markdown as HTML with an inline editor."""

__version__ = "0.1.0"
