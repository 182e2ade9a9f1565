"""Markdown rendering for document pages.

Wraps mistune to produce a navigation block followed by the page body, then
splits that output into table of contents, content and title.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path

import mistune
from mistune.toc import add_toc_hook, render_toc_ul

logger = logging.getLogger(__name__)

NAV_CLOSING_TAG = "</nav>"


@dataclass
class RenderedPage:
    """Page fragments bound into the page template."""

    title: str
    toc: str
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "toc": self.toc, "content": self.content}


class MarkdownConverter:
    """Convert Markdown text to HTML with a leading table of contents."""

    def __init__(self, *, toc_max_level: int = 3) -> None:
        self._markdown = mistune.create_markdown(
            escape=False,
            plugins=["table", "strikethrough", "url"],
        )
        add_toc_hook(self._markdown, min_level=1, max_level=toc_max_level)

    def convert(self, markdown_text: str) -> str:
        """Convert Markdown to a <nav> block followed by the body HTML.

        Args:
            markdown_text: Markdown source text

        Returns:
            HTML string whose first </nav> ends the table of contents
        """
        body, state = self._markdown.parse(markdown_text)
        toc_items = state.env.get("toc_items", [])
        logger.debug(f"Converted {len(markdown_text)} characters, {len(toc_items)} headings")
        return f"<nav>\n{render_toc_ul(toc_items)}</nav>\n{body}"


def split_toc(output: str) -> tuple[str, str]:
    """Split renderer output at the first </nav> tag.

    Args:
        output: Renderer output

    Returns:
        Tuple of (toc, content). Without a </nav> tag the whole output is
        content and the toc is empty.
    """
    idx = output.find(NAV_CLOSING_TAG)
    if idx < 0:
        return "", output
    end = idx + len(NAV_CLOSING_TAG)
    return output[:end], output[end:]


class PageRenderer:
    """Renders Markdown source files into page fragments.

    Nothing is cached; every call reads and renders the source again.
    """

    def __init__(self, converter: MarkdownConverter | None = None) -> None:
        self._converter = converter or MarkdownConverter()
        self._title_pattern = re.compile(
            r"<h1(?:\s[^>]*)?>(.*?)</h1\s*>",
            re.IGNORECASE | re.DOTALL,
        )

    def render(self, source_path: Path) -> RenderedPage:
        """Render a Markdown file.

        Args:
            source_path: Path to the Markdown source

        Returns:
            RenderedPage with title, toc and content

        Raises:
            FileNotFoundError: If source file doesn't exist
        """
        markdown_text = source_path.read_text(encoding="utf-8", errors="replace")
        return self.render_text(markdown_text)

    def render_text(self, markdown_text: str) -> RenderedPage:
        toc, content = split_toc(self._converter.convert(markdown_text))
        return RenderedPage(title=self.extract_title(content), toc=toc, content=content)

    def extract_title(self, content: str) -> str:
        """Return the inner text of the first <h1>, or "" if there is none."""
        match = self._title_pattern.search(content)
        if match is None:
            return ""
        return match.group(1)
