"""Tests for page renderer."""

from pathlib import Path

import pytest
from editdocs.core.renderer import MarkdownConverter, PageRenderer, split_toc


class TestMarkdownConverter:
    """Tests for MarkdownConverter.convert()."""

    def test__headings__listed_in_leading_nav(self) -> None:
        """Output starts with a nav block listing the headings."""
        output = MarkdownConverter().convert("# Guide\n\n## Setup\n\nText.")

        toc, content = split_toc(output)

        assert toc.startswith("<nav>")
        assert toc.endswith("</nav>")
        assert "Setup" in toc
        assert "<p>Text.</p>" in content

    def test__no_headings__empty_nav(self) -> None:
        output = MarkdownConverter().convert("Just text.")

        assert output.startswith("<nav>\n</nav>")

    def test__gfm_extensions__rendered(self) -> None:
        """Tables and strikethrough are enabled."""
        output = MarkdownConverter().convert("| a | b |\n|---|---|\n| 1 | 2 |\n\n~~gone~~")

        assert "<table>" in output
        assert "<del>gone</del>" in output


class TestSplitToc:
    """Tests for split_toc()."""

    def test__nav_present__splits_after_closing_tag(self) -> None:
        toc, content = split_toc("<nav><ul></ul></nav><h1>T</h1>")

        assert toc == "<nav><ul></ul></nav>"
        assert content == "<h1>T</h1>"

    def test__nav_missing__whole_output_is_content(self) -> None:
        """Output without </nav> degrades to empty toc."""
        toc, content = split_toc("<h1>T</h1><p>body</p>")

        assert toc == ""
        assert content == "<h1>T</h1><p>body</p>"

    def test__only_first_closing_tag__used(self) -> None:
        toc, content = split_toc("<nav>a</nav><nav>b</nav>")

        assert toc == "<nav>a</nav>"
        assert content == "<nav>b</nav>"


class TestPageRendererTitle:
    """Tests for title extraction."""

    @pytest.mark.parametrize(
        ("content", "title"),
        [
            ("<h1>Plain</h1>", "Plain"),
            ('<h1 id="toc_1" class="x">With attrs</h1>', "With attrs"),
            ("<H1>Upper</H1>", "Upper"),
            ("<h1>First</h1><p>x</p><h1>Second</h1>", "First"),
            ("<h2>Not a title</h2>", ""),
            ("<header>no</header>", ""),
        ],
    )
    def test__extract_title(self, content: str, title: str) -> None:
        assert PageRenderer().extract_title(content) == title


class TestPageRendererRender:
    """Tests for PageRenderer.render()."""

    def test__single_h1__becomes_title(self, tmp_path: Path) -> None:
        """Render a Markdown file and take its H1 as the title."""
        source = tmp_path / "guide.md"
        source.write_text("# Guide\n\n## Install\n\nThis is a guide.")

        page = PageRenderer().render(source)

        assert page.title == "Guide"
        assert "Install" in page.toc
        assert "This is a guide." in page.content
        assert "<nav>" not in page.content

    def test__no_h1__empty_title(self, tmp_path: Path) -> None:
        source = tmp_path / "notes.md"
        source.write_text("## Only a subheading\n\nText.")

        page = PageRenderer().render(source)

        assert page.title == ""
        assert "Text." in page.content

    def test__missing_file__raises_file_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            PageRenderer().render(tmp_path / "nonexistent.md")

    def test__empty_source__renders(self) -> None:
        page = PageRenderer().render_text("")

        assert page.title == ""
        assert page.content.strip() == ""
