"""Request path resolution against the document root.

Maps a URL path onto its literal file and, for ``.html`` requests, the
Markdown source that renders it.
"""

from dataclasses import dataclass
from pathlib import Path

from editdocs.core.types import URLPath

INDEX_FILE = "index.html"
HTML_SUFFIX = ".html"
SOURCE_SUFFIX = ".md"


@dataclass(frozen=True)
class ResolvedPath:
    """Candidate files for one request path."""

    url_path: URLPath
    literal: Path
    source: Path | None
    source_url: URLPath | None
    inside_root: bool

    @property
    def has_literal(self) -> bool:
        return self.literal.is_file()

    @property
    def has_source(self) -> bool:
        return self.source is not None and self.source.is_file()

    @property
    def target(self) -> Path:
        """File an edit or save applies to.

        The Markdown source is authoritative when it exists.
        """
        if self.source is not None and self.has_source:
            return self.source
        return self.literal


class PathResolver:
    """Resolves URL paths to files under a document root."""

    def __init__(self, root: Path) -> None:
        """Initialize resolver.

        Args:
            root: Document root directory
        """
        self._root = root
        self._resolved_root = root.resolve()

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, url_path: str) -> ResolvedPath:
        """Compute candidate files for a request path.

        A trailing slash names the directory's index.html. Paths ending in
        .html also get a sibling .md source candidate.

        Args:
            url_path: Decoded request path, e.g. "/guide/intro.html"

        Returns:
            ResolvedPath with the literal and source candidates
        """
        if url_path.endswith("/"):
            url_path = url_path + INDEX_FILE

        literal = self._root / url_path.lstrip("/")

        source: Path | None = None
        source_url: URLPath | None = None
        if url_path.endswith(HTML_SUFFIX):
            source_url = URLPath(url_path.removesuffix(HTML_SUFFIX) + SOURCE_SUFFIX)
            source = self._root / source_url.lstrip("/")

        return ResolvedPath(
            url_path=URLPath(url_path),
            literal=literal,
            source=source,
            source_url=source_url,
            inside_root=self._is_inside_root(literal)
            and (source is None or self._is_inside_root(source)),
        )

    def _is_inside_root(self, path: Path) -> bool:
        # resolve() collapses ".." and follows symlinks
        try:
            resolved = path.resolve()
        except ValueError:
            # embedded NUL byte
            return False
        return resolved.is_relative_to(self._resolved_root)
