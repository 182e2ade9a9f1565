"""Configuration management for editdocs.

Supports TOML configuration format with auto-discovery.
"""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from editdocs.assets import get_editor_dir

CONFIG_FILENAME = "editdocs.toml"

DEFAULT_EXTENSIONS = frozenset({".md", ".html", ".txt"})


class ConfigError(ValueError):
    """Configuration that cannot be used to start the server."""


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 9000
    max_body_size: int = 10 * 1024 * 1024


@dataclass
class DocsConfig:
    """Document tree configuration.

    All directories except ``home`` are relative to ``home``.
    """

    home: Path = field(default_factory=lambda: Path("."))
    docs_dir: Path = field(default_factory=lambda: Path("docs"))
    editor_dir: Path | None = None
    users_file: Path = field(default_factory=lambda: Path("users"))
    template: str = "template.html"
    editable_extensions: frozenset[str] = DEFAULT_EXTENSIONS

    @property
    def docs_root(self) -> Path:
        """Directory served as the document root."""
        return self.home / self.docs_dir

    @property
    def editor_root(self) -> Path:
        """Directory holding the editor UI, bundled assets when unset."""
        if self.editor_dir is None:
            return get_editor_dir()
        return self.home / self.editor_dir

    @property
    def users_path(self) -> Path:
        """Credential store file."""
        return self.home / self.users_file


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    docs: DocsConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for editdocs.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents.

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> "Config":
        return cls(server=ServerConfig(), docs=DocsConfig())

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            data = tomllib.load(f)

        server = cls._parse_server(data.get("server"))
        docs = cls._parse_docs(data.get("docs"), path.parent)

        return cls(server=server, docs=docs, config_path=path)

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        """Parse server configuration section.

        Args:
            data: Raw server section data

        Returns:
            ServerConfig instance
        """
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 9000)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        max_body_size = data.get("max_body_size", ServerConfig.max_body_size)
        if not isinstance(max_body_size, int) or isinstance(max_body_size, bool):
            raise ValueError("server.max_body_size must be an integer")

        return ServerConfig(host=host, port=port, max_body_size=max_body_size)

    @classmethod
    def _parse_docs(cls, data: object, config_dir: Path) -> DocsConfig:
        """Parse docs configuration section.

        Args:
            data: Raw docs section data
            config_dir: Directory containing config file (for relative home)

        Returns:
            DocsConfig instance
        """
        if data is None:
            return DocsConfig(home=config_dir)

        if not isinstance(data, dict):
            raise ValueError("docs section must be a dictionary")

        home = _get_str(data, "home", ".")
        docs_dir = _get_str(data, "docs_dir", "docs")
        users_file = _get_str(data, "users_file", "users")
        template = _get_str(data, "template", "template.html")

        editor_dir = data.get("editor_dir")
        if editor_dir is not None and not isinstance(editor_dir, str):
            raise ValueError("docs.editor_dir must be a string")

        extensions_raw = data.get("editable_extensions")
        extensions = DEFAULT_EXTENSIONS
        if extensions_raw is not None:
            if not isinstance(extensions_raw, list):
                raise ValueError("docs.editable_extensions must be a list")
            for item in extensions_raw:
                if not isinstance(item, str):
                    raise ValueError("docs.editable_extensions items must be strings")
            extensions = parse_extensions(",".join(extensions_raw))

        return DocsConfig(
            home=config_dir / home,
            docs_dir=Path(docs_dir),
            editor_dir=Path(editor_dir) if editor_dir is not None else None,
            users_file=Path(users_file),
            template=template,
            editable_extensions=extensions,
        )

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        home: Path | None = None,
        docs_dir: Path | None = None,
        editor_dir: Path | None = None,
        users_file: Path | None = None,
        extensions: str | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            host: Override server.host
            port: Override server.port
            home: Override docs.home
            docs_dir: Override docs.docs_dir
            editor_dir: Override docs.editor_dir
            users_file: Override docs.users_file
            extensions: Comma-separated override for docs.editable_extensions

        Returns:
            New Config instance with overrides applied
        """
        server = replace(
            self.server,
            host=host if host is not None else self.server.host,
            port=port if port is not None else self.server.port,
        )

        docs = replace(
            self.docs,
            home=home if home is not None else self.docs.home,
            docs_dir=docs_dir if docs_dir is not None else self.docs.docs_dir,
            editor_dir=editor_dir if editor_dir is not None else self.docs.editor_dir,
            users_file=users_file if users_file is not None else self.docs.users_file,
            editable_extensions=(
                parse_extensions(extensions)
                if extensions is not None
                else self.docs.editable_extensions
            ),
        )

        return replace(self, server=server, docs=docs)

    def validate(self) -> None:
        """Check that the server can start with this configuration.

        Raises:
            ConfigError: If a directory is missing or the port is out of range
        """
        docs_root = self.docs.docs_root
        if not docs_root.exists():
            raise ConfigError(f"Document root not found: {docs_root}")
        if not docs_root.is_dir():
            raise ConfigError(f"{docs_root} is not a directory")

        editor_root = self.docs.editor_root
        if not editor_root.is_dir():
            raise ConfigError(f"Editor directory not found: {editor_root}")

        if not 0 < self.server.port < 65536:
            raise ConfigError(f"Invalid port: {self.server.port}")


def parse_extensions(value: str) -> frozenset[str]:
    """Parse a comma-separated extension whitelist.

    Entries are lowercased and given a leading dot, so "md, .HTML" becomes
    {".md", ".html"}. An empty string yields an empty set, which disables
    the whitelist.
    """
    extensions = set()
    for item in value.split(","):
        item = item.strip().lower()
        if not item:
            continue
        if not item.startswith("."):
            item = f".{item}"
        extensions.add(item)
    return frozenset(extensions)


def _get_str(data: dict, key: str, default: str) -> str:
    value = data.get(key, default)
    if not isinstance(value, str):
        raise ValueError(f"docs.{key} must be a string")
    return value
