"""Tests for server module."""

from pathlib import Path
from typing import Any

import pytest
from editdocs.config import Config
from editdocs.core.credentials import CredentialStore
from editdocs.server import create_app


class TestCreateApp:
    """Tests for create_app()."""

    @pytest.mark.asyncio
    async def test__no_credentials__loads_users_file(
        self,
        aiohttp_client: Any,
        test_config: Config,
        credentials: CredentialStore,
        auth_headers: dict[str, str],
    ) -> None:
        """Users saved to the configured users file can edit."""
        credentials.save(test_config.docs.users_path)
        (test_config.docs.docs_root / "doc.md").write_text("hello")

        client = await aiohttp_client(create_app(test_config))
        response = await client.get("/doc.md?edit", headers=auth_headers)

        assert response.status == 200

    def test__client_max_size__from_config(self, test_config: Config) -> None:
        test_config.server.max_body_size = 2048

        app = create_app(test_config, CredentialStore())

        assert app._client_max_size == 2048


class TestEditorAssets:
    """Tests for the /editor/ static route."""

    @pytest.mark.asyncio
    async def test__editor_script__served_without_auth(
        self, aiohttp_client: Any, test_config: Config, credentials: CredentialStore
    ) -> None:
        client = await aiohttp_client(create_app(test_config, credentials))
        response = await client.get("/editor/editor.js")

        assert response.status == 200
        assert "ace.edit" in await response.text()

    @pytest.mark.asyncio
    async def test__editor_prefix__takes_precedence_over_documents(
        self,
        aiohttp_client: Any,
        test_config: Config,
        credentials: CredentialStore,
        docs_dir: Path,
    ) -> None:
        """Editor assets shadow documents under /editor/."""
        (docs_dir / "editor").mkdir()
        (docs_dir / "editor" / "editor.js").write_text("document copy")

        client = await aiohttp_client(create_app(test_config, credentials))
        response = await client.get("/editor/editor.js")

        assert "document copy" not in await response.text()

    @pytest.mark.asyncio
    async def test__custom_editor_dir__served(
        self,
        aiohttp_client: Any,
        test_config: Config,
        credentials: CredentialStore,
        tmp_path: Path,
        auth_headers: dict[str, str],
    ) -> None:
        """A configured editor directory supplies editor.html."""
        editor_dir = tmp_path / "editor"
        editor_dir.mkdir()
        (editor_dir / "editor.html").write_text("EDIT {{ path }}: {{ content }}")
        (test_config.docs.docs_root / "doc.md").write_text("hello")
        config = test_config.with_overrides(editor_dir=Path("editor"))

        client = await aiohttp_client(create_app(config, credentials))
        response = await client.get("/doc.md?edit", headers=auth_headers)

        assert await response.text() == "EDIT /doc.md: hello"
