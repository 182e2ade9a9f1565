"""Shared test fixtures."""

import base64
from collections.abc import Callable
from pathlib import Path

import pytest
from argon2 import PasswordHasher
from editdocs.config import Config, DocsConfig, ServerConfig
from editdocs.core.credentials import CredentialStore

USERNAME = "alice"
PASSWORD = "correct horse"


@pytest.fixture
def hasher() -> PasswordHasher:
    """Cheap argon2 parameters to keep tests fast."""
    return PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Create a test configuration rooted at tmp_path.

    Creates the docs directory; the editor UI comes from the bundled assets.
    """
    (tmp_path / "docs").mkdir(exist_ok=True)

    return Config(
        server=ServerConfig(),
        docs=DocsConfig(home=tmp_path),
    )


@pytest.fixture
def docs_dir(test_config: Config) -> Path:
    return test_config.docs.docs_root


@pytest.fixture
def credentials(hasher: PasswordHasher) -> CredentialStore:
    """Store holding a single known user."""
    store = CredentialStore(hasher=hasher)
    store.add_user(USERNAME, PASSWORD)
    return store


def _basic_auth(username: str, password: str) -> dict[str, str]:
    token = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
    return {"Authorization": f"Basic {token}"}


@pytest.fixture
def basic_auth() -> Callable[[str, str], dict[str, str]]:
    """Build an Authorization header for any username and password."""
    return _basic_auth


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Authorization header for the known user."""
    return _basic_auth(USERNAME, PASSWORD)
