"""aiohttp server for editdocs.

Application factory and route registration.
"""

import logging

from aiohttp import web
from jinja2 import ChoiceLoader, Environment, FileSystemLoader, select_autoescape

from editdocs.api.documents import DocumentRouter, create_document_routes
from editdocs.assets import get_templates_dir
from editdocs.config import Config
from editdocs.core.credentials import CredentialStore
from editdocs.core.paths import PathResolver
from editdocs.core.renderer import PageRenderer

logger = logging.getLogger(__name__)


def create_app(config: Config, credentials: CredentialStore | None = None) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration
        credentials: Credential store, loaded from the configured users
            file when omitted

    Returns:
        Configured aiohttp application
    """
    app = web.Application(client_max_size=config.server.max_body_size)

    if credentials is None:
        credentials = CredentialStore.load(config.docs.users_path)

    docs_root = config.docs.docs_root
    editor_root = config.docs.editor_root

    # Page template from the document root wins over the bundled default
    page_templates = Environment(
        loader=ChoiceLoader([
            FileSystemLoader(docs_root),
            FileSystemLoader(get_templates_dir()),
        ]),
        autoescape=False,
    )
    editor_templates = Environment(
        loader=FileSystemLoader(editor_root),
        autoescape=select_autoescape(["html"]),
    )

    router = DocumentRouter(
        PathResolver(docs_root),
        PageRenderer(),
        credentials,
        page_templates=page_templates,
        editor_templates=editor_templates,
        page_template=config.docs.template,
        editable_extensions=config.docs.editable_extensions,
    )

    # Editor assets must be registered first to take precedence over documents
    app.router.add_static("/editor", editor_root)
    app.router.add_routes(create_document_routes(router))

    return app


def run_server(config: Config, credentials: CredentialStore | None = None) -> None:
    """Run the server.

    Args:
        config: Application configuration
        credentials: Credential store, loaded from the users file when omitted
    """
    app = create_app(config, credentials)
    logger.info(f"Serving {config.docs.docs_root} on {config.server.host}:{config.server.port}")
    web.run_app(app, host=config.server.host, port=config.server.port, print=None)
