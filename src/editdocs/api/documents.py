"""Document routes.

Serves static files and rendered Markdown, the authenticated editor view, and
saves posted documents to disk.
"""

import logging
from pathlib import Path
from typing import Any

from aiohttp import web
from jinja2 import Environment, TemplateError
from yarl import URL

from editdocs.api.auth import require_auth
from editdocs.core.credentials import CredentialStore
from editdocs.core.paths import PathResolver, ResolvedPath
from editdocs.core.renderer import PageRenderer

logger = logging.getLogger(__name__)

EDITOR_TEMPLATE = "editor.html"


def create_document_routes(router: "DocumentRouter") -> list[web.RouteDef]:
    return [
        web.get("/{path:.*}", router.get),
        web.post("/{path:.*}", router.post),
    ]


class DocumentRouter:
    """Dispatches document requests.

    GET/HEAD with an ``edit`` query parameter opens the editor, otherwise a
    literal file is served as is and a missing ``.html`` file is rendered
    from its ``.md`` source. POST saves the request body. Editing and saving
    require HTTP Basic authentication.
    """

    def __init__(
        self,
        resolver: PathResolver,
        renderer: PageRenderer,
        credentials: CredentialStore,
        *,
        page_templates: Environment,
        editor_templates: Environment,
        page_template: str = "template.html",
        editable_extensions: frozenset[str] = frozenset(),
    ) -> None:
        """Initialize router.

        Args:
            resolver: Maps request paths to files under the document root
            renderer: Renders Markdown sources into page fragments
            credentials: Store used to authenticate edit and save requests
            page_templates: Jinja environment holding the page template
            editor_templates: Jinja environment holding editor.html
            page_template: Page template name
            editable_extensions: Suffixes allowed for edit and save, empty
                allows any
        """
        self._resolver = resolver
        self._renderer = renderer
        self._credentials = credentials
        self._page_templates = page_templates
        self._editor_templates = editor_templates
        self._page_template = page_template
        self._editable_extensions = editable_extensions

    async def get(self, request: web.Request) -> web.StreamResponse:
        if "edit" in request.query:
            return await self._editor_view(request)

        resolved = self._resolver.resolve(request.path)
        if not resolved.inside_root:
            raise web.HTTPNotFound()

        if resolved.literal.is_dir():
            raise web.HTTPMovedPermanently(request.rel_url.with_path(request.path + "/"))

        if resolved.has_literal:
            return web.FileResponse(resolved.literal)

        if resolved.source is not None and resolved.has_source:
            return self._render_page(resolved.source)

        raise web.HTTPNotFound()

    async def post(self, request: web.Request) -> web.Response:
        username = await require_auth(request, self._credentials)

        resolved = self._resolver.resolve(request.path)
        target = resolved.target
        self._check_editable(resolved, target)

        body = await request.read()
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(body)
        except OSError as e:
            logger.error(f"Error saving {target}: {e}")
            return web.Response()

        logger.info(f"{username} saved {len(body)} bytes to {target}")
        return web.Response()

    async def _editor_view(self, request: web.Request) -> web.Response:
        await require_auth(request, self._credentials)

        resolved = self._resolver.resolve(request.path)
        self._check_editable(resolved, resolved.target)

        if resolved.has_source:
            location = URL.build(path=str(resolved.source_url), query_string=request.query_string)
            raise web.HTTPFound(location)

        data = {
            "path": request.path,
            "content": _read_text(resolved.literal),
        }
        html = _render_template(self._editor_templates, EDITOR_TEMPLATE, data)
        return web.Response(text=html, content_type="text/html")

    def _render_page(self, source: Path) -> web.Response:
        try:
            page = self._renderer.render(source)
        except OSError as e:
            logger.error(f"Error reading {source}: {e}")
            page = self._renderer.render_text("")

        html = _render_template(self._page_templates, self._page_template, page.to_dict())
        return web.Response(text=html, content_type="text/html")

    def _check_editable(self, resolved: ResolvedPath, path: Path) -> None:
        if not resolved.inside_root:
            logger.warning(f"Refusing path outside document root: {resolved.url_path}")
            raise web.HTTPForbidden(text="Path outside document root")

        if self._editable_extensions and path.suffix.lower() not in self._editable_extensions:
            kind = path.suffix or "extensionless"
            raise web.HTTPForbidden(text=f"Editing {kind} files is not allowed")


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return ""
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error reading {path}: {e}")
        return ""


def _render_template(env: Environment, name: str, data: dict[str, Any]) -> str:
    try:
        return env.get_template(name).render(**data)
    except TemplateError as e:
        logger.error(f"Error rendering template {name}: {e}")
        raise web.HTTPInternalServerError(text="Template error") from e
