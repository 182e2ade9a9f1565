"""HTTP Basic authentication against the credential store."""

import asyncio
import logging

from aiohttp import BasicAuth, hdrs, web

from editdocs.core.credentials import CredentialStore

logger = logging.getLogger(__name__)

REALM = "editdocs"


def parse_basic_auth(header: str | None) -> BasicAuth | None:
    """Decode an Authorization header.

    The scheme must be exactly "Basic" and the payload valid base64 of
    "username:password".

    Returns:
        Decoded credentials, or None if the header is missing or malformed
    """
    if not header:
        return None
    scheme, _, _ = header.partition(" ")
    if scheme != "Basic":
        return None
    try:
        return BasicAuth.decode(header, encoding="utf-8")
    except ValueError:
        return None


def unauthorized() -> web.HTTPUnauthorized:
    return web.HTTPUnauthorized(
        headers={hdrs.WWW_AUTHENTICATE: f'Basic realm="{REALM}"'},
    )


async def require_auth(request: web.Request, credentials: CredentialStore) -> str:
    """Authenticate a request or raise 401.

    Password verification is a deliberately slow hash, so it runs in a worker
    thread instead of on the event loop.

    Returns:
        The authenticated username

    Raises:
        web.HTTPUnauthorized: With a Basic challenge, for missing, malformed
            or wrong credentials alike
    """
    auth = parse_basic_auth(request.headers.get(hdrs.AUTHORIZATION))
    if auth is None:
        raise unauthorized()
    if not await asyncio.to_thread(credentials.authenticate, auth.login, auth.password):
        logger.warning(f"Authentication failed for {request.method} {request.path}")
        raise unauthorized()
    return auth.login
