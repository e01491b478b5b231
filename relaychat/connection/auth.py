"""Credential lookup and connection URI helpers."""

from __future__ import annotations

import inspect
from collections.abc import Callable, Awaitable
from urllib.parse import urlparse, parse_qsl, urlencode, urlunparse

from relaychat.config.websocket import WS_QUERY_TOKEN
from relaychat.errors import AuthenticationUnavailableError

TokenProvider = Callable[[], str | None | Awaitable[str | None]]


async def resolve_token(provider: TokenProvider) -> str:
    """Ask the provider for a fresh credential; never cached between attempts."""
    try:
        value = provider()
        if inspect.isawaitable(value):
            value = await value
    except Exception as exc:
        raise AuthenticationUnavailableError(f"token provider failed: {exc}") from exc

    token = value.strip() if isinstance(value, str) else ""
    if not token:
        raise AuthenticationUnavailableError()
    return token


def build_url(url: str, token: str) -> str:
    """Attach the credential as a query parameter, replacing any existing one."""
    parsed = urlparse(url)
    query_params = dict(parse_qsl(parsed.query, keep_blank_values=True))
    query_params[WS_QUERY_TOKEN] = token
    new_query = urlencode(query_params)
    return urlunparse((parsed.scheme, parsed.netloc, parsed.path, parsed.params, new_query, parsed.fragment))


__all__ = ["TokenProvider", "build_url", "resolve_token"]
