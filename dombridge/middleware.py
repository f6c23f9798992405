"""Dev-server middleware that serves DOM component host pages."""

from __future__ import annotations

import dataclasses
import os
import posixpath
import threading
from typing import Awaitable, Callable
from urllib.parse import SplitResult, parse_qs, urljoin, urlsplit

from fastapi import Request
from fastapi.responses import HTMLResponse, PlainTextResponse, Response

from .bundler import BundleOptions, create_bundle_url
from .entry import VirtualEntryGenerator
from .identity import DOM_ROUTE_PREFIX, is_file_url
from .logging import get_logger
from .models import PLATFORM_WEB, SourceReference
from .shell import build_shell

CallNext = Callable[[Request], Awaitable[Response]]

# Only the path and query of a coerced URL are used, so the base is arbitrary.
_FALLBACK_BASE = "https://localhost:0"

_logger = get_logger("middleware")
_warning_lock = threading.Lock()
_unstable_warned = False


def warn_unstable() -> bool:
    """Log the experimental API warning once per process."""
    global _unstable_warned
    with _warning_lock:
        if _unstable_warned:
            return False
        _unstable_warned = True
    _logger.warning(
        "Using experimental DOM Components API. Production exports may not work as expected."
    )
    return True


def coerce_url(url: str) -> SplitResult:
    parts = urlsplit(url)
    if parts.scheme and parts.netloc:
        return parts
    return urlsplit(urljoin(_FALLBACK_BASE, url))


class DomComponentsMiddleware:
    """Answers ``/_expo/@dom`` requests with an HTML page booting the component bundle.

    Everything else is passed to ``call_next`` untouched.
    """

    def __init__(
        self,
        generator: VirtualEntryGenerator,
        *,
        server_root: os.PathLike[str] | str,
        get_dev_server_url: Callable[[], str],
        base_options: BundleOptions | None = None,
    ) -> None:
        self.generator = generator
        self.server_root = os.fspath(server_root)
        self.get_dev_server_url = get_dev_server_url
        self.base_options = base_options or BundleOptions()

    async def __call__(self, request: Request, call_next: CallNext) -> Response:
        target = _request_target(request)
        if not target:
            return await call_next(request)

        url = coerce_url(target)
        # Extra path segments such as `/_expo/@dom/Widget.js` only help browser dev tools.
        if not url.path.startswith(DOM_ROUTE_PREFIX):
            return await call_next(request)

        values = parse_qs(url.query, keep_blank_values=True).get("file")
        file = values[0] if values else None
        if not is_file_url(file):
            return PlainTextResponse(f"Invalid file path: {file}", status_code=400)
        try:
            source = SourceReference.from_url(file)
        except ValueError:
            return PlainTextResponse(f"Invalid file path: {file}", status_code=400)

        warn_unstable()

        generated_entry = await self.generator.ensure_entry(source)
        bundle_url = self.bundle_url_for(generated_entry)

        return HTMLResponse(
            build_shell(bundle_url, title=posixpath.basename(file)),
            status_code=200,
        )

    def bundle_url_for(self, generated_entry: os.PathLike[str] | str) -> str:
        main_module_name = os.path.relpath(generated_entry, self.server_root)
        options = dataclasses.replace(
            self.base_options,
            main_module_name=main_module_name.replace(os.sep, "/"),
            platform=PLATFORM_WEB,
            bytecode=False,
            is_dom=True,
            is_exporting=False,
            engine="hermes",
            # Lazy bundling keeps bundler errors inside the async boundary so the
            # page can recover from them.
            lazy=True,
        )
        # The dev server URL may not be reachable from every client network, e.g. public wifi.
        return create_bundle_url(options, self.get_dev_server_url())


def _request_target(request: Request) -> str:
    # The decoded path would turn an escaped `%3F` or `%23` in the basename into a delimiter.
    raw_path = request.scope.get("raw_path")
    if raw_path:
        path = raw_path.split(b"?", 1)[0].decode("latin-1")
    else:
        path = request.scope.get("path") or ""
    if not path:
        return ""
    query = request.scope.get("query_string", b"").decode("latin-1")
    return f"{path}?{query}" if query else path


__all__ = ["DomComponentsMiddleware", "coerce_url", "warn_unstable"]
