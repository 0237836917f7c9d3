"""HTTP server: routing, static assets and startup."""

from __future__ import annotations

import html
import logging
import socket
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import quote

from werkzeug import serving
from werkzeug.security import safe_join
from werkzeug.utils import redirect, send_file
from werkzeug.wrappers import Request, Response

from somosdev.db import open_database
from somosdev.handlers import get_all_posts
from somosdev.models import Queries

logger = logging.getLogger(__name__)

ASSETS_PREFIX = "/assets/"
ASSETS_DIR = Path(__file__).with_name("assets")
DEV_ASSETS_DIR = Path("assets")
ALLOWED_METHODS = ("GET", "HEAD")
_ANY_HOST = "0.0.0.0"

WSGIApp = Callable[[dict, Callable], Iterable[bytes]]


@dataclass(frozen=True)
class Config:
    """Server settings; ``db_uri`` is ignored in development mode."""

    is_dev: bool = False
    addr: str = ":8080"
    db_uri: str = ""


def _text_error(message: str, status: int) -> Response:
    response = Response(message + "\n", status=status, mimetype="text/plain")
    response.headers["X-Content-Type-Options"] = "nosniff"
    return response


def _directory_listing(directory: Path) -> Response:
    lines = [
        "<!doctype html>",
        '<meta name="viewport" content="width=device-width">',
        "<pre>",
    ]
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        name = entry.name + ("/" if entry.is_dir() else "")
        lines.append(f'<a href="{html.escape(quote(name))}">{html.escape(name)}</a>')
    lines.append("</pre>")
    return Response("\n".join(lines) + "\n", mimetype="text/html")


def parse_addr(addr: str) -> tuple[str, int]:
    """Split ``host:port`` into its host and numeric port; the host may be empty."""
    host, sep, port_text = addr.rpartition(":")
    if not sep:
        raise ValueError(f"missing port in address {addr!r}")
    if host.startswith("["):
        if not host.endswith("]"):
            raise ValueError(f"missing ']' in address {addr!r}")
        host = host[1:-1]
    elif ":" in host:
        raise ValueError(f"too many colons in address {addr!r}")
    if not port_text:
        port = 0
    elif port_text.isascii() and port_text.isdigit():
        port = int(port_text)
    else:
        try:
            port = socket.getservbyname(port_text, "tcp")
        except OSError as exc:
            raise ValueError(f"unknown port {port_text!r}") from exc
    if port > 65535:
        raise ValueError(f"invalid port {port_text!r}")
    return host, port


class Server:
    """WSGI application serving the site's pages and assets."""

    def __init__(self, config: Config) -> None:
        if config.is_dev:
            db_uri = ":memory:"
            logging.getLogger("somosdev").setLevel(logging.DEBUG)
        else:
            db_uri = config.db_uri
        connection = open_database(db_uri, seed=config.is_dev)
        self.is_dev = config.is_dev
        self.addr = config.addr
        self.queries = Queries(connection)
        self._routes: dict[str, WSGIApp] = {}

    def add_routes(self) -> None:
        """Register the site's routes."""
        if self._routes:
            raise RuntimeError("routes are already registered")
        self._routes = {
            ASSETS_PREFIX: self._serve_assets,
            "/": self._redirect_home,
            "/posts/": get_all_posts(self.queries),
            "/users/": self._users,
        }

    def run(self) -> None:
        """Listen on the configured address and serve until interrupted."""
        host, port = parse_addr(self.addr)
        logger.debug("Starting to listen... addr=%s", self.addr)
        serving.run_simple(host or _ANY_HOST, port, self)

    def __call__(self, environ: dict, start_response: Callable) -> Iterable[bytes]:
        path = environ.get("PATH_INFO") or "/"
        if not path.startswith("/"):
            path = "/" + path
        prefix = self._match(path)
        if prefix is None:
            return _text_error("404 page not found", 404)(environ, start_response)
        if environ.get("REQUEST_METHOD", "GET").upper() not in ALLOWED_METHODS:
            response = _text_error("Method Not Allowed", 405)
            response.headers["Allow"] = ", ".join(ALLOWED_METHODS)
            return response(environ, start_response)
        if path + "/" in self._routes:
            location = path + "/"
            query = environ.get("QUERY_STRING")
            if query:
                location += "?" + query
            return redirect(location, 301)(environ, start_response)
        return self._routes[prefix](environ, start_response)

    def _match(self, path: str) -> str | None:
        for prefix in sorted(self._routes, key=len, reverse=True):
            if path.startswith(prefix):
                return prefix
        return None

    def _redirect_home(self, environ: dict, start_response: Callable) -> Iterable[bytes]:
        return redirect("/posts/", 301)(environ, start_response)

    def _users(self, environ: dict, start_response: Callable) -> Iterable[bytes]:
        return Response(b"")(environ, start_response)

    def _serve_assets(self, environ: dict, start_response: Callable) -> Iterable[bytes]:
        request = Request(environ)
        response = self._asset_response(request, request.path[len(ASSETS_PREFIX):])
        if self.is_dev:
            response.headers["Cache-Control"] = "no-store"
        return response(environ, start_response)

    def _asset_response(self, request: Request, sub: str) -> Any:
        root = DEV_ASSETS_DIR if self.is_dev else ASSETS_DIR
        if sub == "index.html" or sub.endswith("/index.html"):
            return redirect("./", 301)
        relative = sub.strip("/")
        target = safe_join(str(root), relative) if relative else str(root)
        if target is None:
            return _text_error("404 page not found", 404)
        path = Path(target)
        if path.is_dir():
            if sub and not sub.endswith("/"):
                return redirect(path.name + "/", 301)
            index = path / "index.html"
            if index.is_file():
                return send_file(index, request.environ)
            return _directory_listing(path)
        if path.is_file():
            if sub.endswith("/"):
                return redirect("../" + path.name, 301)
            return send_file(path, request.environ)
        return _text_error("404 page not found", 404)