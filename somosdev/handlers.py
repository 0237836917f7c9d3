"""Request handlers for the post pages."""

from __future__ import annotations

import logging
from typing import Any

from werkzeug.wrappers import Request, Response

from somosdev.templates import posts_page

logger = logging.getLogger(__name__)

_HANDLER_NAME = "GetAllPosts"


def _text_error(message: str, status: int) -> Response:
    response = Response(message + "\n", status=status, mimetype="text/plain")
    response.headers["X-Content-Type-Options"] = "nosniff"
    return response


def _failure(message: str, exc: BaseException) -> Response:
    logger.error("%s handler=%s err=%s", message, _HANDLER_NAME, exc)
    return _text_error(message, 500)


def get_all_posts(queries: Any):
    """Return a WSGI application that renders the page listing every post."""

    @Request.application
    def handler(request: Request) -> Response:
        try:
            posts = queries.get_posts()
        except Exception as exc:
            return _failure("could not get all posts", exc)
        try:
            body = posts_page(posts)
        except Exception as exc:
            return _failure("could not render 'get all posts'", exc)
        return Response(body, mimetype="text/html")

    return handler