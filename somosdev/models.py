"""Data model and queries for posts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

_GET_POSTS = "SELECT id, content, created_at FROM POSTS"


@dataclass(frozen=True)
class Post:
    """A single post; ``content`` is ``None`` when the column is NULL."""

    id: int
    content: str | None
    created_at: str


class Queries:
    """Runs the application's queries against a connection or transaction."""

    def __init__(self, db: Any) -> None:
        self._db = db

    @property
    def db(self) -> Any:
        return self._db

    def with_tx(self, tx: Any) -> Queries:
        """Return a new ``Queries`` bound to ``tx``."""
        return Queries(tx)

    def get_posts(self) -> list[Post]:
        """Return every post in the ``posts`` table."""
        cursor = self._db.execute(_GET_POSTS)
        try:
            return [Post(*row) for row in cursor.fetchall()]
        finally:
            cursor.close()