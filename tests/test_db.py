import sqlite3

import pytest

from somosdev import db
from somosdev.db import MigrationError, close_database, open_database
from somosdev.models import Post, Queries

CREATE_POSTS = """-- +goose Up
CREATE TABLE posts (
    id INTEGER PRIMARY KEY,
    content TEXT,
    created_at TEXT NOT NULL DEFAULT (datetime('now'))
);

-- +goose Down
DROP TABLE posts;
"""


@pytest.fixture
def migrations(tmp_path, monkeypatch):
    directory = tmp_path / "migrations"
    directory.mkdir()
    monkeypatch.setattr(db, "MIGRATIONS_DIR", directory)
    return directory


def test_pragmas_applied(tmp_path):
    conn = open_database(str(tmp_path / "app.sqlite3"), False)
    assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1
    assert conn.execute("PRAGMA journal_mode").fetchone()[0] == "wal"
    conn.close()


def test_no_seed_leaves_schema_empty(migrations):
    (migrations / "00001_create_posts.sql").write_text(CREATE_POSTS)
    conn = open_database(":memory:", False)
    tables = conn.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
    assert tables == []
    conn.close()


def test_seed_applies_up_section_only(migrations):
    (migrations / "00001_create_posts.sql").write_text(CREATE_POSTS)
    conn = open_database(":memory:", True)
    conn.execute("INSERT INTO posts (id, content, created_at) VALUES (1, 'oi', 'now')")
    assert Queries(conn).get_posts() == [Post(1, "oi", "now")]
    (version,) = conn.execute(
        f"SELECT MAX(version_id) FROM {db.VERSION_TABLE}"
    ).fetchone()
    assert version == 1
    conn.close()


def test_seed_is_idempotent(migrations, tmp_path):
    (migrations / "00001_create_posts.sql").write_text(CREATE_POSTS)
    path = str(tmp_path / "app.sqlite3")
    close_database(open_database(path, True))
    conn = open_database(path, True)
    rows = conn.execute(
        f"SELECT version_id FROM {db.VERSION_TABLE} ORDER BY id"
    ).fetchall()
    assert rows == [(0,), (1,)]
    conn.close()


def test_migrations_run_in_version_order(migrations):
    (migrations / "00002_add_row.sql").write_text(
        "-- +goose Up\nINSERT INTO posts (id, content, created_at) VALUES (5, 'x', 't');\n"
    )
    (migrations / "00001_create_posts.sql").write_text(CREATE_POSTS)
    conn = open_database(":memory:", True)
    assert Queries(conn).get_posts() == [Post(5, "x", "t")]
    conn.close()


def test_failed_migration_rolls_back(migrations, tmp_path):
    (migrations / "00001_broken.sql").write_text(
        "-- +goose Up\nCREATE TABLE good (id INTEGER);\nTHIS IS NOT SQL;\n"
    )
    path = str(tmp_path / "app.sqlite3")
    with pytest.raises(sqlite3.Error):
        open_database(path, True)
    conn = open_database(path, False)
    names = {row[0] for row in conn.execute("SELECT name FROM sqlite_master")}
    assert "good" not in names
    conn.close()


def test_bad_filename_raises(migrations):
    (migrations / "create_posts.sql").write_text(CREATE_POSTS)
    with pytest.raises(MigrationError):
        open_database(":memory:", True)


def test_missing_up_annotation_raises(migrations):
    (migrations / "00001_plain.sql").write_text("CREATE TABLE posts (id INTEGER);\n")
    with pytest.raises(MigrationError):
        open_database(":memory:", True)


def test_close_database_closes_connection():
    conn = open_database(":memory:", False)
    close_database(conn)
    with pytest.raises(sqlite3.ProgrammingError):
        conn.execute("SELECT 1")