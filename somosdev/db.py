"""SQLite connection setup, schema migrations and orderly shutdown."""

from __future__ import annotations

import re
import sqlite3
from dataclasses import dataclass
from pathlib import Path

MIGRATIONS_DIR = Path(__file__).with_name("migrations")
VERSION_TABLE = "goose_db_version"

_PRAGMAS = (
    "PRAGMA foreign_keys = 1",
    "PRAGMA journal_mode = wal",
    "PRAGMA synchronous = normal",
)
_FILENAME = re.compile(r"^(\d+)_.+\.sql$")
_ANNOTATION = "-- +goose"


class MigrationError(Exception):
    """Raised when a migration file cannot be understood."""


@dataclass(frozen=True)
class _Migration:
    version: int
    path: Path
    up_sql: str
    use_transaction: bool


def _parse_migration(path: Path, version: int) -> _Migration:
    up_lines: list[str] = []
    section = None
    use_transaction = True
    for line in path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if stripped.startswith(_ANNOTATION):
            command = stripped[len(_ANNOTATION):].strip().upper()
            if command == "UP":
                section = "up"
            elif command == "DOWN":
                section = "down"
            elif command == "NO TRANSACTION":
                use_transaction = False
            continue
        if section == "up":
            up_lines.append(line)
    if section is None:
        raise MigrationError(f"{path.name}: missing '{_ANNOTATION} Up' annotation")
    return _Migration(version, path, "\n".join(up_lines), use_transaction)


def _collect_migrations(directory: Path) -> list[_Migration]:
    if not directory.is_dir():
        return []
    migrations: dict[int, _Migration] = {}
    for path in sorted(directory.glob("*.sql")):
        match = _FILENAME.match(path.name)
        if match is None:
            raise MigrationError(f"{path.name}: expected '<version>_<name>.sql'")
        version = int(match.group(1))
        if version < 1:
            raise MigrationError(f"{path.name}: version must be positive")
        if version in migrations:
            raise MigrationError(f"{path.name}: duplicate version {version}")
        migrations[version] = _parse_migration(path, version)
    return [migrations[v] for v in sorted(migrations)]


def _current_version(conn: sqlite3.Connection) -> int:
    conn.execute(
        f"CREATE TABLE IF NOT EXISTS {VERSION_TABLE} ("
        "id INTEGER PRIMARY KEY AUTOINCREMENT, "
        "version_id INTEGER NOT NULL, "
        "is_applied INTEGER NOT NULL, "
        "tstamp TIMESTAMP DEFAULT (datetime('now')))"
    )
    (count,) = conn.execute(f"SELECT COUNT(*) FROM {VERSION_TABLE}").fetchone()
    if count == 0:
        conn.execute(
            f"INSERT INTO {VERSION_TABLE} (version_id, is_applied) VALUES (0, 1)"
        )
    (version,) = conn.execute(
        f"SELECT MAX(version_id) FROM {VERSION_TABLE} WHERE is_applied = 1"
    ).fetchone()
    return version or 0


def _apply(conn: sqlite3.Connection, migration: _Migration) -> None:
    script = (
        f"{migration.up_sql}\n;\n"
        f"INSERT INTO {VERSION_TABLE} (version_id, is_applied) "
        f"VALUES ({migration.version}, 1);\n"
    )
    if migration.use_transaction:
        script = f"BEGIN;\n{script}COMMIT;\n"
    try:
        conn.executescript(script)
    except sqlite3.Error:
        if conn.in_transaction:
            conn.execute("ROLLBACK")
        raise


def _migrate_up(conn: sqlite3.Connection, directory: Path) -> None:
    migrations = _collect_migrations(directory)
    current = _current_version(conn)
    for migration in migrations:
        if migration.version > current:
            _apply(conn, migration)


def open_database(db_uri: str, seed: bool = False) -> sqlite3.Connection:
    """Open and configure a database; when ``seed`` is set, run pending migrations."""
    conn = sqlite3.connect(db_uri, isolation_level=None, check_same_thread=False)
    try:
        for pragma in _PRAGMAS:
            conn.execute(pragma)
        conn.execute("SELECT 1").fetchone()
        if seed:
            _migrate_up(conn, MIGRATIONS_DIR)
    except BaseException:
        conn.close()
        raise
    return conn


def close_database(conn: sqlite3.Connection) -> None:
    """Let SQLite optimise its statistics, then close the connection."""
    conn.execute("BEGIN")
    try:
        conn.execute("PRAGMA analysis_limit=400").fetchall()
        conn.execute("PRAGMA optimize").fetchall()
        conn.execute("COMMIT")
    except sqlite3.Error:
        if conn.in_transaction:
            conn.execute("ROLLBACK")
        raise
    conn.close()