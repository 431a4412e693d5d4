"""SQLite plumbing for the session log: connections and numbered migrations."""

import importlib
import logging
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)

MIGRATIONS_PACKAGE = "surfcast.storage.migrations"
MIGRATIONS_DIR = Path(__file__).parent / "migrations"


def connect(db_path: str | Path, check_same_thread: bool = True) -> sqlite3.Connection:
    """Open a connection in WAL mode with foreign keys and dict-like rows.

    Foreign keys must be on for chart snapshots to cascade with their record.
    """
    conn = sqlite3.connect(str(db_path), check_same_thread=check_same_thread)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def _ensure_version_table(conn: sqlite3.Connection) -> set[str]:
    conn.execute(
        "CREATE TABLE IF NOT EXISTS schema_versions ("
        "  version TEXT PRIMARY KEY,"
        "  applied_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP"
        ")"
    )
    conn.commit()
    return {row["version"] for row in conn.execute("SELECT version FROM schema_versions")}


def pending_migrations(conn: sqlite3.Connection) -> list[str]:
    applied = _ensure_version_table(conn)
    return [name for name in _discover_migrations() if name not in applied]


def run_migrations(conn: sqlite3.Connection) -> list[str]:
    """Apply pending migrations in version order and return their names.

    A failing migration is not recorded and is re-raised, leaving earlier
    ones applied. Migrations must therefore be safe to re-run.
    """
    applied = []
    for name in pending_migrations(conn):
        module = importlib.import_module(f"{MIGRATIONS_PACKAGE}.{name}")
        try:
            module.up(conn)
            conn.execute("INSERT INTO schema_versions (version) VALUES (?)", (name,))
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            logger.error("Migration %s failed", name)
            raise
        logger.info("Applied migration %s", name)
        applied.append(name)
    return applied


def table_columns(conn: sqlite3.Connection, table: str) -> list[str]:
    """Column names of a table, empty if the table does not exist."""
    return [row["name"] for row in conn.execute(f"PRAGMA table_info({table})")]


def _discover_migrations() -> list[str]:
    return sorted(p.stem for p in MIGRATIONS_DIR.glob("v[0-9][0-9][0-9]_*.py"))
