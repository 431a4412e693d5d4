"""Add the session location column and the canonical weather code."""

import sqlite3

from surfcast.storage.database import table_columns

LOCATION_COLUMNS = ("beachId", "beachID")


def up(conn: sqlite3.Connection) -> None:
    records = table_columns(conn, "surf_records")
    if not any(c in records for c in LOCATION_COLUMNS):
        conn.execute(
            "ALTER TABLE surf_records ADD COLUMN beachId INTEGER NOT NULL DEFAULT 0"
        )
    if "weatherCode" not in table_columns(conn, "surf_charts"):
        conn.execute("ALTER TABLE surf_charts ADD COLUMN weatherCode INTEGER")
    conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_surf_records_location "
        "ON surf_records(" + _location_column(conn) + ")"
    )
    conn.commit()


def _location_column(conn: sqlite3.Connection) -> str:
    records = table_columns(conn, "surf_records")
    return next(c for c in LOCATION_COLUMNS if c in records)
