"""Initial schema: surf session records and their chart snapshots."""

import sqlite3

DDL = [
    # One row per recorded surf session
    """
    CREATE TABLE IF NOT EXISTS surf_records (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        surfDate TEXT,
        startTime TEXT,
        endTime TEXT,
        rating INTEGER NOT NULL DEFAULT 0,
        memo TEXT,
        isPin INTEGER NOT NULL DEFAULT 0
    )
    """,

    # Forecast charts captured for a session, owned by the record
    """
    CREATE TABLE IF NOT EXISTS surf_charts (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        record_id INTEGER NOT NULL REFERENCES surf_records(id) ON DELETE CASCADE,
        time TEXT NOT NULL,
        windSpeed REAL NOT NULL DEFAULT 0,
        windDirection REAL NOT NULL DEFAULT 0,
        waveHeight REAL,
        wavePeriod REAL NOT NULL DEFAULT 0,
        waveDirection REAL NOT NULL DEFAULT 0,
        airTemperature REAL NOT NULL DEFAULT 0,
        waterTemperature REAL NOT NULL DEFAULT 0,
        weatherIconName TEXT NOT NULL DEFAULT ''
    )
    """,
    (
        "CREATE INDEX IF NOT EXISTS idx_surf_charts_record "
        "ON surf_charts(record_id, time)"
    ),
    "CREATE INDEX IF NOT EXISTS idx_surf_records_date ON surf_records(surfDate)",
]


def up(conn: sqlite3.Connection) -> None:
    for stmt in DDL:
        conn.execute(stmt)
    conn.commit()
