"""Local persistence of surf sessions and their chart snapshots.

The record table has grown a location column over time and older databases
may lack it or spell it ``beachID``. The column in use is resolved once when
the store opens; without one, sessions are stored without a location and
location queries fall back to every session.
"""

import logging
import sqlite3
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, TypeVar

from surfcast.models.common import ensure_utc, parse_timestamp
from surfcast.models.forecast import ChartSnapshot
from surfcast.models.session import Session, SessionHandle
from surfcast.models.weather import WeatherCategory
from surfcast.storage.database import connect, run_migrations, table_columns

logger = logging.getLogger(__name__)

T = TypeVar("T")

RECORDS_TABLE = "surf_records"
CHARTS_TABLE = "surf_charts"
LOCATION_COLUMNS = ("beachId", "beachID")


class StoreError(Exception):
    """Base class for local session store failures."""


class EntityNotFound(StoreError):
    def __init__(self, name: str):
        super().__init__(f"Entity {name} not found in schema")
        self.name = name


class SaveFailed(StoreError):
    pass


class FetchFailed(StoreError):
    pass


class DeleteFailed(StoreError):
    pass


class UpdateFailed(StoreError):
    pass


class InvalidHandle(StoreError):
    pass


class UnknownStoreError(StoreError):
    pass


@dataclass(frozen=True)
class StoreSchema:
    has_records: bool
    has_charts: bool
    location_column: str | None
    has_weather_code: bool


def resolve_schema(conn: sqlite3.Connection) -> StoreSchema:
    records = table_columns(conn, RECORDS_TABLE)
    charts = table_columns(conn, CHARTS_TABLE)
    location = next((c for c in LOCATION_COLUMNS if c in records), None)
    return StoreSchema(
        has_records=bool(records),
        has_charts=bool(charts),
        location_column=location,
        has_weather_code="weatherCode" in charts,
    )


class SessionStore:
    """CRUD over the Session aggregate (record header plus chart snapshots).

    Mutations are serialized on one writer thread, each on a fresh connection
    in its own transaction; callers block until it finishes and receive its
    result or error. Reads share one connection guarded by a lock.
    """

    def __init__(self, db_path: str | Path, migrate: bool = True):
        self.db_path = Path(db_path)
        if migrate:
            conn = connect(self.db_path)
            try:
                run_migrations(conn)
            finally:
                conn.close()

        self._read_conn = connect(self.db_path, check_same_thread=False)
        self._read_lock = threading.Lock()
        self._writer = ThreadPoolExecutor(max_workers=1, thread_name_prefix="session-writer")
        self.schema = resolve_schema(self._read_conn)
        if self.schema.has_records and self.schema.location_column is None:
            logger.warning("%s has no location column; locations are not stored", RECORDS_TABLE)

    def close(self) -> None:
        self._writer.shutdown(wait=True)
        with self._read_lock:
            self._read_conn.close()

    def __enter__(self) -> "SessionStore":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # --- mutations ---

    def save(self, session: Session) -> SessionHandle:
        def op(conn: sqlite3.Connection) -> SessionHandle:
            columns = ["surfDate", "startTime", "endTime", "rating", "memo", "isPin"]
            values: list[Any] = _header_values(session)
            if self.schema.location_column is not None:
                columns.append(self.schema.location_column)
                values.append(session.location_id)
            cursor = conn.execute(
                f"INSERT INTO {RECORDS_TABLE} ({', '.join(columns)}) "
                f"VALUES ({', '.join('?' for _ in columns)})",
                values,
            )
            assert cursor.lastrowid is not None
            self._insert_charts(conn, cursor.lastrowid, session.charts)
            return SessionHandle(cursor.lastrowid)

        handle = self._write(op, SaveFailed)
        logger.info("Saved session %s (%d charts)", handle, len(session.charts))
        return handle

    def update(self, session: Session) -> None:
        """Replace a session's header fields and all of its chart snapshots."""
        handle = session.handle
        if handle is None:
            raise InvalidHandle("Session has no handle; save it first")

        def op(conn: sqlite3.Connection) -> None:
            assignments = ["surfDate = ?", "startTime = ?", "endTime = ?",
                           "rating = ?", "memo = ?", "isPin = ?"]
            values: list[Any] = _header_values(session)
            if self.schema.location_column is not None:
                assignments.append(f"{self.schema.location_column} = ?")
                values.append(session.location_id)
            cursor = conn.execute(
                f"UPDATE {RECORDS_TABLE} SET {', '.join(assignments)} WHERE id = ?",
                (*values, handle.row_id),
            )
            if cursor.rowcount == 0:
                raise UpdateFailed(f"No session with handle {handle}")
            conn.execute(f"DELETE FROM {CHARTS_TABLE} WHERE record_id = ?", (handle.row_id,))
            self._insert_charts(conn, handle.row_id, session.charts)

        self._write(op, UpdateFailed)

    def delete(self, handle: SessionHandle) -> None:
        def op(conn: sqlite3.Connection) -> None:
            cursor = conn.execute(f"DELETE FROM {RECORDS_TABLE} WHERE id = ?", (handle.row_id,))
            if cursor.rowcount == 0:
                raise DeleteFailed(f"No session with handle {handle}")

        self._write(op, DeleteFailed)
        logger.info("Deleted session %s", handle)

    # --- reads ---

    def fetch_all(self) -> list[Session]:
        """All sessions, newest surf date first."""
        return self._read(lambda conn: self._select(conn, "", ()))

    def fetch_by_location(self, location_id: int) -> list[Session]:
        if self.schema.location_column is None:
            return self.fetch_all()
        where = f"WHERE {self.schema.location_column} = ?"
        return self._read(lambda conn: self._select(conn, where, (location_id,)))

    def fetch_by_id(self, handle: SessionHandle) -> Session | None:
        sessions = self._read(lambda conn: self._select(conn, "WHERE id = ?", (handle.row_id,)))
        return sessions[0] if sessions else None

    # --- internals ---

    def _require_tables(self) -> None:
        if not self.schema.has_records:
            raise EntityNotFound(RECORDS_TABLE)
        if not self.schema.has_charts:
            raise EntityNotFound(CHARTS_TABLE)

    def _write(
        self,
        op: Callable[[sqlite3.Connection], T],
        error_cls: type[StoreError],
    ) -> T:
        self._require_tables()
        future = self._writer.submit(self._run_write, op, error_cls)
        return future.result()

    def _run_write(
        self,
        op: Callable[[sqlite3.Connection], T],
        error_cls: type[StoreError],
    ) -> T:
        conn = connect(self.db_path)
        try:
            result = op(conn)
            conn.commit()
            return result
        except StoreError:
            conn.rollback()
            raise
        except sqlite3.Error as e:
            conn.rollback()
            logger.error("Session store write failed: %s", e)
            raise error_cls(str(e)) from e
        except Exception as e:
            conn.rollback()
            raise UnknownStoreError(str(e)) from e
        finally:
            conn.close()

    def _read(self, op: Callable[[sqlite3.Connection], T]) -> T:
        self._require_tables()
        with self._read_lock:
            try:
                return op(self._read_conn)
            except sqlite3.Error as e:
                logger.error("Session store read failed: %s", e)
                raise FetchFailed(str(e)) from e

    def _insert_charts(
        self, conn: sqlite3.Connection, record_id: int, charts: list[ChartSnapshot]
    ) -> None:
        columns = ["record_id", "time", "windSpeed", "windDirection", "waveHeight",
                   "wavePeriod", "waveDirection", "airTemperature", "waterTemperature",
                   "weatherIconName"]
        if self.schema.has_weather_code:
            columns.append("weatherCode")
        sql = (
            f"INSERT INTO {CHARTS_TABLE} ({', '.join(columns)}) "
            f"VALUES ({', '.join('?' for _ in columns)})"
        )
        for chart in sorted(charts, key=lambda c: ensure_utc(c.time)):
            values: list[Any] = [
                record_id,
                ensure_utc(chart.time).isoformat(),
                chart.wind_speed,
                chart.wind_direction,
                chart.wave_height,
                chart.wave_period,
                chart.wave_direction,
                chart.air_temperature,
                chart.water_temperature,
                chart.weather.icon_name,
            ]
            if self.schema.has_weather_code:
                values.append(int(chart.weather))
            conn.execute(sql, values)

    def _select(self, conn: sqlite3.Connection, where: str, params: tuple) -> list[Session]:
        rows = conn.execute(
            f"SELECT * FROM {RECORDS_TABLE} {where} ORDER BY surfDate DESC, id DESC",
            params,
        ).fetchall()
        if not rows:
            return []

        charts_by_record: dict[int, list[ChartSnapshot]] = {}
        ids = [row["id"] for row in rows]
        chart_rows = conn.execute(
            f"SELECT * FROM {CHARTS_TABLE} "
            f"WHERE record_id IN ({', '.join('?' for _ in ids)}) ORDER BY time",
            ids,
        ).fetchall()
        for chart_row in chart_rows:
            snapshot = self._snapshot_from_row(chart_row)
            if snapshot is not None:
                charts_by_record.setdefault(chart_row["record_id"], []).append(snapshot)

        sessions = []
        for row in rows:
            session = self._session_from_row(row, charts_by_record.get(row["id"], []))
            if session is None:
                logger.debug("Skipping session %s with missing dates", row["id"])
                continue
            sessions.append(session)
        return sessions

    def _session_from_row(
        self, row: sqlite3.Row, charts: list[ChartSnapshot]
    ) -> Session | None:
        surf_date = _parse_date(row["surfDate"])
        start = parse_timestamp(row["startTime"])
        end = parse_timestamp(row["endTime"])
        if surf_date is None or start is None or end is None:
            return None

        location_id = 0
        if self.schema.location_column is not None:
            location_id = row[self.schema.location_column] or 0

        charts.sort(key=lambda c: c.time)
        return Session(
            location_id=location_id,
            date=surf_date,
            start_time=start,
            end_time=end,
            rating=row["rating"] or 0,
            memo=row["memo"],
            is_pinned=bool(row["isPin"]),
            charts=charts,
            handle=SessionHandle(row["id"]),
        )

    def _snapshot_from_row(self, row: sqlite3.Row) -> ChartSnapshot | None:
        time = parse_timestamp(row["time"])
        if time is None:
            return None
        code = row["weatherCode"] if self.schema.has_weather_code else None
        if code is not None:
            weather = WeatherCategory.from_code(code)
        else:
            weather = WeatherCategory.from_icon_name(row["weatherIconName"])
        return ChartSnapshot(
            time=time,
            wind_speed=row["windSpeed"] or 0.0,
            wind_direction=row["windDirection"] or 0.0,
            wave_height=row["waveHeight"],
            wave_period=row["wavePeriod"] or 0.0,
            wave_direction=row["waveDirection"] or 0.0,
            air_temperature=row["airTemperature"] or 0.0,
            water_temperature=row["waterTemperature"] or 0.0,
            weather=weather,
        )


def _header_values(session: Session) -> list[Any]:
    return [
        session.date.isoformat(),
        _iso(session.start_time),
        _iso(session.end_time),
        session.rating,
        session.memo,
        int(session.is_pinned),
    ]


def _iso(dt: datetime) -> str:
    return ensure_utc(dt).isoformat()


def _parse_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None
