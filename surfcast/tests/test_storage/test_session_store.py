"""Tests for the local session store."""

import sqlite3
import threading
from dataclasses import replace
from datetime import date
from pathlib import Path

import pytest

from surfcast.models.forecast import ChartSnapshot
from surfcast.models.session import SessionHandle
from surfcast.models.weather import WeatherCategory
from surfcast.storage.database import connect
from surfcast.storage.migrations import v001_initial
from surfcast.storage.session_store import (
    DeleteFailed,
    EntityNotFound,
    InvalidHandle,
    SaveFailed,
    SessionStore,
    UpdateFailed,
)
from surfcast.tests.factories import make_chart, make_session


class TestSaveAndFetch:
    def test_round_trip(self, store: SessionStore):
        session = make_session(rating=4, memo="glassy", is_pinned=True)
        handle = store.save(session)

        loaded = store.fetch_by_id(handle)
        assert loaded is not None
        assert loaded.handle == handle
        assert loaded.location_id == 1001
        assert loaded.date == session.date
        assert loaded.start_time == session.start_time
        assert loaded.end_time == session.end_time
        assert loaded.rating == 4
        assert loaded.memo == "glassy"
        assert loaded.is_pinned
        assert loaded.charts == session.charts

    def test_charts_ordered_by_time(self, store: SessionStore):
        handle = store.save(make_session(chart_hours=(9, 0, 6)))
        loaded = store.fetch_by_id(handle)
        assert loaded is not None
        assert [c.time.hour for c in loaded.charts] == [0, 6, 9]

    def test_missing_wave_height_round_trips(self, store: SessionStore):
        snapshot = ChartSnapshot.from_chart(make_chart(0, wave_height=None))
        handle = store.save(replace(make_session(), charts=[snapshot]))
        loaded = store.fetch_by_id(handle)
        assert loaded is not None
        assert loaded.charts[0].wave_height is None

    def test_fetch_all_newest_first(self, store: SessionStore):
        store.save(make_session(day=date(2025, 10, 1)))
        store.save(make_session(day=date(2025, 10, 20)))
        store.save(make_session(day=date(2025, 9, 15)))
        assert [s.date.day for s in store.fetch_all()] == [20, 1, 15]

    def test_fetch_by_location(self, store: SessionStore):
        store.save(make_session(location_id=1001))
        store.save(make_session(location_id=2001))
        sessions = store.fetch_by_location(2001)
        assert [s.location_id for s in sessions] == [2001]
        assert sessions[0].to_charts()[0].location_id == 2001

    def test_fetch_by_id_missing(self, store: SessionStore):
        assert store.fetch_by_id(SessionHandle(999)) is None

    def test_weather_code_preferred_over_icon(self, store: SessionStore, db_path: Path):
        handle = store.save(make_session())
        conn = connect(db_path)
        conn.execute(
            "UPDATE surf_charts SET weatherIconName = 'rain', weatherCode = ?",
            (int(WeatherCategory.FOG),),
        )
        conn.commit()
        conn.close()
        loaded = store.fetch_by_id(handle)
        assert loaded is not None
        assert all(c.weather == WeatherCategory.FOG for c in loaded.charts)

    def test_legacy_icon_name_rows(self, store: SessionStore, db_path: Path):
        handle = store.save(make_session())
        conn = connect(db_path)
        conn.execute("UPDATE surf_charts SET weatherIconName = 'forg', weatherCode = NULL")
        conn.commit()
        conn.close()
        loaded = store.fetch_by_id(handle)
        assert loaded is not None
        assert all(c.weather == WeatherCategory.FOG for c in loaded.charts)

    def test_rows_missing_dates_skipped(self, store: SessionStore, db_path: Path):
        store.save(make_session())
        conn = connect(db_path)
        conn.execute("INSERT INTO surf_records (surfDate, rating, isPin) VALUES (NULL, 3, 0)")
        conn.commit()
        conn.close()
        assert len(store.fetch_all()) == 1


class TestDelete:
    def test_delete_then_fetch_excludes(self, store: SessionStore, db_path: Path):
        keep = store.save(make_session(rating=2))
        gone = store.save(make_session(rating=5))
        store.delete(gone)

        assert [s.handle for s in store.fetch_all()] == [keep]
        assert store.fetch_by_id(gone) is None

        conn = connect(db_path)
        orphans = conn.execute(
            "SELECT COUNT(*) FROM surf_charts WHERE record_id = ?", (gone.row_id,)
        ).fetchone()[0]
        conn.close()
        assert orphans == 0

    def test_delete_missing(self, store: SessionStore):
        with pytest.raises(DeleteFailed):
            store.delete(SessionHandle(42))


class TestUpdate:
    def test_replaces_header_and_charts(self, store: SessionStore):
        handle = store.save(make_session(chart_hours=(0, 3, 6)))
        original = store.fetch_by_id(handle)
        assert original is not None

        new_chart = ChartSnapshot.from_chart(make_chart(12, weather=WeatherCategory.SNOW))
        store.update(replace(original, rating=5, memo="updated", is_pinned=True,
                             charts=[new_chart]))

        loaded = store.fetch_by_id(handle)
        assert loaded is not None
        assert loaded.rating == 5
        assert loaded.memo == "updated"
        assert loaded.is_pinned
        assert loaded.charts == [new_chart]

    def test_requires_handle(self, store: SessionStore):
        with pytest.raises(InvalidHandle):
            store.update(make_session())

    def test_missing_handle(self, store: SessionStore):
        with pytest.raises(UpdateFailed):
            store.update(replace(make_session(), handle=SessionHandle(77)))

    def test_failed_update_rolls_back(self, store: SessionStore, db_path: Path):
        handle = store.save(make_session(rating=3))
        conn = connect(db_path)
        conn.execute(
            "CREATE TRIGGER no_snow BEFORE INSERT ON surf_charts "
            "WHEN NEW.weatherIconName = 'snow' BEGIN SELECT RAISE(ABORT, 'no snow'); END"
        )
        conn.commit()
        conn.close()

        snowy = ChartSnapshot.from_chart(make_chart(12, weather=WeatherCategory.SNOW))
        session = store.fetch_by_id(handle)
        assert session is not None
        with pytest.raises(UpdateFailed) as exc_info:
            store.update(replace(session, rating=1, charts=[snowy]))
        assert isinstance(exc_info.value.__cause__, sqlite3.Error)

        unchanged = store.fetch_by_id(handle)
        assert unchanged is not None
        assert unchanged.rating == 3
        assert len(unchanged.charts) == 2


class TestSchemaTolerance:
    def test_no_location_column(self, db_path: Path):
        conn = connect(db_path)
        v001_initial.up(conn)
        conn.close()

        with SessionStore(db_path, migrate=False) as store:
            assert store.schema.location_column is None
            assert not store.schema.has_weather_code
            store.save(make_session(location_id=1001, rating=1))
            store.save(make_session(location_id=2001, rating=2))

            all_sessions = store.fetch_all()
            assert store.fetch_by_location(2001) == all_sessions
            assert all(s.location_id == 0 for s in all_sessions)
            # icon names alone still carry the weather
            assert all_sessions[0].charts[0].weather == WeatherCategory.CLEAR

    def test_beach_id_alias(self, db_path: Path):
        conn = connect(db_path)
        conn.execute(
            "CREATE TABLE surf_records (id INTEGER PRIMARY KEY AUTOINCREMENT, "
            "surfDate TEXT, startTime TEXT, endTime TEXT, rating INTEGER NOT NULL DEFAULT 0, "
            "memo TEXT, isPin INTEGER NOT NULL DEFAULT 0, beachID INTEGER)"
        )
        conn.commit()
        conn.close()

        with SessionStore(db_path) as store:
            assert store.schema.location_column == "beachID"
            store.save(make_session(location_id=3001))
            store.save(make_session(location_id=4001))
            assert [s.location_id for s in store.fetch_by_location(3001)] == [3001]

    def test_missing_tables(self, db_path: Path):
        with SessionStore(db_path, migrate=False) as store:
            with pytest.raises(EntityNotFound) as exc_info:
                store.save(make_session())
            assert exc_info.value.name == "surf_records"
            with pytest.raises(EntityNotFound):
                store.fetch_all()


class TestConcurrency:
    def test_writes_from_many_threads(self, store: SessionStore):
        errors: list[Exception] = []

        def worker(i: int) -> None:
            try:
                store.save(make_session(rating=i % 5 + 1))
            except SaveFailed as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(store.fetch_all()) == 10

    def test_writes_run_on_writer_thread(self, store: SessionStore, monkeypatch):
        seen: list[str] = []
        original = store._run_write

        def spy(op, error_cls):
            seen.append(threading.current_thread().name)
            return original(op, error_cls)

        monkeypatch.setattr(store, "_run_write", spy)
        store.save(make_session())
        assert seen and seen[0].startswith("session-writer")
