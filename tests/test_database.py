"""Unit tests for the Store (persistence access layer)."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import sqlite3
import threading
import time

import pytest
import requests
from unittest.mock import MagicMock, patch
from sqlalchemy.exc import IntegrityError, OperationalError

from backoffice.database import Store
from backoffice.exceptions import StoreInitError, StoreNotInitializedError
from backoffice.utils.passwords import verify_password
from conftest import make_settings

INSERT_CAR = (
    "INSERT INTO cars (brand, model, year, license_plate, created_at, updated_at) "
    "VALUES (:brand, :model, :year, :plate, '2026-01-01 00:00:00.000000', '2026-01-01 00:00:00.000000')"
)


def insert_car(store, brand="Renault", model="Clio", year=2020, plate=None):
    return store.execute(INSERT_CAR, {"brand": brand, "model": model, "year": year, "plate": plate})


def snapshot_bytes(tmp_path):
    """A real store file holding one car, read back as bytes."""
    source = Store(make_settings(tmp_path / "source")).acquire()
    insert_car(source, brand="Peugeot", model="208")
    path = source.path
    source.dispose()
    with open(path, "rb") as f:
        return f.read()


class TestInitialization:
    def test_query_before_acquire_fails(self, settings):
        store = Store(settings)
        with pytest.raises(StoreNotInitializedError):
            store.query_all("SELECT 1")
        with pytest.raises(StoreNotInitializedError):
            store.execute("DELETE FROM cars")

    def test_acquire_creates_every_table(self, store):
        assert store.table_names() == ["cars", "students", "users"]

    def test_acquire_seeds_one_hashed_admin(self, store):
        users = store.query_all("SELECT * FROM users")
        assert len(users) == 1
        admin = users[0]
        assert admin["email"] == "admin@school.com"
        assert admin["role"] == "admin"
        assert admin["password"] != "admin123"
        assert verify_password("admin123", admin["password"])

    def test_acquire_is_idempotent(self, settings):
        store = Store(settings)
        assert store.acquire() is store.acquire()
        assert store.query_one("SELECT COUNT(*) AS count FROM users")["count"] == 1
        store.dispose()

    def test_concurrent_acquire_bootstraps_once(self, settings):
        store = Store(settings)
        calls = []
        original = store._bootstrap_schema

        def counting_bootstrap(engine):
            calls.append(engine)
            time.sleep(0.05)
            original(engine)

        store._bootstrap_schema = counting_bootstrap
        threads = [threading.Thread(target=store.acquire) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(calls) == 1
        assert store.query_one("SELECT COUNT(*) AS count FROM users")["count"] == 1
        store.dispose()

    def test_reopening_existing_file_does_not_reseed(self, settings):
        first = Store(settings).acquire()
        first.dispose()
        second = Store(settings).acquire()
        assert second.query_one("SELECT COUNT(*) AS count FROM users")["count"] == 1
        second.dispose()

    def test_no_seed_when_accounts_exist(self, settings):
        first = Store(settings).acquire()
        first.execute("UPDATE users SET email = 'owner@school.com'")
        first.dispose()
        second = Store(settings).acquire()
        emails = [u["email"] for u in second.query_all("SELECT email FROM users")]
        assert emails == ["owner@school.com"]
        second.dispose()


class TestQueries:
    def test_execute_reports_id_and_rowcount(self, store):
        first = insert_car(store)
        second = insert_car(store, brand="BMW", model="X1")
        assert second.last_row_id == first.last_row_id + 1
        assert first.rows_affected == 1

        result = store.execute("UPDATE cars SET mileage = 10")
        assert result.rows_affected == 2
        assert result.durable is True

    def test_query_all_returns_dicts_in_order(self, store):
        insert_car(store, brand="Audi")
        insert_car(store, brand="Fiat")
        rows = store.query_all("SELECT brand, year FROM cars ORDER BY brand DESC")
        assert rows == [{"brand": "Fiat", "year": 2020}, {"brand": "Audi", "year": 2020}]

    def test_query_one_returns_none_when_empty(self, store):
        assert store.query_one("SELECT * FROM cars WHERE id = :id", {"id": 999}) is None

    def test_constraint_violation_propagates(self, store):
        insert_car(store, plate="AB-123-CD")
        with pytest.raises(IntegrityError):
            insert_car(store, plate="AB-123-CD")

    def test_malformed_sql_propagates(self, store):
        with pytest.raises(OperationalError):
            store.query_all("SELEC nothing")


class TestPersistence:
    def test_writes_survive_reopen(self, settings):
        first = Store(settings).acquire()
        insert_car(first, plate="XX-001-XX")
        first.dispose()

        second = Store(settings).acquire()
        assert second.query_one("SELECT license_plate FROM cars")["license_plate"] == "XX-001-XX"
        second.dispose()

    def test_fallback_snapshot_location_is_used(self, tmp_path):
        legacy = tmp_path / "data" / "legacy.sqlite"
        legacy.parent.mkdir()
        legacy.write_bytes(snapshot_bytes(tmp_path))

        store = Store(make_settings(tmp_path, SNAPSHOT_FALLBACK_PATHS=[str(legacy)])).acquire()
        assert store.path == str(legacy)
        assert store.query_one("SELECT brand FROM cars")["brand"] == "Peugeot"
        store.dispose()

    def test_ephemeral_mode_never_touches_the_file(self, tmp_path):
        settings = make_settings(tmp_path, VERCEL="1")
        open(settings.DATABASE_PATH, "wb").close()
        store = Store(settings).acquire()

        assert store.durable is False
        assert store.path is None
        assert insert_car(store).durable is False
        assert os.path.getsize(settings.DATABASE_PATH) == 0
        store.dispose()

    def test_unwritable_file_is_loaded_into_memory(self, tmp_path):
        settings = make_settings(tmp_path)
        with open(settings.DATABASE_PATH, "wb") as f:
            f.write(snapshot_bytes(tmp_path))
        before = os.path.getmtime(settings.DATABASE_PATH)

        with patch("backoffice.database._writable", return_value=False):
            store = Store(settings).acquire()

        assert store.durable is False
        assert store.query_one("SELECT brand FROM cars")["brand"] == "Peugeot"
        assert insert_car(store).durable is False
        assert store.query_one("SELECT COUNT(*) AS count FROM cars")["count"] == 2
        assert os.path.getmtime(settings.DATABASE_PATH) == before
        store.dispose()

    def test_file_turning_read_only_degrades_to_memory(self, store):
        insert_car(store, brand="Kia")
        original = store._write
        attempts = []

        def read_only_once(engine, sql, params):
            attempts.append(sql)
            if len(attempts) == 1:
                raise OperationalError(sql, params, sqlite3.OperationalError("attempt to write a readonly database"))
            return original(engine, sql, params)

        store._write = read_only_once
        result = insert_car(store, brand="Dacia")

        assert len(attempts) == 2
        assert result.durable is False
        assert store.durable is False
        assert store.path is None
        brands = [r["brand"] for r in store.query_all("SELECT brand FROM cars ORDER BY id")]
        assert brands == ["Kia", "Dacia"]

    def test_other_operational_errors_are_not_swallowed(self, store):
        def locked(engine, sql, params):
            raise OperationalError(sql, params, sqlite3.OperationalError("database is locked"))

        store._write = locked
        with pytest.raises(OperationalError):
            insert_car(store)
        assert store.durable is True


class TestRemoteSnapshot:
    def test_missing_local_file_fetches_snapshot(self, tmp_path):
        payload = snapshot_bytes(tmp_path)
        settings = make_settings(tmp_path, SNAPSHOT_URL="https://example.test/database.sqlite")
        response = MagicMock(content=payload)

        with patch("backoffice.database.requests.get", return_value=response) as mock_get:
            store = Store(settings).acquire()

        mock_get.assert_called_once_with("https://example.test/database.sqlite", timeout=None)
        assert store.durable is True
        assert store.query_one("SELECT brand FROM cars")["brand"] == "Peugeot"
        assert os.path.exists(settings.DATABASE_PATH)
        store.dispose()

    def test_ephemeral_mode_restores_snapshot_in_memory(self, tmp_path):
        payload = snapshot_bytes(tmp_path)
        settings = make_settings(tmp_path, EPHEMERAL_STORAGE=True, SNAPSHOT_URL="https://example.test/db")

        with patch("backoffice.database.requests.get", return_value=MagicMock(content=payload)):
            store = Store(settings).acquire()

        assert store.durable is False
        assert store.query_one("SELECT brand FROM cars")["brand"] == "Peugeot"
        assert not os.path.exists(settings.DATABASE_PATH)
        store.dispose()

    def test_local_file_wins_over_remote(self, store, settings):
        store.dispose()
        remote = settings.model_copy(update={"SNAPSHOT_URL": "https://example.test/db"})
        with patch("backoffice.database.requests.get") as mock_get:
            reopened = Store(remote).acquire()
        mock_get.assert_not_called()
        reopened.dispose()

    def test_fetch_failure_is_fatal(self, tmp_path):
        settings = make_settings(tmp_path, EPHEMERAL_STORAGE=True, SNAPSHOT_URL="https://example.test/db")
        store = Store(settings)
        with patch("backoffice.database.requests.get", side_effect=requests.exceptions.ConnectionError("down")):
            with pytest.raises(StoreInitError):
                store.acquire()
        assert store.is_initialized is False

    def test_non_sqlite_payload_is_rejected(self, tmp_path):
        settings = make_settings(tmp_path, SNAPSHOT_URL="https://example.test/db")
        with patch("backoffice.database.requests.get", return_value=MagicMock(content=b"<html>oops</html>")):
            with pytest.raises(StoreInitError):
                Store(settings).acquire()
