# backoffice/database.py
"""
Persistence access layer.

A Store owns the single SQLAlchemy engine of one application instance and is
the only object that talks to SQLite. Everything else goes through
query_all / query_one / execute, after acquire() has opened the store,
created every table and seeded the default account.

Storage modes:
  - durable:   file-backed SQLite, every execute() commits to disk
  - ephemeral: in-memory SQLite (EPHEMERAL_STORAGE=true or VERCEL=1)
  - degraded:  the file could not be written, contents copied into memory
"""

import os
import sqlite3
import tempfile
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Optional

import requests
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from backoffice.config import Settings
from backoffice.exceptions import StoreInitError, StoreNotInitializedError
from backoffice.utils.logger import get_logger
from backoffice.utils.passwords import hash_password

logger = get_logger(__name__)

Base = declarative_base()

SQLITE_HEADER = b"SQLite format 3\x00"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"


@dataclass
class ExecuteResult:
    last_row_id: int
    rows_affected: int
    durable: bool     # False when the write only reached memory


def timestamp(moment: Optional[datetime] = None) -> str:
    """UTC timestamp as stored in created_at / updated_at columns."""
    moment = moment or datetime.now(timezone.utc)
    return moment.strftime(TIMESTAMP_FORMAT)


def _memory_engine() -> Engine:
    # StaticPool: every checkout shares the one in-memory database
    return create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


def _file_engine(path: str) -> Engine:
    return create_engine(
        f"sqlite:///{os.path.abspath(path)}",
        connect_args={"check_same_thread": False},
    )


def _writable(path: str) -> bool:
    directory = os.path.dirname(os.path.abspath(path))
    try:
        os.makedirs(directory, exist_ok=True)
    except OSError:
        return False
    if os.path.exists(path) and not os.access(path, os.W_OK):
        return False
    # SQLite writes its rollback journal next to the database file
    return os.access(directory, os.W_OK)


def _restore(snapshot_path: str, engine: Engine):
    """Copy a snapshot file into the (in-memory) database behind engine."""
    source = sqlite3.connect(Path(snapshot_path).resolve().as_uri() + "?mode=ro", uri=True)
    raw = engine.raw_connection()
    try:
        source.backup(raw.dbapi_connection)
    finally:
        raw.close()
        source.close()


def _restore_bytes(payload: bytes, engine: Engine):
    with tempfile.TemporaryDirectory() as tmp:
        snapshot_path = os.path.join(tmp, "snapshot.sqlite")
        with open(snapshot_path, "wb") as f:
            f.write(payload)
        _restore(snapshot_path, engine)


def _is_readonly_error(exc: OperationalError) -> bool:
    return "readonly" in str(exc.orig).lower()


class Store:
    """
    One SQLite database per application instance.

    acquire() is idempotent and lock-guarded: the first caller opens the
    engine, bootstraps the schema and seeds the default account; later (or
    concurrent) callers get the same store back. Statement execution is
    serialised through the same lock.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.durable = False
        self._engine: Optional[Engine] = None
        self._path: Optional[str] = None
        self._lock = threading.RLock()

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    @property
    def path(self) -> Optional[str]:
        """File backing the store, or None while memory-only."""
        return self._path

    # ── Initialisation ───────────────────────────────────────────────────
    def acquire(self) -> "Store":
        if self._engine is not None:
            return self
        with self._lock:
            if self._engine is not None:
                return self
            engine = self._open()
            try:
                self._bootstrap_schema(engine)
                self._seed_default_account(engine)
            except Exception:
                engine.dispose()
                raise
            self._engine = engine
        return self

    def _open(self) -> Engine:
        if self.settings.is_ephemeral:
            engine = _memory_engine()
            if self.settings.SNAPSHOT_URL:
                _restore_bytes(self._fetch_snapshot(), engine)
            self._path, self.durable = None, False
            logger.info("Store opened in memory (ephemeral hosting mode)")
            return engine

        payload = None
        path = self._locate_snapshot()
        if path is None:
            path = self.settings.DATABASE_PATH
            if self.settings.SNAPSHOT_URL:
                payload = self._fetch_snapshot()

        if not _writable(path):
            logger.warning(f"Store file {path} is not writable — continuing memory-only")
            engine = _memory_engine()
            if payload is not None:
                _restore_bytes(payload, engine)
            elif os.path.exists(path):
                _restore(path, engine)
            self._path, self.durable = None, False
            return engine

        if payload is not None:
            with open(path, "wb") as f:
                f.write(payload)
        self._path, self.durable = path, True
        logger.info(f"Store opened at {os.path.abspath(path)}")
        return _file_engine(path)

    def _locate_snapshot(self) -> Optional[str]:
        candidates = [self.settings.DATABASE_PATH, *self.settings.SNAPSHOT_FALLBACK_PATHS]
        for candidate in candidates:
            if os.path.isfile(candidate):
                return candidate
        return None

    def _fetch_snapshot(self) -> bytes:
        url = self.settings.SNAPSHOT_URL
        logger.info(f"Fetching store snapshot from {url}")
        try:
            resp = requests.get(url, timeout=self.settings.SNAPSHOT_FETCH_TIMEOUT)
            resp.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise StoreInitError(f"Could not fetch snapshot from {url}: {e}") from e
        if not resp.content.startswith(SQLITE_HEADER):
            raise StoreInitError(f"Snapshot at {url} is not an SQLite database")
        return resp.content

    def _bootstrap_schema(self, engine: Engine):
        """Create every table that doesn't exist yet."""
        import backoffice.models  # noqa: registers all tables on Base.metadata

        Base.metadata.create_all(bind=engine)

    def _seed_default_account(self, engine: Engine):
        with engine.begin() as conn:
            count = conn.execute(text("SELECT COUNT(*) FROM users")).scalar()
            if count:
                return
            now = timestamp()
            conn.execute(
                text(
                    "INSERT INTO users (name, email, password, role, created_at, updated_at) "
                    "VALUES (:name, :email, :password, 'admin', :now, :now)"
                ),
                {
                    "name": self.settings.DEFAULT_ADMIN_NAME,
                    "email": self.settings.DEFAULT_ADMIN_EMAIL,
                    "password": hash_password(self.settings.DEFAULT_ADMIN_PASSWORD, self.settings.BCRYPT_ROUNDS),
                    "now": now,
                },
            )
        logger.info(f"Seeded default account {self.settings.DEFAULT_ADMIN_EMAIL}")

    # ── Queries ──────────────────────────────────────────────────────────
    def _require_engine(self) -> Engine:
        if self._engine is None:
            raise StoreNotInitializedError()
        return self._engine

    def query_all(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> list[dict]:
        """Run a read query. Rows come back as dicts, in result-set order."""
        with self._lock:
            engine = self._require_engine()
            with engine.connect() as conn:
                result = conn.execute(text(sql), dict(params or {}))
                return [dict(row) for row in result.mappings()]

    def query_one(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> Optional[dict]:
        rows = self.query_all(sql, params)
        return rows[0] if rows else None

    def execute(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> ExecuteResult:
        """
        Run a write statement in its own transaction and commit it.
        If the store file turned read-only, the store moves to memory and the
        statement is replayed there; the result then reports durable=False.
        Every other engine error propagates to the caller.
        """
        with self._lock:
            engine = self._require_engine()
            try:
                return self._write(engine, sql, params)
            except OperationalError as e:
                if not self.durable or not _is_readonly_error(e):
                    raise
                logger.warning(f"Store file {self._path} became read-only — continuing memory-only: {e.orig}")
                self._degrade_to_memory()
                return self._write(self._engine, sql, params)

    def _write(self, engine: Engine, sql: str, params) -> ExecuteResult:
        with engine.begin() as conn:
            result = conn.execute(text(sql), dict(params or {}))
            return ExecuteResult(
                last_row_id=result.lastrowid or 0,
                rows_affected=result.rowcount,
                durable=self.durable,
            )

    def _degrade_to_memory(self):
        memory = _memory_engine()
        _restore(self._path, memory)
        self._engine.dispose()
        self._engine = memory
        self._path, self.durable = None, False

    # ── Housekeeping ─────────────────────────────────────────────────────
    def table_names(self) -> list[str]:
        with self._lock:
            return sorted(inspect(self._require_engine()).get_table_names())

    def dispose(self):
        """Release the engine. Only for application shutdown: memory-only data is lost."""
        with self._lock:
            if self._engine is not None:
                self._engine.dispose()
                self._engine = None
