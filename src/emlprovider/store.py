"""Per-account local message store backed by SQLite."""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from dataclasses import dataclass, fields
from datetime import datetime
from pathlib import Path
from typing import Callable, TypeVar

from .columns import MESSAGES_TABLE
from .errors import StoreError, UnavailableStorageError
from .notifications import ChangeNotifier

log = logging.getLogger(__name__)

T = TypeVar("T")


class ReadWriteLock:
    """Many concurrent readers or a single writer.

    Waiting writers block new readers so a steady stream of queries
    cannot starve a write. Not reentrant.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if not self._readers:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read(self):
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write(self):
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()

    @property
    def readers(self) -> int:
        return self._readers


class LockableDatabase:
    """SQLite connection guarded by a readers/writer lock.

    All access goes through execute(). Non-exclusive work runs under the
    shared lock and may overlap with other readers; exclusive work runs
    alone inside a transaction.
    """

    def __init__(self, path: str | Path, schema: str | None = None):
        self.path = Path(path)
        self._schema = schema
        self._conn: sqlite3.Connection | None = None
        self._lock = ReadWriteLock()
        self._open_lock = threading.Lock()

    @property
    def lock(self) -> ReadWriteLock:
        return self._lock

    def _open(self) -> sqlite3.Connection:
        with self._open_lock:
            if self._conn is not None:
                return self._conn
            if not self.path.parent.is_dir():
                raise UnavailableStorageError(f"Storage not mounted: {self.path.parent}")
            try:
                conn = sqlite3.connect(self.path, timeout=30.0, check_same_thread=False)
                conn.row_factory = sqlite3.Row
                conn.execute("PRAGMA journal_mode=WAL")
                if self._schema:
                    conn.executescript(self._schema)
                    conn.commit()
            except sqlite3.Error as e:
                raise UnavailableStorageError(f"Cannot open {self.path}: {e}") from e
            self._conn = conn
            return conn

    def execute(self, work: Callable[[sqlite3.Connection], T], exclusive: bool = False) -> T:
        """Run `work` with the open connection and return its result.

        Raises UnavailableStorageError if the database cannot be opened.
        """
        if exclusive:
            with self._lock.write():
                conn = self._open()
                try:
                    result = work(conn)
                except BaseException:
                    conn.rollback()
                    raise
                conn.commit()
                return result
        with self._lock.read():
            return work(self._open())

    def close(self) -> None:
        """Close the connection; the next execute() reopens it."""
        with self._lock.write():
            if self._conn:
                self._conn.close()
                self._conn = None


MESSAGES_SCHEMA = f"""
    CREATE TABLE IF NOT EXISTS {MESSAGES_TABLE} (
        id INTEGER PRIMARY KEY,
        deleted INTEGER DEFAULT 0,
        folder_id INTEGER,
        uid TEXT,
        subject TEXT,
        date INTEGER,
        flags TEXT,
        sender_list TEXT,
        to_list TEXT,
        cc_list TEXT,
        bcc_list TEXT,
        reply_to_list TEXT,
        html_content TEXT,
        text_content TEXT,
        attachment_count INTEGER,
        internal_date INTEGER,
        message_id TEXT,
        preview TEXT,
        mime_type TEXT,
        empty INTEGER DEFAULT 0,
        thread_root INTEGER,
        thread_parent INTEGER
    );

    CREATE INDEX IF NOT EXISTS idx_messages_folder ON {MESSAGES_TABLE}(folder_id);
    CREATE INDEX IF NOT EXISTS idx_messages_uid ON {MESSAGES_TABLE}(uid, folder_id);
    CREATE INDEX IF NOT EXISTS idx_messages_date ON {MESSAGES_TABLE}(date);
    CREATE INDEX IF NOT EXISTS idx_messages_thread_root ON {MESSAGES_TABLE}(thread_root);
"""


@dataclass
class MessageRecord:
    """A message row as written by sync code."""
    uid: str
    folder_id: int
    subject: str = ""
    date: datetime | None = None
    internal_date: datetime | None = None
    message_id: str | None = None
    sender_list: str = ""
    to_list: str = ""
    cc_list: str = ""
    bcc_list: str = ""
    reply_to_list: str = ""
    flags: str = ""
    attachment_count: int = 0
    preview: str = ""
    text_content: str | None = None
    html_content: str | None = None
    mime_type: str | None = None
    thread_root: int | None = None
    thread_parent: int | None = None
    deleted: bool = False
    empty: bool = False


def _to_millis(dt: datetime | None) -> int | None:
    return int(dt.timestamp() * 1000) if dt else None


class LocalStore:
    """Local message database of one account.

    Writes run exclusively and, when a notifier and notification URI are
    configured, signal the URI afterwards so open query results can
    refresh.
    """

    def __init__(
        self,
        path: str | Path,
        notifier: ChangeNotifier | None = None,
        notification_uri: str | None = None,
    ):
        self._database = LockableDatabase(path, schema=MESSAGES_SCHEMA)
        self._notifier = notifier
        self._notification_uri = notification_uri

    @property
    def path(self) -> Path:
        return self._database.path

    def get_database(self) -> LockableDatabase:
        return self._database

    def _notify(self) -> None:
        if self._notifier is not None and self._notification_uri:
            self._notifier.notify_change(self._notification_uri)

    def add_message(self, record: MessageRecord) -> int:
        """Insert a message row. Returns the new row id."""
        values = {f.name: getattr(record, f.name) for f in fields(record)}
        for key in ("date", "internal_date"):
            values[key] = _to_millis(values[key])
        values["deleted"] = int(record.deleted)
        values["empty"] = int(record.empty)
        columns = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)

        def work(conn: sqlite3.Connection) -> int:
            cur = conn.execute(
                f"INSERT INTO {MESSAGES_TABLE} ({columns}) VALUES ({placeholders})",
                list(values.values()),
            )
            return cur.lastrowid

        row_id = self._database.execute(work, exclusive=True)
        log.debug("Added message %s (uid=%s) to %s", row_id, record.uid, self.path)
        self._notify()
        return row_id

    def _set_column(self, message_ids: list[int], column: str, value: int) -> int:
        if not message_ids:
            return 0
        placeholders = ",".join("?" for _ in message_ids)

        def work(conn: sqlite3.Connection) -> int:
            cur = conn.execute(
                f"UPDATE {MESSAGES_TABLE} SET {column} = ? WHERE id IN ({placeholders})",
                [value, *message_ids],
            )
            return cur.rowcount

        changed = self._database.execute(work, exclusive=True)
        if changed:
            self._notify()
        return changed

    def mark_deleted(self, message_ids: list[int]) -> int:
        """Soft-delete messages. Returns number of rows changed."""
        return self._set_column(message_ids, "deleted", 1)

    def undelete(self, message_ids: list[int]) -> int:
        return self._set_column(message_ids, "deleted", 0)

    def count(self, include_hidden: bool = False) -> int:
        """Count messages; deleted and placeholder rows only if include_hidden."""
        query = f"SELECT COUNT(*) FROM {MESSAGES_TABLE}"
        if not include_hidden:
            query += " WHERE deleted=0 AND empty!=1"
        return self._database.execute(lambda conn: conn.execute(query).fetchone()[0])

    def close(self) -> None:
        self._database.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def __repr__(self) -> str:
        return f"LocalStore({str(self.path)!r})"


def open_local_store(path: str | Path, **kwargs) -> LocalStore:
    """Create a LocalStore, failing with StoreError if `path` is unusable."""
    path = Path(path)
    if path.exists() and not path.is_file():
        raise StoreError(f"Not a database file: {path}")
    return LocalStore(path, **kwargs)
