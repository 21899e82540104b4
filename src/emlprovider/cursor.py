"""Row cursors returned by provider queries."""

from typing import Any, Callable, Iterator, Sequence

from .columns import ID_ALIAS, MessageColumns
from .errors import CursorClosedError
from .notifications import ChangeNotifier


class Cursor:
    """Materialized result set with positional navigation.

    Position starts before the first row (-1) and runs to `count`, which
    is after the last row. Values are read by column index from the row
    at the current position.
    """

    def __init__(self, columns: Sequence[str], rows: Sequence[Sequence[Any]]):
        self._columns = list(columns)
        self._rows = [tuple(r) for r in rows]
        self._pos = -1
        self._closed = False
        self._observers: list[Callable[[str], None]] = []
        self._notifier: ChangeNotifier | None = None
        self._notification_uri: str | None = None

    @property
    def column_names(self) -> list[str]:
        return list(self._columns)

    @property
    def column_count(self) -> int:
        return len(self._columns)

    @property
    def position(self) -> int:
        return self._pos

    @property
    def is_closed(self) -> bool:
        return self._closed

    def get_count(self) -> int:
        self._check_open()
        return len(self._rows)

    def __len__(self) -> int:
        return self.get_count()

    def _check_open(self) -> None:
        if self._closed:
            raise CursorClosedError("Cursor is closed")

    # --- Navigation ---

    def move_to_position(self, position: int) -> bool:
        """Move to `position`, clamped to [-1, count]. True if on a row."""
        self._check_open()
        count = len(self._rows)
        self._pos = max(-1, min(position, count))
        return 0 <= self._pos < count

    def move(self, offset: int) -> bool:
        return self.move_to_position(self._pos + offset)

    def move_to_first(self) -> bool:
        return self.move_to_position(0)

    def move_to_last(self) -> bool:
        return self.move_to_position(len(self._rows) - 1)

    def move_to_next(self) -> bool:
        return self.move_to_position(self._pos + 1)

    def move_to_previous(self) -> bool:
        return self.move_to_position(self._pos - 1)

    def is_before_first(self) -> bool:
        return not self._rows or self._pos == -1

    def is_after_last(self) -> bool:
        return not self._rows or self._pos == len(self._rows)

    def is_first(self) -> bool:
        return bool(self._rows) and self._pos == 0

    def is_last(self) -> bool:
        return bool(self._rows) and self._pos == len(self._rows) - 1

    # --- Column lookup ---

    def get_column_index(self, column_name: str) -> int:
        """Index of `column_name`, or -1 if the result has no such column."""
        # Qualified names ("messages.id") resolve by their last component
        name = column_name.rsplit(".", 1)[-1]
        try:
            return self._columns.index(name)
        except ValueError:
            return -1

    def get_column_index_or_throw(self, column_name: str) -> int:
        index = self.get_column_index(column_name)
        if index < 0:
            raise ValueError(f"column '{column_name}' does not exist")
        return index

    def get_column_name(self, column_index: int) -> str:
        return self._columns[column_index]

    # --- Values ---

    def _current(self) -> tuple:
        self._check_open()
        if not 0 <= self._pos < len(self._rows):
            raise IndexError(f"Index {self._pos} requested, with a size of {len(self._rows)}")
        return self._rows[self._pos]

    def get(self, column_index: int) -> Any:
        return self._current()[column_index]

    def is_null(self, column_index: int) -> bool:
        return self.get(column_index) is None

    def get_string(self, column_index: int) -> str | None:
        value = self.get(column_index)
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, bytes):
            return value.decode("utf-8", errors="replace")
        return str(value)

    def get_int(self, column_index: int) -> int:
        value = self.get(column_index)
        return int(value) if value is not None else 0

    def get_float(self, column_index: int) -> float:
        value = self.get(column_index)
        return float(value) if value is not None else 0.0

    def get_blob(self, column_index: int) -> bytes | None:
        value = self.get(column_index)
        if value is None or isinstance(value, bytes):
            return value
        return str(value).encode()

    def __iter__(self) -> Iterator[tuple]:
        """Iterate over all rows from the start, leaving position after last."""
        self._check_open()
        self._pos = -1
        while self.move_to_next():
            yield self._rows[self._pos]

    # --- Change notification ---

    def register_observer(self, observer: Callable[[str], None]) -> None:
        self._observers.append(observer)

    def unregister_observer(self, observer: Callable[[str], None]) -> None:
        self._observers.remove(observer)

    def set_notification_uri(self, notifier: ChangeNotifier, uri: str) -> None:
        """Watch `uri` for changes, replacing any earlier registration."""
        if self._notifier is not None:
            self._notifier.unregister(self._on_change)
        self._notifier = notifier
        self._notification_uri = uri
        notifier.register(uri, self._on_change)

    @property
    def notification_uri(self) -> str | None:
        return self._notification_uri

    def _on_change(self, uri: str) -> None:
        for observer in list(self._observers):
            observer(uri)

    # --- Lifecycle ---

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._rows = []
        self._observers.clear()
        if self._notifier is not None:
            self._notifier.unregister(self._on_change)
            self._notifier = None

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else f"rows={len(self._rows)}"
        return f"Cursor(columns={self._columns!r}, {state})"


class IdAliasCursor:
    """Expose the `id` column under `_id` for generic list adapters.

    Only name-to-index lookups are rewritten; navigation, values and
    lifecycle calls go straight to the wrapped cursor. Querying the
    provider itself still uses `id`.
    """

    _ALIASES = {ID_ALIAS: MessageColumns.ID}

    def __init__(self, cursor: Cursor):
        self._cursor = cursor

    def get_column_index(self, column_name: str) -> int:
        return self._cursor.get_column_index(self._ALIASES.get(column_name, column_name))

    def get_column_index_or_throw(self, column_name: str) -> int:
        return self._cursor.get_column_index_or_throw(self._ALIASES.get(column_name, column_name))

    def __getattr__(self, name):
        return getattr(self._cursor, name)

    def __iter__(self):
        return iter(self._cursor)

    def __len__(self) -> int:
        return len(self._cursor)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self._cursor.close()

    def __repr__(self) -> str:
        return f"IdAliasCursor({self._cursor!r})"
