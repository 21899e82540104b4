"""Query provider for the local message store.

Used to display the message list and similar views. Callers address a
collection by URI and get back a cursor; for now the provider only
answers queries on one account's messages.
"""

import logging
import sqlite3
from typing import Sequence

from .accounts import Account, AccountRegistry
from .columns import MESSAGES_TABLE, PUBLIC_COLUMNS, InternalMessageColumns
from .cursor import Cursor, IdAliasCursor
from .errors import (
    ProviderError,
    StoreError,
    UnavailableStorageError,
    UnknownAccountError,
    UnknownUriError,
    UnsupportedOperationError,
)
from .notifications import ChangeNotifier
from .store import LockableDatabase
from .uri import DEFAULT_AUTHORITY, NO_MATCH, UriMatcher, path_segments

log = logging.getLogger(__name__)

# URI match codes
MESSAGES = 0

IMPLICIT_SELECTION = (
    f"{InternalMessageColumns.DELETED}=0 AND {InternalMessageColumns.EMPTY}!=1"
)


def build_selection(selection: str | None) -> str:
    """Combine a caller's selection with the hidden-row filter.

    The caller's expression is parenthesized so its operators cannot
    change how the filter binds.
    """
    if not selection or not selection.strip():
        return IMPLICIT_SELECTION
    return f"({selection}) AND {IMPLICIT_SELECTION}"


def build_query(
    projection: Sequence[str] | None,
    selection: str | None,
    sort_order: str | None,
) -> str:
    columns = ", ".join(projection) if projection else ", ".join(PUBLIC_COLUMNS)
    sql = f"SELECT {columns} FROM {MESSAGES_TABLE} WHERE {build_selection(selection)}"
    if sort_order:
        sql += f" ORDER BY {sort_order}"
    return sql


class EmailProvider:
    """URI-addressed, read-only access to per-account message tables."""

    def __init__(
        self,
        registry: AccountRegistry,
        notifier: ChangeNotifier | None = None,
        authority: str = DEFAULT_AUTHORITY,
    ):
        self._registry = registry
        self._notifier = notifier if notifier is not None else ChangeNotifier()
        self.authority = authority
        self._matcher = UriMatcher()
        self._matcher.add_uri(authority, "account/*/messages", MESSAGES)

    @property
    def notifier(self) -> ChangeNotifier:
        return self._notifier

    def get_type(self, uri: str) -> str:
        raise UnsupportedOperationError("get_type")

    def query(
        self,
        uri: str,
        projection: Sequence[str] | None = None,
        selection: str | None = None,
        selection_args: Sequence | None = None,
        sort_order: str | None = None,
    ) -> IdAliasCursor:
        """Query the collection at `uri`.

        Deleted messages and empty placeholders are never returned. The
        result maps lookups of "_id" to the "id" column.
        """
        match = self._matcher.match(uri)
        if match == NO_MATCH:
            raise UnknownUriError(uri)

        if match == MESSAGES:
            account_uuid = path_segments(uri)[1]
            cursor = self.get_messages(
                account_uuid, projection, selection, selection_args, sort_order
            )
            cursor.set_notification_uri(self._notifier, uri)

        return IdAliasCursor(cursor)

    def delete(self, uri: str, selection: str | None = None, selection_args: Sequence | None = None) -> int:
        raise UnsupportedOperationError("delete")

    def insert(self, uri: str, values: dict) -> str:
        raise UnsupportedOperationError("insert")

    def update(
        self,
        uri: str,
        values: dict,
        selection: str | None = None,
        selection_args: Sequence | None = None,
    ) -> int:
        raise UnsupportedOperationError("update")

    def get_messages(
        self,
        account_uuid: str,
        projection: Sequence[str] | None,
        selection: str | None,
        selection_args: Sequence | None,
        sort_order: str | None,
    ) -> Cursor:
        account = self._get_account(account_uuid)
        database = self._get_database(account)
        sql = build_query(projection, selection, sort_order)
        args = tuple(selection_args or ())
        log.debug("query account=%s: %s %r", account_uuid, sql, args)

        def work(conn: sqlite3.Connection) -> Cursor:
            cur = conn.execute(sql, args)
            columns = [d[0] for d in cur.description]
            return Cursor(columns, cur.fetchall())

        try:
            return database.execute(work, exclusive=False)
        except UnavailableStorageError as e:
            log.warning("Storage not available for account %s: %s", account_uuid, e)
            raise ProviderError("Storage not available") from e

    def _get_account(self, account_uuid: str) -> Account:
        account = self._registry.get_account(account_uuid)
        if account is None:
            raise UnknownAccountError(account_uuid)
        return account

    def _get_database(self, account: Account) -> LockableDatabase:
        try:
            local_store = account.get_local_store()
        except StoreError as e:
            raise ProviderError("Couldn't get local store") from e
        return local_store.get_database()
