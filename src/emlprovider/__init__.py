"""URI-addressed query access to local email stores."""

from .accounts import Account, AccountRegistry, ConfigAccountRegistry
from .columns import ID_ALIAS, PUBLIC_COLUMNS, MessageColumns
from .cursor import Cursor, IdAliasCursor
from .errors import (
    CursorClosedError,
    ProviderError,
    StoreError,
    UnavailableStorageError,
    UnknownAccountError,
    UnknownUriError,
    UnsupportedOperationError,
)
from .notifications import ChangeNotifier
from .provider import EmailProvider, build_selection
from .store import LocalStore, LockableDatabase, MessageRecord
from .uri import UriMatcher, content_uri, messages_uri

__all__ = [
    "Account",
    "AccountRegistry",
    "ChangeNotifier",
    "ConfigAccountRegistry",
    "Cursor",
    "CursorClosedError",
    "EmailProvider",
    "ID_ALIAS",
    "IdAliasCursor",
    "LocalStore",
    "LockableDatabase",
    "MessageColumns",
    "MessageRecord",
    "PUBLIC_COLUMNS",
    "ProviderError",
    "StoreError",
    "UnavailableStorageError",
    "UnknownAccountError",
    "UnknownUriError",
    "UnsupportedOperationError",
    "UriMatcher",
    "build_selection",
    "content_uri",
    "messages_uri",
]
