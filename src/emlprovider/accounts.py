"""Accounts and the registry the provider resolves them through."""

import threading
from pathlib import Path
from typing import Protocol, runtime_checkable

from .config import AccountConfig, ProviderConfig, database_path, load_config
from .errors import StoreError
from .notifications import ChangeNotifier
from .store import LocalStore, open_local_store
from .uri import DEFAULT_AUTHORITY, messages_uri


class Account:
    """A mail account owning exactly one local store."""

    def __init__(
        self,
        uuid: str,
        name: str,
        db_path: Path | None,
        authority: str = DEFAULT_AUTHORITY,
        notifier: ChangeNotifier | None = None,
    ):
        self.uuid = uuid
        self.name = name
        self.db_path = db_path
        self._authority = authority
        self._notifier = notifier
        self._store: LocalStore | None = None
        self._store_lock = threading.Lock()

    @property
    def messages_uri(self) -> str:
        return messages_uri(self.uuid, self._authority)

    def get_local_store(self) -> LocalStore:
        """The account's store, opened on first use.

        Raises StoreError if the account has no usable database path.
        """
        with self._store_lock:
            if self._store is None:
                if self.db_path is None:
                    raise StoreError(f"No database configured for account {self.uuid}")
                self._store = open_local_store(
                    self.db_path,
                    notifier=self._notifier,
                    notification_uri=self.messages_uri,
                )
            return self._store

    def close(self) -> None:
        with self._store_lock:
            if self._store is not None:
                self._store.close()
                self._store = None

    def __repr__(self) -> str:
        return f"Account({self.uuid!r}, {self.name!r})"


@runtime_checkable
class AccountRegistry(Protocol):
    """Resolves account UUIDs. Returns None for unknown accounts."""

    def get_account(self, uuid: str) -> Account | None:
        ...


class ConfigAccountRegistry:
    """Account registry built from a project's config.yaml.

    Accounts are created once at construction and shared by every
    lookup, so each account keeps a single store.
    """

    def __init__(
        self,
        config: ProviderConfig,
        root: Path,
        notifier: ChangeNotifier | None = None,
    ):
        self.authority = config.authority
        self._accounts = {
            uuid: self._make_account(acct, root, notifier)
            for uuid, acct in config.accounts.items()
        }

    def _make_account(
        self,
        acct: AccountConfig,
        root: Path,
        notifier: ChangeNotifier | None,
    ) -> Account:
        return Account(
            uuid=acct.uuid,
            name=acct.name,
            db_path=database_path(acct, root),
            authority=self.authority,
            notifier=notifier,
        )

    @classmethod
    def load(cls, root: Path, notifier: ChangeNotifier | None = None) -> "ConfigAccountRegistry":
        return cls(load_config(root), root, notifier=notifier)

    def get_account(self, uuid: str) -> Account | None:
        return self._accounts.get(uuid)

    def close(self) -> None:
        for account in self._accounts.values():
            account.close()

    def __len__(self) -> int:
        return len(self._accounts)
