"""Shared fixtures: a project with one seeded account."""

from datetime import datetime

import pytest

from emlprovider.accounts import ConfigAccountRegistry
from emlprovider.config import AccountConfig, ProviderConfig, save_config
from emlprovider.notifications import ChangeNotifier
from emlprovider.provider import EmailProvider
from emlprovider.store import MessageRecord
from emlprovider.uri import messages_uri

ACCOUNT_UUID = "5b4f3c2a-1e0d-4c9b-8a7f-6e5d4c3b2a10"

SEED = [
    # (uid, folder_id, subject, deleted, empty)
    ("101", 1, "Hello from Alice", False, False),
    ("102", 1, "Re: Hello from Alice", False, False),
    ("103", 2, "Quarterly report", False, False),
    ("104", 1, "Deleted spam", True, False),
    ("105", 1, "", False, True),
    ("106", 2, "Lunch?", False, False),
]


@pytest.fixture
def root(tmp_path):
    """Project root with config.yaml registering ACCOUNT_UUID."""
    (tmp_path / ".eml" / "accounts").mkdir(parents=True)
    config = ProviderConfig(accounts={
        ACCOUNT_UUID: AccountConfig(uuid=ACCOUNT_UUID, name="Test"),
    })
    save_config(config, tmp_path)
    return tmp_path


@pytest.fixture
def notifier():
    return ChangeNotifier()


@pytest.fixture
def registry(root, notifier):
    reg = ConfigAccountRegistry.load(root, notifier=notifier)
    yield reg
    reg.close()


@pytest.fixture
def store(registry):
    """The test account's store, seeded with SEED."""
    store = registry.get_account(ACCOUNT_UUID).get_local_store()
    for i, (uid, folder_id, subject, deleted, empty) in enumerate(SEED):
        store.add_message(MessageRecord(
            uid=uid,
            folder_id=folder_id,
            subject=subject,
            date=datetime(2024, 1, 1 + i, 12, 0, 0),
            sender_list="alice@example.com" if i % 2 == 0 else "bob@example.com",
            deleted=deleted,
            empty=empty,
        ))
    return store


@pytest.fixture
def provider(registry, notifier, store):
    return EmailProvider(registry, notifier=notifier)


@pytest.fixture
def uri():
    return messages_uri(ACCOUNT_UUID)
