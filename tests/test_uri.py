"""Tests for content URIs, UriMatcher and ChangeNotifier."""

import gc

import pytest

from emlprovider.notifications import ChangeNotifier
from emlprovider.uri import (
    NO_MATCH,
    UriMatcher,
    content_uri,
    is_descendant,
    messages_uri,
    path_segments,
)


class TestBuilders:
    def test_content_uri(self):
        assert content_uri() == "content://eml.provider"
        assert content_uri("org.example") == "content://org.example"

    def test_messages_uri(self):
        assert messages_uri("abc") == "content://eml.provider/account/abc/messages"

    def test_messages_uri_quotes(self):
        uri = messages_uri("a/b")
        assert path_segments(uri) == ["account", "a/b", "messages"]

    def test_path_segments(self):
        assert path_segments("content://x/account/u1/messages/") == ["account", "u1", "messages"]


class TestUriMatcher:
    @pytest.fixture
    def matcher(self):
        m = UriMatcher()
        m.add_uri("eml.provider", "account/*/messages", 0)
        m.add_uri("eml.provider", "account/*/thread/#", 2)
        return m

    def test_match(self, matcher):
        assert matcher.match("content://eml.provider/account/u1/messages") == 0

    def test_digits(self, matcher):
        assert matcher.match("content://eml.provider/account/u1/thread/42") == 2
        assert matcher.match("content://eml.provider/account/u1/thread/x") == NO_MATCH

    @pytest.mark.parametrize("uri", [
        "content://eml.provider/account/u1",
        "content://eml.provider/account//messages",
        "content://eml.provider/accounts/u1/messages",
        "content://other/account/u1/messages",
        "",
    ])
    def test_no_match(self, matcher, uri):
        assert matcher.match(uri) == NO_MATCH

    def test_scheme_ignored(self, matcher):
        assert matcher.match("file://eml.provider/account/u1/messages") == 0
        assert matcher.match("https://eml.provider/account/u1/thread/7") == 2

    def test_custom_no_match(self):
        assert UriMatcher(no_match=-7).match("content://x/y") == -7

    def test_negative_code(self):
        with pytest.raises(ValueError):
            UriMatcher().add_uri("x", "y", -1)

class TestNotifier:
    def test_is_descendant(self):
        base = "content://eml.provider/account/u1"
        assert is_descendant(base + "/messages", base)
        assert is_descendant(base, base)
        assert not is_descendant(base, base + "/messages")
        assert not is_descendant("content://other/account/u1", base)

    def test_notifies_same_ancestor_and_descendant(self):
        notifier = ChangeNotifier()
        seen = []
        notifier.register("content://eml.provider/account/u1/messages", lambda u: seen.append("msgs"))
        notifier.register("content://eml.provider/account/u1", lambda u: seen.append("acct"))
        notifier.register("content://eml.provider/account/u2/messages", lambda u: seen.append("other"))

        assert notifier.notify_change("content://eml.provider/account/u1/messages") == 2
        assert sorted(seen) == ["acct", "msgs"]

        seen.clear()
        notifier.notify_change("content://eml.provider")
        assert sorted(seen) == ["acct", "msgs", "other"]

    def test_unregister(self):
        notifier = ChangeNotifier()
        seen = []
        notifier.register("content://eml.provider/a", seen.append)
        notifier.unregister(seen.append)
        assert notifier.notify_change("content://eml.provider/a") == 0
        assert len(notifier) == 0

    def test_is_truthy_when_empty(self):
        notifier = ChangeNotifier()
        assert len(notifier) == 0
        assert notifier

    def test_bound_method_held_weakly(self):
        class Watcher:
            def __init__(self):
                self.seen = []

            def on_change(self, uri):
                self.seen.append(uri)

        notifier = ChangeNotifier()
        watcher = Watcher()
        notifier.register("content://eml.provider/a", watcher.on_change)
        assert notifier.notify_change("content://eml.provider/a") == 1
        assert watcher.seen == ["content://eml.provider/a"]

        del watcher
        gc.collect()
        assert notifier.notify_change("content://eml.provider/a") == 0
        assert len(notifier) == 0
