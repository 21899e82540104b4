"""Content URIs and pattern matching for provider collections."""

import re
from dataclasses import dataclass
from urllib.parse import quote, unquote, urlsplit

SCHEME = "content"
DEFAULT_AUTHORITY = "eml.provider"

NO_MATCH = -1


def content_uri(authority: str = DEFAULT_AUTHORITY) -> str:
    """Base URI of the provider, e.g. content://eml.provider."""
    return f"{SCHEME}://{authority}"


def messages_uri(account_uuid: str, authority: str = DEFAULT_AUTHORITY) -> str:
    """URI of the messages collection of one account."""
    return f"{content_uri(authority)}/account/{quote(account_uuid, safe='')}/messages"


def path_segments(uri: str) -> list[str]:
    """Decoded, non-empty path segments of a URI."""
    path = urlsplit(uri).path
    return [unquote(seg) for seg in path.split("/") if seg]


@dataclass
class _Pattern:
    authority: str
    segments: list[str]
    code: int


_DIGITS = re.compile(r"^\d+$")


def _segment_matches(pattern: str, segment: str) -> bool:
    if pattern == "*":
        return bool(segment)
    if pattern == "#":
        return bool(_DIGITS.match(segment))
    return pattern == segment


class UriMatcher:
    """Map URIs to integer codes by authority and path pattern.

    Only authority and path take part in matching; the scheme is
    ignored. Path patterns are '/'-separated; a '*' segment matches any non-empty
    text and a '#' segment matches a run of digits. Patterns are tried in
    the order they were added.
    """

    def __init__(self, no_match: int = NO_MATCH):
        self._no_match = no_match
        self._patterns: list[_Pattern] = []

    def add_uri(self, authority: str, path: str, code: int) -> None:
        if code < 0:
            raise ValueError(f"Match code must be non-negative: {code}")
        segments = [seg for seg in path.split("/") if seg]
        self._patterns.append(_Pattern(authority, segments, code))

    def match(self, uri: str) -> int:
        parts = urlsplit(uri)
        segments = path_segments(uri)
        for pattern in self._patterns:
            if pattern.authority != parts.netloc:
                continue
            if len(pattern.segments) != len(segments):
                continue
            if all(_segment_matches(p, s) for p, s in zip(pattern.segments, segments)):
                return pattern.code
        return self._no_match


def is_descendant(uri: str, ancestor: str) -> bool:
    """True if `uri` equals `ancestor` or lies below it in the path tree."""
    a, b = urlsplit(ancestor), urlsplit(uri)
    if (a.scheme, a.netloc) != (b.scheme, b.netloc):
        return False
    a_segs, b_segs = path_segments(ancestor), path_segments(uri)
    return b_segs[:len(a_segs)] == a_segs
