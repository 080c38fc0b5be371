"""Content normalization and hashing.

This module handles:
1. URL canonicalization (tracking parameters, case, trailing slash)
2. Content hashing for cross-source deduplication
3. Stable external ids for feed entries

The hashes are 32-bit and intentionally simple: identical inputs produce
identical digests in every process, which is all dedup linkage needs.
"""

import re
from urllib.parse import SplitResult, parse_qsl, quote, urlencode, urlsplit, urlunsplit

TRACKING_PARAMS = frozenset({"utm_source", "utm_medium", "utm_campaign", "ref", "source"})

DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443, "ftp": 21}

# Characters left as-is in a URL path; everything else (including non-ASCII) is
# percent-encoded as UTF-8
_PATH_SAFE = "/%:@!$&'()*+,;=-._~[]|^"

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_int32(value: int) -> int:
    """Wrap an integer to signed 32-bit two's complement."""
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


def _netloc(parts: SplitResult) -> str:
    """Host with userinfo, dropping the scheme's default port."""
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    port = parts.port
    if port is not None and port != DEFAULT_PORTS.get(parts.scheme.lower()):
        host = f"{host}:{port}"
    userinfo, _, _ = parts.netloc.rpartition("@")
    return f"{userinfo}@{host}" if userinfo else host


def normalize_url(url: str) -> str:
    """Canonicalize a URL for hashing.

    Drops tracking query parameters and the scheme's default port,
    percent-encodes the path, lower-cases the whole URL and strips one
    trailing slash. Input that does not parse as an absolute URL is
    only lower-cased. Never raises.

    Args:
        url: Raw URL

    Returns:
        Canonical URL string
    """
    try:
        parts = urlsplit(url.strip())
        if not parts.scheme or not parts.netloc:
            return url.lower()

        query = [
            (key, value)
            for key, value in parse_qsl(parts.query, keep_blank_values=True)
            if key not in TRACKING_PARAMS
        ]
        path = quote(parts.path or "/", safe=_PATH_SAFE)
        normalized = urlunsplit(
            (parts.scheme, _netloc(parts), path, urlencode(query), parts.fragment)
        )
    except ValueError:
        return url.lower()

    normalized = normalized.lower()
    if normalized.endswith("/"):
        normalized = normalized[:-1]
    return normalized


def djb2_hex(text: str) -> str:
    """djb2 digest (seed 5381, multiply by 33, xor) rendered in base-16.

    Args:
        text: Input string

    Returns:
        Lower-case hex digest of the absolute 32-bit hash
    """
    h = 5381
    for ch in text:
        h = _to_int32(h * 33) ^ ord(ch)
    return format(abs(h), "x")


def content_hash(title: str, url: str) -> str:
    """Hash of normalized title and URL.

    Titles are reduced to lower-case alphanumerics, so punctuation and
    spacing differences between sources do not defeat deduplication.

    Args:
        title: Item title
        url: Item URL

    Returns:
        Hex content hash
    """
    normalized_title = _NON_ALNUM.sub("", title.lower())
    return djb2_hex(f"{normalized_title}|{normalize_url(url)}")


def feed_external_id(url: str) -> str:
    """Stable external id for a feed entry derived from its link.

    Args:
        url: Entry link

    Returns:
        Base-36 string of the absolute 31-multiplier 32-bit hash
    """
    h = 0
    for ch in url:
        h = _to_int32((h << 5) - h + ord(ch))
    return _to_base36(abs(h))


__all__ = [
    "TRACKING_PARAMS",
    "content_hash",
    "djb2_hex",
    "feed_external_id",
    "normalize_url",
]
