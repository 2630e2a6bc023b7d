"""
Pwned Passwords lookup using the k-anonymity range API.

Only the first 5 hex characters of the SHA-1 digest ever leave the process;
the server returns every suffix sharing that prefix and the match happens
locally.
"""

from __future__ import annotations

import enum
import hashlib
import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple

import httpx
from cachetools import TTLCache

logger = logging.getLogger(__name__)

PWNED_API_URL = os.getenv("PWNED_API_URL", "https://api.pwnedpasswords.com").rstrip("/")
PWNED_TIMEOUT = float(os.getenv("PWNED_TIMEOUT", "10"))
PWNED_CACHE_TTL = int(os.getenv("PWNED_CACHE_TTL", "600"))  # seconds, 0 disables
PWNED_USER_AGENT = os.getenv("PWNED_USER_AGENT", "pwcheck/1.0")
PWNED_CACHE_MAX = int(os.getenv("PWNED_CACHE_MAX", "1024"))

# prefix -> range body that parsed cleanly
_CACHE: TTLCache = TTLCache(maxsize=PWNED_CACHE_MAX, ttl=max(PWNED_CACHE_TTL, 1))


class BreachCheckError(Exception):
    pass


class NetworkFailure(BreachCheckError):
    """Transport error or non-success status from the range API."""


class ParseFailure(BreachCheckError):
    """Range API body did not look like SUFFIX:COUNT records."""


class BreachStatus(str, enum.Enum):
    EMPTY = "empty"
    FOUND = "found"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True)
class BreachResult:
    status: BreachStatus
    count: int = 0
    reason: Optional[str] = None

    @classmethod
    def empty(cls) -> "BreachResult":
        return cls(BreachStatus.EMPTY)

    @classmethod
    def found(cls, count: int) -> "BreachResult":
        return cls(BreachStatus.FOUND, count=count)

    @classmethod
    def not_found(cls) -> "BreachResult":
        return cls(BreachStatus.NOT_FOUND)

    @classmethod
    def failed(cls, reason: str) -> "BreachResult":
        return cls(BreachStatus.FAILED, reason=reason)

    @property
    def breached(self) -> bool:
        # padding rows match with count 0; those are not breaches
        return self.status is BreachStatus.FOUND and self.count > 0


def sha1_split(password: str) -> Tuple[str, str]:
    sha = hashlib.sha1(password.encode("utf-8")).hexdigest().upper()
    return sha[:5], sha[5:]


def match_suffix(body: str, suffix: str) -> Optional[int]:
    """
    Return the count of the first record whose suffix equals `suffix`,
    or None if no record matches.
    """
    want = suffix.strip().upper()
    for line in body.splitlines():
        if not line.strip():
            continue
        parts = line.split(":")
        if len(parts) != 2:
            raise ParseFailure(f"malformed range record {line[:50]!r}")
        sfx, count = parts[0].strip().upper(), parts[1].strip()
        if sfx != want:
            continue
        if not (count.isascii() and count.isdigit()):
            raise ParseFailure(f"bad count {count[:20]!r} in matching record")
        return int(count)
    return None


def clear_cache() -> None:
    _CACHE.clear()


async def fetch_range(prefix: str, client: Optional[httpx.AsyncClient] = None) -> str:
    """
    GET /range/{prefix}. Pass `client` to reuse a connection pool (or a
    mock transport); otherwise a short-lived client is opened.
    """
    if PWNED_CACHE_TTL > 0:
        hit = _CACHE.get(prefix)
        if hit is not None:
            return hit

    url = f"{PWNED_API_URL}/range/{prefix}"
    headers = {"Add-Padding": "true", "User-Agent": PWNED_USER_AGENT}
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=PWNED_TIMEOUT) as own:
                r = await own.get(url, headers=headers)
        else:
            r = await client.get(url, headers=headers, timeout=PWNED_TIMEOUT)
        r.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise NetworkFailure(f"range API returned {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise NetworkFailure(f"{type(e).__name__} talking to range API") from e

    return r.text


async def check_breach(password: str, client: Optional[httpx.AsyncClient] = None) -> BreachResult:
    if not password:
        return BreachResult.empty()

    prefix, suffix = sha1_split(password)
    try:
        body = await fetch_range(prefix, client)
        count = match_suffix(body, suffix)
    except BreachCheckError as e:
        logger.warning("breach check for prefix %s failed: %s", prefix, e)
        return BreachResult.failed(str(e))

    if PWNED_CACHE_TTL > 0:
        _CACHE[prefix] = body

    if count is None:
        return BreachResult.not_found()
    return BreachResult.found(count)


async def pwned_password_count(password: str) -> int:
    """Number of times `password` appears in the corpus (0 if never)."""
    result = await check_breach(password)
    if result.status is BreachStatus.FAILED:
        raise BreachCheckError(result.reason)
    return result.count
