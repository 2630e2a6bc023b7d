"""
Stale-result guard for breach checks.

Every check takes a monotonic token; a result is only handed back if its
token is still the newest one when the lookup returns. Superseded lookups
are left to finish on their own, their results are just dropped.
"""

from __future__ import annotations

import time
from typing import Awaitable, Callable, Dict, Optional

from pwcheck.pwned import BreachResult, check_breach

Checker = Callable[[str], Awaitable[BreachResult]]


class BreachCheckSession:
    def __init__(self) -> None:
        self.latest = 0
        self.closed = False
        self.touched = time.monotonic()

    def begin(self) -> int:
        self.latest += 1
        self.touched = time.monotonic()
        return self.latest

    def observe(self, token: int) -> bool:
        """
        Register a caller-supplied token. Returns False when a newer token
        has already been seen, i.e. the request is stale on arrival.
        """
        self.touched = time.monotonic()
        if self.closed or token < self.latest:
            return False
        self.latest = token
        return True

    def is_current(self, token: int) -> bool:
        return not self.closed and token == self.latest

    def close(self) -> None:
        self.closed = True

    async def run(self, password: str, checker: Checker = check_breach,
                  token: Optional[int] = None) -> Optional[BreachResult]:
        if token is None:
            token = self.begin()
        elif not self.observe(token):
            return None
        result = await checker(password)
        if not self.is_current(token):
            return None
        return result


class SessionRegistry:
    """One BreachCheckSession per client id, forgotten after `idle_sec`."""

    def __init__(self, idle_sec: float = 900) -> None:
        self.idle_sec = idle_sec
        self._sessions: Dict[str, BreachCheckSession] = {}

    def get(self, client_id: str) -> BreachCheckSession:
        self._prune()
        sess = self._sessions.get(client_id)
        if sess is None or sess.closed:
            sess = self._sessions[client_id] = BreachCheckSession()
        return sess

    def close(self, client_id: str) -> None:
        sess = self._sessions.pop(client_id, None)
        if sess:
            sess.close()

    def _prune(self) -> None:
        cutoff = time.monotonic() - self.idle_sec
        for cid in [c for c, s in self._sessions.items() if s.touched < cutoff]:
            self._sessions.pop(cid).close()

    def __len__(self) -> int:
        return len(self._sessions)
