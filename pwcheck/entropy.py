"""
Adapter around the zxcvbn strength estimator.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from zxcvbn import zxcvbn

from pwcheck.policy import EntropyEstimate

# zxcvbn refuses longer input with ValueError
MAX_ORACLE_LENGTH = 72


def from_result(result: Mapping[str, Any]) -> EntropyEstimate:
    feedback = result.get("feedback") or {}
    warning = feedback.get("warning") or None
    suggestions = tuple(s for s in (feedback.get("suggestions") or []) if s)
    return EntropyEstimate(
        score=int(result["score"]),
        guesses=float(result["guesses"]),
        warning=warning,
        suggestions=suggestions,
    )


def estimate(password: str, user_inputs: Optional[List[str]] = None) -> EntropyEstimate:
    """
    Run zxcvbn on `password`; `user_inputs` are extra words (name, email...)
    that should be penalised if they appear in it.

    Only the first MAX_ORACLE_LENGTH characters are scored. Length and
    character-type rules in `policy.evaluate` still see the whole password.
    """
    return from_result(zxcvbn(password[:MAX_ORACLE_LENGTH], user_inputs=user_inputs or []))
