"""
Password policy evaluation.

Maps a password plus a zxcvbn-style entropy estimate to a meter verdict
(label, color, width) and a deduplicated list of suggestions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple

RED = "#ef4444"
ORANGE = "#f97316"
YELLOW = "#eab308"
GREEN = "#22c55e"


@dataclass(frozen=True)
class PasswordPolicy:
    min_length: int = 12     # minimum length to be acceptable
    strong_length: int = 16  # length to be "very strong"
    min_score: int = 3       # zxcvbn 0-4, require 3+ to be "OK"


DEFAULT_POLICY = PasswordPolicy()

MIX_SUGGESTION = "Use a mix of lowercase, uppercase, numbers, and symbols (at least 3 types)."
COMMON_SUGGESTION = "Avoid common words, names, or patterns."


def length_suggestion(policy: PasswordPolicy = DEFAULT_POLICY) -> str:
    return f"Use at least {policy.min_length} characters."


@dataclass(frozen=True)
class CharacterProfile:
    has_lower: bool = False
    has_upper: bool = False
    has_digit: bool = False
    has_symbol: bool = False

    @property
    def types_count(self) -> int:
        return sum((self.has_lower, self.has_upper, self.has_digit, self.has_symbol))

    @classmethod
    def from_password(cls, password: str) -> "CharacterProfile":
        lower = upper = digit = symbol = False
        # iterates code points, so astral characters count once
        for ch in password:
            if "a" <= ch <= "z":
                lower = True
            elif "A" <= ch <= "Z":
                upper = True
            elif "0" <= ch <= "9":
                digit = True
            else:
                symbol = True
        return cls(lower, upper, digit, symbol)


@dataclass(frozen=True)
class EntropyEstimate:
    score: int
    guesses: float
    warning: Optional[str] = None
    suggestions: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PolicyVerdict:
    label: str
    color: str
    width: int
    suggestions: Tuple[str, ...] = field(default_factory=tuple)


EMPTY_VERDICT = PolicyVerdict(label="", color=GREEN, width=0)


def dedupe(items: Iterable[Optional[str]]) -> Tuple[str, ...]:
    """
    Drop empty entries and repeats, keeping the first occurrence of each.
    """
    seen = {}
    for item in items:
        if item and item not in seen:
            seen[item] = None
    return tuple(seen)


def _suggestions(length: int, profile: CharacterProfile, estimate: EntropyEstimate,
                 policy: PasswordPolicy) -> Tuple[str, ...]:
    out = []
    if length < policy.min_length:
        out.append(length_suggestion(policy))
    if profile.types_count < 3:
        out.append(MIX_SUGGESTION)
    if estimate.score < policy.min_score:
        out.append(COMMON_SUGGESTION)
    if estimate.warning:
        out.append(estimate.warning)
    out.extend(estimate.suggestions or ())
    return dedupe(out)


def evaluate(
    password: str,
    estimate: EntropyEstimate,
    policy: PasswordPolicy = DEFAULT_POLICY,
) -> PolicyVerdict:
    """
    Classify a password into one meter band.

    The bands are checked top to bottom and the first match wins; anything
    that falls through all four (e.g. score 3 with only two character types)
    lands on "Medium".
    """
    if not password:
        return EMPTY_VERDICT

    length = len(password)
    profile = CharacterProfile.from_password(password)
    types = profile.types_count
    score = estimate.score
    suggestions = _suggestions(length, profile, estimate, policy)

    if length < policy.min_length or types < 2 or score <= 1:
        label, color, width = "Too weak", RED, 20
    elif length >= policy.min_length and types >= 2 and score == 2:
        label, color, width = "Weak", ORANGE, 40
    elif length >= policy.min_length and types >= 3 and score == 3:
        label, color, width = "Strong", GREEN, 70
    elif length >= policy.strong_length and types >= 3 and score == 4:
        label, color, width = "Very strong", GREEN, 100
    else:
        label, color, width = "Medium", YELLOW, 60

    return PolicyVerdict(label=label, color=color, width=width, suggestions=suggestions)
