"""
Text and colors shown by the UI for strength and breach results.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from pwcheck.policy import ORANGE, RED, GREEN, EntropyEstimate, PolicyVerdict
from pwcheck.pwned import BreachResult, BreachStatus

CHECKING_COLOR = "#e2e8f0"

CHECKING_TEXT = "Checking..."
EMPTY_TEXT = "Enter a password to check."
BREACHED_TEXT = "This password has appeared in breaches {count} times. Do not use it."
CLEAN_TEXT = "This password was not found in the breached password database."
ERROR_TEXT = "Error checking password. Try again later."


@dataclass(frozen=True)
class BreachMessage:
    text: str
    color: str


CHECKING = BreachMessage(CHECKING_TEXT, CHECKING_COLOR)


def format_number(value: float) -> str:
    """en-US grouping: 1234567 -> '1,234,567', 1234.5 -> '1,234.5'."""
    if isinstance(value, int):
        return f"{value:,}"
    if float(value).is_integer():
        # repr is the shortest round-tripping form: 1e23, not 99999999999999991611392
        return f"{int(Decimal(repr(float(value)))):,}"
    return f"{value:,.3f}".rstrip("0").rstrip(".")


def strength_text(verdict: PolicyVerdict, estimate: EntropyEstimate) -> str:
    if not verdict.label:
        return ""
    return (
        f"Strength: {verdict.label} "
        f"(zxcvbn score {estimate.score}/4, guesses ~{format_number(estimate.guesses)})"
    )


def breach_message(result: BreachResult) -> BreachMessage:
    if result.status is BreachStatus.EMPTY:
        return BreachMessage(EMPTY_TEXT, CHECKING_COLOR)
    if result.status is BreachStatus.FAILED:
        return BreachMessage(ERROR_TEXT, ORANGE)
    if result.breached:
        return BreachMessage(BREACHED_TEXT.format(count=format_number(result.count)), RED)
    return BreachMessage(CLEAN_TEXT, GREEN)
