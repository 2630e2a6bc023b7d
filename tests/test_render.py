import pytest

from pwcheck.policy import EMPTY_VERDICT, EntropyEstimate, PolicyVerdict
from pwcheck.pwned import BreachResult
from pwcheck.render import CHECKING, breach_message, format_number, strength_text


@pytest.mark.parametrize("value,expected", [
    (0, "0"),
    (999, "999"),
    (1234567, "1,234,567"),
    (1e10, "10,000,000,000"),
    (1234.5, "1,234.5"),
    (10.0001, "10"),
    (1e23, "100,000,000,000,000,000,000,000"),
    (10**23, "100,000,000,000,000,000,000,000"),
])
def test_format_number(value, expected):
    assert format_number(value) == expected


def test_strength_text():
    verdict = PolicyVerdict("Strong", "#22c55e", 70)
    est = EntropyEstimate(score=3, guesses=123456789.0)
    assert strength_text(verdict, est) == "Strength: Strong (zxcvbn score 3/4, guesses ~123,456,789)"


def test_strength_text_empty():
    assert strength_text(EMPTY_VERDICT, EntropyEstimate(0, 1.0)) == ""


def test_breached_message():
    msg = breach_message(BreachResult.found(9659365))
    assert msg.text == "This password has appeared in breaches 9,659,365 times. Do not use it."
    assert msg.color == "#ef4444"


def test_not_found_message():
    msg = breach_message(BreachResult.not_found())
    assert msg.text == "This password was not found in the breached password database."
    assert msg.color == "#22c55e"


def test_padding_match_reads_as_clean():
    assert breach_message(BreachResult.found(0)) == breach_message(BreachResult.not_found())


def test_failed_message_is_generic():
    msg = breach_message(BreachResult.failed("ConnectTimeout talking to range API"))
    assert msg.text == "Error checking password. Try again later."
    assert msg.color == "#f97316"


def test_empty_and_checking_messages():
    assert breach_message(BreachResult.empty()).text == "Enter a password to check."
    assert (CHECKING.text, CHECKING.color) == ("Checking...", "#e2e8f0")
