"""
Tests for the token codec, the issuer and the admission gate.

Run with: pytest tests/test_admission.py -v
"""
from __future__ import annotations

import pytest

from service.admission import AdmissionGate, Admitted, Rejected, RejectionReason
from service.tokens import (
    MalformedTokenError,
    TimestampTokenCodec,
    TokenIssuer,
    now_millis,
)


WINDOW = 60_000


@pytest.fixture
def codec() -> TimestampTokenCodec:
    return TimestampTokenCodec()


@pytest.fixture
def gate(codec) -> AdmissionGate:
    return AdmissionGate(codec, window_ms=WINDOW)


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------

def test_codec_encodes_decimal_millis(codec):
    assert codec.encode(1700000000123) == "1700000000123"
    assert codec.to_json("1700000000123") == 1700000000123


@pytest.mark.parametrize("raw,expected", [("1000", 1000), (" 1000 ", 1000), ("+42", 42), ("-5", -5)])
def test_codec_decodes_integers(codec, raw, expected):
    assert codec.decode(raw) == expected


@pytest.mark.parametrize("raw", [
    "abc", "12abc", "1.5", "1e3", "", "1_000", "0x10",
    "\u0661\u0660\u0660\u0660",       # Arabic-Indic digits
    "1" * 21,
])
def test_codec_rejects_non_integers(codec, raw):
    with pytest.raises(MalformedTokenError):
        codec.decode(raw)


# ---------------------------------------------------------------------------
# Issuer
# ---------------------------------------------------------------------------

def test_issue_uses_clock(codec):
    issuer = TokenIssuer(codec, clock=lambda: 1234)
    token = issuer.issue()
    assert token.value == "1234"
    assert token.issued_at_ms == 1234


def test_issue_with_explicit_now(codec):
    token = TokenIssuer(codec).issue(now_ms=5000)
    assert token.value == "5000"


def test_default_clock_is_wall_time(codec):
    before = now_millis()
    token = TokenIssuer(codec).issue()
    assert before <= token.issued_at_ms <= now_millis()


def test_two_issues_are_distinct_and_each_valid_for_one_window(codec, gate):
    issuer = TokenIssuer(codec)
    first = issuer.issue(now_ms=1_000)
    second = issuer.issue(now_ms=20_000)
    assert first.value != second.value

    # first expires while second is still fresh
    assert isinstance(gate.admit(first.value, "x", 1_000 + WINDOW + 1), Rejected)
    assert isinstance(gate.admit(second.value, "x", 1_000 + WINDOW + 1), Admitted)
    assert isinstance(gate.admit(second.value, "x", 20_000 + WINDOW + 1), Rejected)


# ---------------------------------------------------------------------------
# Freshness window
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("t", [0, 1_000, 1_700_000_000_000])
def test_admitted_just_inside_window(gate, t):
    verdict = gate.admit(str(t), "x", t + 59_999)
    assert isinstance(verdict, Admitted)
    assert verdict.issued_at_ms == t


@pytest.mark.parametrize("t", [0, 1_000, 1_700_000_000_000])
def test_rejected_just_outside_window(gate, t):
    verdict = gate.admit(str(t), "x", t + 60_001)
    assert isinstance(verdict, Rejected)
    assert verdict.reason is RejectionReason.TOKEN_EXPIRED


def test_boundary_instant_is_admitted(gate):
    assert isinstance(gate.admit("1000", "x", 1000 + WINDOW), Admitted)


def test_token_from_the_future_is_admitted(gate):
    assert isinstance(gate.admit("90000", "x", 1000), Admitted)


def test_gate_does_not_consume_tokens(gate):
    first = gate.admit("1000", "x", 2000)
    second = gate.admit("1000", "x", 3000)
    assert first.admitted and second.admitted


def test_custom_window(codec):
    gate = AdmissionGate(codec, window_ms=10)
    assert isinstance(gate.admit("100", "x", 110), Admitted)
    assert isinstance(gate.admit("100", "x", 111), Rejected)


def test_window_must_be_positive(codec):
    with pytest.raises(ValueError):
        AdmissionGate(codec, window_ms=0)


# ---------------------------------------------------------------------------
# Ordering and reasons
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("title", [None, "", "   "])
def test_missing_title_rejected_even_with_fresh_token(gate, title):
    verdict = gate.admit("1000", title, 1000)
    assert isinstance(verdict, Rejected)
    assert verdict.reason is RejectionReason.MISSING_TITLE


def test_missing_title_checked_before_token(gate):
    verdict = gate.admit(None, None, 1000)
    assert verdict.reason is RejectionReason.MISSING_TITLE


@pytest.mark.parametrize("token", [None, "", "  "])
def test_missing_token(gate, token):
    verdict = gate.admit(token, "sports", 1000)
    assert verdict.reason is RejectionReason.MISSING_TOKEN


@pytest.mark.parametrize("now", [0, 1000, 10**15])
@pytest.mark.parametrize("token", ["abc", "12abc", "null", "1.0"])
def test_non_numeric_token_rejected_regardless_of_now(gate, token, now):
    verdict = gate.admit(token, "sports", now)
    assert isinstance(verdict, Rejected)
    assert verdict.reason is RejectionReason.MALFORMED_TOKEN


@pytest.mark.parametrize("token", ["9" * 5000, "1" * 21, "-" + "1" * 4400])
def test_oversized_numeric_token_is_malformed(gate, token):
    verdict = gate.admit(token, "sports", 1000)
    assert isinstance(verdict, Rejected)
    assert verdict.reason is RejectionReason.MALFORMED_TOKEN


def test_non_ascii_digits_are_malformed(gate):
    verdict = gate.admit("\u0661\u0660\u0660\u0660", "sports", 1000)
    assert verdict.reason is RejectionReason.MALFORMED_TOKEN


def test_reason_codes_are_distinct_and_have_messages():
    codes = [r.value for r in RejectionReason]
    assert len(codes) == len(set(codes))
    assert RejectionReason.TOKEN_EXPIRED.message == "Authorization Error. Token Expired"
    assert RejectionReason.MISSING_TITLE.message == "Title is required in query string"
    messages = [r.message for r in RejectionReason]
    assert len(messages) == len(set(messages))
