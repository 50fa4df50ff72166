"""Paddle-Signature 검증 테스트"""
import pytest

from core.paddle_signature import compute_signature, parse_signature_header, verify_paddle_signature

SECRET = "pdl_ntfset_secret"
NOW = 1_700_000_000
BODY = b'{"event_type":"transaction.paid","data":{"id":"txn_1"}}'


def _header(ts: int = NOW, body: bytes = BODY, secret: str = SECRET) -> str:
    return f"ts={ts};h1={compute_signature(secret, str(ts), body)}"


def test_valid_signature_is_accepted():
    assert verify_paddle_signature(BODY, _header(), SECRET, now=NOW)


def test_header_segments_tolerate_whitespace_and_unknown_keys():
    header = f" ts={NOW} ; foo=bar ;h1={compute_signature(SECRET, str(NOW), BODY)} "
    assert verify_paddle_signature(BODY, header, SECRET, now=NOW)


@pytest.mark.parametrize(
    "body",
    [
        BODY.replace(b"txn_1", b"txn_2"),
        BODY + b" ",
        BODY[:-1],
    ],
)
def test_mutated_body_fails(body):
    assert not verify_paddle_signature(body, _header(), SECRET, now=NOW)


def test_mutated_timestamp_fails():
    signed = compute_signature(SECRET, str(NOW), BODY)
    header = f"ts={NOW + 1};h1={signed}"
    assert not verify_paddle_signature(BODY, header, SECRET, now=NOW)


def test_different_secret_fails():
    assert not verify_paddle_signature(BODY, _header(secret="other"), SECRET, now=NOW)


@pytest.mark.parametrize(
    "header",
    [
        None,
        "",
        f"ts={NOW}",
        "h1=abcdef",
        f"ts=not-a-number;h1={compute_signature(SECRET, 'not-a-number', BODY)}",
        "garbage",
    ],
)
def test_malformed_headers_fail(header):
    assert not verify_paddle_signature(BODY, header, SECRET, now=NOW)


@pytest.mark.parametrize("secret", [None, "", "   "])
def test_missing_secret_fails(secret):
    assert not verify_paddle_signature(BODY, _header(), secret, now=NOW)


def test_non_ascii_signature_fails_without_raising():
    header = f"ts={NOW};h1=é{compute_signature(SECRET, str(NOW), BODY)[1:]}"
    assert not verify_paddle_signature(BODY, header, SECRET, now=NOW)


def test_stale_timestamp_is_rejected():
    assert not verify_paddle_signature(BODY, _header(ts=NOW - 301), SECRET, now=NOW)
    assert verify_paddle_signature(BODY, _header(ts=NOW - 300), SECRET, now=NOW)


def test_zero_tolerance_disables_freshness_check():
    header = _header(ts=NOW - 86_400)
    assert verify_paddle_signature(BODY, header, SECRET, tolerance_seconds=0, now=NOW)


def test_parse_signature_header_ignores_invalid_chunks():
    assert parse_signature_header("ts=1; ;novalue;h1=ab=cd") == {"ts": ["1"], "h1": ["ab=cd"]}


def test_any_matching_h1_is_accepted_during_secret_rotation():
    old = compute_signature("pdl_ntfset_old", str(NOW), BODY)
    current = compute_signature(SECRET, str(NOW), BODY)

    assert verify_paddle_signature(BODY, f"ts={NOW};h1={old};h1={current}", SECRET, now=NOW)
    assert verify_paddle_signature(BODY, f"ts={NOW};h1={current};h1={old}", SECRET, now=NOW)
    assert not verify_paddle_signature(BODY, f"ts={NOW};h1={old};h1={old}", SECRET, now=NOW)


def test_parse_signature_header_keeps_every_h1():
    assert parse_signature_header("ts=1;h1=aa;h1=bb") == {"ts": ["1"], "h1": ["aa", "bb"]}
