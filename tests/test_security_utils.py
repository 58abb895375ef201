"""Tests for activation keys and signed session tokens - pure functions, no IO."""

from datetime import datetime, timedelta

import pytest
from itsdangerous import URLSafeTimedSerializer

from salonx.security_utils import (
    KEY_ALPHABET,
    SessionExpired,
    create_session_token,
    generate_activation_key,
    hash_activation_key,
    is_valid_key_format,
    verify_activation_key,
    verify_session_token,
)


def test_generated_key_has_salonx_format():
    key = generate_activation_key()
    assert key.startswith("SALONX-")
    assert is_valid_key_format(key)
    groups = key.split("-")[1:]
    assert [len(g) for g in groups] == [4, 4, 4]
    assert all(ch in KEY_ALPHABET for g in groups for ch in g)


def test_generated_keys_are_unique():
    assert len({generate_activation_key() for _ in range(50)}) == 50


@pytest.mark.parametrize(
    "key",
    ["", "SALONX-ABCD-EFGH", "salonx-abcd-efgh-jklm", "SALON-ABCD-EFGH-JKLM", "SALONX-ABCD-EFGH-JKLMN"],
)
def test_rejects_malformed_keys(key):
    assert not is_valid_key_format(key)


def test_key_hash_verifies_only_the_original_key():
    key = "SALONX-ABCD-EFGH-JKLM"
    key_hash = hash_activation_key(key)
    assert key_hash != key
    assert verify_activation_key(key, key_hash)
    assert not verify_activation_key("SALONX-ABCD-EFGH-JKLN", key_hash)


def test_session_token_round_trips_payload():
    token = create_session_token("salon-1", "owner@glamour.in")
    data = verify_session_token(token)
    assert data["salonId"] == "salon-1"
    assert data["email"] == "owner@glamour.in"
    assert data["isAdmin"] is False


def test_tampered_session_token_is_treated_as_absent():
    token = create_session_token("salon-1", "owner@glamour.in")
    assert verify_session_token(token[:-2] + "xx") is None


def test_token_signed_with_other_key_is_rejected():
    forged = URLSafeTimedSerializer("someone-else").dumps(
        {"salonId": "salon-1", "isAdmin": True}, salt="salonx-session"
    )
    assert verify_session_token(forged) is None


def test_past_expiry_raises_session_expired():
    token = create_session_token("salon-1", "owner@glamour.in", expires_at=datetime.utcnow() - timedelta(minutes=1))
    with pytest.raises(SessionExpired):
        verify_session_token(token)


def test_empty_token_returns_none():
    assert verify_session_token("") is None
