"""Credential verifier: password hashing, stores, pending token issue."""

import pytest

from cardtransfer.auth.credentials import (
    CredentialVerifier,
    DatabaseCredentialStore,
    StaticCredentialStore,
    check_password,
    hash_password,
)
from cardtransfer.core.errors import AuthError, AuthErrorKind


def test_hash_round_trip_and_salted():
    first = hash_password("qwerty123")
    second = hash_password("qwerty123")
    assert first != second
    assert first.startswith("$2b$")
    assert check_password("qwerty123", first)
    assert not check_password("qwerty124", first)


def test_check_password_rejects_garbage_hash():
    assert not check_password("x", "not-a-hash")
    assert not check_password("x", "md5$1$00$abc")
    assert not check_password("x", None)


async def test_static_store_issues_pending(otp_manager):
    verifier = CredentialVerifier(StaticCredentialStore({"vasya": "qwerty123"}), otp_manager)
    pending = await verifier.verify("vasya", "qwerty123")
    assert pending.login == "vasya"
    assert otp_manager.has_pending(pending.token)


async def test_database_store_accepts_seeded_user(db, seeded, otp_manager, sms):
    verifier = CredentialVerifier(DatabaseCredentialStore(db), otp_manager)
    pending = await verifier.verify("vasya", "qwerty123")
    assert pending.login == "vasya"
    assert sms.last_code("vasya") == "12345"


@pytest.mark.parametrize(
    "login,password",
    [
        ("vasya", "wrong"),
        ("nobody", "qwerty123"),
        ("", "qwerty123"),
        ("vasya", ""),
    ],
)
async def test_mismatch_is_invalid_credentials_without_pending(db, seeded, otp_manager, login, password):
    verifier = CredentialVerifier(DatabaseCredentialStore(db), otp_manager)
    with pytest.raises(AuthError) as exc:
        await verifier.verify(login, password)
    assert exc.value.kind is AuthErrorKind.INVALID_CREDENTIALS
    assert exc.value.message == "Invalid login or password"
    assert otp_manager._pending == {}


async def test_repeated_logins_keep_earlier_pending_valid(otp_manager):
    verifier = CredentialVerifier(StaticCredentialStore({"vasya": "qwerty123"}), otp_manager)
    first = await verifier.verify("vasya", "qwerty123")
    second = await verifier.verify("vasya", "qwerty123")
    assert first.token != second.token
    assert otp_manager.has_pending(first.token)
    assert otp_manager.has_pending(second.token)
