"""Tests for the authentication service."""

import pytest

from financy.domain.auth import AuthService
from financy.domain.errors import AuthError, AUTH_ERROR_MESSAGES


def test_sign_up_signs_in(auth_service):
    user = auth_service.sign_up("Ana@Example.com ", "secret123")

    assert user.email == "ana@example.com"
    assert auth_service.current_user == user


def test_session_survives_new_service(auth_service, temp_db):
    user = auth_service.sign_up("ana@example.com", "secret123")

    assert AuthService(temp_db).current_user == user


def test_sign_in_and_out(auth_service):
    user = auth_service.sign_up("ana@example.com", "secret123")
    auth_service.sign_out()
    assert auth_service.current_user is None

    signed_in = auth_service.sign_in("ana@example.com", "secret123")

    assert signed_in == user
    assert auth_service.current_user == user


def test_sign_out_twice(auth_service):
    auth_service.sign_out()
    auth_service.sign_out()

    assert auth_service.current_user is None


def test_password_is_hashed(auth_service, temp_db):
    auth_service.sign_up("ana@example.com", "secret123")

    _, password_hash = temp_db.get_user_credentials("ana@example.com")

    assert password_hash != "secret123"


@pytest.mark.parametrize(
    "email,password,code",
    [
        ("not-an-email", "secret123", "auth/invalid-email"),
        ("", "secret123", "auth/invalid-email"),
        ("ana@example.com", "12345", "auth/weak-password"),
    ],
)
def test_invalid_credentials(auth_service, email, password, code):
    with pytest.raises(AuthError) as excinfo:
        auth_service.sign_up(email, password)

    assert excinfo.value.code == code
    assert str(excinfo.value) == AUTH_ERROR_MESSAGES[code]


def test_duplicate_email(auth_service):
    auth_service.sign_up("ana@example.com", "secret123")

    with pytest.raises(AuthError) as excinfo:
        auth_service.sign_up("ana@example.com", "another123")

    assert excinfo.value.code == "auth/email-already-in-use"


def test_unknown_user(auth_service):
    with pytest.raises(AuthError) as excinfo:
        auth_service.sign_in("nobody@example.com", "secret123")

    assert excinfo.value.code == "auth/user-not-found"


def test_wrong_password(auth_service):
    auth_service.sign_up("ana@example.com", "secret123")
    auth_service.sign_out()

    with pytest.raises(AuthError) as excinfo:
        auth_service.sign_in("ana@example.com", "wrong-password")

    assert excinfo.value.code == "auth/wrong-password"
    assert auth_service.current_user is None


def test_unknown_code_gets_generic_message():
    assert "Please try again" in str(AuthError("auth/too-many-requests"))


def test_auth_state_listener(auth_service):
    seen = []
    unsubscribe = auth_service.on_auth_state_change(seen.append)

    user = auth_service.sign_up("ana@example.com", "secret123")
    auth_service.sign_out()
    unsubscribe()
    auth_service.sign_in("ana@example.com", "secret123")

    assert seen == [None, user, None]
