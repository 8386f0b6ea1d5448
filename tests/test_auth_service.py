import uuid
from datetime import timedelta

import pytest

from stocksence.application.services import auth_service
from stocksence.core.exceptions import (
    DuplicateRegistrationException,
    UnauthorizedException,
    ValidationException,
)

PASSWORD = "secret123"


def test_sign_up_stores_a_hashed_password(user):
    assert user.email == "owner@shop.test"
    assert user.full_name == "Shop Owner"
    assert user.password_hash != PASSWORD
    assert auth_service.verify_password(PASSWORD, user.password_hash)


@pytest.mark.parametrize(
    "email, password, full_name",
    [
        ("", PASSWORD, "Someone"),
        ("not-an-email", PASSWORD, "Someone"),
        ("someone@shop.test", "12345", "Someone"),
        ("someone@shop.test", PASSWORD, "  "),
    ],
)
def test_sign_up_validation(db_session, email, password, full_name):
    with pytest.raises(ValidationException):
        auth_service.sign_up(db_session, email, password, full_name)


def test_duplicate_email_is_rejected_case_insensitively(db_session, user):
    with pytest.raises(DuplicateRegistrationException):
        auth_service.sign_up(db_session, "Owner@Shop.test", PASSWORD, "Copycat")


def test_sign_in_opens_a_session(db_session, user, session_events):
    signed_in = auth_service.sign_in(db_session, "owner@shop.test", PASSWORD)

    assert signed_in.user.id == user.id
    assert auth_service.current_session(db_session, signed_in.access_token).id == user.id
    assert [(e.event, e.user_id) for e in session_events] == [(auth_service.SIGNED_IN, user.id)]


def test_sign_in_with_wrong_password(db_session, user, session_events):
    with pytest.raises(UnauthorizedException):
        auth_service.sign_in(db_session, "owner@shop.test", "wrong-password")

    assert session_events == []


def test_sign_out_revokes_the_token(db_session, user, session_events):
    token = auth_service.sign_in(db_session, "owner@shop.test", PASSWORD).access_token

    auth_service.sign_out(db_session, token)
    auth_service.sign_out(db_session, token)

    assert auth_service.current_session(db_session, token) is None
    assert [e.event for e in session_events] == [auth_service.SIGNED_IN, auth_service.SIGNED_OUT]


def test_expired_token_emits_token_expired(db_session, user, session_events):
    token = auth_service.create_access_token(
        {"sub": user.id, "jti": str(uuid.uuid4())},
        expires_delta=timedelta(seconds=-5),
    )

    assert auth_service.current_session(db_session, token) is None
    assert [(e.event, e.user_id) for e in session_events] == [(auth_service.TOKEN_EXPIRED, user.id)]


def test_garbage_and_forged_tokens_have_no_session(db_session, user):
    forged = auth_service.create_access_token({"sub": user.id, "jti": "never-issued"})

    assert auth_service.current_session(db_session, "not.a.jwt") is None
    assert auth_service.current_session(db_session, forged) is None


def test_failing_listener_does_not_block_others(db_session, user, session_events):
    def broken(change):
        raise RuntimeError("listener bug")

    unsubscribe = auth_service.on_session_change(broken)
    try:
        auth_service.sign_in(db_session, "owner@shop.test", PASSWORD)
    finally:
        unsubscribe()

    assert len(session_events) == 1


def test_require_session():
    with pytest.raises(UnauthorizedException):
        auth_service.require_session(None)
