"""Tests for password hashing and signed tokens."""
from types import SimpleNamespace

from tripdesk.models import Role
from tripdesk.services.security import (
    create_agency_action_token,
    create_password_reset_token,
    create_session_token,
    decode_session_token,
    generate_password,
    hash_password,
    verify_agency_action_token,
    verify_password,
    verify_password_reset_token,
)


def _user(**overrides):
    values = {
        "id": "u1",
        "email": "asha@example.com",
        "role": Role.AGENCY_ADMIN,
        "user_type": "AGENCY_ADMIN",
        "agency_id": "u1",
        "password_hash": hash_password("secret123"),
    }
    values.update(overrides)
    return SimpleNamespace(**values)


class TestPasswords:
    """Test hashing and generated passwords."""

    def test_hash_and_verify(self):
        hashed = hash_password("secret123")

        assert hashed != "secret123"
        assert verify_password("secret123", hashed)
        assert not verify_password("wrong", hashed)

    def test_empty_values_never_verify(self):
        assert not verify_password("", hash_password("x"))
        assert not verify_password("x", "")

    def test_generated_password_mixes_character_classes(self):
        password = generate_password(14)

        assert len(password) == 14
        assert any(c.isupper() for c in password)
        assert any(c.islower() for c in password)
        assert any(c.isdigit() for c in password)


class TestSessionTokens:
    """Test session JWTs."""

    def test_round_trip_claims(self):
        payload = decode_session_token(create_session_token(_user()))

        assert payload["sub"] == "u1"
        assert payload["role"] == "AGENCY_ADMIN"
        assert payload["scope"] == "session"

    def test_garbage_is_rejected(self):
        assert decode_session_token("not-a-token") is None
        assert decode_session_token(None) is None

    def test_other_scopes_are_not_sessions(self):
        """Test an approval-link token cannot be used as a session."""
        assert decode_session_token(create_agency_action_token("a1", "approve")) is None


class TestApprovalTokens:
    """Test tokens bound to one agency and one action."""

    def test_valid_for_its_agency_and_action(self):
        token = create_agency_action_token("a1", "approve")

        assert verify_agency_action_token(token, "a1", "approve")

    def test_wrong_action_or_agency(self):
        token = create_agency_action_token("a1", "approve")

        assert not verify_agency_action_token(token, "a1", "reject")
        assert not verify_agency_action_token(token, "a2", "approve")

    def test_session_token_is_not_an_approval(self):
        assert not verify_agency_action_token(create_session_token(_user()), "u1", "approve")


class TestPasswordResetTokens:
    """Test reset tokens."""

    def test_carries_hash_fingerprint(self):
        user = _user()
        payload = verify_password_reset_token(create_password_reset_token(user))

        assert payload["sub"] == "u1"
        assert payload["pwd"] == user.password_hash[-12:]

    def test_session_token_is_not_a_reset_token(self):
        assert verify_password_reset_token(create_session_token(_user())) is None
