# Overview: Pytest coverage for password hashing and session token lifecycle.

from datetime import timedelta

import pytest

from storeledger.errors import ValidationError
from storeledger.extensions import db
from storeledger.models import SessionToken
from storeledger.services import auth_service, session_service
from storeledger.time_utils import utcnow


def _session_for(token):
    return db.session.query(SessionToken).filter_by(token_hash=session_service.hash_token(token)).one()


class TestPasswords:

    def test_hash_and_verify(self, app):
        with app.app_context():
            hashed = auth_service.hash_password("secret123")
            assert hashed != "secret123"
            assert auth_service.verify_password("secret123", hashed)
            assert not auth_service.verify_password("secret124", hashed)

    def test_short_password_rejected(self, app):
        with app.app_context():
            with pytest.raises(ValidationError):
                auth_service.hash_password("abc")

    def test_malformed_hash_does_not_verify(self):
        assert auth_service.verify_password("secret123", "not-a-bcrypt-hash") is False


class TestAuthenticate:

    def test_email_is_case_insensitive(self, store_a):
        user = auth_service.authenticate("  Owner_A@Example.com ", "secret123")
        assert user is not None
        assert user.last_login_at is not None

    def test_inactive_user(self, store_a):
        store_a.owner.is_active = False
        db.session.commit()
        assert auth_service.authenticate("owner_a@example.com", "secret123") is None


class TestSessionLifecycle:

    def test_token_is_stored_hashed(self, store_a):
        session, token = session_service.create_session(store_a.user_id)
        assert len(token) == 64
        assert session.token_hash == session_service.hash_token(token)
        assert session.token_hash != token
        assert session.store_id == store_a.id

    def test_validate_returns_context(self, store_a, token_a):
        context = session_service.validate_session(token_a)
        assert context.store_id == store_a.id
        assert context.user.id == store_a.user_id

    def test_expired_session(self, token_a):
        _session_for(token_a).expires_at = utcnow() - timedelta(seconds=1)
        db.session.commit()
        assert session_service.validate_session(token_a) is None

    def test_idle_session_is_revoked(self, app, token_a):
        idle = timedelta(minutes=app.config["SESSION_IDLE_MINUTES"] + 1)
        _session_for(token_a).last_used_at = utcnow() - idle
        db.session.commit()

        assert session_service.validate_session(token_a) is None
        session = _session_for(token_a)
        assert session.is_revoked
        assert session.revoked_reason == "Idle timeout"

    def test_deactivated_user_session_is_revoked(self, store_a, token_a):
        store_a.owner.is_active = False
        db.session.commit()
        assert session_service.validate_session(token_a) is None
        assert _session_for(token_a).revoked_reason == "User account deactivated"

    def test_revoke(self, token_a):
        assert session_service.revoke_session(token_a) is True
        assert session_service.revoke_session(token_a) is False
        assert session_service.validate_session(token_a) is None

    def test_create_for_unknown_user(self, db_session):
        with pytest.raises(ValueError):
            session_service.create_session(424242)


class TestCleanup:

    def test_removes_only_old_dead_sessions(self, store_a):
        _, old_revoked = session_service.create_session(store_a.user_id)
        _, fresh_revoked = session_service.create_session(store_a.user_id)
        _, active = session_service.create_session(store_a.user_id)

        session_service.revoke_session(old_revoked)
        session_service.revoke_session(fresh_revoked)
        _session_for(old_revoked).created_at = utcnow() - timedelta(days=40)
        db.session.commit()

        assert session_service.cleanup_expired_sessions(retention_days=30) == 1
        remaining = {s.token_hash for s in db.session.query(SessionToken).all()}
        assert session_service.hash_token(old_revoked) not in remaining
        assert session_service.hash_token(fresh_revoked) in remaining
        assert session_service.hash_token(active) in remaining
