from datetime import datetime, timedelta, timezone

import jwt
import pytest
from sqlalchemy.exc import SQLAlchemyError

from models import storage
from models.refresh_token import RefreshToken
from services import auth_service, token_store, users_service
from services.exceptions import (
    InvalidToken,
    PasswordOrEmailIncorrect,
    RefreshTokenNotFound,
    TokenExpired,
    UserAlreadyExists,
    UserCouldNotBeCreated,
    UserNotFound,
)
from tests.conftest import PASSWORD

OTHER_SECRET = "not-the-stored-secret-but-long-enough"


def _rows(user_id):
    return storage.get_session().query(RefreshToken).filter(RefreshToken.user_id == user_id).all()


def _active_rows(user_id):
    return [row for row in _rows(user_id) if not row.is_revoked]


def _refresh_token(user_id, secret, expires_in=timedelta(days=1), **extra):
    now = datetime.now(timezone.utc)
    claims = {"sub": str(user_id), "iat": now, "exp": now + expires_in}
    claims.update(extra)
    return jwt.encode(claims, secret, algorithm="HS256")


class TestSignUp:
    def test_returns_user_without_password(self, app_ctx):
        user = auth_service.sign_up("Ada", "Lovelace", "a@x.com", PASSWORD)
        assert user["id"] == 1
        assert user["email"] == "a@x.com"
        assert "password_hash" not in user

    def test_duplicate_email(self, user):
        with pytest.raises(UserAlreadyExists):
            auth_service.sign_up("Other", "Person", "a@x.com", PASSWORD)

    def test_email_is_case_sensitive(self, user):
        other = auth_service.sign_up("Ada", "Upper", "A@x.com", PASSWORD)
        assert other["id"] != user.id

    def test_storage_failure(self, app_ctx, monkeypatch):
        def failing_save():
            raise SQLAlchemyError("disk I/O error")

        monkeypatch.setattr(storage, "save", failing_save)
        with pytest.raises(UserCouldNotBeCreated) as exc:
            auth_service.sign_up("Ada", "Lovelace", "a@x.com", PASSWORD)
        assert exc.value.status == 400


class TestLogin:
    def test_first_login_creates_one_active_row(self, user):
        result = auth_service.login("a@x.com", PASSWORD)

        rows = _rows(user.id)
        assert len(rows) == 1
        assert rows[0].is_revoked is False
        assert rows[0].type == "refresh_token"
        assert len(rows[0].token) == 32
        assert jwt.decode(result.token.refresh_token, rows[0].token, algorithms=["HS256"])["sub"] == str(user.id)

    def test_repeated_login_reuses_secret(self, user):
        first = auth_service.login("a@x.com", PASSWORD)
        second = auth_service.login("a@x.com", PASSWORD)

        rows = _rows(user.id)
        assert len(rows) == 1
        secret = rows[0].token
        for result in (first, second):
            jwt.decode(result.token.refresh_token, secret, algorithms=["HS256"])
        assert first.token.access_token != second.token.access_token
        assert first.token.refresh_token != second.token.refresh_token

    def test_token_windows(self, user):
        result = auth_service.login("a@x.com", PASSWORD)
        assert result.token.expires_in == 3600
        assert result.token.refresh_expires_in == 30 * 24 * 3600
        assert result.status == 200

    def test_access_token_signed_with_server_secret(self, app_ctx, user):
        result = auth_service.login("a@x.com", PASSWORD)
        claims = jwt.decode(result.token.access_token, app_ctx.config["JWT_SECRET"], algorithms=["HS256"])
        assert claims["data"] == {"id": user.id, "username": "Ada"}

    def test_password_never_returned(self, user):
        result = auth_service.login("a@x.com", PASSWORD)
        assert "password_hash" not in result.user
        assert "password" not in result.user
        assert result.user["first_name"] == "Ada"

    def test_wrong_password_is_400(self, user):
        with pytest.raises(PasswordOrEmailIncorrect) as exc:
            auth_service.login("a@x.com", "wrong")
        assert exc.value.status == 400
        assert _rows(user.id) == []

    def test_unknown_email_is_404_with_same_message(self, user):
        with pytest.raises(PasswordOrEmailIncorrect) as missing:
            auth_service.login("nobody@x.com", "anything")
        with pytest.raises(PasswordOrEmailIncorrect) as wrong:
            auth_service.login("a@x.com", "wrong")
        assert missing.value.status == 404
        assert missing.value.message == wrong.value.message


class TestCreateToken:
    def test_unknown_user(self, app_ctx):
        with pytest.raises(UserNotFound):
            auth_service.create_token(999)

    def test_new_secret_after_revocation(self, user):
        auth_service.create_token(user.id)
        old = token_store.find_active(user.id)
        token_store.revoke(old)

        auth_service.create_token(user.id)

        new = token_store.find_active(user.id)
        assert new.id != old.id
        assert new.token != old.token
        assert len(_rows(user.id)) == 2
        assert len(_active_rows(user.id)) == 1

    def test_concurrent_first_issue_keeps_one_active_row(self, user, monkeypatch):
        auth_service.create_token(user.id)
        existing = token_store.find_active(user.id)

        real_find_active = token_store.find_active
        calls = []

        def stale_find_active(user_id):
            # the first lookup misses, as if a concurrent request had not committed yet
            calls.append(user_id)
            if len(calls) == 1:
                return None
            return real_find_active(user_id)

        monkeypatch.setattr(token_store, "find_active", stale_find_active)

        result = auth_service.create_token(user.id)

        assert len(calls) == 2
        assert len(_active_rows(user.id)) == 1
        jwt.decode(result.refresh_token, existing.token, algorithms=["HS256"])


class TestTokenRefresh:
    def test_reissues_with_same_secret(self, user):
        login = auth_service.login("a@x.com", PASSWORD)
        secret = token_store.find_active(user.id).token

        result = auth_service.token_refresh(login.token.refresh_token)

        assert result.user["id"] == user.id
        assert "password_hash" not in result.user
        jwt.decode(result.token.refresh_token, secret, algorithms=["HS256"])
        assert len(_rows(user.id)) == 1
        assert token_store.find_active(user.id).is_revoked is False

    def test_refresh_token_can_be_presented_again(self, user):
        login = auth_service.login("a@x.com", PASSWORD)
        auth_service.token_refresh(login.token.refresh_token)
        auth_service.token_refresh(login.token.refresh_token)
        assert len(_active_rows(user.id)) == 1

    def test_garbage_token(self, app_ctx):
        with pytest.raises(InvalidToken):
            auth_service.token_refresh("not-a-jwt")

    def test_token_without_subject(self, user):
        token = jwt.encode({"foo": "bar"}, OTHER_SECRET, algorithm="HS256")
        with pytest.raises(InvalidToken):
            auth_service.token_refresh(token)

    def test_non_numeric_subject(self, user):
        with pytest.raises(InvalidToken):
            auth_service.token_refresh(_refresh_token("abc", OTHER_SECRET))

    @pytest.mark.parametrize("subject", ["99999999999999999999999", str(2 ** 63), float("inf"), "-5"])
    def test_subject_outside_id_range(self, user, subject):
        token = jwt.encode({"sub": subject}, OTHER_SECRET, algorithm="HS256")
        with pytest.raises(InvalidToken):
            auth_service.token_refresh(token)

    @pytest.mark.parametrize("subject", [0, "0", ""])
    def test_empty_or_zero_subject(self, user, subject):
        token = jwt.encode({"sub": subject}, OTHER_SECRET, algorithm="HS256")
        with pytest.raises(InvalidToken):
            auth_service.token_refresh(token)

    def test_user_gone_after_verification(self, user, monkeypatch):
        login = auth_service.login("a@x.com", PASSWORD)
        # the token row verifies, but the user lookup comes back empty
        monkeypatch.setattr(storage, "get", lambda cls, id: None)

        with pytest.raises(UserNotFound) as exc:
            auth_service.token_refresh(login.token.refresh_token)
        assert exc.value.status == 404
        assert token_store.find_active(user.id) is not None

    def test_no_active_row(self, user):
        with pytest.raises(RefreshTokenNotFound):
            auth_service.token_refresh(_refresh_token(user.id, OTHER_SECRET))

    def test_tampered_token_revokes_row(self, user):
        auth_service.login("a@x.com", PASSWORD)
        stored = token_store.find_active(user.id)

        with pytest.raises(InvalidToken):
            auth_service.token_refresh(_refresh_token(user.id, OTHER_SECRET))

        assert token_store.find_active(user.id) is None
        assert storage.get(RefreshToken, stored.id).is_revoked is True

    def test_expired_token_revokes_row(self, user):
        auth_service.login("a@x.com", PASSWORD)
        stored = token_store.find_active(user.id)
        expired = _refresh_token(user.id, stored.token, expires_in=timedelta(seconds=-60))

        with pytest.raises(TokenExpired):
            auth_service.token_refresh(expired)

        assert storage.get(RefreshToken, stored.id).is_revoked is True

    def test_revoked_lineage_is_dead(self, user):
        login = auth_service.login("a@x.com", PASSWORD)
        with pytest.raises(InvalidToken):
            auth_service.token_refresh(_refresh_token(user.id, OTHER_SECRET))

        # the once-valid token now has no active row to verify against
        with pytest.raises(RefreshTokenNotFound):
            auth_service.token_refresh(login.token.refresh_token)

        # a fresh login starts a new lineage that the old token cannot use
        relogin = auth_service.login("a@x.com", PASSWORD)
        with pytest.raises(InvalidToken):
            auth_service.token_refresh(login.token.refresh_token)
        with pytest.raises(RefreshTokenNotFound):
            auth_service.token_refresh(relogin.token.refresh_token)

    def test_user_lookup_by_id(self, user):
        assert users_service.get_user_by_id(user.id).email == "a@x.com"


def test_password_is_write_only(user):
    with pytest.raises(AttributeError):
        user.password
