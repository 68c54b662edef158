# =============================================================================
# tests/test_auth_service.py - Registration, login, verification, refresh
# =============================================================================
# Runs AuthService against in-memory repositories.
# =============================================================================

from datetime import timedelta

import pytest

from todo_api.core.exceptions import (
    EmailNotVerifiedError,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    UserAlreadyExistsError,
)
from todo_api.core.tenant_context import get_bound_tenant
from todo_api.models.user import UserRole
from todo_api.services.auth import AuthService

PASSWORD = "a-long-password"


@pytest.fixture
def service(tenant_repo, user_repo, sender, token_service, password_service, ids, clock):
    return AuthService(
        tenant_repo=tenant_repo,
        user_repo=user_repo,
        sender=sender,
        tokens=token_service,
        passwords=password_service,
        ids=ids,
        now=clock,
    )


@pytest.fixture
def registered(service, fake_db):
    return service.register(fake_db, email="a@b.com", password=PASSWORD, name="X")


class TestRegister:

    def test_creates_one_tenant_and_one_unverified_admin(self, registered, tenant_repo, user_repo, clock, fake_db):
        assert len(tenant_repo.rows) == 1
        assert len(user_repo.rows) == 1

        tenant = tenant_repo.rows[registered.tenant_id]
        user = user_repo.rows[registered.user_id]

        assert tenant.name == "X"
        assert user.tenant_id == tenant.id
        assert user.email == "a@b.com"
        assert user.name == "X"
        assert user.role == UserRole.ADMIN
        assert user.email_verified is False
        assert user.verification_token is not None
        assert user.verification_token_expires_at == clock() + timedelta(hours=24)
        assert user.password_hash != PASSWORD
        assert fake_db.commits == 1

    def test_slug_is_local_part_plus_tenant_prefix(self, registered, tenant_repo):
        tenant = tenant_repo.rows[registered.tenant_id]
        assert tenant.slug == f"a-{registered.tenant_id[:8]}"
        assert registered.tenant_slug == tenant.slug

    def test_binds_session_to_new_tenant(self, registered, fake_db):
        assert get_bound_tenant(fake_db) == registered.tenant_id

    def test_sends_verification_email_with_token(self, registered, sender, user_repo):
        user = user_repo.rows[registered.user_id]
        assert sender.sent == [("a@b.com", user.verification_token)]
        assert registered.message.startswith("Registration successful")

    def test_email_failure_does_not_fail_registration(self, service, sender, fake_db, user_repo):
        sender.fail = True

        result = service.register(fake_db, email="c@d.com", password=PASSWORD, name="Y")

        assert result.user_id in user_repo.rows
        assert sender.sent == []

    def test_constraint_violation_is_user_already_exists(self, service, tenant_repo, ids, fake_db):
        # Pre-create the slug the next registration will compute
        next_tenant_id = f"{ids.prefix}{ids.count + 1:08d}"
        tenant_repo.create(fake_db, id="existing", name="Other", slug=f"dup-{next_tenant_id[:8]}")

        with pytest.raises(UserAlreadyExistsError):
            service.register(fake_db, email="dup@b.com", password=PASSWORD, name="Dup")

        assert fake_db.rollbacks == 1


class TestLogin:

    def test_login_before_verification_fails(self, service, registered, fake_db):
        with pytest.raises(EmailNotVerifiedError):
            service.login(fake_db, tenant_slug=registered.tenant_slug, email="a@b.com", password=PASSWORD)

    def test_login_after_verification_issues_both_tokens(self, service, registered, sender, token_service, fake_db):
        service.verify_email(fake_db, token=sender.token_for("a@b.com"))

        result = service.login(fake_db, tenant_slug=registered.tenant_slug, email="a@b.com", password=PASSWORD)

        access = token_service.validate(result.access_token)
        refresh = token_service.validate(result.refresh_token)
        assert access.user_id == refresh.user_id == registered.user_id
        assert access.tenant_id == registered.tenant_id
        assert access.role == "admin"
        assert result.user.email_verified is True
        assert result.user.id == registered.user_id

    def test_wrong_password_is_invalid_credentials(self, service, registered, sender, fake_db):
        service.verify_email(fake_db, token=sender.token_for("a@b.com"))

        with pytest.raises(InvalidCredentialsError):
            service.login(fake_db, tenant_slug=registered.tenant_slug, email="a@b.com", password="wrong-password")

    def test_unknown_email_is_invalid_credentials(self, service, registered, fake_db):
        with pytest.raises(InvalidCredentialsError):
            service.login_with_tenant(fake_db, tenant_id=registered.tenant_id, email="nobody@b.com", password=PASSWORD)

    def test_unknown_slug_is_invalid_credentials(self, service, registered, fake_db):
        with pytest.raises(InvalidCredentialsError):
            service.login(fake_db, tenant_slug="no-such-tenant", email="a@b.com", password=PASSWORD)

    def test_user_of_other_tenant_cannot_log_in(self, service, registered, sender, fake_db):
        other = service.register(fake_db, email="z@b.com", password=PASSWORD, name="Z")
        service.verify_email(fake_db, token=sender.token_for("a@b.com"))

        with pytest.raises(InvalidCredentialsError):
            service.login(fake_db, tenant_slug=other.tenant_slug, email="a@b.com", password=PASSWORD)


class TestVerifyEmail:

    def test_marks_verified_and_clears_token(self, service, registered, sender, user_repo, fake_db):
        result = service.verify_email(fake_db, token=sender.token_for("a@b.com"))

        user = user_repo.rows[registered.user_id]
        assert result.success is True
        assert user.email_verified is True
        assert user.verification_token is None
        assert user.verification_token_expires_at is None

    def test_unknown_token_is_invalid(self, service, registered, fake_db):
        with pytest.raises(InvalidTokenError):
            service.verify_email(fake_db, token="unknown")

    def test_expired_token(self, service, registered, sender, clock, fake_db):
        clock.advance(hours=24, seconds=1)

        with pytest.raises(TokenExpiredError):
            service.verify_email(fake_db, token=sender.token_for("a@b.com"))

    def test_token_is_single_use(self, service, registered, sender, fake_db):
        token = sender.token_for("a@b.com")
        service.verify_email(fake_db, token=token)

        with pytest.raises(InvalidTokenError):
            service.verify_email(fake_db, token=token)


class TestRefreshToken:

    def test_reissues_pair_with_same_claims(self, service, token_service):
        refresh = token_service.issue_refresh("user-1", "tenant-1", "a@example.com", "member")

        result = service.refresh_token(refresh_token=refresh)

        for token in (result.access_token, result.refresh_token):
            claims = token_service.validate(token)
            assert (claims.user_id, claims.tenant_id, claims.email, claims.role) == (
                "user-1", "tenant-1", "a@example.com", "member"
            )

    def test_does_not_consult_user_store(self, service, token_service, user_repo):
        refresh = token_service.issue_refresh("ghost", "tenant-1", "ghost@example.com", "member")

        result = service.refresh_token(refresh_token=refresh)

        assert user_repo.rows == {}
        assert token_service.validate(result.access_token).user_id == "ghost"

    def test_invalid_refresh_token(self, service):
        with pytest.raises(InvalidTokenError):
            service.refresh_token(refresh_token="garbage")
