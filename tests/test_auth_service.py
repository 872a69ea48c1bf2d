import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import select

from storefront.models.user import User
from storefront.services.auth import AuthService, RegistrationError


@pytest.fixture
def service(session, token_service):
    return AuthService(session, token_service)


class TestRegister:
    def test_register_stores_hash_not_raw_password(self, service):
        user, error = service.register("alice", "a@x.com", "pw123456")

        assert error is None
        assert user.id is not None
        stored = service.find_by_username("alice")
        assert stored.email == "a@x.com"
        assert stored.password_hash != "pw123456"
        assert service.verify_password("alice", "pw123456") is True

    def test_duplicate_username_is_reported(self, service, session):
        service.register("alice", "a@x.com", "pw123456")

        user, error = service.register("alice", "other@x.com", "pw123456")

        assert user is None
        assert error is RegistrationError.DUPLICATE_USERNAME
        assert len(session.exec(select(User)).all()) == 1

    def test_duplicate_email_is_reported(self, service, session):
        service.register("alice", "a@x.com", "pw123456")

        user, error = service.register("bob", "a@x.com", "pw123456")

        assert user is None
        assert error is RegistrationError.DUPLICATE_EMAIL
        assert error.message != RegistrationError.DUPLICATE_USERNAME.message

    def test_username_is_checked_before_email(self, service):
        service.register("alice", "a@x.com", "pw123456")

        _, error = service.register("alice", "a@x.com", "pw123456")

        assert error is RegistrationError.DUPLICATE_USERNAME

    def test_save_failure_is_reported_as_system_error(self, service, monkeypatch):
        def broken_create(user):
            raise OperationalError("INSERT INTO user", {}, Exception("database is locked"))

        monkeypatch.setattr(service.repo, "create", broken_create)

        user, error = service.register("alice", "a@x.com", "pw123456")

        assert user is None
        assert error is RegistrationError.SYSTEM_ERROR
        assert "locked" not in error.message


class TestVerifyPassword:
    def test_wrong_password_is_false(self, service):
        service.register("alice", "a@x.com", "pw123456")

        assert service.verify_password("alice", "wrong-password") is False

    def test_unknown_user_is_false(self, service):
        assert service.verify_password("nobody", "pw123456") is False

    def test_find_unknown_user_returns_none(self, service):
        assert service.find_by_username("nobody") is None


class TestLogin:
    def test_login_issues_token_for_user(self, service, token_service):
        user, _ = service.register("alice", "a@x.com", "pw123456")

        logged_in, token = service.login("alice", "pw123456")

        assert logged_in.id == user.id
        assert token_service.validate(token, "alice") is True
        assert token_service.extract_user_id(token) == user.id

    def test_login_with_bad_credentials_returns_none(self, service):
        service.register("alice", "a@x.com", "pw123456")

        assert service.login("alice", "nope") is None
        assert service.login("nobody", "pw123456") is None
