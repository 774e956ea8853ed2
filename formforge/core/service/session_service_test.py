import datetime

import pytest
from django.core import signing
from freezegun import freeze_time

from formforge.core.service.result import ErrorKind
from formforge.core.service.session_service import SESSION_SALT
from formforge.core.service.session_service import SessionService
from formforge.core.service.store import ResourceStore
from formforge.users.factories import DEFAULT_PASSWORD
from formforge.users.factories import UserFactory
from formforge.users.models import Role
from formforge.users.models import User
from formforge.users.models import UserStatus

STRONG_PASSWORD = "Plover-Umbrella-1987"


@pytest.fixture
def sessions(store: ResourceStore) -> SessionService:
    return SessionService(store)


def test_issued_credential_verifies_to_the_user(sessions: SessionService, user: User) -> None:
    result = sessions.verify(sessions.issue(user))

    assert result.ok
    assert result.value is not None
    assert result.value.id == user.id
    assert result.value.role == Role.REGULAR
    assert result.value.status == UserStatus.ACTIVE


@pytest.mark.django_db
@pytest.mark.parametrize(
    ("credential", "message"),
    [
        (None, "No credential provided"),
        ("", "No credential provided"),
        ("not-a-credential", "Invalid credential"),
        (signing.dumps({"role": "regular"}, salt="some.other.salt"), "Invalid credential"),
        (signing.dumps({"role": "regular"}, salt=SESSION_SALT), "Invalid credential"),
        (signing.dumps({"uid": "not-a-uuid"}, salt=SESSION_SALT), "Invalid credential"),
    ],
)
def test_unusable_credentials(sessions: SessionService, credential: str | None, message: str) -> None:
    result = sessions.verify(credential)

    assert result.error is not None
    assert result.error.kind == ErrorKind.UNAUTHENTICATED
    assert result.error.message == message


def test_credential_expires(sessions: SessionService, user: User) -> None:
    issued_at = datetime.datetime(2024, 3, 1, 12, 0, tzinfo=datetime.UTC)
    with freeze_time(issued_at):
        token = sessions.issue(user)

    with freeze_time(issued_at + datetime.timedelta(hours=23)):
        assert sessions.verify(token).ok

    with freeze_time(issued_at + datetime.timedelta(hours=25)):
        result = sessions.verify(token)
    assert result.error is not None
    assert result.error.kind == ErrorKind.UNAUTHENTICATED
    assert result.error.message == "Credential has expired"


def test_credential_for_deleted_user(sessions: SessionService, user: User) -> None:
    token = sessions.issue(user)
    user.delete()

    result = sessions.verify(token)
    assert result.error is not None
    assert result.error.kind == ErrorKind.UNAUTHENTICATED
    assert result.error.message == "User not found"


@pytest.mark.parametrize(
    ("field", "value"),
    [("role", Role.ADMIN), ("status", UserStatus.SUSPENDED)],
)
def test_credential_goes_stale_when_role_or_status_changes(
    sessions: SessionService, user: User, field: str, value: str
) -> None:
    token = sessions.issue(user)
    setattr(user, field, value)
    user.save()

    result = sessions.verify(token)
    assert result.error is not None
    assert result.error.kind == ErrorKind.STALE_CREDENTIAL

    # a fresh credential reflects the new state
    user.status = UserStatus.ACTIVE
    user.save()
    assert sessions.verify(sessions.issue(user)).ok


@pytest.mark.django_db
def test_register(sessions: SessionService) -> None:
    result = sessions.register("new@example.com", "New Person", STRONG_PASSWORD)

    assert result.ok
    session = result.unwrap()
    assert session.user.role == Role.REGULAR
    assert session.user.status == UserStatus.ACTIVE
    assert session.user.check_password(STRONG_PASSWORD)
    assert sessions.verify(session.token).unwrap().id == session.user.id


@pytest.mark.django_db
@pytest.mark.parametrize(
    ("email", "password", "field"),
    [
        ("not-an-email", STRONG_PASSWORD, "email"),
        ("taken@example.com", STRONG_PASSWORD, "email"),
        ("TAKEN@example.com", STRONG_PASSWORD, "email"),
        ("new@example.com", "short", "password"),
        ("new@example.com", "12345678901", "password"),
    ],
)
def test_register_validation(sessions: SessionService, email: str, password: str, field: str) -> None:
    UserFactory.create(email="taken@example.com")

    result = sessions.register(email, "Someone", password)

    assert result.error is not None
    assert result.error.kind == ErrorKind.VALIDATION
    assert result.error.field == field
    assert not User.objects.filter(email="new@example.com").exists()


def test_login(sessions: SessionService, user: User) -> None:
    session = sessions.login(user.email.upper(), DEFAULT_PASSWORD).unwrap()

    assert session.user == user
    assert sessions.verify(session.token).ok


@pytest.mark.parametrize(
    ("email", "password"),
    [("nobody@example.com", DEFAULT_PASSWORD), (None, "wrong password")],
)
def test_login_with_bad_credentials(sessions: SessionService, user: User, email: str | None, password: str) -> None:
    result = sessions.login(email or user.email, password)

    assert result.error is not None
    assert result.error.kind == ErrorKind.UNAUTHENTICATED
    assert result.error.message == "Invalid credentials"


@pytest.mark.django_db
def test_suspended_user_cannot_log_in(sessions: SessionService) -> None:
    suspended = UserFactory.create(status=UserStatus.SUSPENDED)

    result = sessions.login(suspended.email, DEFAULT_PASSWORD)

    assert result.error is not None
    assert result.error.kind == ErrorKind.FORBIDDEN
