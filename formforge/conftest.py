import pytest
from django.test import Client

from formforge.core.factories import TemplateFactory
from formforge.core.models import Template
from formforge.core.models import TemplateStatus
from formforge.core.service.policy_service import Actor
from formforge.core.service.session_service import SessionService
from formforge.core.service.store import ResourceStore
from formforge.users.factories import AdminUserFactory
from formforge.users.factories import UserFactory
from formforge.users.models import User


@pytest.fixture(autouse=True)
def _fast_password_hashing(settings) -> None:
    settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]


@pytest.fixture
def store() -> ResourceStore:
    return ResourceStore()


@pytest.fixture
def user(db) -> User:
    return UserFactory.create()


@pytest.fixture
def other_user(db) -> User:
    return UserFactory.create()


@pytest.fixture
def admin_user(db) -> User:
    return AdminUserFactory.create()


@pytest.fixture
def actor(user: User) -> Actor:
    return Actor.from_user(user)


@pytest.fixture
def other_actor(other_user: User) -> Actor:
    return Actor.from_user(other_user)


@pytest.fixture
def admin_actor(admin_user: User) -> Actor:
    return Actor.from_user(admin_user)


@pytest.fixture
def template(user: User) -> Template:
    return TemplateFactory.create(author=user)


@pytest.fixture
def published_template(user: User) -> Template:
    return TemplateFactory.create(author=user, status=TemplateStatus.PUBLISHED)


@pytest.fixture
def auth_client(store: ResourceStore):
    """Build a test client that sends a bearer credential for the given user."""

    def build(user: User) -> Client:
        token = SessionService(store).issue(user)
        return Client(headers={"Authorization": f"Bearer {token}"})

    return build
