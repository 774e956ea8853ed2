import pytest

from formforge.users.models import Role
from formforge.users.models import User
from formforge.users.models import UserStatus


@pytest.mark.django_db
def test_create_user_defaults() -> None:
    user = User.objects.create_user(email="someone@EXAMPLE.com", password="Plover-Umbrella-1987", name="Someone")

    assert user.email == "someone@example.com"
    assert user.role == Role.REGULAR
    assert user.status == UserStatus.ACTIVE
    assert not user.is_admin
    assert user.check_password("Plover-Umbrella-1987")
    assert str(user) == "someone@example.com"


@pytest.mark.django_db
def test_create_superuser_is_admin() -> None:
    user = User.objects.create_superuser(email="root@example.com", password="Plover-Umbrella-1987")

    assert user.is_admin
    assert user.is_staff


def test_create_user_requires_email() -> None:
    with pytest.raises(ValueError, match="email"):
        User.objects.create_user(email="", password="x")
