import factory
from factory.django import DjangoModelFactory

from formforge.users.models import Role
from formforge.users.models import User
from formforge.users.models import UserStatus

DEFAULT_PASSWORD = "correct-horse-battery-staple"


class UserFactory(DjangoModelFactory[User]):
    class Meta:
        model = User
        django_get_or_create = ("email",)

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    name = factory.Faker("name")
    password = factory.django.Password(DEFAULT_PASSWORD)
    role = Role.REGULAR
    status = UserStatus.ACTIVE


class AdminUserFactory(UserFactory):
    role = Role.ADMIN
