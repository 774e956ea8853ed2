import logging
from collections.abc import Mapping
from typing import Any
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email

from formforge.core.service.operation import require
from formforge.core.service.operation import service_operation
from formforge.core.service.policy_service import Action
from formforge.core.service.policy_service import Actor
from formforge.core.service.policy_service import UserAccount
from formforge.core.service.policy_service import UserDirectory
from formforge.core.service.result import ErrorKind
from formforge.core.service.result import ServiceException
from formforge.core.service.result import not_found
from formforge.core.service.store import ResourceStore
from formforge.core.service.store import UserStatistics
from formforge.users.models import Role
from formforge.users.models import User
from formforge.users.models import UserStatus

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "email", "role", "status")


class UserOrchestrator:
    def __init__(self, store: ResourceStore):
        self.store = store

    def _load(self, user_id: UUID) -> User:
        user = self.store.get_user(user_id)
        if user is None:
            raise not_found("User")
        return user

    @service_operation
    def get_profile(self, user_id: UUID) -> User:
        """Public profile lookup; no credential required."""
        return self._load(user_id)

    @service_operation
    def list_users(self, actor: Actor) -> list[User]:
        require(actor, UserDirectory(), Action.LIST)
        return self.store.list_users()

    @service_operation
    def search(self, actor: Actor, *, name: str | None = None, email: str | None = None) -> list[User]:
        require(actor, UserDirectory(), Action.SEARCH)
        return self.store.search_users(name=(name or "").strip(), email=(email or "").strip())

    @service_operation
    def update(self, actor: Actor, user_id: UUID, changes: Mapping[str, Any]) -> User:
        require(actor, UserDirectory(), Action.UPDATE)
        user = self._load(user_id)

        unknown = set(changes) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ServiceException(ErrorKind.VALIDATION, "Field cannot be updated", field=sorted(unknown)[0])

        if "name" in changes:
            user.name = (changes["name"] or "").strip()
        if "email" in changes:
            user.email = self._validated_email(changes["email"], user)
        if "role" in changes:
            if changes["role"] not in Role.values:
                raise ServiceException(ErrorKind.VALIDATION, f'Unknown role "{changes["role"]}"', field="role")
            user.role = changes["role"]
        if "status" in changes:
            if changes["status"] not in UserStatus.values:
                raise ServiceException(ErrorKind.VALIDATION, f'Unknown status "{changes["status"]}"', field="status")
            user.status = changes["status"]

        self.store.save_user(user)
        logger.info(
            "User updated by admin",
            extra={"user_id": actor.id, "target_user_id": user.id, "fields": sorted(changes)},
        )
        return user

    def _validated_email(self, email: str | None, user: User) -> str:
        email = (email or "").strip()
        try:
            validate_email(email)
        except DjangoValidationError:
            raise ServiceException(ErrorKind.VALIDATION, "Enter a valid email address", field="email") from None
        if self.store.email_taken(email, exclude_id=user.id):
            raise ServiceException(ErrorKind.VALIDATION, "Email address already in use", field="email")
        return email

    @service_operation
    def delete(self, actor: Actor, user_id: UUID) -> None:
        require(actor, UserDirectory(), Action.DELETE)
        user = self._load(user_id)
        self.store.delete_user(user)
        logger.info("User deleted by admin", extra={"user_id": actor.id, "target_user_id": user_id})

    @service_operation
    def statistics(self, actor: Actor) -> UserStatistics:
        require(actor, UserAccount(actor.id), Action.READ)
        return self.store.user_statistics(actor.id)
