"""
Identity and session credentials.

A credential is a signed, timestamped payload carrying the user's id, role and status at issuance. Verification
re-reads the user, so a credential issued before a role or status change stops working.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from django.conf import settings
from django.contrib.auth.password_validation import validate_password
from django.core import signing
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email

from formforge.core.service.operation import service_operation
from formforge.core.service.policy_service import Actor
from formforge.core.service.result import ErrorKind
from formforge.core.service.result import ServiceException
from formforge.core.service.store import ResourceStore
from formforge.users.models import Role
from formforge.users.models import User
from formforge.users.models import UserStatus

logger = logging.getLogger(__name__)

SESSION_SALT = "formforge.session"


@dataclass(frozen=True)
class Session:
    user: User
    token: str


class SessionService:
    def __init__(self, store: ResourceStore, max_age: int | None = None):
        self.store = store
        self.max_age = max_age if max_age is not None else settings.FORMFORGE_SESSION_MAX_AGE

    def issue(self, user: User) -> str:
        payload = {"uid": str(user.id), "role": user.role, "status": user.status}
        return signing.dumps(payload, salt=SESSION_SALT, compress=True)

    @service_operation
    def verify(self, credential: str | None) -> Actor:
        if not credential:
            raise ServiceException(ErrorKind.UNAUTHENTICATED, "No credential provided")

        try:
            payload = signing.loads(credential, salt=SESSION_SALT, max_age=self.max_age)
        except signing.SignatureExpired:
            raise ServiceException(ErrorKind.UNAUTHENTICATED, "Credential has expired") from None
        except signing.BadSignature:
            raise ServiceException(ErrorKind.UNAUTHENTICATED, "Invalid credential") from None

        try:
            user_id = UUID(payload["uid"])
        except (KeyError, TypeError, ValueError):
            raise ServiceException(ErrorKind.UNAUTHENTICATED, "Invalid credential") from None

        user = self.store.get_user(user_id)
        if user is None:
            raise ServiceException(ErrorKind.UNAUTHENTICATED, "User not found")

        if user.role != payload.get("role") or user.status != payload.get("status"):
            logger.info(
                "Stale credential rejected",
                extra={"user_id": user.id, "issued_role": payload.get("role"), "issued_status": payload.get("status")},
            )
            raise ServiceException(ErrorKind.STALE_CREDENTIAL, "Credential no longer matches the user's role or status")

        return Actor.from_user(user)

    @service_operation
    def register(self, email: str, name: str, password: str) -> Session:
        email = email.strip()
        try:
            validate_email(email)
        except DjangoValidationError:
            raise ServiceException(ErrorKind.VALIDATION, "Enter a valid email address", field="email") from None

        if self.store.email_taken(email):
            raise ServiceException(ErrorKind.VALIDATION, "User already exists", field="email")

        try:
            validate_password(password, user=User(email=email, name=name))
        except DjangoValidationError as exc:
            raise ServiceException(ErrorKind.VALIDATION, " ".join(exc.messages), field="password") from None

        user = self.store.create_user(
            email=email, name=name, password=password, role=Role.REGULAR, status=UserStatus.ACTIVE
        )
        logger.info("User registered", extra={"user_id": user.id})
        return Session(user=user, token=self.issue(user))

    @service_operation
    def login(self, email: str, password: str) -> Session:
        user = self.store.get_user_by_email(email.strip())
        if user is None or not user.check_password(password):
            logger.info("Login failed", extra={"known_email": user is not None})
            raise ServiceException(ErrorKind.UNAUTHENTICATED, "Invalid credentials")

        if user.status != UserStatus.ACTIVE:
            logger.info("Login refused for inactive user", extra={"user_id": user.id, "status": user.status})
            raise ServiceException(ErrorKind.FORBIDDEN, "User is not active")

        logger.info("User logged in", extra={"user_id": user.id})
        return Session(user=user, token=self.issue(user))
