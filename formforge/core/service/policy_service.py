"""
Authorization decisions for templates, forms and user accounts.

`authorize` is a pure function: it is handed the acting user and a snapshot of the target resource, and never touches
the database. Callers build the snapshot from freshly loaded rows on every request.
"""

import logging
from dataclasses import dataclass
from dataclasses import field
from enum import StrEnum
from uuid import UUID

from formforge.core.models import Template
from formforge.core.models import TemplateStatus
from formforge.core.service.result import ErrorKind
from formforge.core.service.result import ServiceError
from formforge.users.models import Role
from formforge.users.models import User
from formforge.users.models import UserStatus

logger = logging.getLogger(__name__)


class Action(StrEnum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    READ_SUBMISSIONS = "read_submissions"
    MANAGE_COLLABORATORS = "manage_collaborators"
    LIST = "list"
    SEARCH = "search"


@dataclass(frozen=True)
class Actor:
    id: UUID
    role: str
    status: str

    @classmethod
    def from_user(cls, user: User) -> "Actor":
        return cls(id=user.id, role=user.role, status=user.status)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


@dataclass(frozen=True)
class TemplateResource:
    author_id: UUID
    status: str
    admin_ids: frozenset[UUID] = field(default_factory=frozenset)

    @classmethod
    def from_template(cls, template: Template) -> "TemplateResource":
        return cls(
            author_id=template.author_id,
            status=template.status,
            admin_ids=frozenset(admin.id for admin in template.admins.all()),
        )

    def is_managed_by(self, user_id: UUID) -> bool:
        return user_id == self.author_id or user_id in self.admin_ids


@dataclass(frozen=True)
class TemplateCatalog:
    """Every template in the system. Target of template creation and the admin listing."""


@dataclass(frozen=True)
class NewForm:
    """A form about to be submitted against `template`."""

    template: TemplateResource


@dataclass(frozen=True)
class FormResource:
    user_id: UUID
    template: TemplateResource


@dataclass(frozen=True)
class UserDirectory:
    """All user accounts."""


@dataclass(frozen=True)
class UserAccount:
    user_id: UUID


type Resource = TemplateCatalog | TemplateResource | NewForm | FormResource | UserDirectory | UserAccount


@dataclass(frozen=True)
class Decision:
    error: ServiceError | None = None

    @property
    def permitted(self) -> bool:
        return self.error is None


PERMIT = Decision()


def deny(kind: ErrorKind, message: str) -> Decision:
    return Decision(error=ServiceError(kind=kind, message=message))


def authorize(actor: Actor | None, resource: Resource, action: Action) -> Decision:
    """
    Decide whether `actor` may perform `action` on `resource`.

    Reading a published template is the only action open to anonymous and inactive callers. Every other action
    requires an active user with a recognized role. Submitting a form additionally requires a published template,
    for admins too.
    """
    if action == Action.READ and isinstance(resource, TemplateResource) and resource.status == TemplateStatus.PUBLISHED:
        return PERMIT

    if actor is None:
        return deny(ErrorKind.UNAUTHENTICATED, "Authentication required")

    if actor.status != UserStatus.ACTIVE or actor.role not in Role.values:
        logger.info(
            "Authorization denied for inactive or unrecognized user",
            extra={"user_id": actor.id, "role": actor.role, "status": actor.status, "action": action},
        )
        return deny(ErrorKind.FORBIDDEN, "User is not active")

    if isinstance(resource, NewForm) and resource.template.status != TemplateStatus.PUBLISHED:
        return deny(ErrorKind.TEMPLATE_NOT_PUBLISHED, "The template is not published")

    if actor.is_admin:
        return PERMIT

    if _permits_regular_user(actor, resource, action):
        return PERMIT

    logger.info(
        "Authorization denied",
        extra={"user_id": actor.id, "resource": type(resource).__name__, "action": action},
    )
    return deny(ErrorKind.FORBIDDEN, "User is not authorized for this action")


def _permits_regular_user(actor: Actor, resource: Resource, action: Action) -> bool:  # noqa: PLR0911
    if isinstance(resource, TemplateResource):
        if action in (Action.UPDATE, Action.DELETE, Action.READ_SUBMISSIONS, Action.READ):
            return resource.is_managed_by(actor.id)
        if action == Action.MANAGE_COLLABORATORS:
            return actor.id == resource.author_id
        return False

    if isinstance(resource, (TemplateCatalog, NewForm)):
        return action == Action.CREATE

    if isinstance(resource, FormResource):
        if action in (Action.UPDATE, Action.DELETE, Action.READ) and actor.id == resource.user_id:
            return True
        return action in (Action.DELETE, Action.READ) and resource.template.is_managed_by(actor.id)

    if isinstance(resource, UserDirectory):
        return action == Action.SEARCH

    if isinstance(resource, UserAccount):
        return action == Action.READ and actor.id == resource.user_id

    return False
