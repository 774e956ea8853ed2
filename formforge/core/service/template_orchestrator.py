import logging
from collections.abc import Iterable
from collections.abc import Mapping
from typing import Any
from uuid import UUID

from django.conf import settings

from formforge.core.models import Template
from formforge.core.models import TemplateStatus
from formforge.core.schemas import Block
from formforge.core.service.operation import require
from formforge.core.service.operation import service_operation
from formforge.core.service.policy_service import Action
from formforge.core.service.policy_service import Actor
from formforge.core.service.policy_service import TemplateCatalog
from formforge.core.service.policy_service import TemplateResource
from formforge.core.service.policy_service import UserAccount
from formforge.core.service.result import ErrorKind
from formforge.core.service.result import ServiceException
from formforge.core.service.result import not_found
from formforge.core.service.store import ResourceStore
from formforge.core.service.template_service import apply_template_changes
from formforge.core.service.template_service import validate_blocks
from formforge.core.service.template_service import validate_name
from formforge.core.service.template_service import validate_status

logger = logging.getLogger(__name__)


class TemplateOrchestrator:
    def __init__(self, store: ResourceStore, *, strict_versioning: bool | None = None):
        self.store = store
        if strict_versioning is None:
            strict_versioning = settings.FORMFORGE_STRICT_VERSIONING
        self.strict_versioning = strict_versioning

    def _load(self, template_id: UUID) -> Template:
        template = self.store.get_template(template_id)
        if template is None:
            raise not_found("Template")
        return template

    def _collaborator_ids(self, admin_ids: Iterable[UUID]) -> list[UUID]:
        requested = list(dict.fromkeys(admin_ids))
        existing = self.store.existing_user_ids(requested)
        for index, admin_id in enumerate(requested):
            if admin_id not in existing:
                raise ServiceException(ErrorKind.VALIDATION, f"Unknown user {admin_id}", field=f"admins[{index}]")
        return requested

    @service_operation
    def create(  # noqa: PLR0913
        self,
        actor: Actor,
        *,
        name: str,
        description: str,
        blocks: Iterable[Block | Mapping[str, Any]],
        admins: Iterable[UUID] = (),
        status: str = TemplateStatus.DRAFT,
        image: str | None = None,
    ) -> Template:
        require(actor, TemplateCatalog(), Action.CREATE)

        author = self.store.get_user(actor.id)
        if author is None:
            raise not_found("User")

        template = self.store.create_template(
            name=validate_name(name),
            description=description or "",
            image=image or None,
            status=validate_status(status),
            blocks=validate_blocks(blocks),
            author=author,
            admin_ids=self._collaborator_ids([author.id, *admins]),
        )
        logger.info(
            "Template created",
            extra={"user_id": actor.id, "template_id": template.id, "blocks": len(template.blocks)},
        )
        return template

    @service_operation
    def get(self, actor: Actor | None, template_id: UUID) -> Template:
        template = self._load(template_id)
        require(actor, TemplateResource.from_template(template), Action.READ)
        return template

    @service_operation
    def update(
        self,
        actor: Actor,
        template_id: UUID,
        changes: Mapping[str, Any],
        *,
        expected_version: int | None = None,
    ) -> Template:
        template = self._load(template_id)
        require(actor, TemplateResource.from_template(template), Action.UPDATE)

        if self.strict_versioning and expected_version is not None and expected_version != template.version:
            raise ServiceException(
                ErrorKind.CONFLICT,
                f"Template is at version {template.version}, not {expected_version}",
                field="expectedVersion",
            )

        apply_template_changes(template, changes)
        self.store.save_template(template)
        logger.info(
            "Template updated",
            extra={"user_id": actor.id, "template_id": template.id, "version": template.version},
        )
        return template

    @service_operation
    def set_collaborators(self, actor: Actor, template_id: UUID, admins: Iterable[UUID]) -> Template:
        template = self._load(template_id)
        require(actor, TemplateResource.from_template(template), Action.MANAGE_COLLABORATORS)

        admin_ids = self._collaborator_ids(admins)
        self.store.set_template_admins(template, admin_ids)
        logger.info(
            "Template collaborators replaced",
            extra={"user_id": actor.id, "template_id": template.id, "collaborators": len(admin_ids)},
        )
        return template

    @service_operation
    def delete(self, actor: Actor, template_id: UUID) -> int:
        template = self._load(template_id)
        require(actor, TemplateResource.from_template(template), Action.DELETE)

        forms_deleted = self.store.delete_template(template)
        logger.info(
            "Template deleted",
            extra={"user_id": actor.id, "template_id": template_id, "forms_deleted": forms_deleted},
        )
        return forms_deleted

    @service_operation
    def list_published(self) -> list[Template]:
        return self.store.published_templates()

    @service_operation
    def list_for_user(self, actor: Actor) -> list[Template]:
        require(actor, UserAccount(actor.id), Action.READ)
        return self.store.templates_for_user(actor.id)

    @service_operation
    def list_all(self, actor: Actor) -> list[Template]:
        require(actor, TemplateCatalog(), Action.LIST)
        return self.store.all_templates()
