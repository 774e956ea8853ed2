import logging
from collections.abc import Sequence
from uuid import UUID

from formforge.core.models import Form
from formforge.core.schemas import Answer
from formforge.core.service.consistency_service import check_answers
from formforge.core.service.operation import require
from formforge.core.service.operation import service_operation
from formforge.core.service.policy_service import Action
from formforge.core.service.policy_service import Actor
from formforge.core.service.policy_service import FormResource
from formforge.core.service.policy_service import NewForm
from formforge.core.service.policy_service import TemplateResource
from formforge.core.service.policy_service import UserAccount
from formforge.core.service.result import not_found
from formforge.core.service.store import ResourceStore

logger = logging.getLogger(__name__)


def form_resource(form: Form) -> FormResource:
    return FormResource(user_id=form.user_id, template=TemplateResource.from_template(form.template))


class FormOrchestrator:
    def __init__(self, store: ResourceStore):
        self.store = store

    def _load(self, form_id: UUID) -> Form:
        form = self.store.get_form(form_id)
        if form is None:
            raise not_found("Form")
        return form

    @service_operation
    def create(self, actor: Actor, template_id: UUID, answers: Sequence[Answer]) -> Form:
        template = self.store.get_template(template_id)
        if template is None:
            raise not_found("Template")
        require(actor, NewForm(template=TemplateResource.from_template(template)), Action.CREATE)

        checked = check_answers(template.blocks, answers)
        form = self.store.create_form(template=template, user_id=actor.id, answers=checked)
        logger.info(
            "Form submitted",
            extra={
                "user_id": actor.id,
                "template_id": template.id,
                "template_version": template.version,
                "form_id": form.id,
            },
        )
        return form

    @service_operation
    def get(self, actor: Actor, form_id: UUID) -> Form:
        form = self._load(form_id)
        require(actor, form_resource(form), Action.READ)
        return form

    @service_operation
    def update(self, actor: Actor, form_id: UUID, answers: Sequence[Answer]) -> Form:
        """Replace the answers of a form, checked against the blocks its template has now."""
        form = self._load(form_id)
        require(actor, form_resource(form), Action.UPDATE)

        form.answers = check_answers(form.template.blocks, answers)
        self.store.save_form(form)
        logger.info(
            "Form updated",
            extra={
                "user_id": actor.id,
                "form_id": form.id,
                "template_id": form.template_id,
                "template_version": form.template.version,
            },
        )
        return form

    @service_operation
    def delete(self, actor: Actor, form_id: UUID) -> None:
        form = self._load(form_id)
        require(actor, form_resource(form), Action.DELETE)

        self.store.delete_form(form)
        logger.info("Form deleted", extra={"user_id": actor.id, "form_id": form_id, "template_id": form.template_id})

    @service_operation
    def list_for_user(self, actor: Actor) -> list[Form]:
        require(actor, UserAccount(actor.id), Action.READ)
        return self.store.forms_for_user(actor.id)

    @service_operation
    def list_submissions(self, actor: Actor) -> list[Form]:
        """Forms received by the templates the actor manages."""
        require(actor, UserAccount(actor.id), Action.READ)
        return self.store.submissions_for_author(actor.id)

    @service_operation
    def list_for_template(self, actor: Actor, template_id: UUID) -> list[Form]:
        template = self.store.get_template(template_id)
        if template is None:
            raise not_found("Template")
        require(actor, TemplateResource.from_template(template), Action.READ_SUBMISSIONS)
        return self.store.forms_for_template(template.id)
