"""
The storage capability handed to session handling and to every orchestrator.

Orchestrators receive a `ResourceStore` at construction and never query the ORM themselves, so tests can hand them a
store that fails on purpose.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from uuid import UUID

from django.db import transaction
from django.db.models import Q
from django.db.models import QuerySet

from formforge.core.models import Form
from formforge.core.models import Template
from formforge.core.models import TemplateStatus
from formforge.core.schemas import Answer
from formforge.core.schemas import Block
from formforge.users.models import User


@dataclass(frozen=True)
class UserStatistics:
    templates_authored: int
    templates_published: int
    submissions_received: int
    forms_submitted: int


class ResourceStore:
    # Users

    def get_user(self, user_id: UUID) -> User | None:
        return User.objects.filter(id=user_id).first()

    def get_user_by_email(self, email: str) -> User | None:
        return User.objects.filter(email__iexact=email).first()

    def email_taken(self, email: str, *, exclude_id: UUID | None = None) -> bool:
        users = User.objects.filter(email__iexact=email)
        if exclude_id is not None:
            users = users.exclude(id=exclude_id)
        return users.exists()

    def create_user(self, *, email: str, name: str, password: str, role: str, status: str) -> User:
        return User.objects.create_user(email=email, name=name, password=password, role=role, status=status)

    def save_user(self, user: User) -> User:
        user.save()
        return user

    def delete_user(self, user: User) -> None:
        user.delete()

    def list_users(self) -> list[User]:
        return list(User.objects.order_by("email"))

    def search_users(self, *, name: str | None = None, email: str | None = None) -> list[User]:
        users = User.objects.all()
        if name:
            users = users.filter(name__icontains=name)
        if email:
            users = users.filter(email__icontains=email)
        return list(users.order_by("email"))

    def existing_user_ids(self, user_ids: Iterable[UUID]) -> set[UUID]:
        return set(User.objects.filter(id__in=list(user_ids)).values_list("id", flat=True))

    def user_statistics(self, user_id: UUID) -> UserStatistics:
        authored = Template.objects.filter(author_id=user_id)
        return UserStatistics(
            templates_authored=authored.count(),
            templates_published=authored.filter(status=TemplateStatus.PUBLISHED).count(),
            submissions_received=Form.objects.filter(template__author_id=user_id).count(),
            forms_submitted=Form.objects.filter(user_id=user_id).count(),
        )

    # Templates

    def _templates(self) -> QuerySet[Template]:
        return Template.objects.select_related("author").prefetch_related("admins")

    def get_template(self, template_id: UUID) -> Template | None:
        return self._templates().filter(id=template_id).first()

    def published_templates(self) -> list[Template]:
        return list(self._templates().filter(status=TemplateStatus.PUBLISHED).order_by("-created_at"))

    def templates_for_user(self, user_id: UUID) -> list[Template]:
        """Templates the user authored or collaborates on."""
        return list(
            self._templates().filter(Q(author_id=user_id) | Q(admins__id=user_id)).distinct().order_by("-updated_at")
        )

    def all_templates(self) -> list[Template]:
        return list(self._templates().order_by("-created_at"))

    def create_template(  # noqa: PLR0913
        self,
        *,
        name: str,
        description: str,
        image: str | None,
        status: str,
        blocks: list[Block],
        author: User,
        admin_ids: Iterable[UUID],
    ) -> Template:
        template = Template.objects.create(
            name=name,
            description=description,
            image=image,
            status=status,
            blocks=blocks,
            author=author,
            version=1,
        )
        template.admins.set(list(admin_ids))
        return template

    def save_template(self, template: Template) -> Template:
        """
        Write the in-memory template back as is.

        No check is made that the stored row still holds the version this instance was read with.
        """
        template.save()
        return template

    def set_template_admins(self, template: Template, admin_ids: Iterable[UUID]) -> Template:
        template.admins.set(list(admin_ids))
        return template

    def delete_template(self, template: Template) -> int:
        """Delete the template together with every form submitted against it. Returns the number of forms removed."""
        with transaction.atomic():
            forms_deleted, _ = Form.objects.filter(template=template).delete()
            template.delete()
        return forms_deleted

    # Forms

    def _forms(self) -> QuerySet[Form]:
        return Form.objects.select_related("template", "user").prefetch_related("template__admins")

    def get_form(self, form_id: UUID) -> Form | None:
        return self._forms().filter(id=form_id).first()

    def forms_for_user(self, user_id: UUID) -> list[Form]:
        return list(self._forms().filter(user_id=user_id).order_by("-created_at"))

    def forms_for_template(self, template_id: UUID) -> list[Form]:
        return list(self._forms().filter(template_id=template_id).order_by("-created_at"))

    def submissions_for_author(self, user_id: UUID) -> list[Form]:
        """Forms submitted against every template the user authored or collaborates on."""
        return list(
            self._forms()
            .filter(Q(template__author_id=user_id) | Q(template__admins__id=user_id))
            .distinct()
            .order_by("-created_at")
        )

    def create_form(self, *, template: Template, user_id: UUID, answers: list[Answer]) -> Form:
        return Form.objects.create(template=template, user_id=user_id, answers=answers)

    def save_form(self, form: Form) -> Form:
        form.save()
        return form

    def delete_form(self, form: Form) -> None:
        form.delete()
