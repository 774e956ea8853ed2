"""Request bodies, validated by django-ninja before a view runs."""

from uuid import UUID

import ninja
import pydantic
from pydantic.alias_generators import to_camel

from formforge.core.models import TemplateStatus
from formforge.core.schemas import Answer
from formforge.core.schemas import Block


class CamelSchema(ninja.Schema):
    model_config = pydantic.ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterIn(CamelSchema):
    email: str
    name: str = ""
    password: str


class LoginIn(CamelSchema):
    email: str
    password: str


class TemplateIn(CamelSchema):
    name: str
    description: str = ""
    image: str | None = None
    status: str = TemplateStatus.DRAFT
    blocks: list[Block]
    admins: list[UUID] = []


class TemplateUpdateIn(CamelSchema):
    name: str | None = None
    description: str | None = None
    image: str | None = None
    status: str | None = None
    blocks: list[Block] | None = None
    # Only checked when strict versioning is switched on.
    expected_version: int | None = None


class CollaboratorsIn(CamelSchema):
    admins: list[UUID]


class FormIn(CamelSchema):
    template_id: UUID
    answers: list[Answer]


class FormUpdateIn(CamelSchema):
    answers: list[Answer]


class UserUpdateIn(CamelSchema):
    name: str | None = None
    email: str | None = None
    role: str | None = None
    status: str | None = None
