from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _
from django_pydantic_field import SchemaField

from formforge.core.models.abstract import BaseModel
from formforge.core.schemas import Block


class TemplateStatus(models.TextChoices):
    DRAFT = "draft", _("Draft")
    PUBLISHED = "published", _("Published")
    RESTRICTED = "restricted", _("Restricted")


class Template(BaseModel):
    """
    A questionnaire definition made of ordered blocks.

    `version` starts at 1 and is bumped by one on every successful content update.
    """

    name = models.CharField(max_length=255, help_text="The name of the template")
    description = models.TextField(blank=True, default="")
    image = models.CharField(max_length=2048, null=True, blank=True)
    status = models.CharField(max_length=20, choices=TemplateStatus, default=TemplateStatus.DRAFT)
    blocks: list[Block] = SchemaField(schema=list[Block], default=list)
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="authored_templates",
    )
    admins = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        blank=True,
        related_name="administered_templates",
        help_text="Users sharing the author's rights over this template",
    )
    version = models.PositiveIntegerField(default=1)

    def __str__(self) -> str:
        return self.name
