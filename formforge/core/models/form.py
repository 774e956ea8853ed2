from django.conf import settings
from django.db import models
from django_pydantic_field import SchemaField

from formforge.core.models.abstract import BaseModel
from formforge.core.models.template import Template
from formforge.core.schemas import Answer


class Form(BaseModel):
    """A respondent's answers to one template. The template binding never changes after creation."""

    template = models.ForeignKey(Template, on_delete=models.CASCADE, related_name="forms")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="forms")
    answers: list[Answer] = SchemaField(schema=list[Answer], default=list)

    def __str__(self) -> str:
        return f"{self.template} ({self.user})"
