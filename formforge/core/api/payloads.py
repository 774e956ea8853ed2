from collections.abc import Iterable
from typing import Any

from django.http import JsonResponse

from formforge.core.models import Form
from formforge.core.models import Template
from formforge.core.service.session_service import Session
from formforge.core.service.store import UserStatistics
from formforge.users.models import User


def user_data(user: User, *, public: bool = False) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "status": user.status,
        "createdAt": user.date_joined,
    }
    if not public:
        data["role"] = user.role
    return data


def template_data(template: Template) -> dict[str, Any]:
    return {
        "id": template.id,
        "name": template.name,
        "description": template.description,
        "image": template.image,
        "status": template.status,
        "blocks": [block.to_json() for block in template.blocks],
        "authorId": template.author_id,
        "admins": [admin.id for admin in template.admins.all()],
        "version": template.version,
        "createdAt": template.created_at,
        "updatedAt": template.updated_at,
    }


def form_data(form: Form) -> dict[str, Any]:
    return {
        "id": form.id,
        "templateId": form.template_id,
        "userId": form.user_id,
        "answers": [answer.to_json() for answer in form.answers],
        "createdAt": form.created_at,
        "updatedAt": form.updated_at,
    }


def statistics_data(statistics: UserStatistics) -> dict[str, int]:
    return {
        "templatesAuthored": statistics.templates_authored,
        "templatesPublished": statistics.templates_published,
        "submissionsReceived": statistics.submissions_received,
        "formsSubmitted": statistics.forms_submitted,
    }


class ListResponse(JsonResponse):
    """A JSON array response."""

    def __init__(self, items: Iterable[dict[str, Any]], **kwargs):
        super().__init__(list(items), safe=False, **kwargs)


class SessionResponse(JsonResponse):
    """
    A custom JsonResponse for a freshly issued session credential.
    """

    @classmethod
    def success(cls, session: Session, **kwargs) -> "SessionResponse":
        data = {"user": user_data(session.user), "token": session.token}
        return cls(data, **kwargs)


class DeletedResponse(JsonResponse):
    @classmethod
    def success(cls, message: str, **ids: Any) -> "DeletedResponse":
        return cls({"result": "success", "message": message, **ids})
