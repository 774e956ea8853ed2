import logging
import uuid
from http import HTTPStatus

import ninja
from django.http import HttpRequest
from django.http import JsonResponse

from formforge.core.api.payloads import DeletedResponse
from formforge.core.api.payloads import ListResponse
from formforge.core.api.payloads import template_data
from formforge.core.api.schemas import CollaboratorsIn
from formforge.core.api.schemas import TemplateIn
from formforge.core.api.schemas import TemplateUpdateIn
from formforge.core.api.security import optional_actor
from formforge.core.api.security import require_login
from formforge.core.service.store import ResourceStore
from formforge.core.service.template_orchestrator import TemplateOrchestrator
from formforge.core.util.http import AuthenticatedHttpRequest

logger = logging.getLogger(__name__)
router = ninja.Router(tags=["templates"])


def templates() -> TemplateOrchestrator:
    return TemplateOrchestrator(ResourceStore())


@router.post("/new", auth=require_login)
def create_template(request: AuthenticatedHttpRequest, payload: TemplateIn) -> JsonResponse:
    logger.info("Template create accessed", extra={"user_id": request.auth.id, "blocks": len(payload.blocks)})
    template = templates().create(
        request.auth,
        name=payload.name,
        description=payload.description,
        blocks=payload.blocks,
        admins=payload.admins,
        status=payload.status,
        image=payload.image,
    ).unwrap()
    return JsonResponse(template_data(template), status=HTTPStatus.CREATED)


@router.put("/update/{uuid:template_id}", auth=require_login)
def update_template(
    request: AuthenticatedHttpRequest, template_id: uuid.UUID, payload: TemplateUpdateIn
) -> JsonResponse:
    changes = payload.model_dump(exclude_unset=True, exclude={"expected_version"})
    result = templates().update(request.auth, template_id, changes, expected_version=payload.expected_version)
    template = result.unwrap()
    return JsonResponse(template_data(template))


@router.put("/admins/{uuid:template_id}", auth=require_login)
def update_collaborators(
    request: AuthenticatedHttpRequest, template_id: uuid.UUID, payload: CollaboratorsIn
) -> JsonResponse:
    template = templates().set_collaborators(request.auth, template_id, payload.admins).unwrap()
    return JsonResponse(template_data(template))


@router.get("/user", auth=require_login)
def list_user_templates(request: AuthenticatedHttpRequest) -> ListResponse:
    return ListResponse(template_data(template) for template in templates().list_for_user(request.auth).unwrap())


@router.get("/all", auth=require_login)
def list_all_templates(request: AuthenticatedHttpRequest) -> ListResponse:
    return ListResponse(template_data(template) for template in templates().list_all(request.auth).unwrap())


@router.get("")
def list_published_templates(request: HttpRequest) -> ListResponse:
    return ListResponse(template_data(template) for template in templates().list_published().unwrap())


@router.get("/{uuid:template_id}")
def get_template(request: HttpRequest, template_id: uuid.UUID) -> JsonResponse:
    template = templates().get(optional_actor(request), template_id).unwrap()
    return JsonResponse(template_data(template))


@router.delete("/{uuid:template_id}", auth=require_login)
def delete_template(request: AuthenticatedHttpRequest, template_id: uuid.UUID) -> DeletedResponse:
    forms_deleted = templates().delete(request.auth, template_id).unwrap()
    return DeletedResponse.success("Template deleted successfully", templateId=template_id, formsDeleted=forms_deleted)
