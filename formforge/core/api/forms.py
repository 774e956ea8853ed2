import logging
import uuid
from http import HTTPStatus

import ninja
from django.http import JsonResponse

from formforge.core.api.payloads import DeletedResponse
from formforge.core.api.payloads import ListResponse
from formforge.core.api.payloads import form_data
from formforge.core.api.schemas import FormIn
from formforge.core.api.schemas import FormUpdateIn
from formforge.core.api.security import require_login
from formforge.core.service.form_orchestrator import FormOrchestrator
from formforge.core.service.store import ResourceStore
from formforge.core.util.http import AuthenticatedHttpRequest

logger = logging.getLogger(__name__)
router = ninja.Router(tags=["forms"], auth=require_login)


def forms() -> FormOrchestrator:
    return FormOrchestrator(ResourceStore())


@router.post("/new")
def create_form(request: AuthenticatedHttpRequest, payload: FormIn) -> JsonResponse:
    logger.info(
        "Form submission accessed",
        extra={"user_id": request.auth.id, "template_id": payload.template_id, "answers": len(payload.answers)},
    )
    form = forms().create(request.auth, payload.template_id, payload.answers).unwrap()
    return JsonResponse(form_data(form), status=HTTPStatus.CREATED)


@router.get("/user")
def list_user_forms(request: AuthenticatedHttpRequest) -> ListResponse:
    return ListResponse(form_data(form) for form in forms().list_for_user(request.auth).unwrap())


@router.get("/submissions")
def list_received_forms(request: AuthenticatedHttpRequest) -> ListResponse:
    return ListResponse(form_data(form) for form in forms().list_submissions(request.auth).unwrap())


@router.get("/template/{uuid:template_id}")
def list_template_forms(request: AuthenticatedHttpRequest, template_id: uuid.UUID) -> ListResponse:
    submissions = forms().list_for_template(request.auth, template_id).unwrap()
    return ListResponse(form_data(form) for form in submissions)


@router.get("/get/{uuid:form_id}")
def get_form(request: AuthenticatedHttpRequest, form_id: uuid.UUID) -> JsonResponse:
    return JsonResponse(form_data(forms().get(request.auth, form_id).unwrap()))


@router.put("/update/{uuid:form_id}")
def update_form(request: AuthenticatedHttpRequest, form_id: uuid.UUID, payload: FormUpdateIn) -> JsonResponse:
    return JsonResponse(form_data(forms().update(request.auth, form_id, payload.answers).unwrap()))


@router.delete("/delete/{uuid:form_id}")
def delete_form(request: AuthenticatedHttpRequest, form_id: uuid.UUID) -> DeletedResponse:
    forms().delete(request.auth, form_id).unwrap()
    return DeletedResponse.success("Form deleted successfully", formId=form_id)
