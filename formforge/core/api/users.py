import logging
import uuid

import ninja
from django.http import HttpRequest
from django.http import JsonResponse

from formforge.core.api.payloads import DeletedResponse
from formforge.core.api.payloads import ListResponse
from formforge.core.api.payloads import statistics_data
from formforge.core.api.payloads import user_data
from formforge.core.api.schemas import UserUpdateIn
from formforge.core.api.security import require_login
from formforge.core.service.store import ResourceStore
from formforge.core.service.user_orchestrator import UserOrchestrator
from formforge.core.util.http import AuthenticatedHttpRequest

logger = logging.getLogger(__name__)
router = ninja.Router(tags=["users"])


def users() -> UserOrchestrator:
    return UserOrchestrator(ResourceStore())


@router.get("", auth=require_login)
def list_users(request: AuthenticatedHttpRequest) -> ListResponse:
    return ListResponse(user_data(user) for user in users().list_users(request.auth).unwrap())


@router.get("/search", auth=require_login)
def search_users(request: AuthenticatedHttpRequest, name: str | None = None, email: str | None = None) -> ListResponse:
    found = users().search(request.auth, name=name, email=email).unwrap()
    return ListResponse(user_data(user, public=True) for user in found)


@router.get("/stats", auth=require_login)
def user_statistics(request: AuthenticatedHttpRequest) -> JsonResponse:
    return JsonResponse(statistics_data(users().statistics(request.auth).unwrap()))


@router.get("/{uuid:user_id}")
def get_user(request: HttpRequest, user_id: uuid.UUID) -> JsonResponse:
    return JsonResponse(user_data(users().get_profile(user_id).unwrap(), public=True))


@router.put("/{uuid:user_id}", auth=require_login)
def update_user(request: AuthenticatedHttpRequest, user_id: uuid.UUID, payload: UserUpdateIn) -> JsonResponse:
    changes = payload.model_dump(exclude_unset=True)
    return JsonResponse(user_data(users().update(request.auth, user_id, changes).unwrap()))


@router.delete("/{uuid:user_id}", auth=require_login)
def delete_user(request: AuthenticatedHttpRequest, user_id: uuid.UUID) -> DeletedResponse:
    logger.info("User delete accessed", extra={"user_id": request.auth.id, "target_user_id": user_id})
    users().delete(request.auth, user_id).unwrap()
    return DeletedResponse.success("User deleted successfully", userId=user_id)
