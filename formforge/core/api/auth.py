import logging
from http import HTTPStatus

import ninja
from django.http import HttpRequest

from formforge.core.api.payloads import SessionResponse
from formforge.core.api.schemas import LoginIn
from formforge.core.api.schemas import RegisterIn
from formforge.core.service.session_service import SessionService
from formforge.core.service.store import ResourceStore

logger = logging.getLogger(__name__)
router = ninja.Router(tags=["auth"])


def sessions() -> SessionService:
    return SessionService(ResourceStore())


@router.post("/register")
def register(request: HttpRequest, payload: RegisterIn) -> SessionResponse:
    session = sessions().register(payload.email, payload.name, payload.password).unwrap()
    return SessionResponse.success(session, status=HTTPStatus.CREATED)


@router.post("/login")
def login(request: HttpRequest, payload: LoginIn) -> SessionResponse:
    logger.debug("Login accessed")
    session = sessions().login(payload.email, payload.password).unwrap()
    return SessionResponse.success(session)
