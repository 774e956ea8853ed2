import logging

from django.http import HttpRequest
from ninja.security import HttpBearer

from formforge.core.service.policy_service import Actor
from formforge.core.service.result import ErrorKind
from formforge.core.service.result import ServiceException
from formforge.core.service.session_service import SessionService
from formforge.core.service.store import ResourceStore

logger = logging.getLogger(__name__)


class BearerCredential(HttpBearer):
    """Resolves `Authorization: Bearer <credential>` to the current state of the calling user."""

    def authenticate(self, request: HttpRequest, token: str) -> Actor:
        return SessionService(ResourceStore()).verify(token).unwrap()


def optional_actor(request: HttpRequest) -> Actor | None:
    """
    For endpoints open to anonymous callers: no header means anonymous, but a credential that is sent must be valid.
    """
    header = request.headers.get("Authorization")
    if not header:
        return None

    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        logger.debug("Unsupported authorization scheme", extra={"scheme": scheme})
        raise ServiceException(ErrorKind.UNAUTHENTICATED, "Unsupported authorization scheme")
    return SessionService(ResourceStore()).verify(token.strip()).unwrap()


require_login = BearerCredential()
