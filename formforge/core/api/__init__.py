import logging
from http import HTTPStatus

from django.http import HttpRequest
from django.http import HttpResponse
from ninja import NinjaAPI
from ninja.errors import AuthenticationError
from ninja.errors import HttpError
from ninja.errors import ValidationError

from formforge.core.api.errors import format_location
from formforge.core.service.result import ErrorKind
from formforge.core.service.result import ServiceError
from formforge.core.service.result import ServiceException

from .auth import router as auth_router
from .forms import router as forms_router
from .templates import router as templates_router
from .users import router as users_router

logger = logging.getLogger(__name__)

api = NinjaAPI(title="formforge", urls_namespace="api")

api.add_router("/", auth_router)
api.add_router("/templates", templates_router)
api.add_router("/forms", forms_router)
api.add_router("/users", users_router)

# Location prefixes ninja adds in front of the field path.
_REQUEST_PARTS = {"body", "query", "path", "payload"}

_HTTP_ERROR_KINDS = {
    HTTPStatus.UNAUTHORIZED: ErrorKind.UNAUTHENTICATED,
    HTTPStatus.FORBIDDEN: ErrorKind.FORBIDDEN,
    HTTPStatus.NOT_FOUND: ErrorKind.NOT_FOUND,
    HTTPStatus.CONFLICT: ErrorKind.CONFLICT,
}


def error_response(request: HttpRequest, error: ServiceError) -> HttpResponse:
    return api.create_response(
        request,
        {"detail": error.message, "error": error.kind, "field": error.field},
        status=error.status,
    )


@api.exception_handler(ServiceException)
def service_error(request: HttpRequest, exc: ServiceException) -> HttpResponse:
    return error_response(request, exc.error)


@api.exception_handler(AuthenticationError)
def unauthenticated(request: HttpRequest, exc: AuthenticationError) -> HttpResponse:
    return error_response(request, ServiceError(ErrorKind.UNAUTHENTICATED, "Authentication required"))


@api.exception_handler(HttpError)
def http_error(request: HttpRequest, exc: HttpError) -> HttpResponse:
    """Errors ninja raises itself, such as an unparsable request body."""
    kind = _HTTP_ERROR_KINDS.get(exc.status_code, ErrorKind.VALIDATION)
    logger.info("Request rejected by ninja", extra={"path": request.path, "status": exc.status_code})
    return api.create_response(request, {"detail": exc.message, "error": kind, "field": None}, status=exc.status_code)


@api.exception_handler(ValidationError)
def invalid_request(request: HttpRequest, exc: ValidationError) -> HttpResponse:
    first = exc.errors[0] if exc.errors else {}
    location = [part for part in first.get("loc", ()) if part not in _REQUEST_PARTS]
    logger.info("Request rejected by schema validation", extra={"path": request.path, "errors": len(exc.errors)})
    field = format_location(location) or None
    return error_response(request, ServiceError(ErrorKind.VALIDATION, first.get("msg", "Invalid request"), field=field))
