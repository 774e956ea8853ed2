import functools
import logging
from collections.abc import Callable

from django.db import DatabaseError
from django.db import transaction

from formforge.core.service.policy_service import Action
from formforge.core.service.policy_service import Actor
from formforge.core.service.policy_service import Resource
from formforge.core.service.policy_service import authorize
from formforge.core.service.result import ErrorKind
from formforge.core.service.result import Result
from formforge.core.service.result import ServiceError
from formforge.core.service.result import ServiceException

logger = logging.getLogger(__name__)


def service_operation[**P, T](func: Callable[P, T]) -> Callable[P, Result[T]]:
    """
    Run an orchestrator method as one unit of work and hand back a `Result`.

    The body runs inside a transaction, so a `ServiceException` raised after some writes rolls them back. Storage
    errors are logged and reported as `internal` without exposing the underlying exception.
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> Result[T]:
        try:
            with transaction.atomic():
                value = func(*args, **kwargs)
        except ServiceException as exc:
            logger.info(
                "Operation rejected",
                extra={"operation": func.__qualname__, "error_kind": exc.error.kind, "field": exc.error.field},
            )
            return Result.failure(exc.error)
        except DatabaseError:
            logger.exception("Storage failure", extra={"operation": func.__qualname__})
            return Result.failure(ServiceError(ErrorKind.INTERNAL, "An unexpected error occurred"))
        return Result.success(value)

    return wrapper


def require(actor: Actor | None, resource: Resource, action: Action) -> None:
    """Raise the policy's denial, if any."""
    decision = authorize(actor, resource, action)
    if decision.error is not None:
        raise ServiceException(decision.error.kind, decision.error.message, decision.error.field)
