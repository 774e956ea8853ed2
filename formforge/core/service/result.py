"""Error taxonomy shared by every service, and the result values orchestrators hand back to callers."""

from dataclasses import dataclass
from enum import StrEnum
from http import HTTPStatus


class ErrorKind(StrEnum):
    UNAUTHENTICATED = "unauthenticated"
    STALE_CREDENTIAL = "stale_credential"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    VALIDATION = "validation_error"
    TEMPLATE_NOT_PUBLISHED = "template_not_published"
    MISSING_REQUIRED_ANSWER = "missing_required_answer"
    UNMATCHED_ANSWER = "unmatched_answer"
    CONFLICT = "conflict"
    INTERNAL = "internal"

    @property
    def status(self) -> HTTPStatus:
        return _HTTP_STATUS[self]


_HTTP_STATUS = {
    ErrorKind.UNAUTHENTICATED: HTTPStatus.UNAUTHORIZED,
    ErrorKind.STALE_CREDENTIAL: HTTPStatus.UNAUTHORIZED,
    ErrorKind.FORBIDDEN: HTTPStatus.FORBIDDEN,
    ErrorKind.NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorKind.VALIDATION: HTTPStatus.BAD_REQUEST,
    ErrorKind.TEMPLATE_NOT_PUBLISHED: HTTPStatus.BAD_REQUEST,
    ErrorKind.MISSING_REQUIRED_ANSWER: HTTPStatus.BAD_REQUEST,
    ErrorKind.UNMATCHED_ANSWER: HTTPStatus.BAD_REQUEST,
    ErrorKind.CONFLICT: HTTPStatus.CONFLICT,
    ErrorKind.INTERNAL: HTTPStatus.INTERNAL_SERVER_ERROR,
}


@dataclass(frozen=True)
class ServiceError:
    kind: ErrorKind
    message: str
    # Offending field path, block id or question id, depending on the kind.
    field: str | None = None

    @property
    def status(self) -> HTTPStatus:
        return self.kind.status


class ServiceException(Exception):  # noqa: N818
    """Raised by domain code. Orchestrators turn it into a failed `Result`."""

    def __init__(self, kind: ErrorKind, message: str, field: str | None = None):
        super().__init__(message)
        self.error = ServiceError(kind=kind, message=message, field=field)


def not_found(what: str) -> ServiceException:
    return ServiceException(ErrorKind.NOT_FOUND, f"{what} not found")


@dataclass(frozen=True)
class Result[T]:
    value: T | None = None
    error: ServiceError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ServiceError) -> "Result[T]":
        return cls(error=error)

    def unwrap(self) -> T:
        """Return the value, raising the carried error as a `ServiceException` on failure."""
        if not self.ok:
            raise ServiceException(self.error.kind, self.error.message, self.error.field)
        return self.value  # type: ignore[return-value]
