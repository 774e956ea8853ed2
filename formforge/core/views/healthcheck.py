import logging
from http import HTTPStatus

from django.conf import settings
from django.db import DatabaseError
from django.db import connection
from django.http import JsonResponse
from django.utils import timezone

logger = logging.getLogger(__name__)


def healthcheck(request):
    """
    Healthcheck endpoint. Reports the running version and whether the database answers.
    """
    data = {"datetime": timezone.now(), "version": settings.APP_VERSION, "database": "ok"}
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError:
        logger.exception("Healthcheck database query failed")
        data["database"] = "unavailable"
        return JsonResponse(data, status=HTTPStatus.SERVICE_UNAVAILABLE)
    return JsonResponse(data)
