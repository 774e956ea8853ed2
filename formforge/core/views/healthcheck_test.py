import datetime
from http import HTTPStatus
from unittest import mock

import pytest
from django.db import OperationalError
from django.test import Client
from django.urls import reverse
from freezegun import freeze_time


@pytest.mark.django_db
def test_healthcheck(client: Client, settings) -> None:
    settings.APP_VERSION = "1.2.3"

    with freeze_time(datetime.datetime(2024, 5, 1, 9, 30, tzinfo=datetime.UTC)):
        response = client.get(reverse("core:healthcheck"))

    assert response.status_code == HTTPStatus.OK
    assert response.json() == {"datetime": "2024-05-01T09:30:00Z", "version": "1.2.3", "database": "ok"}


@pytest.mark.django_db
def test_healthcheck_reports_database_failure(client: Client) -> None:
    with mock.patch("formforge.core.views.healthcheck.connection.cursor", side_effect=OperationalError("gone")):
        response = client.get(reverse("core:healthcheck"))

    assert response.status_code == HTTPStatus.SERVICE_UNAVAILABLE
    assert response.json()["database"] == "unavailable"
