from django.urls import include
from django.urls import path

from formforge.core.api import api

urlpatterns = [
    path("", include("formforge.core.urls")),
    path("", api.urls),
]
