from django.http import HttpRequest

from formforge.core.service.policy_service import Actor


class AuthenticatedHttpRequest(HttpRequest):
    """A request that passed bearer authentication; `auth` holds the verified caller."""

    auth: Actor
