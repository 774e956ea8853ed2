from uuid import uuid4

import pytest

from formforge.core.models import TemplateStatus
from formforge.core.service.policy_service import Action
from formforge.core.service.policy_service import Actor
from formforge.core.service.policy_service import FormResource
from formforge.core.service.policy_service import NewForm
from formforge.core.service.policy_service import TemplateCatalog
from formforge.core.service.policy_service import TemplateResource
from formforge.core.service.policy_service import UserAccount
from formforge.core.service.policy_service import UserDirectory
from formforge.core.service.policy_service import authorize
from formforge.core.service.result import ErrorKind
from formforge.users.models import Role
from formforge.users.models import UserStatus


def make_actor(role: str = Role.REGULAR, status: str = UserStatus.ACTIVE) -> Actor:
    return Actor(id=uuid4(), role=role, status=status)


def make_template(author: Actor, status: str = TemplateStatus.DRAFT, *admins: Actor) -> TemplateResource:
    return TemplateResource(
        author_id=author.id, status=status, admin_ids=frozenset([author.id, *(a.id for a in admins)])
    )


def test_author_can_manage_own_template() -> None:
    author = make_actor()
    template = make_template(author)
    for action in (Action.READ, Action.UPDATE, Action.DELETE, Action.READ_SUBMISSIONS, Action.MANAGE_COLLABORATORS):
        assert authorize(author, template, action).permitted, action


def test_collaborator_shares_rights_except_collaborator_management() -> None:
    author, collaborator = make_actor(), make_actor()
    template = make_template(author, TemplateStatus.DRAFT, collaborator)

    for action in (Action.READ, Action.UPDATE, Action.DELETE, Action.READ_SUBMISSIONS):
        assert authorize(collaborator, template, action).permitted, action

    decision = authorize(collaborator, template, Action.MANAGE_COLLABORATORS)
    assert decision.error is not None
    assert decision.error.kind == ErrorKind.FORBIDDEN


@pytest.mark.parametrize("action", [Action.UPDATE, Action.DELETE, Action.READ_SUBMISSIONS, Action.READ])
def test_stranger_is_forbidden_on_draft_template(action: Action) -> None:
    template = make_template(make_actor())
    decision = authorize(make_actor(), template, action)
    assert decision.error is not None
    assert decision.error.kind == ErrorKind.FORBIDDEN


def test_published_template_is_readable_by_anyone() -> None:
    template = make_template(make_actor(), TemplateStatus.PUBLISHED)
    assert authorize(None, template, Action.READ).permitted
    assert authorize(make_actor(), template, Action.READ).permitted
    assert not authorize(make_actor(), template, Action.UPDATE).permitted


def test_anonymous_actor_is_unauthenticated() -> None:
    decision = authorize(None, TemplateCatalog(), Action.CREATE)
    assert decision.error is not None
    assert decision.error.kind == ErrorKind.UNAUTHENTICATED


@pytest.mark.parametrize("role", [Role.ADMIN, Role.REGULAR])
@pytest.mark.parametrize(
    ("resource", "action"),
    [
        (TemplateCatalog(), Action.CREATE),
        (UserDirectory(), Action.SEARCH),
        (UserDirectory(), Action.LIST),
    ],
)
def test_suspended_users_are_denied_regardless_of_role(role: str, resource, action: Action) -> None:
    decision = authorize(make_actor(role=role, status=UserStatus.SUSPENDED), resource, action)
    assert decision.error is not None
    assert decision.error.kind == ErrorKind.FORBIDDEN


def test_suspended_author_cannot_touch_own_template() -> None:
    author = make_actor(status=UserStatus.SUSPENDED)
    decision = authorize(author, make_template(author), Action.UPDATE)
    assert decision.error is not None
    assert decision.error.kind == ErrorKind.FORBIDDEN


def test_unrecognized_role_is_forbidden() -> None:
    decision = authorize(make_actor(role="owner"), TemplateCatalog(), Action.CREATE)
    assert decision.error is not None
    assert decision.error.kind == ErrorKind.FORBIDDEN


def test_admin_is_permitted_everything() -> None:
    admin = make_actor(role=Role.ADMIN)
    template = make_template(make_actor())
    form = FormResource(user_id=uuid4(), template=template)
    assert authorize(admin, template, Action.UPDATE).permitted
    assert authorize(admin, template, Action.MANAGE_COLLABORATORS).permitted
    assert authorize(admin, form, Action.UPDATE).permitted
    assert authorize(admin, UserDirectory(), Action.DELETE).permitted
    assert authorize(admin, TemplateCatalog(), Action.LIST).permitted


@pytest.mark.parametrize("status", [TemplateStatus.DRAFT, TemplateStatus.RESTRICTED])
@pytest.mark.parametrize("role", [Role.ADMIN, Role.REGULAR])
def test_form_creation_requires_published_template(status: str, role: str) -> None:
    author = make_actor()
    decision = authorize(make_actor(role=role), NewForm(template=make_template(author, status)), Action.CREATE)
    assert decision.error is not None
    assert decision.error.kind == ErrorKind.TEMPLATE_NOT_PUBLISHED

    # the author gets no exemption either
    decision = authorize(author, NewForm(template=make_template(author, status)), Action.CREATE)
    assert decision.error is not None
    assert decision.error.kind == ErrorKind.TEMPLATE_NOT_PUBLISHED


def test_form_creation_on_published_template() -> None:
    template = make_template(make_actor(), TemplateStatus.PUBLISHED)
    assert authorize(make_actor(), NewForm(template=template), Action.CREATE).permitted


def test_form_rules() -> None:
    author, collaborator, submitter, stranger = make_actor(), make_actor(), make_actor(), make_actor()
    form = FormResource(
        user_id=submitter.id, template=make_template(author, TemplateStatus.PUBLISHED, collaborator)
    )

    for action in (Action.READ, Action.UPDATE, Action.DELETE):
        assert authorize(submitter, form, action).permitted, action

    for owner in (author, collaborator):
        assert authorize(owner, form, Action.READ).permitted
        assert authorize(owner, form, Action.DELETE).permitted
        assert not authorize(owner, form, Action.UPDATE).permitted

    for action in (Action.READ, Action.UPDATE, Action.DELETE):
        assert not authorize(stranger, form, action).permitted, action


def test_user_directory_is_admin_only_except_search() -> None:
    regular = make_actor()
    assert authorize(regular, UserDirectory(), Action.SEARCH).permitted
    for action in (Action.LIST, Action.UPDATE, Action.DELETE):
        assert not authorize(regular, UserDirectory(), action).permitted, action


def test_user_account_is_readable_by_its_owner_only() -> None:
    regular = make_actor()
    assert authorize(regular, UserAccount(user_id=regular.id), Action.READ).permitted
    assert not authorize(regular, UserAccount(user_id=uuid4()), Action.READ).permitted
