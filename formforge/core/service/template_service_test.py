import pytest

from formforge.core.models import Template
from formforge.core.models import TemplateStatus
from formforge.core.schemas import Block
from formforge.core.schemas import BlockType
from formforge.core.service.result import ErrorKind
from formforge.core.service.result import ServiceException
from formforge.core.service.template_service import apply_template_changes
from formforge.core.service.template_service import validate_blocks
from formforge.core.service.template_service import validate_name


def assert_validation_error(exc_info: pytest.ExceptionInfo[ServiceException], field: str) -> None:
    assert exc_info.value.error.kind == ErrorKind.VALIDATION
    assert exc_info.value.error.field == field


def choice_block(**fields) -> dict:
    return {"id": "q1", "type": "multipleChoice", "question": "Pick", "required": True} | fields


def test_validate_blocks_parses_camel_case_input() -> None:
    blocks = validate_blocks(
        [
            {"id": "q1", "type": "short", "question": "Name?", "required": True},
            {
                "id": "q2",
                "type": "multipleChoice",
                "question": "Pick one",
                "required": False,
                "optionsType": "radio",
                "options": ["a", "b"],
            },
        ]
    )
    assert [block.id for block in blocks] == ["q1", "q2"]
    assert blocks[1].options == ["a", "b"]


def test_validate_blocks_accepts_an_empty_list() -> None:
    assert validate_blocks([]) == []


@pytest.mark.parametrize(
    ("raw", "field"),
    [
        (choice_block(options=["a"]), "optionsType"),
        (choice_block(optionsType="radio"), "options"),
        (choice_block(optionsType="radio", options=[]), "options"),
        (choice_block(optionsType="radio", options=["a", "a"]), "options"),
        (choice_block(optionsType="radio", options=["a", " "]), "options"),
        (choice_block(type="short", options=["a"]), "options"),
        (choice_block(type="paragraph", optionsType="radio"), "optionsType"),
        (choice_block(type="date"), "type"),
        (choice_block(type="short", question=""), "question"),
    ],
)
def test_invalid_block_reports_its_field(raw: dict, field: str) -> None:
    with pytest.raises(ServiceException) as exc_info:
        validate_blocks([{"id": "q0", "type": "short", "question": "Ok", "required": False}, raw])
    assert_validation_error(exc_info, f"blocks[1].{field}")


def test_duplicate_block_ids() -> None:
    blocks = [Block(id="q1", type=BlockType.SHORT, question=f"Q{n}", required=False) for n in range(2)]
    with pytest.raises(ServiceException) as exc_info:
        validate_blocks(blocks)
    assert_validation_error(exc_info, "blocks[1].id")


def test_validate_name() -> None:
    assert validate_name(" Survey ") == "Survey"
    with pytest.raises(ServiceException) as exc_info:
        validate_name("   ")
    assert_validation_error(exc_info, "name")


@pytest.mark.django_db
def test_apply_changes_merges_and_bumps_version(template: Template) -> None:
    original_blocks = template.blocks
    apply_template_changes(template, {"name": "Renamed", "status": TemplateStatus.PUBLISHED})

    assert template.name == "Renamed"
    assert template.status == TemplateStatus.PUBLISHED
    assert template.blocks == original_blocks
    assert template.version == 2

    # nothing is written
    template.refresh_from_db()
    assert template.version == 1


@pytest.mark.django_db
def test_apply_changes_replaces_blocks_wholesale(template: Template) -> None:
    apply_template_changes(
        template, {"blocks": [{"id": "other", "type": "paragraph", "question": "Anything else?", "required": False}]}
    )
    assert [block.id for block in template.blocks] == ["other"]


@pytest.mark.django_db
@pytest.mark.parametrize(
    ("changes", "field"),
    [
        ({"author": "someone"}, "author"),
        ({"version": 7}, "version"),
        ({"status": "archived"}, "status"),
        ({"name": ""}, "name"),
        ({"blocks": None}, "blocks"),
        ({"blocks": [choice_block()]}, "blocks[0].optionsType"),
    ],
)
def test_apply_changes_rejects_invalid_changes(template: Template, changes: dict, field: str) -> None:
    with pytest.raises(ServiceException) as exc_info:
        apply_template_changes(template, changes)
    assert_validation_error(exc_info, field)


@pytest.mark.django_db
def test_apply_changes_rejects_an_empty_change_set(template: Template) -> None:
    with pytest.raises(ServiceException) as exc_info:
        apply_template_changes(template, {})

    assert exc_info.value.error.kind == ErrorKind.VALIDATION
    assert exc_info.value.error.field is None
    assert template.version == 1
