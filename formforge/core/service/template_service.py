import logging
from collections.abc import Iterable
from collections.abc import Mapping
from typing import Any

import pydantic

from formforge.core.models import Template
from formforge.core.models import TemplateStatus
from formforge.core.schemas import Block
from formforge.core.schemas import BlockType
from formforge.core.service.result import ErrorKind
from formforge.core.service.result import ServiceException

logger = logging.getLogger(__name__)

# Fields a content update may change. Author, collaborators and version are managed separately.
UPDATABLE_FIELDS = ("name", "description", "image", "status", "blocks")


def _validation_error(message: str, field: str) -> ServiceException:
    return ServiceException(ErrorKind.VALIDATION, message, field=field)


def _parse_block(raw: Block | Mapping[str, Any], index: int) -> Block:
    if isinstance(raw, Block):
        return raw
    try:
        return Block.model_validate(raw)
    except pydantic.ValidationError as exc:
        error = exc.errors()[0]
        location = ".".join(str(part) for part in error["loc"])
        field = f"blocks[{index}].{location}" if location else f"blocks[{index}]"
        raise _validation_error(error["msg"], field) from None


def validate_block(block: Block, index: int) -> None:
    """Check the fields whose presence depends on the block type."""
    prefix = f"blocks[{index}]"
    if block.type == BlockType.MULTIPLE_CHOICE:
        if block.options_type is None:
            raise _validation_error("Multiple choice questions need an options type", f"{prefix}.optionsType")
        if not block.options:
            raise _validation_error("Multiple choice questions need at least one option", f"{prefix}.options")
        if any(not option.strip() for option in block.options):
            raise _validation_error("Options may not be blank", f"{prefix}.options")
        if len(set(block.options)) != len(block.options):
            raise _validation_error("Options must be unique", f"{prefix}.options")
    else:
        if block.options_type is not None:
            raise _validation_error(f"{block.type} questions do not take an options type", f"{prefix}.optionsType")
        if block.options is not None:
            raise _validation_error(f"{block.type} questions do not take options", f"{prefix}.options")


def validate_blocks(blocks: Iterable[Block | Mapping[str, Any]]) -> list[Block]:
    """
    Parse and validate an ordered block list, stopping at the first invalid block.

    Raises a validation `ServiceException` whose field is the offending path, e.g. ``blocks[2].options``.
    """
    validated: list[Block] = []
    seen_ids: set[str] = set()
    for index, raw in enumerate(blocks):
        block = _parse_block(raw, index)
        validate_block(block, index)
        if block.id in seen_ids:
            raise _validation_error(f'Duplicate block id "{block.id}"', f"blocks[{index}].id")
        seen_ids.add(block.id)
        validated.append(block)
    return validated


def validate_name(name: str | None) -> str:
    if name is None or not name.strip():
        raise _validation_error("Template name may not be blank", "name")
    return name.strip()


def validate_status(status: str | None) -> TemplateStatus:
    if status not in TemplateStatus.values:
        raise _validation_error(f'Unknown template status "{status}"', "status")
    return TemplateStatus(status)


def apply_template_changes(template: Template, changes: Mapping[str, Any]) -> Template:
    """
    Merge a partial update over `template` in memory and bump its version.

    Fields absent from `changes` keep their current values. A supplied block list replaces the current one wholesale;
    blocks are never merged one by one. Nothing is written; the caller persists the result.
    """
    if not changes:
        raise ServiceException(ErrorKind.VALIDATION, "No changes supplied")
    unknown = set(changes) - set(UPDATABLE_FIELDS)
    if unknown:
        raise _validation_error("Field cannot be updated", sorted(unknown)[0])

    if "name" in changes:
        template.name = validate_name(changes["name"])
    if "description" in changes:
        template.description = changes["description"] or ""
    if "image" in changes:
        template.image = changes["image"] or None
    if "status" in changes:
        template.status = validate_status(changes["status"])
    if "blocks" in changes:
        if changes["blocks"] is None:
            raise _validation_error("Blocks may not be null", "blocks")
        template.blocks = validate_blocks(changes["blocks"])

    previous_version = template.version
    template.version = previous_version + 1
    logger.debug(
        "Template changes applied",
        extra={
            "template_id": template.id,
            "fields": sorted(changes),
            "previous_version": previous_version,
            "version": template.version,
        },
    )
    return template
