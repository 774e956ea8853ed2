"""Structured records stored inside templates and forms."""

from enum import StrEnum

import pydantic
from pydantic.alias_generators import to_camel


class BlockType(StrEnum):
    SHORT = "short"
    PARAGRAPH = "paragraph"
    MULTIPLE_CHOICE = "multipleChoice"


class OptionsType(StrEnum):
    CHECKBOX = "checkbox"
    RADIO = "radio"
    DROPDOWN = "dropdown"


class CamelModel(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Block(CamelModel):
    """
    One question of a template.

    Only the basic shape is enforced here. Whether `options_type` and `options` belong on a block depends on its
    type and is checked by the template lifecycle, which can report the offending field by position.
    """

    id: str = pydantic.Field(min_length=1)
    type: BlockType
    question: str = pydantic.Field(min_length=1)
    required: bool
    description: str | None = None
    options_type: OptionsType | None = None
    options: list[str] | None = None


class Answer(CamelModel):
    """
    A single answer of a submitted form.

    `question` and `question_type` are copies of the block at submission time, kept for audit.
    """

    question_id: str
    question: str = ""
    question_type: BlockType | None = None
    answer: str | list[str]
