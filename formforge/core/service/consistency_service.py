import logging
from collections import Counter
from collections.abc import Sequence

from formforge.core.schemas import Answer
from formforge.core.schemas import Block
from formforge.core.schemas import BlockType
from formforge.core.service.result import ErrorKind
from formforge.core.service.result import ServiceException

logger = logging.getLogger(__name__)


def check_answers(blocks: Sequence[Block], answers: Sequence[Answer]) -> list[Answer]:
    """
    Check an answer set against a template's current blocks.

    The checks run in order: every required block answered exactly once, no answer without a matching block, no
    optional question answered twice, and every value shaped the way its block expects. Returns the answers with the
    question text and type copied from the blocks they answer.
    """
    counts = Counter(answer.question_id for answer in answers)
    for block in blocks:
        if block.required and counts[block.id] != 1:
            problem = "is not answered" if counts[block.id] == 0 else "is answered more than once"
            raise ServiceException(
                ErrorKind.MISSING_REQUIRED_ANSWER,
                f'Required question "{block.question}" {problem}',
                field=block.id,
            )

    blocks_by_id = {block.id: block for block in blocks}
    for answer in answers:
        if answer.question_id not in blocks_by_id:
            raise ServiceException(
                ErrorKind.UNMATCHED_ANSWER,
                f'The answer to "{answer.question_id}" does not match any question of the template',
                field=answer.question_id,
            )

    for index, answer in enumerate(answers):
        if counts[answer.question_id] > 1:
            raise ServiceException(
                ErrorKind.VALIDATION,
                f'Question "{answer.question_id}" is answered more than once',
                field=f"answers[{index}].questionId",
            )

    checked = []
    for index, answer in enumerate(answers):
        block = blocks_by_id[answer.question_id]
        _check_shape(block, answer, index)
        checked.append(answer.model_copy(update={"question": block.question, "question_type": block.type}))

    logger.debug("Answers checked", extra={"blocks": len(blocks), "answers": len(answers)})
    return checked


def _check_shape(block: Block, answer: Answer, index: int) -> None:
    field = f"answers[{index}].answer"
    if block.type == BlockType.MULTIPLE_CHOICE:
        if not isinstance(answer.answer, list):
            raise ServiceException(ErrorKind.VALIDATION, "Multiple choice answers must be a list of options", field)
        allowed = set(block.options or [])
        for choice in answer.answer:
            if choice not in allowed:
                raise ServiceException(ErrorKind.VALIDATION, f'"{choice}" is not one of the options', field)
    elif not isinstance(answer.answer, str):
        raise ServiceException(ErrorKind.VALIDATION, f"{block.type} answers must be a single string", field)
