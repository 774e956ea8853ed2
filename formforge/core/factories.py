import factory
from factory.django import DjangoModelFactory

from formforge.core.models import Form
from formforge.core.models import Template
from formforge.core.models import TemplateStatus
from formforge.core.schemas import Answer
from formforge.core.schemas import Block
from formforge.core.schemas import BlockType
from formforge.users.factories import UserFactory


def default_blocks() -> list[Block]:
    return [Block(id="q1", type=BlockType.SHORT, question="What is your name?", required=True)]


class TemplateFactory(DjangoModelFactory[Template]):
    class Meta:
        model = Template
        skip_postgeneration_save = True

    name = factory.Faker("sentence", nb_words=3)
    description = factory.Faker("paragraph", nb_sentences=2)
    status = TemplateStatus.DRAFT
    blocks = factory.LazyFunction(default_blocks)
    author = factory.SubFactory(UserFactory)
    version = 1

    @factory.post_generation
    def admins(self: Template, create, extracted, **kwargs):  # noqa: N805
        """The author is always a collaborator; pass `admins=[...]` to add more."""
        if not create:
            return
        self.admins.add(self.author, *(extracted or []))


class FormFactory(DjangoModelFactory[Form]):
    class Meta:
        model = Form

    template = factory.SubFactory(TemplateFactory, status=TemplateStatus.PUBLISHED)
    user = factory.SubFactory(UserFactory)
    answers = factory.LazyAttribute(
        lambda o: [
            Answer(question_id=block.id, question=block.question, question_type=block.type, answer="An answer")
            for block in o.template.blocks
            if block.type != BlockType.MULTIPLE_CHOICE
        ]
    )
