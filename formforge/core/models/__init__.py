from .form import Form
from .template import Template
from .template import TemplateStatus

__all__ = [
    "Form",
    "Template",
    "TemplateStatus",
]
