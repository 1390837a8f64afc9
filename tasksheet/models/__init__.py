"""
数据模型模块
"""

from .question import DEFAULT_TITLE, Question, ExportOptions, Sheet
from .document import (
    ColorRole,
    ROLE_COLORS,
    MUTED_COLOR,
    Span,
    PlainText,
    InlineMath,
    BlockMath,
    Block,
    Heading,
    NumberedQuestion,
    ChoiceList,
    MetadataLine,
    LabeledSection,
    AnswerSpace,
    Spacer,
)

__all__ = [
    "DEFAULT_TITLE",
    "Question",
    "ExportOptions",
    "Sheet",
    "ColorRole",
    "ROLE_COLORS",
    "MUTED_COLOR",
    "Span",
    "PlainText",
    "InlineMath",
    "BlockMath",
    "Block",
    "Heading",
    "NumberedQuestion",
    "ChoiceList",
    "MetadataLine",
    "LabeledSection",
    "AnswerSpace",
    "Spacer",
]
