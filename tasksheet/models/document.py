"""
文档中间模型：Span（分段结果）与 Block（版面块）

Block 序列是构建器与两个渲染器之间唯一的契约，
渲染器只处理 Block，不直接访问 Question。
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class ColorRole(str, Enum):
    """带标签区段的颜色角色"""
    SOLUTION = "solution"  # 绿色系
    ANSWER = "answer"      # 蓝色系
    NEUTRAL = "neutral"    # 默认墨色


# 两种格式共用的固定配色（十六进制 RGB）
ROLE_COLORS: dict[ColorRole, str] = {
    ColorRole.SOLUTION: "008800",
    ColorRole.ANSWER: "000088",
    ColorRole.NEUTRAL: "000000",
}
MUTED_COLOR = "666666"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Span
# ---------------------------------------------------------------------------

class PlainText(_Frozen):
    """纯文本片段，换行拆分为多行保存"""
    kind: Literal["text"] = "text"
    lines: list[str] = Field(..., description="按换行拆分后的文本行")

    @property
    def source(self) -> str:
        return "\n".join(self.lines)


class InlineMath(_Frozen):
    """行内公式 \\( ... \\)"""
    kind: Literal["inline_math"] = "inline_math"
    expression: str = Field(..., description="去除首尾空白后的公式原文")
    source: str = Field(..., description="含定界符的原始子串")


class BlockMath(_Frozen):
    """独立公式 \\[ ... \\]"""
    kind: Literal["block_math"] = "block_math"
    expression: str = Field(..., description="去除首尾空白后的公式原文")
    source: str = Field(..., description="含定界符的原始子串")


Span = Annotated[Union[PlainText, InlineMath, BlockMath], Field(discriminator="kind")]


# ---------------------------------------------------------------------------
# Block
# ---------------------------------------------------------------------------

class Heading(_Frozen):
    """文档标题"""
    kind: Literal["heading"] = "heading"
    text: str


class NumberedQuestion(_Frozen):
    """带编号的题干"""
    kind: Literal["question"] = "question"
    index: int = Field(..., ge=1, description="从 1 开始的题号")
    spans: list[Span] = Field(default_factory=list)


class ChoiceList(_Frozen):
    """选择题选项，按 A、B、C… 排列"""
    kind: Literal["choices"] = "choices"
    options: list[list[Span]] = Field(default_factory=list)

    @staticmethod
    def letter(position: int) -> str:
        """选项序号 → 字母（超过 26 个时继续使用 AA、AB…）"""
        letters = ""
        position += 1
        while position:
            position, rem = divmod(position - 1, 26)
            letters = chr(ord("A") + rem) + letters
        return letters


class MetadataLine(_Frozen):
    """题型 / 知识点 / 难度信息行"""
    kind: Literal["metadata"] = "metadata"
    type: str
    topic: str
    difficulty: str

    @property
    def text(self) -> str:
        return f"Type: {self.type} | Topic: {self.topic} | Difficulty: {self.difficulty}"


class LabeledSection(_Frozen):
    """带标签的区段，如 Solution / Answer / Context"""
    kind: Literal["labeled"] = "labeled"
    label: str
    spans: list[Span] = Field(default_factory=list)
    role: ColorRole = ColorRole.NEUTRAL

    @property
    def color(self) -> str:
        return ROLE_COLORS[self.role]


class AnswerSpace(_Frozen):
    """作答留白行"""
    kind: Literal["answer_space"] = "answer_space"
    lines: int = Field(default=4, ge=1)


class Spacer(_Frozen):
    """题目之间的空行"""
    kind: Literal["spacer"] = "spacer"


Block = Annotated[
    Union[Heading, NumberedQuestion, ChoiceList, MetadataLine, LabeledSection, AnswerSpace, Spacer],
    Field(discriminator="kind"),
]
