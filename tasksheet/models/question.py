"""
数据模型定义：Question, ExportOptions, Sheet 等输入结构
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_TITLE = "Task Sheet"


class Question(BaseModel):
    """题目数据模型（由外部提供，导出引擎只读）"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(..., description="题目唯一标识，同一批次内不重复")
    text: str = Field(..., description="题干，可包含 \\( \\) 与 \\[ \\] 数学标记")
    type: str = Field(default="", description="题型，如 multiple choice")
    topic: str = Field(default="", description="知识点")
    difficulty: str = Field(default="", description="难度")
    answers: list[str] | None = Field(default=None, description="选择题选项列表")
    correct_answer: str | None = Field(default=None, alias="correctAnswer", description="参考解答")
    answer: str | None = Field(default=None, description="答案")
    explanation: str | None = Field(default=None, description="解析")
    context: str | None = Field(default=None, description="题目背景材料")
    instructions: str | None = Field(default=None, description="作答说明")
    learning_outcome: str | None = Field(default=None, alias="learningOutcome", description="学习目标")

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("题干不能为空")
        return value

    @property
    def is_multiple_choice(self) -> bool:
        """是否为选择题"""
        return self.type.strip().lower() == "multiple choice"


class ExportOptions(BaseModel):
    """导出选项，各开关互相独立"""
    model_config = ConfigDict(frozen=True)

    include_solutions: bool = Field(default=False, description="是否包含参考解答与解析")
    include_answers: bool = Field(default=False, description="是否包含答案")
    include_answer_spaces: bool = Field(default=False, description="是否为非选择题预留作答行")
    include_instructions: bool = Field(default=False, description="是否包含作答说明")
    include_context: bool = Field(default=False, description="是否包含背景材料")
    include_learning_outcomes: bool = Field(default=False, description="是否包含学习目标")
    title: str | None = Field(default=None, description="文档标题，为空时使用默认标题")


class Sheet(BaseModel):
    """题单：标题 + 导出选项 + 有序题目列表（YAML 文件的内存形式）"""
    title: str | None = Field(default=None, description="题单标题，为空时由导出选项或配置决定")
    options: ExportOptions = Field(default_factory=ExportOptions, description="导出选项")
    questions: list[Question] = Field(default_factory=list, description="题目列表，顺序即导出顺序")
