"""
文档模型构建器

将题目列表与导出选项转换为有序的 Block 序列，
两种渲染器都只消费这一序列，保证输出内容结构一致
"""

from __future__ import annotations

from typing import Sequence

from ..models import (
    DEFAULT_TITLE,
    Question,
    ExportOptions,
    Block,
    ColorRole,
    Heading,
    NumberedQuestion,
    ChoiceList,
    MetadataLine,
    LabeledSection,
    AnswerSpace,
    Spacer,
)
from .segmenter import segment


class DocumentBuilder:
    """
    文档模型构建器

    每题依次产生：题干、选项、信息行、可选区段、作答留白、空行
    """

    def __init__(self, answer_space_lines: int = 4):
        """
        初始化构建器

        Args:
            answer_space_lines: 每道非选择题预留的作答行数
        """
        self.answer_space_lines = answer_space_lines

    def build(
        self,
        questions: Sequence[Question],
        options: ExportOptions,
        title: str = DEFAULT_TITLE,
    ) -> list[Block]:
        """
        构建 Block 序列

        Args:
            questions: 题目列表（顺序由调用方决定，不做排序）
            options: 导出选项
            title: 文档标题

        Returns:
            以 Heading 开头的 Block 列表
        """
        blocks: list[Block] = [Heading(text=title)]
        for index, question in enumerate(questions, start=1):
            blocks.extend(self._question_blocks(index, question, options))
        return blocks

    def _question_blocks(
        self,
        index: int,
        question: Question,
        options: ExportOptions,
    ) -> list[Block]:
        """单道题目的 Block"""
        blocks: list[Block] = [NumberedQuestion(index=index, spans=segment(question.text))]

        choices = [choice for choice in (question.answers or []) if choice and choice.strip()]
        if choices:
            blocks.append(ChoiceList(options=[segment(choice) for choice in choices]))

        blocks.append(MetadataLine(
            type=question.type,
            topic=question.topic,
            difficulty=question.difficulty,
        ))

        sections = [
            (options.include_instructions, "Instructions", question.instructions, ColorRole.NEUTRAL),
            (options.include_context, "Context", question.context, ColorRole.NEUTRAL),
            (options.include_solutions, "Solution", question.correct_answer, ColorRole.SOLUTION),
            (options.include_solutions, "Explanation", question.explanation, ColorRole.SOLUTION),
            (options.include_answers, "Answer", question.answer, ColorRole.ANSWER),
        ]
        for enabled, label, content, role in sections:
            section = _labeled(enabled, label, content, role)
            if section is not None:
                blocks.append(section)

        if options.include_answer_spaces and not question.is_multiple_choice:
            blocks.append(AnswerSpace(lines=self.answer_space_lines))

        outcome = _labeled(
            options.include_learning_outcomes,
            "Learning Outcome",
            question.learning_outcome,
            ColorRole.NEUTRAL,
        )
        if outcome is not None:
            blocks.append(outcome)

        blocks.append(Spacer())
        return blocks


def _labeled(enabled: bool, label: str, content: str | None, role: ColorRole) -> LabeledSection | None:
    # 关闭或内容为空时不产生任何 Block
    if not enabled or not content or not content.strip():
        return None
    return LabeledSection(label=label, spans=segment(content), role=role)


def build_blocks(
    questions: Sequence[Question],
    options: ExportOptions,
    title: str = DEFAULT_TITLE,
    answer_space_lines: int = 4,
) -> list[Block]:
    """便捷函数：使用默认构建器生成 Block 序列"""
    return DocumentBuilder(answer_space_lines=answer_space_lines).build(questions, options, title)
