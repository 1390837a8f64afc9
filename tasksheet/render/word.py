"""
Word 渲染器

将 Block 序列生成为段落式的 Word (.docx) 文档，
公式以样式化的文字片段嵌入段落，不做分页计算
"""

from __future__ import annotations

import io
from typing import Sequence, TYPE_CHECKING

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml.ns import qn
from docx.shared import Cm, Pt, RGBColor

from ..models import (
    MUTED_COLOR,
    Block,
    Span,
    PlainText,
    InlineMath,
    Heading,
    NumberedQuestion,
    ChoiceList,
    MetadataLine,
    LabeledSection,
    AnswerSpace,
    Spacer,
)

if TYPE_CHECKING:
    from docx.document import Document as DocxDocument
    from docx.text.paragraph import Paragraph


BODY_FONT = "Calibri"
MATH_FONT = "Cambria Math"
ANSWER_LINE = "_" * 60


class WordRenderer:
    """
    Word 渲染器

    每个 Block 对应一个或多个段落；带标签区段的标签与正文
    必须位于同一段落内
    """

    def __init__(
        self,
        question_size: float = 12,
        section_size: float = 11,
        metadata_size: float = 10,
    ):
        """
        初始化渲染器

        Args:
            question_size: 题干字号（pt）
            section_size: 区段字号（pt）
            metadata_size: 信息行字号（pt）
        """
        self.question_size = question_size
        self.section_size = section_size
        self.metadata_size = metadata_size

    def render(self, blocks: Sequence[Block]) -> bytes:
        """
        渲染 Block 序列为 Word 文档

        Args:
            blocks: 构建器产生的 Block 序列

        Returns:
            .docx 文件字节
        """
        doc = Document()
        self._set_document_defaults(doc)

        for block in blocks:
            self._add_block(doc, block)

        buffer = io.BytesIO()
        doc.save(buffer)
        return buffer.getvalue()

    def _set_document_defaults(self, doc: "DocxDocument") -> None:
        """设置文档默认样式"""
        style = doc.styles["Normal"]
        style.font.name = BODY_FONT
        style.font.size = Pt(self.question_size)
        style.paragraph_format.space_after = Pt(2)

        heading_style = doc.styles["Heading 1"]
        heading_style.font.name = BODY_FONT
        heading_style.font.size = Pt(18)
        heading_style.font.bold = True

    def _add_block(self, doc: "DocxDocument", block: Block) -> None:
        if isinstance(block, Heading):
            heading = doc.add_heading(block.text, level=1)
            heading.alignment = WD_ALIGN_PARAGRAPH.CENTER
            doc.core_properties.title = block.text

        elif isinstance(block, NumberedQuestion):
            para = doc.add_paragraph()
            para.add_run(f"{block.index}. ").font.size = Pt(self.question_size)
            self._add_spans(para, block.spans, self.question_size)

        elif isinstance(block, ChoiceList):
            for position, option in enumerate(block.options):
                para = doc.add_paragraph()
                para.paragraph_format.left_indent = Cm(0.75)
                para.add_run(f"{ChoiceList.letter(position)}. ").font.size = Pt(self.section_size)
                self._add_spans(para, option, self.section_size)

        elif isinstance(block, MetadataLine):
            para = doc.add_paragraph()
            run = para.add_run(block.text)
            run.font.size = Pt(self.metadata_size)
            run.font.color.rgb = RGBColor.from_string(MUTED_COLOR)

        elif isinstance(block, LabeledSection):
            para = doc.add_paragraph()
            label_run = para.add_run(f"{block.label}: ")
            label_run.bold = True
            label_run.font.size = Pt(self.section_size)
            label_run.font.color.rgb = RGBColor.from_string(block.color)
            self._add_spans(para, block.spans, self.section_size, color=block.color)

        elif isinstance(block, AnswerSpace):
            for _ in range(block.lines):
                para = doc.add_paragraph()
                run = para.add_run(ANSWER_LINE)
                run.font.color.rgb = RGBColor.from_string(MUTED_COLOR)

        elif isinstance(block, Spacer):
            doc.add_paragraph()

        else:
            raise TypeError(f"未知的 Block 类型: {type(block).__name__}")

    def _add_spans(
        self,
        para: "Paragraph",
        spans: Sequence[Span],
        size: float,
        color: str | None = None,
    ) -> None:
        """
        将片段追加为段落内的文字片段

        纯文本换行转为段内换行；独立公式前后各换行，单独占一行
        """
        pending_break = False  # 独立公式之后尚未换行
        line_has_text = False

        for span in spans:
            if isinstance(span, PlainText):
                for j, line in enumerate(span.lines):
                    if j > 0:
                        para.add_run().add_break()
                        pending_break = False
                        line_has_text = False
                    if line:
                        if pending_break:
                            para.add_run().add_break()
                            pending_break = False
                        self._style_run(para.add_run(line), size, color)
                        line_has_text = True
            elif isinstance(span, InlineMath):
                if pending_break:
                    para.add_run().add_break()
                    pending_break = False
                self._style_math_run(para.add_run(span.expression), size, color)
                line_has_text = True
            else:
                if line_has_text or pending_break:
                    para.add_run().add_break()
                self._style_math_run(para.add_run(span.expression), size, color)
                pending_break = True
                line_has_text = False

    @staticmethod
    def _style_run(run, size: float, color: str | None) -> None:
        run.font.size = Pt(size)
        if color:
            run.font.color.rgb = RGBColor.from_string(color)

    @classmethod
    def _style_math_run(cls, run, size: float, color: str | None) -> None:
        cls._style_run(run, size, color)
        run.italic = True
        run.font.name = MATH_FONT
        run._element.rPr.rFonts.set(qn("w:eastAsia"), MATH_FONT)
