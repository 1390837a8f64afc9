"""
PDF 渲染器

将 Block 序列绘制为固定页面尺寸的 PDF 文档，
按垂直游标估算每个 Block 的高度，放不下时先分页再绘制
"""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import Literal, Sequence

from pydantic import BaseModel, Field
from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4, LETTER
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas
from reportlab.pdfbase.pdfmetrics import stringWidth
from rich.console import Console

from ..models import (
    MUTED_COLOR,
    Block,
    Heading,
    NumberedQuestion,
    ChoiceList,
    MetadataLine,
    LabeledSection,
    AnswerSpace,
    Spacer,
)
from .segmenter import spans_to_lines

console = Console()


PAGE_SIZES = {
    "a4": A4,
    "letter": LETTER,
}

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
RULE_COLOR = "999999"
FOOTER_FONT_SIZE = 8


class PdfLayout(BaseModel):
    """PDF 版面参数（单位：pt）"""
    page_size: Literal["a4", "letter"] = Field(default="a4", description="纸张规格，纵向")
    margin_top: float = Field(default=20 * mm, description="上边距")
    margin_bottom: float = Field(default=20 * mm, description="下边距")
    margin_left: float = Field(default=20 * mm, description="左边距")
    margin_right: float = Field(default=20 * mm, description="右边距")
    heading_size: float = Field(default=18, description="标题字号")
    question_size: float = Field(default=12, description="题干字号")
    section_size: float = Field(default=11, description="区段字号")
    metadata_size: float = Field(default=10, description="信息行字号")
    line_spacing: float = Field(default=1.4, description="行高 / 字号")
    label_indent: float = Field(default=5 * mm, description="区段正文缩进")
    answer_line_height: float = Field(default=8 * mm, description="作答留白行高")
    spacer_height: float = Field(default=6 * mm, description="题目间距")
    show_page_numbers: bool = Field(default=True, description="是否绘制页码")

    @property
    def page_width(self) -> float:
        return PAGE_SIZES[self.page_size][0]

    @property
    def page_height(self) -> float:
        return PAGE_SIZES[self.page_size][1]

    @property
    def content_width(self) -> float:
        return self.page_width - self.margin_left - self.margin_right

    @property
    def usable_height(self) -> float:
        return self.page_height - self.margin_top - self.margin_bottom


@dataclass
class _Line:
    """一行待绘制内容"""
    text: str
    size: float
    height: float
    font: str = FONT
    color: str = "000000"
    indent: float = 0.0
    centered: bool = False
    rule: bool = False


@dataclass
class _Item:
    """一个 Block 的绘制计划"""
    lines: list[_Line] = field(default_factory=list)
    gap_after: float = 0.0

    @property
    def extent(self) -> float:
        return sum(line.height for line in self.lines) + self.gap_after


@dataclass
class _Cursor:
    y: float
    page: int = 1
    has_content: bool = False


class PdfRenderer:
    """
    PDF 渲染器

    公式不做排版，按表达式原文以普通文字绘制
    """

    def __init__(self, layout: PdfLayout | None = None):
        """
        初始化渲染器

        Args:
            layout: 版面参数，默认 A4 纵向、20mm 边距
        """
        self.layout = layout or PdfLayout()

    def render(self, blocks: Sequence[Block]) -> bytes:
        """
        渲染 Block 序列为 PDF

        Args:
            blocks: 构建器产生的 Block 序列

        Returns:
            PDF 文件字节
        """
        layout = self.layout
        buffer = io.BytesIO()
        c = canvas.Canvas(
            buffer,
            pagesize=(layout.page_width, layout.page_height),
            invariant=1,
        )

        for block in blocks:
            if isinstance(block, Heading):
                c.setTitle(block.text)
                break

        cursor = _Cursor(y=layout.margin_top)
        for block in blocks:
            self._place(c, cursor, self._plan(block))

        self._finish_page(c, cursor)
        c.save()
        return buffer.getvalue()

    # ------------------------------------------------------------------
    # 版面规划
    # ------------------------------------------------------------------

    def _plan(self, block: Block) -> _Item:
        """估算 Block 所需的行与间距"""
        layout = self.layout

        if isinstance(block, Heading):
            size = layout.heading_size
            lines = [
                self._line(text, size, font=FONT_BOLD, centered=True)
                for text in self._wrap(block.text, FONT_BOLD, size, layout.content_width)
            ]
            return _Item(lines=lines, gap_after=size * 0.6)

        if isinstance(block, NumberedQuestion):
            size = layout.question_size
            return _Item(
                lines=self._prefixed(f"{block.index}. ", spans_to_lines(block.spans), size),
                gap_after=size * 0.3,
            )

        if isinstance(block, ChoiceList):
            size = layout.section_size
            lines: list[_Line] = []
            for position, option in enumerate(block.options):
                prefix = f"{ChoiceList.letter(position)}. "
                lines.extend(self._prefixed(prefix, spans_to_lines(option), size, indent=layout.label_indent))
            return _Item(lines=lines, gap_after=size * 0.3)

        if isinstance(block, MetadataLine):
            size = layout.metadata_size
            lines = [
                self._line(text, size, color=MUTED_COLOR)
                for text in self._wrap(block.text, FONT, size, layout.content_width)
            ]
            return _Item(lines=lines, gap_after=size * 0.8)

        if isinstance(block, LabeledSection):
            size = layout.section_size
            width = layout.content_width - layout.label_indent
            lines = [self._line(f"{block.label}:", size, font=FONT_BOLD, color=block.color)]
            for display_line in spans_to_lines(block.spans):
                for text in self._wrap(display_line, FONT, size, width):
                    lines.append(self._line(text, size, color=block.color, indent=layout.label_indent))
            return _Item(lines=lines, gap_after=size * 0.8)

        if isinstance(block, AnswerSpace):
            lines = [
                _Line(text="", size=0, height=layout.answer_line_height, color=RULE_COLOR, rule=True)
                for _ in range(block.lines)
            ]
            return _Item(lines=lines, gap_after=layout.question_size * 0.3)

        if isinstance(block, Spacer):
            return _Item(gap_after=layout.spacer_height)

        raise TypeError(f"未知的 Block 类型: {type(block).__name__}")

    def _line(
        self,
        text: str,
        size: float,
        font: str = FONT,
        color: str = "000000",
        indent: float = 0.0,
        centered: bool = False,
    ) -> _Line:
        return _Line(
            text=text,
            size=size,
            height=size * self.layout.line_spacing,
            font=font,
            color=color,
            indent=indent,
            centered=centered,
        )

    def _prefixed(
        self,
        prefix: str,
        display_lines: list[str],
        size: float,
        indent: float = 0.0,
    ) -> list[_Line]:
        """带前缀（题号 / 选项字母）的文本，续行按前缀宽度悬挂缩进"""
        hang = stringWidth(prefix, FONT, size)
        width = self.layout.content_width - indent - hang
        lines: list[_Line] = []

        for i, display_line in enumerate(display_lines or [""]):
            for j, text in enumerate(self._wrap(display_line, FONT, size, width)):
                if i == 0 and j == 0:
                    lines.append(self._line(prefix + text, size, indent=indent))
                else:
                    lines.append(self._line(text, size, indent=indent + hang))
        return lines

    @staticmethod
    def _wrap(text: str, font: str, size: float, width: float) -> list[str]:
        """按可用宽度折行；空行保留为一行"""
        if not text.strip():
            return [""]
        return simpleSplit(text, font, size, width) or [""]

    # ------------------------------------------------------------------
    # 绘制
    # ------------------------------------------------------------------

    def _place(self, c: canvas.Canvas, cursor: _Cursor, item: _Item) -> None:
        """放置一个 Block：整体放不下则先分页；超过整页高度时逐行续页"""
        layout = self.layout
        page_bottom = layout.page_height - layout.margin_bottom

        # 纯间距（无内容行）不触发分页
        if item.lines and cursor.y + item.extent > page_bottom and cursor.has_content:
            self._new_page(c, cursor)

        if item.extent > layout.usable_height:
            console.print(
                f"[yellow]⚠ 内容块高度超过单页可用高度，将跨 {self._page_span(item)} 页绘制[/yellow]"
            )

        # 当前页已有内容且放不下下一行时续页，任何行都不越过下边距
        for line in item.lines:
            if cursor.y + line.height > page_bottom and cursor.has_content:
                self._new_page(c, cursor)
            self._draw_line(c, cursor, line)

        cursor.y += item.gap_after

    def _page_span(self, item: _Item) -> int:
        """从新页顶部开始逐行放置时，该 Block 占用的页数"""
        layout = self.layout
        page_bottom = layout.page_height - layout.margin_bottom
        y, pages, has_content = layout.margin_top, 1, False
        for line in item.lines:
            if y + line.height > page_bottom and has_content:
                y, pages = layout.margin_top, pages + 1
            y += line.height
            has_content = True
        return pages

    def _draw_line(self, c: canvas.Canvas, cursor: _Cursor, line: _Line) -> None:
        layout = self.layout
        x = layout.margin_left + line.indent

        if line.rule:
            baseline = layout.page_height - (cursor.y + line.height - 2)
            c.setStrokeColor(HexColor(f"#{line.color}"))
            c.setLineWidth(0.5)
            c.line(x, baseline, layout.page_width - layout.margin_right, baseline)
        elif line.text:
            baseline = layout.page_height - (cursor.y + line.size)
            c.setFont(line.font, line.size)
            c.setFillColor(HexColor(f"#{line.color}"))
            if line.centered:
                c.drawCentredString(layout.page_width / 2, baseline, line.text)
            else:
                c.drawString(x, baseline, line.text)

        cursor.y += line.height
        cursor.has_content = True

    def _new_page(self, c: canvas.Canvas, cursor: _Cursor) -> None:
        self._finish_page(c, cursor)
        cursor.page += 1
        cursor.y = self.layout.margin_top
        cursor.has_content = False

    def _finish_page(self, c: canvas.Canvas, cursor: _Cursor) -> None:
        if self.layout.show_page_numbers:
            self._draw_footer(c, cursor.page)
        c.showPage()

    def _draw_footer(self, c: canvas.Canvas, page: int) -> None:
        """页脚居中页码，距页面底部 15pt"""
        c.saveState()
        c.setFont(FONT, FOOTER_FONT_SIZE)
        c.setFillColor(HexColor(f"#{MUTED_COLOR}"))
        c.drawCentredString(self.layout.page_width / 2, 15, f"Page {page}")
        c.restoreState()
