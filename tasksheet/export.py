"""
导出编排

公开入口：构建一次 Block 序列，按格式分派到 PDF 或 Word 渲染器，
返回文档字节与建议文件名，并交给外部的保存回调
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Callable, Sequence

from pydantic import BaseModel, Field
from rich.console import Console

from .config import AppConfig
from .errors import EmptyInput, UnsupportedFormat, SerializationFailure
from .models import DEFAULT_TITLE, Question, ExportOptions, Block
from .render import DocumentBuilder, PdfRenderer, WordRenderer

console = Console()

SaveCallback = Callable[[bytes, str], None]


class ExportFormat(str, Enum):
    """导出格式"""
    PAGINATED = "paginated"    # PDF，固定页面
    STRUCTURED = "structured"  # Word，段落流式

    @property
    def extension(self) -> str:
        return ".pdf" if self is ExportFormat.PAGINATED else ".docx"

    @property
    def media_type(self) -> str:
        if self is ExportFormat.PAGINATED:
            return "application/pdf"
        return "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

    @classmethod
    def parse(cls, value: "ExportFormat | str") -> "ExportFormat":
        """解析格式名，支持 pdf / docx 别名（不区分大小写）"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            if key in _FORMAT_ALIASES:
                return _FORMAT_ALIASES[key]
        raise UnsupportedFormat(value)


_FORMAT_ALIASES = {
    "paginated": ExportFormat.PAGINATED,
    "pdf": ExportFormat.PAGINATED,
    "structured": ExportFormat.STRUCTURED,
    "docx": ExportFormat.STRUCTURED,
}


class ExportResult(BaseModel):
    """导出结果"""
    data: bytes = Field(..., description="文档字节")
    filename: str = Field(..., description="建议文件名")
    format: ExportFormat = Field(..., description="导出格式")

    @property
    def media_type(self) -> str:
        return self.format.media_type


def suggest_filename(title: str, export_format: ExportFormat) -> str:
    """由标题生成文件名：小写，非字母数字替换为连字符"""
    stem = re.sub(r"[^\w]+", "-", title.strip().lower()).strip("-")
    return f"{stem or 'tasks'}{export_format.extension}"


class ExportOrchestrator:
    """
    导出编排器

    无状态：每次调用独立构建 Block 序列与渲染表面
    """

    def __init__(self, config: AppConfig | None = None):
        """
        初始化编排器

        Args:
            config: 应用配置，默认使用内置默认值
        """
        self.config = config or AppConfig()

    def build(
        self,
        questions: Sequence[Question],
        options: ExportOptions,
        title: str | None = None,
    ) -> list[Block]:
        """构建 Block 序列（不渲染），供预览使用"""
        if not questions:
            raise EmptyInput()
        builder = DocumentBuilder(answer_space_lines=self.config.answer_space_lines)
        return builder.build(questions, options, self.resolve_title(options, title))

    def export(
        self,
        questions: Sequence[Question],
        export_format: ExportFormat | str,
        options: ExportOptions,
        title: str | None = None,
        save: SaveCallback | None = None,
    ) -> ExportResult:
        """
        导出题目列表

        Args:
            questions: 题目列表，不能为空
            export_format: paginated / structured（或 pdf / docx）
            options: 导出选项
            title: 文档标题，优先于 options.title
            save: 保存回调，接收 (字节, 文件名)

        Returns:
            ExportResult

        Raises:
            EmptyInput: 题目列表为空
            UnsupportedFormat: 格式无法识别
            SerializationFailure: 渲染或打包失败
        """
        fmt = ExportFormat.parse(export_format)
        resolved_title = self.resolve_title(options, title)
        blocks = self.build(questions, options, resolved_title)

        console.print(f"[cyan]📄 正在生成 {fmt.extension[1:].upper()} 文档（{len(questions)} 题）...[/cyan]")

        try:
            if fmt is ExportFormat.PAGINATED:
                data = PdfRenderer(self.config.pdf_layout()).render(blocks)
            else:
                data = WordRenderer().render(blocks)
        except Exception as e:
            raise SerializationFailure(f"生成 {fmt.value} 文档失败: {e}") from e

        result = ExportResult(
            data=data,
            filename=suggest_filename(resolved_title, fmt),
            format=fmt,
        )

        if save is not None:
            save(result.data, result.filename)

        console.print(f"[green]✓ 文档已生成: {result.filename}（{len(data)} 字节）[/green]")
        return result

    def resolve_title(self, options: ExportOptions, title: str | None = None) -> str:
        """标题优先级：显式参数 > options.title > 配置默认标题"""
        for candidate in (title, options.title, self.config.default_title):
            if candidate and candidate.strip():
                return candidate.strip()
        return DEFAULT_TITLE


def export_document(
    questions: Sequence[Question],
    export_format: ExportFormat | str,
    options: ExportOptions | None = None,
    title: str | None = None,
    save: SaveCallback | None = None,
    config: AppConfig | None = None,
) -> ExportResult:
    """便捷函数：使用默认配置导出"""
    return ExportOrchestrator(config).export(
        questions,
        export_format,
        options or ExportOptions(),
        title=title,
        save=save,
    )
