"""
tasksheet: 题单导出引擎
从「题目列表 + 导出选项」到「PDF 试卷 + Word 文档」
"""

__version__ = "0.1.0"

from .models import Question, ExportOptions, Sheet, Block, Span, ColorRole
from .config import load_config, load_sheet, save_sheet, AppConfig
from .errors import ExportError, EmptyInput, UnsupportedFormat, SerializationFailure
from .render import segment, build_blocks, DocumentBuilder, PdfRenderer, PdfLayout, WordRenderer
from .export import ExportFormat, ExportResult, ExportOrchestrator, export_document

__all__ = [
    # 版本
    "__version__",
    # 模型
    "Question",
    "ExportOptions",
    "Sheet",
    "Block",
    "Span",
    "ColorRole",
    # 配置
    "load_config",
    "load_sheet",
    "save_sheet",
    "AppConfig",
    # 错误
    "ExportError",
    "EmptyInput",
    "UnsupportedFormat",
    "SerializationFailure",
    # 渲染
    "segment",
    "build_blocks",
    "DocumentBuilder",
    "PdfRenderer",
    "PdfLayout",
    "WordRenderer",
    # 导出
    "ExportFormat",
    "ExportResult",
    "ExportOrchestrator",
    "export_document",
]
