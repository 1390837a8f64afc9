"""
渲染模块

负责公式分段、文档模型构建，以及 PDF 与 Word 两种格式的渲染
"""

from .segmenter import segment, spans_to_source, spans_to_lines, spans_to_text
from .builder import DocumentBuilder, build_blocks
from .pdf import PdfLayout, PdfRenderer
from .word import WordRenderer

__all__ = [
    "segment",
    "spans_to_source",
    "spans_to_lines",
    "spans_to_text",
    "DocumentBuilder",
    "build_blocks",
    "PdfLayout",
    "PdfRenderer",
    "WordRenderer",
]
