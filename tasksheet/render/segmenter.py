"""
公式分段器

将题目文本拆分为纯文本、行内公式、独立公式三类片段，
供构建器与两种渲染器共用
"""

from __future__ import annotations

import re
from typing import Sequence

from ..models import Span, PlainText, InlineMath, BlockMath


# 独立公式 \[...\] 与行内公式 \(...\)，非贪婪，可跨行；一次从左到右扫描
MATH_PATTERN = re.compile(r"\\\[(?P<block>.*?)\\\]|\\\((?P<inline>.*?)\\\)", re.DOTALL)


def segment(raw: str) -> list[Span]:
    """
    将文本拆分为有序片段序列

    未闭合的定界符按普通文本处理，不会抛出异常。

    Args:
        raw: 原始文本

    Returns:
        片段列表；空字符串返回空列表
    """
    if not raw:
        return []

    spans: list[Span] = []
    position = 0

    for match in MATH_PATTERN.finditer(raw):
        if match.start() > position:
            spans.append(_plain(raw[position:match.start()]))

        if match.group("block") is not None:
            spans.append(BlockMath(expression=match.group("block").strip(), source=match.group(0)))
        else:
            spans.append(InlineMath(expression=match.group("inline").strip(), source=match.group(0)))

        position = match.end()

    if position < len(raw):
        spans.append(_plain(raw[position:]))

    return spans


def _plain(text: str) -> PlainText:
    return PlainText(lines=text.split("\n"))


def spans_to_source(spans: Sequence[Span]) -> str:
    """还原片段对应的原始文本（含公式定界符）"""
    return "".join(span.source for span in spans)


def spans_to_lines(spans: Sequence[Span]) -> list[str]:
    """
    将片段展平为显示行

    - 纯文本中的换行开始新行
    - 行内公式以原文接在当前行
    - 独立公式单独占一行

    公式不做排版，直接输出表达式原文。
    """
    # 末元素为当前行
    lines: list[str] = [""]
    after_block = False

    for span in spans:
        if isinstance(span, PlainText):
            for i, line in enumerate(span.lines):
                # 紧跟独立公式的第一个换行只结束公式所在行
                if i > 0 and not (i == 1 and after_block and span.lines[0] == ""):
                    lines.append("")
                lines[-1] += line
            after_block = False
        elif isinstance(span, InlineMath):
            lines[-1] += span.expression
            after_block = False
        else:
            if lines[-1]:
                lines.append(span.expression)
            else:
                lines[-1] = span.expression
            lines.append("")
            after_block = True

    if lines[-1] == "":
        lines.pop()

    return lines


def spans_to_text(spans: Sequence[Span]) -> str:
    """展平为单个字符串，行之间以换行分隔"""
    return "\n".join(spans_to_lines(spans))
