"""
导出错误类型

均为调用方可处理的错误，导出引擎内部不做重试
"""

from __future__ import annotations


class ExportError(Exception):
    """导出错误基类"""


class EmptyInput(ExportError):
    """题目列表为空"""

    def __init__(self, message: str = "没有可导出的题目，请至少选择一道题"):
        super().__init__(message)


class UnsupportedFormat(ExportError):
    """不支持的导出格式"""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"不支持的导出格式: {value!r}（可选 pdf / docx）")


class SerializationFailure(ExportError):
    """生成或打包文档字节时失败"""
