"""
配置管理模块
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field
from reportlab.lib.units import mm

from ..models import DEFAULT_TITLE, Question, ExportOptions, Sheet
from ..render import PdfLayout


class AppConfig(BaseModel):
    """应用配置"""
    default_title: str = Field(default=DEFAULT_TITLE, description="未指定标题时使用的文档标题")
    output_dir: str = Field(default="output", description="CLI 导出目录")
    page_size: Literal["a4", "letter"] = Field(default="a4", description="PDF 纸张规格")
    margin_mm: float = Field(default=20.0, gt=0, description="PDF 四周边距（毫米）")
    answer_space_lines: int = Field(default=4, ge=1, description="作答留白行数")

    def pdf_layout(self) -> PdfLayout:
        """根据配置生成 PDF 版面参数"""
        margin = self.margin_mm * mm
        return PdfLayout(
            page_size=self.page_size,
            margin_top=margin,
            margin_bottom=margin,
            margin_left=margin,
            margin_right=margin,
        )


def load_config(env_file: str | Path | None = None) -> AppConfig:
    """
    从环境变量加载配置

    Args:
        env_file: .env 文件路径，默认为当前目录的 .env

    Returns:
        AppConfig 实例
    """
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    page_size = os.getenv("TASKSHEET_PAGE_SIZE", "a4").strip().lower()

    return AppConfig(
        default_title=os.getenv("TASKSHEET_DEFAULT_TITLE", DEFAULT_TITLE),
        output_dir=os.getenv("TASKSHEET_OUTPUT_DIR", "output"),
        page_size=page_size,
        margin_mm=float(os.getenv("TASKSHEET_MARGIN_MM", "20")),
        answer_space_lines=int(os.getenv("TASKSHEET_ANSWER_SPACE_LINES", "4")),
    )


def load_sheet(file_path: str | Path) -> Sheet:
    """
    从 YAML 文件加载题单

    文件结构：
        sheet:
          title: ...
          options: {include_solutions: true, ...}
        questions:
          - id: q1
            text: ...

    题目字段同时接受 snake_case 与 camelCase（correctAnswer 等）。

    Args:
        file_path: YAML 文件路径

    Returns:
        Sheet 实例
    """
    with open(file_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    sheet_data = data.get("sheet", {}) or {}
    questions_data = data.get("questions", []) or []

    def parse_question(position: int, q: dict[str, Any]) -> Question:
        q = dict(q)
        # 缺少 id 时按位置补齐
        q.setdefault("id", f"q{position + 1}")
        for key in ("type", "topic", "difficulty"):
            if q.get(key) is None:
                q[key] = ""
            else:
                q[key] = str(q[key])
        return Question.model_validate(q)

    return Sheet(
        title=sheet_data.get("title") or None,
        options=ExportOptions.model_validate(sheet_data.get("options", {}) or {}),
        questions=[parse_question(i, q) for i, q in enumerate(questions_data)],
    )


def save_sheet(sheet: Sheet, file_path: str | Path) -> None:
    """
    将题单保存到 YAML 文件

    Args:
        sheet: Sheet 实例
        file_path: 输出文件路径
    """
    def question_to_dict(q: Question) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": q.id,
            "text": q.text,
            "type": q.type,
            "topic": q.topic,
            "difficulty": q.difficulty,
        }
        if q.answers:
            d["answers"] = list(q.answers)
        for key in ("correct_answer", "answer", "explanation", "context", "instructions", "learning_outcome"):
            value = getattr(q, key)
            if value:
                d[key] = value
        return d

    options = sheet.options.model_dump(exclude_none=True, exclude_defaults=True)

    sheet_data: dict[str, Any] = {}
    if sheet.title:
        sheet_data["title"] = sheet.title
    sheet_data["options"] = options

    data = {
        "sheet": sheet_data,
        "questions": [question_to_dict(q) for q in sheet.questions],
    }

    with open(file_path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, allow_unicode=True, default_flow_style=False, sort_keys=False)
