"""
tasksheet CLI 命令行入口

提供两个命令：
- export: 将 YAML 题单导出为 PDF / Word 并保存到目录
- preview: 以表格形式预览导出的版面块序列
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.markup import escape
from rich.table import Table

from .config import AppConfig, load_config, load_sheet
from .errors import ExportError
from .export import ExportOrchestrator
from .render import spans_to_text
from .models import (
    ExportOptions,
    Sheet,
    Heading,
    NumberedQuestion,
    ChoiceList,
    MetadataLine,
    LabeledSection,
    AnswerSpace,
)


app = typer.Typer(
    name="tasksheet",
    help="tasksheet - 题单 PDF / Word 导出工具",
    add_completion=False,
)

console = Console()

FORMAT_CHOICES = {
    "pdf": ["paginated"],
    "docx": ["structured"],
    "all": ["paginated", "structured"],
}


def save_to_directory(output_dir: Path) -> Callable[[bytes, str], None]:
    """创建保存回调：将文档字节写入目录"""
    def save(data: bytes, filename: str) -> None:
        output_dir.mkdir(parents=True, exist_ok=True)
        target = output_dir / filename
        target.write_bytes(data)
        console.print(f"[green]  ✓ 已保存: {target}[/green]")
    return save


def _apply_toggles(options: ExportOptions, **toggles: Optional[bool]) -> ExportOptions:
    """命令行开关覆盖题单中的选项（未指定的保持不变）"""
    update = {key: value for key, value in toggles.items() if value is not None}
    return options.model_copy(update=update)


def _load_config(env_file: Optional[Path]) -> AppConfig:
    try:
        return load_config(env_file)
    except Exception as e:
        console.print(f"[red]配置加载失败: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


def _load(input_file: Path) -> Sheet:
    try:
        return load_sheet(input_file)
    except Exception as e:
        console.print(f"[red]题单加载失败: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


@app.command("export")
def export(
    input_file: Path = typer.Argument(
        ...,
        help="题单 YAML 文件路径",
        exists=True,
    ),
    export_format: str = typer.Option(
        "pdf",
        "--format", "-f",
        help="导出格式：pdf / docx / all",
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="输出目录（默认读取 TASKSHEET_OUTPUT_DIR）",
    ),
    title: Optional[str] = typer.Option(
        None,
        "--title", "-t",
        help="文档标题（覆盖题单中的标题）",
    ),
    solutions: Optional[bool] = typer.Option(None, "--solutions/--no-solutions", help="包含参考解答"),
    answers: Optional[bool] = typer.Option(None, "--answers/--no-answers", help="包含答案"),
    answer_spaces: Optional[bool] = typer.Option(None, "--answer-spaces/--no-answer-spaces", help="预留作答行"),
    instructions: Optional[bool] = typer.Option(None, "--instructions/--no-instructions", help="包含作答说明"),
    context: Optional[bool] = typer.Option(None, "--context/--no-context", help="包含背景材料"),
    outcomes: Optional[bool] = typer.Option(None, "--outcomes/--no-outcomes", help="包含学习目标"),
    env_file: Optional[Path] = typer.Option(
        None,
        "--env", "-e",
        help=".env 配置文件路径",
    ),
) -> None:
    """
    导出题单为 PDF / Word 文档

    示例:
        tasksheet export algebra.yaml -f all -o output --solutions
    """
    formats = FORMAT_CHOICES.get(export_format.strip().lower())
    if formats is None:
        console.print(f"[red]不支持的导出格式: {escape(export_format)}（可选 pdf / docx / all）[/red]")
        raise typer.Exit(code=1)

    config = _load_config(env_file)
    sheet = _load(input_file)
    options = _apply_toggles(
        sheet.options,
        include_solutions=solutions,
        include_answers=answers,
        include_answer_spaces=answer_spaces,
        include_instructions=instructions,
        include_context=context,
        include_learning_outcomes=outcomes,
    )
    # 未给出标题时交由编排器按 options.title / 配置默认标题决定
    doc_title = title or sheet.title
    orchestrator = ExportOrchestrator(config)

    console.print(Panel(
        "[bold]tasksheet 导出[/bold]\n"
        f"题单: {escape(str(input_file))}\n"
        f"标题: {escape(orchestrator.resolve_title(options, doc_title))}\n"
        f"题目数: {len(sheet.questions)}",
        border_style="blue",
    ))

    save = save_to_directory(output_dir or Path(config.output_dir))

    try:
        for fmt in formats:
            orchestrator.export(sheet.questions, fmt, options, title=doc_title, save=save)
    except ExportError as e:
        console.print(f"\n[red]错误: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


@app.command("preview")
def preview(
    input_file: Path = typer.Argument(
        ...,
        help="题单 YAML 文件路径",
        exists=True,
    ),
    solutions: Optional[bool] = typer.Option(None, "--solutions/--no-solutions", help="包含参考解答"),
    answers: Optional[bool] = typer.Option(None, "--answers/--no-answers", help="包含答案"),
    answer_spaces: Optional[bool] = typer.Option(None, "--answer-spaces/--no-answer-spaces", help="预留作答行"),
    instructions: Optional[bool] = typer.Option(None, "--instructions/--no-instructions", help="包含作答说明"),
    context: Optional[bool] = typer.Option(None, "--context/--no-context", help="包含背景材料"),
    outcomes: Optional[bool] = typer.Option(None, "--outcomes/--no-outcomes", help="包含学习目标"),
    env_file: Optional[Path] = typer.Option(
        None,
        "--env", "-e",
        help=".env 配置文件路径",
    ),
) -> None:
    """
    预览导出的版面块序列（不生成文件）
    """
    config = _load_config(env_file)
    sheet = _load(input_file)
    options = _apply_toggles(
        sheet.options,
        include_solutions=solutions,
        include_answers=answers,
        include_answer_spaces=answer_spaces,
        include_instructions=instructions,
        include_context=context,
        include_learning_outcomes=outcomes,
    )

    orchestrator = ExportOrchestrator(config)
    try:
        blocks = orchestrator.build(sheet.questions, options, sheet.title)
    except ExportError as e:
        console.print(f"[red]错误: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    table = Table(title=escape(orchestrator.resolve_title(options, sheet.title)))
    table.add_column("#", style="dim", justify="right")
    table.add_column("类型", style="cyan")
    table.add_column("内容")

    for i, block in enumerate(blocks, start=1):
        table.add_row(str(i), block.kind, _describe(block))

    console.print(table)


def _describe(block) -> str:
    """Block 的单行摘要"""
    if isinstance(block, Heading):
        return escape(block.text)
    if isinstance(block, NumberedQuestion):
        return escape(f"{block.index}. {spans_to_text(block.spans)}")
    if isinstance(block, ChoiceList):
        return escape(" / ".join(
            f"{ChoiceList.letter(i)}. {spans_to_text(option)}" for i, option in enumerate(block.options)
        ))
    if isinstance(block, MetadataLine):
        return escape(block.text)
    if isinstance(block, LabeledSection):
        return f"[#{block.color}]{escape(block.label)}:[/] {escape(spans_to_text(block.spans))}"
    if isinstance(block, AnswerSpace):
        return f"{block.lines} 行留白"
    return ""


def main() -> None:
    """CLI 入口"""
    app()


if __name__ == "__main__":
    main()
