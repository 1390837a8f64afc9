"""
测试 PDF 渲染器
"""
import re

import fitz
import pytest

from tasksheet.models import (
    ExportOptions,
    Question,
    Heading,
    NumberedQuestion,
    LabeledSection,
    AnswerSpace,
    Spacer,
    ColorRole,
)
from tasksheet.render import PdfLayout, PdfRenderer, build_blocks, segment


def open_pdf(data: bytes) -> fitz.Document:
    return fitz.open(stream=data, filetype="pdf")


def page_texts(data: bytes) -> list[str]:
    with open_pdf(data) as doc:
        return [page.get_text() for page in doc]


def test_renders_valid_pdf_with_math_as_plain_text():
    question = Question(
        id="q1",
        text="Compute \\(2+2\\)",
        type="calculation",
        topic="arithmetic",
        difficulty="easy",
        correct_answer="\\[ 4 \\]",
    )
    blocks = build_blocks([question], ExportOptions(include_solutions=True), "Arithmetic")
    data = PdfRenderer().render(blocks)

    assert data.startswith(b"%PDF")
    text = "\n".join(page_texts(data))
    assert "Arithmetic" in text
    assert "1. Compute 2+2" in text
    assert "Type: calculation | Topic: arithmetic | Difficulty: easy" in text
    assert "Solution:" in text
    assert "\\(" not in text


def test_title_metadata():
    data = PdfRenderer().render([Heading(text="Sheet A"), Spacer()])
    with open_pdf(data) as doc:
        assert doc.metadata["title"] == "Sheet A"


def test_output_is_deterministic():
    blocks = build_blocks(
        [Question(id="q", text="a \\(b\\)", type="t", topic="t", difficulty="d")],
        ExportOptions(),
    )
    renderer = PdfRenderer()
    assert renderer.render(blocks) == renderer.render(blocks)


def test_page_break_when_block_does_not_fit():
    questions = [
        Question(id=f"q{i}", text=f"Question number {i}", type="t", topic="t", difficulty="d")
        for i in range(1, 61)
    ]
    data = PdfRenderer().render(build_blocks(questions, ExportOptions()))
    texts = page_texts(data)

    assert len(texts) > 1
    # 每道题完整出现在某一页上，不被拆开
    for i in range(1, 61):
        assert sum(f"{i}. Question number {i}\n" in t for t in texts) == 1


def test_oversized_block_spans_multiple_pages():
    long_text = "\n".join(f"line {n}" for n in range(200))
    question = Question(id="big", text=long_text, type="t", topic="t", difficulty="d")
    blocks = build_blocks([question], ExportOptions())
    data = PdfRenderer().render(blocks)

    with open_pdf(data) as doc:
        assert doc.page_count >= 3
        text = "".join(page.get_text() for page in doc)
    assert "line 0" in text
    assert "line 199" in text


def test_very_tall_block_keeps_every_line_on_a_page(capsys):
    count = 12000
    text = "\n".join(f"line {n}" for n in range(count))
    blocks = [Heading(text="Long"), NumberedQuestion(index=1, spans=segment(text))]
    data = PdfRenderer().render(blocks)

    with open_pdf(data) as doc:
        pages = doc.page_count
        last_page = doc[-1].get_text()
        drawn = set()
        for page in doc:
            drawn.update(re.findall(r"line (\d+)", page.get_text()))

    assert len(drawn) == count
    assert f"line {count - 1}" in last_page
    # 标题独占第一页，其余页数即为警告中的估算
    assert f"跨 {pages - 1} 页" in capsys.readouterr().out


def test_oversized_single_line_wraps_and_terminates():
    question = Question(id="w", text="word " * 5000, type="t", topic="t", difficulty="d")
    data = PdfRenderer().render(build_blocks([question], ExportOptions()))
    with open_pdf(data) as doc:
        assert doc.page_count > 1


def test_page_numbers_in_footer():
    blocks = [Heading(text="T")] + [
        NumberedQuestion(index=i, spans=segment("\n".join(["x"] * 30))) for i in range(1, 6)
    ]
    texts = page_texts(PdfRenderer().render(blocks))
    assert len(texts) > 1
    for number, text in enumerate(texts, start=1):
        assert f"Page {number}" in text


def test_page_numbers_can_be_disabled():
    data = PdfRenderer(PdfLayout(show_page_numbers=False)).render([Heading(text="T")])
    assert "Page 1" not in page_texts(data)[0]


@pytest.mark.parametrize("page_size,expected", [("a4", (595, 842)), ("letter", (612, 792))])
def test_page_size(page_size, expected):
    data = PdfRenderer(PdfLayout(page_size=page_size)).render([Heading(text="T")])
    with open_pdf(data) as doc:
        rect = doc[0].rect
    assert (round(rect.width), round(rect.height)) == expected


def test_labeled_section_and_answer_space_draw():
    blocks = [
        Heading(text="T"),
        LabeledSection(label="Answer", spans=segment("line a\nline b"), role=ColorRole.ANSWER),
        AnswerSpace(lines=3),
        Spacer(),
    ]
    text = page_texts(PdfRenderer().render(blocks))[0]
    assert "Answer:" in text
    assert "line a" in text and "line b" in text


def test_empty_block_list_still_produces_one_page():
    with open_pdf(PdfRenderer().render([])) as doc:
        assert doc.page_count == 1
