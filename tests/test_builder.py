"""
测试文档模型构建器
"""
import pytest
from pydantic import ValidationError

from tasksheet.models import (
    Question,
    ExportOptions,
    ColorRole,
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
from tasksheet.render import DocumentBuilder, build_blocks


def make_question(i: int = 1, **fields) -> Question:
    data = {
        "id": f"q{i}",
        "text": f"Question {i}",
        "type": "short answer",
        "topic": "algebra",
        "difficulty": "easy",
    }
    data.update(fields)
    return Question(**data)


def labels(blocks) -> list[str]:
    return [b.label for b in blocks if isinstance(b, LabeledSection)]


def test_scenario_solution_only():
    question = Question(
        id="q1",
        text="Compute \\(2+2\\)",
        type="calculation",
        topic="arithmetic",
        difficulty="easy",
        correctAnswer="4",
        answer="4",
    )
    blocks = build_blocks([question], ExportOptions(include_solutions=True, include_answers=False), "Task Sheet")

    assert blocks == [
        Heading(text="Task Sheet"),
        NumberedQuestion(index=1, spans=[
            PlainText(lines=["Compute "]),
            InlineMath(expression="2+2", source="\\(2+2\\)"),
        ]),
        MetadataLine(type="calculation", topic="arithmetic", difficulty="easy"),
        LabeledSection(label="Solution", spans=[PlainText(lines=["4"])], role=ColorRole.SOLUTION),
        Spacer(),
    ]


def test_heading_always_first():
    blocks = build_blocks([make_question()], ExportOptions(), "My Sheet")
    assert blocks[0] == Heading(text="My Sheet")
    assert sum(isinstance(b, Heading) for b in blocks) == 1


def test_numbering_is_contiguous_in_input_order():
    questions = [
        make_question(7, correct_answer="x"),
        make_question(3),
        make_question(5, answer="y", context="ctx"),
    ]
    blocks = build_blocks(questions, ExportOptions(include_solutions=True, include_answers=True))
    numbered = [b for b in blocks if isinstance(b, NumberedQuestion)]
    assert [b.index for b in numbered] == [1, 2, 3]
    assert [b.spans[0].source for b in numbered] == ["Question 7", "Question 3", "Question 5"]


def test_toggle_independence():
    questions = [
        make_question(1, correct_answer="s1", answer="a1"),
        make_question(2, correct_answer="s2"),
        make_question(3, answer="a3"),
    ]
    blocks = build_blocks(questions, ExportOptions(include_solutions=False, include_answers=True))
    assert labels(blocks).count("Solution") == 0
    assert labels(blocks).count("Answer") == 2


def test_missing_or_blank_fields_produce_no_blocks():
    question = make_question(correct_answer="", answer="   ", context=None)
    options = ExportOptions(
        include_solutions=True,
        include_answers=True,
        include_context=True,
        include_instructions=True,
        include_learning_outcomes=True,
    )
    blocks = build_blocks([question], options)
    assert labels(blocks) == []
    assert [b.kind for b in blocks] == ["heading", "question", "metadata", "spacer"]


def test_all_sections_order_and_roles():
    question = make_question(
        correct_answer="sol",
        explanation="because",
        answer="ans",
        context="ctx",
        instructions="show work",
        learning_outcome="LO1",
    )
    options = ExportOptions(
        include_solutions=True,
        include_answers=True,
        include_answer_spaces=True,
        include_instructions=True,
        include_context=True,
        include_learning_outcomes=True,
    )
    blocks = build_blocks([question], options)

    assert [b.kind for b in blocks] == [
        "heading", "question", "metadata",
        "labeled", "labeled", "labeled", "labeled", "labeled",
        "answer_space", "labeled", "spacer",
    ]
    sections = [b for b in blocks if isinstance(b, LabeledSection)]
    assert [(s.label, s.role) for s in sections] == [
        ("Instructions", ColorRole.NEUTRAL),
        ("Context", ColorRole.NEUTRAL),
        ("Solution", ColorRole.SOLUTION),
        ("Explanation", ColorRole.SOLUTION),
        ("Answer", ColorRole.ANSWER),
        ("Learning Outcome", ColorRole.NEUTRAL),
    ]


def test_labeled_section_segments_math():
    question = make_question(answer="\\[x = 2\\]")
    blocks = build_blocks([question], ExportOptions(include_answers=True))
    answer = next(b for b in blocks if isinstance(b, LabeledSection))
    assert answer.spans[0].expression == "x = 2"


def test_choice_list_for_multiple_choice():
    question = make_question(type="Multiple Choice", answers=["Paris", "", "\\(\\pi\\)"])
    blocks = build_blocks([question], ExportOptions(include_answer_spaces=True))

    assert [b.kind for b in blocks] == ["heading", "question", "choices", "metadata", "spacer"]
    choices = blocks[2]
    assert isinstance(choices, ChoiceList)
    assert len(choices.options) == 2
    assert choices.options[1][0].expression == "\\pi"


def test_answer_space_skips_multiple_choice():
    questions = [make_question(1), make_question(2, type="multiple choice")]
    blocks = DocumentBuilder(answer_space_lines=6).build(questions, ExportOptions(include_answer_spaces=True))
    spaces = [b for b in blocks if isinstance(b, AnswerSpace)]
    assert len(spaces) == 1
    assert spaces[0].lines == 6


def test_choice_letters():
    assert [ChoiceList.letter(i) for i in (0, 1, 25, 26, 27)] == ["A", "B", "Z", "AA", "AB"]


def test_metadata_text():
    line = MetadataLine(type="essay", topic="history", difficulty="hard")
    assert line.text == "Type: essay | Topic: history | Difficulty: hard"


def test_blank_question_text_is_rejected():
    with pytest.raises(ValidationError):
        make_question(text="  ")


def test_camel_case_aliases_accepted():
    question = Question.model_validate({
        "id": "q1",
        "text": "t",
        "type": "",
        "topic": "",
        "difficulty": "",
        "correctAnswer": "c",
        "learningOutcome": "lo",
    })
    assert question.correct_answer == "c"
    assert question.learning_outcome == "lo"
