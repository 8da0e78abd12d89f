from src.news_lessons.ui.components import grade_answer


def test_grade_answer_uses_option_position() -> None:
    question = {"question": "Pick the second", "options": ["same", "same", "other", "x"], "answer": 1}

    assert grade_answer(question, 1) == (True, "same")
    assert grade_answer(question, 0) == (False, "same")


def test_grade_answer_out_of_range_answer() -> None:
    question = {"options": ["A", "B"], "answer": 5}

    assert grade_answer(question, 0) == (False, "")
