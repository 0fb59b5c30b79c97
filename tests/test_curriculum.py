"""
Where: tests/test_curriculum.py
What: Lesson lookup, fallback and guide excerpts.
"""

from api._curriculum import CURRICULUM, guide_excerpt, lookup


def test_all_thirteen_lessons_present():
    assert sorted(CURRICULUM, key=int) == [str(i) for i in range(1, 14)]


def test_lookup_normalizes_ids():
    assert lookup(2).title == "Data Types"
    assert lookup(" 2 ").title == "Data Types"


def test_unknown_id_falls_back_to_lesson_one():
    assert lookup("99").title == "Print & Variables"
    assert lookup("").id == "1"
    assert lookup(None).id == "1"


def test_guide_excerpt_strips_tags_and_caps_length():
    excerpt = guide_excerpt(lookup("1"))
    assert "<" not in excerpt and ">" not in excerpt
    assert "print()" in excerpt
    assert len(guide_excerpt(lookup("1"), limit=10)) == 10
