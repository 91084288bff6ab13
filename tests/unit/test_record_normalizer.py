"""
Unit tests for shape normalization.

Tests cover:
- Alias resolution and precedence
- Value coercion (text, lists, difficulty choice)
- Structural validity (required fields, option counts, answer membership)
- Id synthesis and ordering

Run: pytest tests/unit/test_record_normalizer.py -v
"""
import pytest

from src.llm_output.normalizer import (
    coerce_list,
    is_empty,
    normalize_record,
    normalize_records,
    resolve_field,
)
from src.llm_output.schemas import EXAM_QUESTION, QUIZ_QUESTION, ROADMAP_PHASE


class TestHelpers:
    @pytest.mark.parametrize("value", [None, "", "   ", [], {}, ()])
    def test_empty_values(self, value):
        assert is_empty(value)

    @pytest.mark.parametrize("value", [0, False, "x", [""], {"a": None}])
    def test_present_values(self, value):
        assert not is_empty(value)

    def test_blank_canonical_defers_to_alias(self):
        spec = ROADMAP_PHASE.get_field("phase")
        assert resolve_field({"phase": "  ", "name": "Basics"}, spec) == "Basics"

    def test_canonical_beats_alias(self):
        spec = ROADMAP_PHASE.get_field("phase")
        assert resolve_field({"title": "B", "phase": "A"}, spec) == "A"

    def test_alias_order(self):
        spec = ROADMAP_PHASE.get_field("phase")
        assert resolve_field({"stage": "S", "name": "N"}, spec) == "N"

    def test_list_default_is_fresh(self):
        spec = ROADMAP_PHASE.get_field("skills")
        first = resolve_field({}, spec)
        first.append("mutated")
        assert resolve_field({}, spec) == []

    def test_coerce_list(self):
        assert coerce_list(["a", "", None, 3, {"name": "b"}, {"other": 1}]) == ["a", "3", "b"]
        assert coerce_list("single") == ["single"]
        assert coerce_list(None) == []


class TestRoadmapRecords:
    def test_aliases_resolved(self):
        raw = {
            "title": "Learn the basics",
            "summary": "Start here.",
            "timeframe": "2 weeks",
            "topics": ["HTML", {"name": "CSS"}],
            "links": [{"url": "https://developer.mozilla.org"}],
        }
        record = normalize_record(raw, ROADMAP_PHASE)
        assert record == {
            "phase": "Learn the basics",
            "description": "Start here.",
            "duration": "2 weeks",
            "skills": ["HTML", "CSS"],
            "resources": ["https://developer.mozilla.org"],
        }

    def test_short_alias_names(self):
        raw = {"name": "Intro", "desc": "d", "timeframe": "2 months",
               "essential_skills": ["a"], "links": ["b"]}
        assert normalize_record(raw, ROADMAP_PHASE) == {
            "phase": "Intro",
            "description": "d",
            "duration": "2 months",
            "skills": ["a"],
            "resources": ["b"],
        }

    def test_missing_optional_fields_get_defaults(self):
        record = normalize_record({"phase": "Only a name"}, ROADMAP_PHASE)
        assert record["description"] == ""
        assert record["duration"] == ""
        assert record["skills"] == []
        assert record["resources"] == []

    def test_missing_phase_is_dropped(self):
        assert normalize_record({"description": "no name"}, ROADMAP_PHASE) is None

    def test_unknown_keys_are_discarded(self):
        record = normalize_record({"phase": "P", "emoji": "rocket"}, ROADMAP_PHASE)
        assert "emoji" not in record

    def test_text_is_trimmed(self):
        assert normalize_record({"phase": "  Padded  "}, ROADMAP_PHASE)["phase"] == "Padded"


class TestQuizRecords:
    def test_wrong_answer_is_substituted(self):
        raw = {"question": "Q", "options": ["A", "B", "C"], "answer": "Z"}
        assert normalize_record(raw, QUIZ_QUESTION)["answer"] == "A"

    def test_missing_answer_is_substituted(self):
        raw = {"question": "Q", "options": ["A", "B"]}
        assert normalize_record(raw, QUIZ_QUESTION)["answer"] == "A"

    def test_options_capped_at_four(self):
        raw = {"question": "Q", "options": ["A", "B", "C", "D", "E"], "answer": "E"}
        record = normalize_record(raw, QUIZ_QUESTION)
        assert record["options"] == ["A", "B", "C", "D"]
        # The answer fell outside the cap, so it is substituted
        assert record["answer"] == "A"

    def test_cap_override(self):
        raw = {"question": "Q", "options": ["A", "B", "C", "D"], "answer": "B"}
        record = normalize_record(raw, QUIZ_QUESTION, max_options=2)
        assert record["options"] == ["A", "B"]
        assert record["answer"] == "B"

    @pytest.mark.parametrize("options", [[], ["only one"], None, "A"])
    def test_too_few_options_dropped(self, options):
        raw = {"question": "Q", "options": options, "answer": "A"}
        assert normalize_record(raw, QUIZ_QUESTION) is None

    def test_choices_alias(self):
        raw = {"prompt": "Q", "choices": ["x", "y"], "correct": "y"}
        assert normalize_record(raw, QUIZ_QUESTION) == {"question": "Q", "options": ["x", "y"], "answer": "y"}

    def test_quiz_has_no_id(self):
        raw = {"question": "Q", "options": ["x", "y"], "answer": "x"}
        assert "id" not in normalize_record(raw, QUIZ_QUESTION)


class TestExamRecords:
    def test_stored_field_names(self, exam_items):
        record = normalize_record(exam_items[0], EXAM_QUESTION, position=0, id_prefix="ai-networks")
        assert record == {
            "id": "ai-networks-1",
            "question": "Which layer does TCP belong to?",
            "options": ["Transport", "Network", "Session", "Physical"],
            "answer": "Transport",
            "explanation": "TCP is a transport-layer protocol.",
            "difficulty": "easy",
        }

    def test_answer_not_in_options_is_rejected(self):
        raw = {"question": "Q", "options": ["A", "B"], "answer": "C"}
        assert normalize_record(raw, EXAM_QUESTION) is None

    def test_missing_answer_is_rejected(self):
        assert normalize_record({"question": "Q", "options": ["A", "B"]}, EXAM_QUESTION) is None

    def test_integer_answer_is_an_option_index(self):
        raw = {"question": "Q", "options": ["A", "B", "C"], "correct_index": 2}
        assert normalize_record(raw, EXAM_QUESTION)["answer"] == "C"

    def test_out_of_range_integer_matches_option_text(self):
        raw = {"question": "Default HTTPS port?", "options": ["80", 443], "answer": 443}
        record = normalize_record(raw, EXAM_QUESTION)
        assert record["options"] == ["80", "443"]
        assert record["answer"] == "443"

    def test_boolean_answer_is_not_an_index(self):
        raw = {"question": "Q", "options": ["A", "B"], "answer": True}
        assert normalize_record(raw, EXAM_QUESTION) is None

    @pytest.mark.parametrize("raw_level,expected", [
        ("HARD", "hard"),
        (" easy ", "easy"),
        ("extreme", "medium"),
        (None, "medium"),
    ])
    def test_difficulty_restricted(self, raw_level, expected):
        raw = {"question": "Q", "options": ["A", "B"], "answer": "A", "difficulty": raw_level}
        assert normalize_record(raw, EXAM_QUESTION)["difficulty"] == expected

    def test_level_alias(self):
        raw = {"question": "Q", "options": ["A", "B"], "answer": "A", "level": "hard"}
        assert normalize_record(raw, EXAM_QUESTION)["difficulty"] == "hard"

    def test_existing_id_kept(self):
        raw = {"_id": 42, "question": "Q", "options": ["A", "B"], "answer": "A"}
        assert normalize_record(raw, EXAM_QUESTION)["id"] == "42"

    def test_canonical_field_order(self):
        raw = {"difficulty": "easy", "answer": "A", "options": ["A", "B"], "question": "Q"}
        record = normalize_record(raw, EXAM_QUESTION)
        assert list(record) == list(EXAM_QUESTION.field_names)


class TestNormalizeRecords:
    def test_invalid_records_dropped_order_preserved(self):
        items = [
            {"question": "first", "options": ["A", "B"], "answer": "A"},
            "not an object",
            {"question": "", "options": ["A", "B"], "answer": "A"},
            {"question": "second", "options": ["A", "B"], "answer": "B"},
        ]
        records = normalize_records(items, EXAM_QUESTION)
        assert [r["question"] for r in records] == ["first", "second"]

    def test_ids_follow_source_position(self):
        items = [
            {"question": "", "options": ["A", "B"], "answer": "A"},
            {"question": "kept", "options": ["A", "B"], "answer": "A"},
        ]
        assert normalize_records(items, EXAM_QUESTION, id_prefix="ai-os")[0]["id"] == "ai-os-2"

    def test_truncated_to_count(self, quiz_items):
        assert len(normalize_records(quiz_items * 3, QUIZ_QUESTION, count=4)) == 4

    def test_never_more_than_available(self, quiz_items):
        assert len(normalize_records(quiz_items, QUIZ_QUESTION, count=10)) == 2

    def test_single_object_is_one_record(self):
        records = normalize_records({"phase": "Solo"}, ROADMAP_PHASE)
        assert [r["phase"] for r in records] == ["Solo"]

    def test_nested_list_under_unknown_key(self, exam_items):
        records = normalize_records({"questions": exam_items}, EXAM_QUESTION)
        assert len(records) == 3

    def test_nested_roadmap_key(self):
        value = {"roadmap": [{"phase": "One"}, {"phase": "Two"}]}
        assert [r["phase"] for r in normalize_records(value, ROADMAP_PHASE)] == ["One", "Two"]

    def test_wrapper_with_metadata_is_unwrapped(self, exam_items):
        value = {"topic": "Networks", "difficulty": "medium", "questions": exam_items[:2]}
        records = normalize_records(value, EXAM_QUESTION, count=2)
        assert [r["question"] for r in records] == [
            "Which layer does TCP belong to?",
            "What is the default port for HTTPS?",
        ]

    def test_wrapper_with_alias_named_metadata(self):
        # "title" is a phase alias, but the phases live under "phases"
        value = {"title": "Frontend roadmap", "phases": [{"phase": "HTML"}, {"phase": "CSS"}]}
        assert [r["phase"] for r in normalize_records(value, ROADMAP_PHASE)] == ["HTML", "CSS"]

    def test_list_field_of_objects_is_not_a_wrapper(self):
        value = {"phase": "Basics", "skills": [{"name": "HTML"}, {"name": "CSS"}]}
        records = normalize_records(value, ROADMAP_PHASE)
        assert len(records) == 1
        assert records[0]["skills"] == ["HTML", "CSS"]

    def test_unrelated_nested_objects_keep_lone_record(self):
        value = {"phase": "Basics", "meta": [{"model": "x"}]}
        assert [r["phase"] for r in normalize_records(value, ROADMAP_PHASE)] == ["Basics"]

    @pytest.mark.parametrize("value", [[1], [None], "text", 5, None, []])
    def test_no_records(self, value):
        assert normalize_records(value, QUIZ_QUESTION) == []

    def test_input_not_mutated(self, exam_items):
        snapshot = [dict(item) for item in exam_items]
        normalize_records(exam_items, EXAM_QUESTION)
        assert exam_items == snapshot
