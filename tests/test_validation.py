import json
import logging

import pytest

from models import (
    DEFAULT_IMPROVEMENTS,
    DEFAULT_STRENGTHS,
    DEFAULT_SUMMARY,
    DEFAULT_TOP_IMPROVEMENT,
    AIFeedback,
)
from services.validation import parse_feedback_response


def _parse(data) -> AIFeedback:
    return parse_feedback_response(json.dumps(data))


class TestMalformedResponses:

    @pytest.mark.parametrize("response", [
        '{"invalid json',
        "",
        None,
        "null",
        "undefined",
        "[]",
        "[1, 2, 3]",
        '"just a string"',
        "42",
        "Sure! Here is your feedback: {",
    ])
    def test_falls_back_to_defaults(self, response):
        result = parse_feedback_response(response)
        assert result.scores.clarity == 5
        assert result.scores.confidence == 5
        assert result.scores.logic == 5
        assert result.summary == DEFAULT_SUMMARY
        assert result.strengths == DEFAULT_STRENGTHS
        assert result.improvements == DEFAULT_IMPROVEMENTS
        assert result.top_improvement == DEFAULT_TOP_IMPROVEMENT

    def test_default_lists_are_not_shared(self):
        first = parse_feedback_response("")
        first.strengths.append("mutated")
        assert parse_feedback_response("").strengths == DEFAULT_STRENGTHS


class TestScores:

    def test_partial_scores_keep_what_is_valid(self):
        result = _parse({"scores": {"clarity": 7}, "summary": "Test"})
        assert result.scores.clarity == 7
        assert result.scores.confidence == 5
        assert result.scores.logic == 5
        assert result.summary == "Test"

    @pytest.mark.parametrize("raw, expected", [
        (15, 10),
        (-5, 0),
        (7.5, 8),
        (8.9, 9),
        (6.1, 6),
        (0, 0),
        (10, 10),
        ("7", 7),
        (" 3 ", 3),
        ("ten", 5),
        (None, 5),
        (True, 5),
        ([8], 5),
        ({"value": 8}, 5),
        ("NaN", 5),
        ("Infinity", 5),
    ])
    def test_score_repair(self, raw, expected):
        result = _parse({"scores": {"clarity": raw}})
        assert result.scores.clarity == expected

    @pytest.mark.parametrize("scores", [None, "high", [1, 2, 3], 9])
    def test_non_object_scores_use_defaults(self, scores):
        result = _parse({"scores": scores, "summary": "Kept"})
        assert (result.scores.clarity, result.scores.confidence, result.scores.logic) == (5, 5, 5)
        assert result.summary == "Kept"


class TestTextFields:

    @pytest.mark.parametrize("summary", [["not", "a", "string"], 12, None, "", "   "])
    def test_invalid_summary(self, summary):
        assert _parse({"summary": summary}).summary == DEFAULT_SUMMARY

    def test_top_improvement_accepts_camel_case(self):
        assert _parse({"topImprovement": "Slow down"}).top_improvement == "Slow down"

    def test_top_improvement_accepts_snake_case(self):
        assert _parse({"top_improvement": "Slow down"}).top_improvement == "Slow down"

    def test_strengths_drop_non_strings(self):
        result = _parse({"strengths": ["Good eye contact", 3, "", None, "  Clear opening  "]})
        assert result.strengths == ["Good eye contact", "Clear opening"]

    @pytest.mark.parametrize("improvements", ["Be clearer", [], [1, 2], [""], None])
    def test_invalid_improvements(self, improvements):
        assert _parse({"improvements": improvements}).improvements == DEFAULT_IMPROVEMENTS

    def test_unknown_fields_are_ignored(self):
        result = _parse({"summary": "Nice", "extraField": "ignored", "scores": {"clarity": 6, "pacing": 2}})
        dumped = result.model_dump()
        assert "extraField" not in dumped
        assert "pacing" not in dumped["scores"]


class TestCoaching:

    def test_full_coaching_block(self):
        result = _parse({
            "coaching": {
                "clarity": {
                    "reason": "Clear structure",
                    "example": "First, I want to say",
                    "tip": "Keep using signposts",
                    "rubricLevel": "7-8",
                },
            },
        })
        assert result.coaching.clarity.reason == "Clear structure"
        assert result.coaching.clarity.example == "First, I want to say"
        assert result.coaching.clarity.rubric_level == "7-8"

    def test_partial_detail_fills_generic_defaults(self):
        result = _parse({"coaching": {"clarity": {"tip": "Slow down"}}})
        assert result.coaching.clarity.tip == "Slow down"
        assert result.coaching.clarity.reason == "Unable to analyze this aspect"
        assert result.coaching.clarity.rubric_level == "N/A"

    def test_missing_metric_uses_metric_specific_default(self):
        result = _parse({"coaching": {"clarity": {"tip": "Slow down"}}})
        assert result.coaching.confidence.reason == "Unable to analyze confidence"
        assert result.coaching.confidence.tip == "Speak with more conviction and authority"
        assert result.coaching.logic.tip == "Structure your arguments more clearly"

    @pytest.mark.parametrize("detail", ["just a string", 7, None, ["a", "b"]])
    def test_non_object_detail(self, detail):
        result = _parse({"coaching": {"clarity": detail}})
        assert result.coaching.clarity.reason == "Unable to analyze clarity"
        assert result.coaching.clarity.tip == "Focus on clear articulation and structure"

    def test_blank_and_non_string_detail_fields(self):
        result = _parse({"coaching": {"logic": {"reason": "", "example": 42, "tip": "Use examples"}}})
        assert result.coaching.logic.reason == "Unable to analyze this aspect"
        assert result.coaching.logic.example == "No specific example available"
        assert result.coaching.logic.tip == "Use examples"

    def test_non_object_coaching(self):
        result = _parse({"coaching": "none"})
        assert result.coaching.logic.reason == "Unable to analyze logic"


class TestWellFormedResponse:

    def test_round_trip_of_valid_reply(self):
        reply = {
            "scores": {"clarity": 8, "confidence": 7, "logic": 6},
            "coaching": {
                metric: {"reason": "r", "example": "e", "tip": "t", "rubricLevel": "7-8"}
                for metric in ("clarity", "confidence", "logic")
            },
            "summary": "Solid effort.",
            "strengths": ["Good structure", "Strong close"],
            "improvements": ["Vary tone", "Add an example"],
            "topImprovement": "Add a concrete example",
        }
        result = _parse(reply)
        assert (result.scores.clarity, result.scores.confidence, result.scores.logic) == (8, 7, 6)
        assert result.coaching.logic.rubric_level == "7-8"
        assert result.strengths == ["Good structure", "Strong close"]
        assert result.top_improvement == "Add a concrete example"


class TestLogging:

    def test_bad_reply_is_logged_on_root_logger(self, caplog):
        with caplog.at_level(logging.WARNING):
            parse_feedback_response('{"invalid json')
        assert [record.name for record in caplog.records] == ["root"]
        assert "not valid JSON" in caplog.records[0].getMessage()
