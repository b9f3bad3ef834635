"""
Unit Tests — Review Response Parser
====================================
Validates JSON extraction from noisy model text, the required-field gate,
and the defaults applied to optional fields.
"""
import json
import time

import pytest

from diffshield.llm.review_parser import (
    extract_json_object,
    iter_json_object_spans,
    parse_v2_response,
    parse_v2_response_detailed,
)
from diffshield.utils.failure_reasons import INVALID_JSON, NO_JSON_FOUND, SCHEMA_VIOLATION


MINIMAL = {
    "prIntent": "Improve onboarding",
    "changeOverview": "Docs updated",
    "verdict": {"verdict": "approved", "confidence": 0.8, "summary": "Looks good"},
}


def _json(**overrides):
    data = dict(MINIMAL)
    data.update(overrides)
    return json.dumps(data)


# ---------------------------------------------------------------------------
# 1. Extraction
# ---------------------------------------------------------------------------
class TestExtraction:

    def test_json_surrounded_by_prose(self):
        output = parse_v2_response(f"Here is the result: {_json()} thanks")
        assert output is not None
        assert output.pr_intent == "Improve onboarding"

    def test_markdown_fenced_json(self):
        output = parse_v2_response(f"```json\n{_json()}\n```")
        assert output is not None
        assert output.change_overview == "Docs updated"

    def test_braces_inside_strings_do_not_break_extraction(self):
        raw = "Result: " + _json(prIntent="Fix } and { handling in templates") + " } trailing"
        output = parse_v2_response(raw)
        assert output is not None
        assert output.pr_intent == "Fix } and { handling in templates"

    def test_escaped_quotes_inside_strings(self):
        output = parse_v2_response(_json(changeOverview='Renamed "Setup {old}" section'))
        assert output is not None
        assert output.change_overview == 'Renamed "Setup {old}" section'

    def test_first_decodable_candidate_wins(self):
        raw = "Use {placeholder} syntax. " + _json()
        assert extract_json_object(raw) == MINIMAL

    def test_outermost_spans_ordered_by_opening_brace(self):
        spans = list(iter_json_object_spans('a {"x": {"y": 1}} b {"z": 2}'))
        assert spans == ['{"x": {"y": 1}}', '{"z": 2}']

    def test_unbalanced_text_yields_nothing(self):
        assert list(iter_json_object_spans('{"prIntent": "cut off')) == []

    def test_unclosed_brace_before_json_is_ignored(self):
        raw = "Template starts with { and never closes. " + _json()
        assert extract_json_object(raw) == MINIMAL

    def test_quotes_in_prose_do_not_hide_json(self):
        raw = 'The 5" banner was "resized. ' + _json()
        assert extract_json_object(raw) == MINIMAL

    def test_long_unbalanced_input_is_scanned_quickly(self):
        started = time.perf_counter()
        output, reason = parse_v2_response_detailed("{" * 200_000)
        assert time.perf_counter() - started < 1.0
        assert output is None
        assert reason == NO_JSON_FOUND


# ---------------------------------------------------------------------------
# 2. Failures never raise
# ---------------------------------------------------------------------------
class TestFailures:

    @pytest.mark.parametrize("raw", ["", "No JSON here at all", "just a } brace"])
    def test_no_json_returns_none(self, raw):
        output, reason = parse_v2_response_detailed(raw)
        assert output is None
        assert reason == NO_JSON_FOUND

    def test_undecodable_json_returns_none(self):
        output, reason = parse_v2_response_detailed("{prIntent: 'single quotes'}")
        assert output is None
        assert reason == INVALID_JSON

    def test_malformed_review_object_is_invalid_json(self):
        raw = _json()[:-1] + ",}"
        output, reason = parse_v2_response_detailed(raw)
        assert output is None
        assert reason == INVALID_JSON

    def test_malformed_wrapper_does_not_expose_inner_review(self):
        wrapped = '{"review": ' + _json() + "}"
        broken = '{"review": ' + _json() + ",}"
        assert parse_v2_response(wrapped) is None
        assert parse_v2_response(broken) is None
        assert parse_v2_response_detailed(broken)[1] == INVALID_JSON

    def test_later_object_after_malformed_one_is_used(self):
        raw = "{not: json} then " + _json()
        output = parse_v2_response(raw)
        assert output is not None
        assert output.pr_intent == "Improve onboarding"

    def test_none_input_returns_none(self):
        assert parse_v2_response(None) is None

    @pytest.mark.parametrize("field", ["prIntent", "changeOverview", "verdict"])
    def test_missing_required_field_returns_none(self, field):
        data = dict(MINIMAL)
        del data[field]
        output, reason = parse_v2_response_detailed(json.dumps(data))
        assert output is None
        assert reason == SCHEMA_VIOLATION

    def test_empty_required_field_returns_none(self):
        assert parse_v2_response(_json(changeOverview="")) is None

    def test_non_object_verdict_returns_none(self):
        assert parse_v2_response(_json(verdict="approved")) is None


# ---------------------------------------------------------------------------
# 3. Defaults
# ---------------------------------------------------------------------------
class TestDefaults:

    def test_absent_optional_fields_default(self):
        output = parse_v2_response(_json())
        assert output.key_risks == []
        assert output.checklist == []
        assert output.pr_body_suggestion == {"sections": []}

    def test_verdict_subfields_default(self):
        output = parse_v2_response(_json(verdict={"summary": "Needs a second look"}))
        assert output.verdict.verdict == "commented"
        assert output.verdict.confidence == 0.5
        assert output.verdict.summary == "Needs a second look"

    @pytest.mark.parametrize("confidence", ["high", None, True, [0.9]])
    def test_non_numeric_confidence_defaults(self, confidence):
        output = parse_v2_response(_json(verdict={"verdict": "approved", "confidence": confidence}))
        assert output.verdict.confidence == 0.5
        assert output.verdict.summary == ""

    def test_integer_confidence_kept(self):
        output = parse_v2_response(_json(verdict={"verdict": "approved", "confidence": 1}))
        assert output.verdict.confidence == 1

    def test_body_suggestion_without_sections_gets_empty_list(self):
        output = parse_v2_response(_json(prBodySuggestion={"note": "x"}))
        assert output.pr_body_suggestion == {"note": "x", "sections": []}


# ---------------------------------------------------------------------------
# 4. No coercion below the top level
# ---------------------------------------------------------------------------
class TestPassThrough:

    def test_malformed_risk_and_checklist_entries_unchanged(self):
        risks = ["not an object", {"severity": "critical", "extra": 1}]
        checklist = [{"item": "Check links"}, 42]
        output = parse_v2_response(_json(keyRisks=risks, checklist=checklist))
        assert output.key_risks == risks
        assert output.checklist == checklist

    def test_body_suggestion_sections_unchanged(self):
        body = {"sections": [{"heading": "Summary", "content": "Text", "extra": True}]}
        output = parse_v2_response(_json(prBodySuggestion=body))
        assert output.pr_body_suggestion == body


# ---------------------------------------------------------------------------
# 5. End-to-end example
# ---------------------------------------------------------------------------
def test_readme_review_example():
    raw = (
        '{"prIntent":"Improve onboarding","changeOverview":"Docs updated",'
        '"verdict":{"verdict":"approved","confidence":0.8,"summary":"Looks good"}}'
    )
    output = parse_v2_response(raw)

    assert output.key_risks == []
    assert output.checklist == []
    assert output.pr_body_suggestion["sections"] == []
    assert output.verdict.verdict == "approved"
    assert output.verdict.confidence == 0.8
    assert output.verdict.summary == "Looks good"
    assert output.to_dict() == {
        "prIntent": "Improve onboarding",
        "changeOverview": "Docs updated",
        "keyRisks": [],
        "checklist": [],
        "prBodySuggestion": {"sections": []},
        "verdict": {"verdict": "approved", "confidence": 0.8, "summary": "Looks good"},
    }
