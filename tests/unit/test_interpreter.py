"""Tests for the model response interpreter.

All tests are deterministic and operate on raw text only.
"""

import json

import pytest

from backend.app.llm.interpreter import (
    EMPTY_RESPONSE_REASON,
    GOOD_RESULT_REASON,
    LACK_INFO_REASON,
    MAX_REASON_WORDS,
    extract_json_span,
    interpret_response,
    normalize_reason,
    split_status_flag,
)
from backend.app.models.common import ScheduleStatus
from backend.app.planning.fallback import fallback_path_payload

GOOD_PAYLOAD = {
    "reason": "ok",
    "pathResult": [
        {
            "title": "A",
            "schedule": [
                {
                    "time": "08:00",
                    "location": "X",
                    "activity": "Y",
                    "coordinates": {"lat": 1, "lng": 2},
                }
            ],
        }
    ],
}


class TestSplitStatusFlag:
    """Leading flag detection."""

    def test_good_result_flag_is_stripped(self) -> None:
        status, rest = split_status_flag('GOOD RESULT   {"a": 1}')
        assert status == ScheduleStatus.GOOD_RESULT
        assert rest == '{"a": 1}'

    def test_lack_info_flag_is_stripped(self) -> None:
        status, rest = split_status_flag("LACK INFO\n{}")
        assert status == ScheduleStatus.LACK_INFO
        assert rest == "{}"

    def test_flag_match_is_case_insensitive(self) -> None:
        status, rest = split_status_flag("good result {}")
        assert status == ScheduleStatus.GOOD_RESULT
        assert rest == "{}"

    def test_flag_must_be_at_start(self) -> None:
        text = 'Sure! GOOD RESULT {"a": 1}'
        status, rest = split_status_flag(text)
        assert status == ScheduleStatus.LACK_INFO
        assert rest == text

    def test_missing_flag_defaults_to_lack_info(self) -> None:
        status, rest = split_status_flag("{}")
        assert status == ScheduleStatus.LACK_INFO
        assert rest == "{}"


class TestExtractJsonSpan:
    """First/last brace slicing."""

    def test_noise_around_json(self) -> None:
        span = extract_json_span('noise {"a":1} trailing')
        assert span.json_text == '{"a":1}'
        assert span.outside_text == "noise trailing"

    def test_nested_braces_use_outermost_span(self) -> None:
        span = extract_json_span('x {"a": {"b": 1}} y')
        assert span.json_text == '{"a": {"b": 1}}'

    def test_no_braces(self) -> None:
        span = extract_json_span("just prose here")
        assert span.json_text is None
        assert span.outside_text == "just prose here"

    def test_only_opening_brace(self) -> None:
        span = extract_json_span('prefix {"a": 1')
        assert span.json_text is None
        assert span.outside_text == "prefix"

    def test_json_only_has_no_outside_text(self) -> None:
        span = extract_json_span('{"a": 1}')
        assert span.json_text == '{"a": 1}'
        assert span.outside_text == ""


class TestNormalizeReason:
    """Word cap for reason strings."""

    def test_caps_at_max_words(self) -> None:
        text = " ".join(f"w{i}" for i in range(400))
        result = normalize_reason(text)
        assert len(result.split()) == MAX_REASON_WORDS
        assert result.endswith(f"w{MAX_REASON_WORDS - 1}")

    def test_collapses_whitespace(self) -> None:
        assert normalize_reason("  a \n\t b  ") == "a b"

    def test_empty(self) -> None:
        assert normalize_reason("") == ""
        assert normalize_reason(None) == ""


class TestInterpretResponse:
    """End-to-end interpretation."""

    def test_empty_response_uses_fallback(self) -> None:
        result = interpret_response("")

        assert result.status == ScheduleStatus.LACK_INFO
        assert result.reason == EMPTY_RESPONSE_REASON
        assert result.path_result == [fallback_path_payload()]

    def test_whitespace_only_counts_as_empty(self) -> None:
        result = interpret_response("  \n ")
        assert result.reason == EMPTY_RESPONSE_REASON

    def test_good_result_is_returned_unmodified(self) -> None:
        raw = "GOOD RESULT " + json.dumps(GOOD_PAYLOAD)

        result = interpret_response(raw)

        assert result.status == ScheduleStatus.GOOD_RESULT
        assert result.reason == "ok"
        assert result.path_result == GOOD_PAYLOAD["pathResult"]
        item = result.path_result[0]["schedule"][0]
        assert item == GOOD_PAYLOAD["pathResult"][0]["schedule"][0]

    def test_lack_info_with_empty_path_result(self) -> None:
        raw = 'LACK INFO Some text {"pathResult":[]} more text'

        result = interpret_response(raw)

        assert result.status == ScheduleStatus.LACK_INFO
        assert result.path_result == [fallback_path_payload()]
        assert result.reason == "Some text more text"

    def test_unflagged_json_is_lack_info(self) -> None:
        result = interpret_response(json.dumps(GOOD_PAYLOAD))

        assert result.status == ScheduleStatus.LACK_INFO
        assert result.path_result == GOOD_PAYLOAD["pathResult"]

    def test_pure_prose_uses_text_as_reason(self) -> None:
        result = interpret_response("I cannot plan this day, sorry.")

        assert result.status == ScheduleStatus.LACK_INFO
        assert result.reason == "I cannot plan this day, sorry."
        assert result.path_result == [fallback_path_payload()]

    def test_malformed_json_falls_back(self) -> None:
        result = interpret_response('GOOD RESULT {"pathResult": [ oops } tail')

        assert result.status == ScheduleStatus.LACK_INFO
        assert result.reason == "tail"
        assert result.path_result == [fallback_path_payload()]

    def test_malformed_json_without_outside_text_uses_raw_text(self) -> None:
        raw = 'GOOD RESULT {"pathResult": [}'

        result = interpret_response(raw)

        assert result.status == ScheduleStatus.LACK_INFO
        assert result.reason == raw

    def test_unparseable_braces_after_prose(self) -> None:
        result = interpret_response("GOOD RESULT [1, 2] {not json}")

        assert result.status == ScheduleStatus.LACK_INFO
        assert result.reason == "[1, 2]"
        assert result.path_result == [fallback_path_payload()]

    def test_missing_path_result_good_flag_keeps_status(self) -> None:
        result = interpret_response('GOOD RESULT {"reason": "fine"}')

        assert result.status == ScheduleStatus.GOOD_RESULT
        assert result.reason == "fine"
        assert result.path_result == [fallback_path_payload()]

    def test_non_list_path_result_is_replaced(self) -> None:
        result = interpret_response('LACK INFO {"pathResult": {"title": "x"}}')
        assert result.path_result == [fallback_path_payload()]

    def test_canned_reason_for_good_result(self) -> None:
        raw = "GOOD RESULT " + json.dumps({"pathResult": GOOD_PAYLOAD["pathResult"]})
        result = interpret_response(raw)
        assert result.reason == GOOD_RESULT_REASON

    def test_canned_reason_for_lack_info(self) -> None:
        raw = "LACK INFO " + json.dumps({"reason": "   ", "pathResult": []})
        result = interpret_response(raw)
        assert result.reason == LACK_INFO_REASON

    def test_malformed_schedule_items_pass_through(self) -> None:
        payload = {"reason": "r", "pathResult": [{"title": "T", "schedule": "not a list"}]}

        result = interpret_response("GOOD RESULT " + json.dumps(payload))

        assert result.status == ScheduleStatus.GOOD_RESULT
        assert result.path_result == payload["pathResult"]

    def test_long_own_reason_is_capped(self) -> None:
        payload = dict(GOOD_PAYLOAD, reason=" ".join(["word"] * 500))
        result = interpret_response("GOOD RESULT " + json.dumps(payload))
        assert len(result.reason.split()) == MAX_REASON_WORDS

    def test_data_shape(self) -> None:
        result = interpret_response("GOOD RESULT " + json.dumps(GOOD_PAYLOAD))
        assert result.data == {"reason": "ok", "pathResult": GOOD_PAYLOAD["pathResult"]}

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "prose only",
            "{",
            "}{",
            '{"a": 1}',
            'GOOD RESULT {"pathResult": null}',
            "LACK INFO " + " ".join(["long"] * 1000),
            'LACK INFO {"reason": 5, "pathResult": []} ' + "x " * 300,
        ],
    )
    def test_always_returns_usable_result(self, raw: str) -> None:
        result = interpret_response(raw)

        assert result.status in (ScheduleStatus.GOOD_RESULT, ScheduleStatus.LACK_INFO)
        assert isinstance(result.path_result, list)
        assert len(result.path_result) > 0
        assert len(result.reason.split()) <= MAX_REASON_WORDS
