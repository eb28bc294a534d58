"""Response interpreter: turn raw model text into a renderable result.

Models are asked to answer with a leading status flag followed by a JSON
object. In practice the flag may be missing, prose may surround the JSON,
or the JSON may be broken. Every input maps to a status plus a non-empty
path list; malformed output is never raised as an error.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any

from backend.app.llm.prompts import GOOD_RESULT_FLAG, LACK_INFO_FLAG
from backend.app.models.common import ScheduleStatus
from backend.app.planning.fallback import fallback_path_payload

logger = logging.getLogger(__name__)

MAX_REASON_WORDS = 150

EMPTY_RESPONSE_REASON = (
    "Empty response from model; using fallback schedule at Grainger Library and ECEB."
)
LACK_INFO_REASON = (
    "The model reported limited context; using a simplified schedule "
    "at Grainger Library and ECEB."
)
GOOD_RESULT_REASON = "Schedule generated based on the available context."
UNSTRUCTURED_REASON = (
    "Model could not generate a structured schedule; using fallback at Grainger Library and ECEB."
)

_FLAGS: tuple[tuple[str, ScheduleStatus], ...] = (
    (GOOD_RESULT_FLAG, ScheduleStatus.GOOD_RESULT),
    (LACK_INFO_FLAG, ScheduleStatus.LACK_INFO),
)
_FLAG_PATTERNS = [
    (re.compile(rf"^{re.escape(flag)}\s*", re.IGNORECASE), status) for flag, status in _FLAGS
]


@dataclass(frozen=True)
class JsonSpan:
    """Candidate JSON text and the prose found around it."""

    json_text: str | None
    outside_text: str


@dataclass(frozen=True)
class InterpretedResponse:
    """Parse result for one model response."""

    status: ScheduleStatus
    reason: str
    path_result: list[Any] = field(default_factory=list)

    @property
    def data(self) -> dict[str, Any]:
        """Payload in the shape models are asked to emit."""
        return {"reason": self.reason, "pathResult": self.path_result}


def split_status_flag(text: str) -> tuple[ScheduleStatus, str]:
    """Strip a leading status flag.

    Only a flag at the very start counts. Text without a flag is treated
    as LACK_INFO and returned whole.
    """
    for pattern, status in _FLAG_PATTERNS:
        match = pattern.match(text)
        if match:
            return status, text[match.end():]
    return ScheduleStatus.LACK_INFO, text


def extract_json_span(text: str) -> JsonSpan:
    """Slice the text between the first '{' and the last '}'.

    Text before the first brace and after the last brace is joined as
    outside text.
    """
    first = text.find("{")
    last = text.rfind("}")

    before = text if first == -1 else text[:first].strip()
    after = "" if last == -1 else text[last + 1:].strip()
    outside_text = " ".join(part for part in (before, after) if part)

    if first == -1 or last == -1 or last < first:
        return JsonSpan(json_text=None, outside_text=outside_text)
    return JsonSpan(json_text=text[first:last + 1], outside_text=outside_text)


def normalize_reason(text: str | None) -> str:
    """Collapse whitespace and keep at most MAX_REASON_WORDS words."""
    if not text:
        return ""
    return " ".join(text.split()[:MAX_REASON_WORDS])


def _parse_object(json_text: str | None) -> dict[str, Any] | None:
    if json_text is None:
        return None
    try:
        parsed = json.loads(json_text)
    except ValueError as e:
        logger.warning(f"Failed to parse JSON from model output; using fallback: {e}")
        return None
    if not isinstance(parsed, dict):
        return None
    return parsed


def interpret_response(raw: str | None) -> InterpretedResponse:
    """Interpret raw model text.

    Args:
        raw: Raw completion text (may be empty)

    Returns:
        InterpretedResponse whose status is GOOD_RESULT or LACK_INFO and whose
        path_result is never empty
    """
    content = (raw or "").strip()
    if not content:
        logger.warning("Empty response content from model; using fallback schedule")
        return InterpretedResponse(
            status=ScheduleStatus.LACK_INFO,
            reason=EMPTY_RESPONSE_REASON,
            path_result=[fallback_path_payload()],
        )

    status, rest = split_status_flag(content)
    span = extract_json_span(rest)
    parsed = _parse_object(span.json_text)

    if parsed is not None:
        path_result = parsed.get("pathResult")
        if not isinstance(path_result, list) or not path_result:
            logger.warning("Parsed JSON has empty or missing pathResult; using fallback schedule")
            path_result = [fallback_path_payload()]

        own_reason = parsed.get("reason")
        if isinstance(own_reason, str) and own_reason.strip():
            reason = own_reason
        elif span.outside_text:
            reason = span.outside_text
        elif status == ScheduleStatus.LACK_INFO:
            reason = LACK_INFO_REASON
        else:
            reason = GOOD_RESULT_REASON

        return InterpretedResponse(
            status=status,
            reason=normalize_reason(reason),
            path_result=path_result,
        )

    return InterpretedResponse(
        status=ScheduleStatus.LACK_INFO,
        reason=normalize_reason(span.outside_text or content or UNSTRUCTURED_REASON),
        path_result=[fallback_path_payload()],
    )
