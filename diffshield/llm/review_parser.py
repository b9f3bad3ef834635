"""
Review Response Parser
======================
Extracts and validates the structured review from raw model text.

Extraction:
    - Models often wrap the JSON in prose or markdown fences, so the parser
      scans for balanced {...} spans instead of decoding the whole text.
    - The scanner tracks bracket depth and JSON string state, so braces
      inside string literals never end or start a span.
    - Outermost candidates are tried in order of their opening brace; a
      candidate that fails to decode is skipped whole. The first one
      that decodes to a JSON object wins.

Validation (outer contract only):
    - prIntent, changeOverview and verdict must be present and truthy,
      and verdict must be an object. Otherwise the whole parse fails.
    - keyRisks / checklist default to [], prBodySuggestion to
      {"sections": []}.
    - verdict.verdict defaults to "commented", verdict.confidence to 0.5
      (also when non-numeric), verdict.summary to "".
    - Entries inside keyRisks / checklist / prBodySuggestion are passed
      through unchanged.

Failure Policy:
    parse_v2_response never raises. Every failure is logged and returns
    None; parse_v2_response_detailed also reports the failure reason.
"""
import json
import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple

from diffshield.core.constants import DEFAULT_VERDICT, DEFAULT_VERDICT_CONFIDENCE
from diffshield.models.review_output import (
    V2ReviewOutput,
    V2Verdict,
    empty_pr_body_suggestion,
)
from diffshield.utils.failure_reasons import (
    INVALID_JSON,
    NO_JSON_FOUND,
    SCHEMA_VIOLATION,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("prIntent", "changeOverview", "verdict")


# ---------------------------------------------------------------------------
# JSON span scanning
# ---------------------------------------------------------------------------
def _balanced_spans(text: str) -> List[Tuple[int, int]]:
    """
    Return (start, end) for every balanced {...} span in text, in one pass.

    Spans are ordered by opening brace. A "{" that never closes produces no
    span, but spans opened after it are still found. Quotes outside any
    brace are prose and do not start a string.
    """
    spans = []
    open_braces = []
    in_string = False
    escaped = False
    for i, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"' and open_braces:
            in_string = True
        elif ch == "{":
            open_braces.append(i)
        elif ch == "}" and open_braces:
            spans.append((open_braces.pop(), i + 1))
    spans.sort()
    return spans


def iter_json_object_spans(text: str) -> Iterator[str]:
    """
    Yield the outermost balanced {...} spans in text, ordered by opening brace.

    Objects nested inside a yielded span are never yielded on their own, so
    a malformed object cannot be rescued by one of its members.
    """
    if not text:
        return
    resume_at = 0
    for start, end in _balanced_spans(text):
        if start < resume_at:
            continue
        yield text[start:end]
        resume_at = end


def extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Return the first span that decodes to a JSON object, or None."""
    data, _ = _extract(text)
    return data


def _extract(text: str) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    found_span = False
    for span in iter_json_object_spans(text):
        found_span = True
        try:
            data = json.loads(span)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data, None
    return None, INVALID_JSON if found_span else NO_JSON_FOUND


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------
def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _build_verdict(raw: Dict[str, Any]) -> V2Verdict:
    confidence = raw.get("confidence")
    return V2Verdict(
        verdict=raw.get("verdict") or DEFAULT_VERDICT,
        confidence=confidence if _is_number(confidence) else DEFAULT_VERDICT_CONFIDENCE,
        summary=raw.get("summary") or "",
    )


def _list_or_empty(value: Any) -> list:
    return value if isinstance(value, list) else []


def build_review_output(data: Dict[str, Any]) -> Optional[V2ReviewOutput]:
    """Apply the outer schema gate and defaults to a decoded JSON object."""
    missing = [name for name in REQUIRED_FIELDS if not data.get(name)]
    if missing:
        logger.warning("Review JSON missing required fields: %s", ", ".join(missing))
        return None

    verdict = data["verdict"]
    if not isinstance(verdict, dict):
        logger.warning("Review JSON verdict is not an object: %r", verdict)
        return None

    body_suggestion = data.get("prBodySuggestion")
    if not isinstance(body_suggestion, dict):
        body_suggestion = empty_pr_body_suggestion()
    elif "sections" not in body_suggestion:
        body_suggestion = {**body_suggestion, "sections": []}

    return V2ReviewOutput(
        pr_intent=data["prIntent"],
        change_overview=data["changeOverview"],
        verdict=_build_verdict(verdict),
        key_risks=_list_or_empty(data.get("keyRisks")),
        checklist=_list_or_empty(data.get("checklist")),
        pr_body_suggestion=body_suggestion,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def parse_v2_response_detailed(raw_text: str) -> Tuple[Optional[V2ReviewOutput], Optional[str]]:
    """
    Parse raw model text and report why parsing failed.

    Returns
    -------
    tuple
        (V2ReviewOutput, None) on success, (None, reason) on failure where
        reason is NO_JSON_FOUND, INVALID_JSON or SCHEMA_VIOLATION.
    """
    data, reason = _extract(raw_text or "")
    if data is None:
        if reason == NO_JSON_FOUND:
            logger.warning("No JSON object found in model response (%d chars)", len(raw_text or ""))
        else:
            logger.warning("Model response JSON could not be decoded: %.200s", raw_text)
        return None, reason

    output = build_review_output(data)
    if output is None:
        return None, SCHEMA_VIOLATION
    return output, None


def parse_v2_response(raw_text: str) -> Optional[V2ReviewOutput]:
    """
    Parse raw model text into a V2ReviewOutput.

    Parameters
    ----------
    raw_text : str
        Raw model content, possibly with surrounding prose.

    Returns
    -------
    V2ReviewOutput or None
        None when no JSON object is found, it cannot be decoded, or a
        required field is missing.
    """
    output, _ = parse_v2_response_detailed(raw_text)
    return output
