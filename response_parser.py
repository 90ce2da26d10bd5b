"""
Interpretation of free-form assessment replies from the completion model.

The model is asked for a single JSON object but does not always comply. Replies
are read through an ordered list of extraction strategies; if none yields a
usable object, scores and sections are recovered with regular expressions and
missing narrative is filled from score-tiered templates. Interpretation never
raises.
"""

from __future__ import annotations

import collections.abc
import json
import logging
import math
import re
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from data_models import Assessment

LOGGER = logging.getLogger(__name__)

DEFAULT_FALLBACK_SCORE = 50
MIN_SECTION_LENGTH = 20

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.I)
_BULLET_RE = re.compile(r"^[-*\u2022\u00b7]\s*")
_LINE_SPLIT_RE = re.compile(r"\\n|\r?\n")

SCORE_PATTERNS = (
    re.compile(r"match[_\s-]*score[\"\s:]*(\d+)", re.I),
    re.compile(r"score[\"\s:]*(\d+)", re.I),
    re.compile(r"(\d+)%?\s*match", re.I),
    re.compile(r"\"(\d+)\""),
)

# (strengths, gaps, recommendations) per score tier.
OPTIMISTIC_TEMPLATE = (
    ["Strong candidate with relevant experience", "Meets most job requirements", "Good background for the role"],
    ["Minor skill gaps can be addressed with training", "Verify specific requirements in interview"],
    ["Recommend for interview", "Strong match for the position", "Priority candidate"],
)
NEUTRAL_TEMPLATE = (
    ["Has core qualifications", "Relevant work experience", "Meets basic requirements"],
    ["Some preferred skills missing", "May need additional training", "Verify capabilities in interview"],
    ["Consider for interview", "Assess training needs", "Good potential candidate"],
)
CAUTIONARY_TEMPLATE = (
    ["Some transferable skills", "Willing to learn"],
    ["Lacks several key qualifications", "Limited relevant experience", "May require significant training"],
    [
        "Not recommended unless willing to train",
        "Consider for entry-level positions",
        "Look for better-qualified candidates",
    ],
)


def format_bullet_points(value: Union[str, Iterable[Any], None]) -> str:
    """
    Normalize list-like text into "- item" lines.

    Accepts strings with real or escaped newlines, with or without existing
    dash/asterisk/bullet markers, and JSON arrays. Any other value (a number,
    a boolean, an object) is treated as a single item.
    """
    if value is None:
        return ""

    if isinstance(value, (str, dict)) or not isinstance(value, collections.abc.Iterable):
        items = [value]
    else:
        items = [item for item in value if item is not None]

    raw_lines = []
    for item in items:
        raw_lines.extend(_LINE_SPLIT_RE.split(str(item)))

    lines = []
    for line in raw_lines:
        line = _BULLET_RE.sub("", line.strip()).strip()
        if line:
            lines.append(f"- {line}")
    return "\n".join(lines)


def score_template(score: int):
    """Pick the (strengths, gaps, recommendations) template for a score."""
    if score >= 75:
        return OPTIMISTIC_TEMPLATE
    if score >= 60:
        return NEUTRAL_TEMPLATE
    return CAUTIONARY_TEMPLATE


# --- structured extraction strategies -------------------------------------------------
# Each returns candidate JSON text or None ("try next").


def _whole_reply(text: str) -> Optional[str]:
    return text or None


def _fenced_block(text: str) -> Optional[str]:
    match = _FENCE_RE.search(text)
    return match.group(1).strip() if match else None


def _outer_braces(text: str) -> Optional[str]:
    fenced = _fenced_block(text)
    if fenced is not None:
        text = fenced
    first, last = text.find("{"), text.rfind("}")
    if first == -1 or last <= first:
        return None
    return text[first : last + 1]


JSON_STRATEGIES: List[Callable[[str], Optional[str]]] = [_whole_reply, _fenced_block, _outer_braces]


def _coerce_score(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip().rstrip("%"))
        except ValueError:
            return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return int(value)
    return None


def _load_object(candidate: str) -> Optional[Dict[str, Any]]:
    try:
        payload = json.loads(candidate)
    except (json.JSONDecodeError, ValueError):
        return None
    return payload if isinstance(payload, dict) else None


def find_json_object(text: str, accept: Callable[[Dict[str, Any]], bool]) -> Optional[Dict[str, Any]]:
    """
    Run the extraction strategies in order and return the first JSON object ``accept`` approves.

    Args:
        text: Raw model reply.
        accept: Predicate deciding whether a decoded object is usable.

    Returns:
        The decoded object, or None if no strategy produced an acceptable one.
    """
    for strategy in JSON_STRATEGIES:
        candidate = strategy(text)
        if candidate is None:
            continue
        payload = _load_object(candidate)
        if payload is not None and accept(payload):
            LOGGER.debug("JSON extracted with %s", strategy.__name__)
            return payload
    return None


def extract_payload(text: str) -> Optional[Dict[str, Any]]:
    """Return the first JSON object with a numeric match_score found by the strategies."""
    return find_json_object(text, lambda payload: _coerce_score(payload.get("match_score")) is not None)


def _as_bool(value: Any) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
        return None
    return bool(value)


def clamp_score(score: int) -> int:
    if score < 0 or score > 100:
        LOGGER.warning("match_score %d outside 0-100, clamping", score)
    return max(0, min(100, score))


def _section(payload: Dict[str, Any], key: str, default: str) -> str:
    return format_bullet_points(payload.get(key)) or format_bullet_points(default)


def _text(payload: Dict[str, Any], key: str, default: str) -> str:
    value = payload.get(key)
    text = "" if value is None else str(value).strip()
    return text or default


def _from_payload(payload: Dict[str, Any]) -> Assessment:
    score = clamp_score(_coerce_score(payload.get("match_score")))
    return Assessment(
        match_score=score,
        employment_gap_detected=bool(_as_bool(payload.get("employment_gap_detected"))),
        employment_gap_details=_text(payload, "employment_gap_details", "No gaps detected"),
        commute_info=_text(payload, "commute_info", "Commute information not available"),
        commute_reasonable=_as_bool(payload.get("commute_reasonable")),
        strengths=_section(payload, "strengths", "No strengths identified"),
        gaps=_section(payload, "gaps", "No gaps identified"),
        recommendations=_section(payload, "recommendations", "No recommendations provided"),
        detailed_analysis=_text(payload, "summary", "") or _text(payload, "detailed_analysis", ""),
        parse_method="json",
    )


# --- regex fallback ------------------------------------------------------------------


def extract_score(text: str) -> int:
    """Find a plausible 0-100 score in free text, defaulting to 50."""
    for pattern in SCORE_PATTERNS:
        match = pattern.search(text)
        if match:
            score = int(match.group(1))
            if 0 <= score <= 100:
                return score
    return DEFAULT_FALLBACK_SCORE


def extract_section(text: str, name: str) -> str:
    """Recover a named section from a malformed reply; empty string if absent."""
    key = r"\b" + re.escape(name) + r"\b[\"*]*[ \t]*"
    patterns = (
        re.compile(key + r":\s*\"((?:[^\"\\]|\\.)*)\"", re.I),
        re.compile(key + r":?[*]*[ \t]*\r?\n((?:[ \t]*[-*\u2022][ \t].*(?:\r?\n|$))+)", re.I),
        re.compile(key + r":[*]*[ \t]*([^\n]+)", re.I),
    )
    for pattern in patterns:
        match = pattern.search(text)
        if match and match.group(1).strip():
            section = match.group(1).strip().replace('\\"', '"').replace("\\n", "\n")
            return section.strip().strip("\"',").strip()
    return ""


def fallback_assessment(text: str) -> Assessment:
    """Build a best-effort assessment from a reply that is not usable JSON."""
    score = extract_score(text)
    strengths = format_bullet_points(extract_section(text, "strengths"))
    gaps = format_bullet_points(extract_section(text, "gaps"))
    recommendations = format_bullet_points(extract_section(text, "recommendations"))

    template = score_template(score)
    if len(strengths) < MIN_SECTION_LENGTH or len(gaps) < MIN_SECTION_LENGTH:
        strengths, gaps, recommendations = (format_bullet_points(part) for part in template)
    elif len(recommendations) < MIN_SECTION_LENGTH:
        recommendations = format_bullet_points(template[2])

    summary = extract_section(text, "summary") or extract_section(text, "detailed_analysis")
    if not summary:
        summary = (
            f"Match score: {score}%. Review the candidate's experience and qualifications for this role."
        )

    gap_flag = re.search(r"employment_gap_detected\"?\s*:\s*(true|false)", text, re.I)
    gap_details = extract_section(text, "employment_gap_details")

    return Assessment(
        match_score=score,
        employment_gap_detected=bool(gap_flag and gap_flag.group(1).lower() == "true"),
        employment_gap_details=gap_details or "No gaps detected",
        commute_info=extract_section(text, "commute_info") or "Commute information not available",
        strengths=strengths,
        gaps=gaps,
        recommendations=recommendations,
        detailed_analysis=summary,
        parse_method="fallback",
    )


def interpret_response(raw: Optional[str]) -> Assessment:
    """
    Turn the model's raw reply into an Assessment.

    Args:
        raw: Text returned by the completion model (may be empty or malformed).

    Returns:
        A structurally valid Assessment; never raises.
    """
    text = (raw or "").strip()
    try:
        payload = extract_payload(text)
        if payload is not None:
            return _from_payload(payload)
        LOGGER.warning("Assessment reply is not valid JSON, using fallback parser. Reply (first 200 chars): %s", text[:200])
        return fallback_assessment(text)
    except Exception as exc:
        LOGGER.error("Unexpected error interpreting assessment reply: %s", exc)
        return fallback_assessment(text)
