"""
Result export and score interpretation for recruiters.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from data_models import MatchRun

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreBand:
    level: str
    recommendation: str


def interpret_score(score: int) -> ScoreBand:
    """Map a match score to the band shown to recruiters."""
    if score >= 90:
        return ScoreBand("Exceptional", "Highly recommended - Priority interview")
    if score >= 75:
        return ScoreBand("Strong", "Recommended - Schedule interview")
    if score >= 60:
        return ScoreBand("Good", "Consider for interview")
    if score >= 40:
        return ScoreBand("Moderate", "Review carefully - May lack key qualifications")
    return ScoreBand("Poor", "Not recommended")


def run_to_dict(run: MatchRun) -> Dict[str, Any]:
    """Serialize a matching run into the payload returned to the API layer."""
    comparisons = []
    for result in run.results:
        record = result.to_dict()
        if result.success:
            band = interpret_score(result.match_score)
            record["score_level"] = band.level
            record["score_recommendation"] = band.recommendation
        comparisons.append(record)

    candidate = run.candidate
    return {
        "candidate": {
            "id": candidate.id,
            "name": candidate.name,
            "email": candidate.email,
            "phone": candidate.phone,
            "address": candidate.address,
        },
        "notification_threshold": run.notification_threshold,
        "comparisons": comparisons,
        "notifications": [result.job.id for result in run.notifications],
    }


def write_matches_json(run: MatchRun, output_path: Path) -> None:
    """
    Persist match results to JSON.

    Args:
        run: Ranked matching run.
        output_path: Destination file path.
    """
    payload = run_to_dict(run)
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False, default=str), encoding="utf-8")
    LOGGER.info("Wrote match JSON to %s", output_path)
