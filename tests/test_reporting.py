"""
Tests for result export and score interpretation.
"""

import json

import pytest

from data_models import (
    Assessment,
    CommuteEstimate,
    Coordinates,
    InterviewQuestion,
    InterviewQuestionSet,
    JobRequisition,
    MatchResult,
    MatchRun,
)
from reporting import interpret_score, run_to_dict, write_matches_json


def _result(job_id, score, commute=None):
    assessment = Assessment(
        match_score=score,
        strengths="- Forklift",
        gaps="- None",
        recommendations="- Interview",
        detailed_analysis="Solid fit",
    )
    return MatchResult(job=JobRequisition(id=job_id, title=f"Job {job_id}"), assessment=assessment, commute=commute)


@pytest.fixture
def run(candidate):
    commute = CommuteEstimate(
        candidate_address=candidate.address,
        candidate_coords=Coordinates(30.25, -97.75),
        job_site_address="500 Congress Ave, Austin, TX 78701",
        job_site_coords=Coordinates(30.277, -97.743),
        distance_km=3.1,
        distance_miles=1.9,
        commute_reasonable=True,
        commute_tier="short",
        commute_description="Short commute (reasonable)",
    )
    good = _result(1, 88, commute)
    failed = MatchResult(job=JobRequisition(id=2, title="Job 2"), assessment=Assessment.failed("quota exceeded"))
    return MatchRun(candidate=candidate, results=[good, failed], notifications=[good], notification_threshold=75)


class TestInterpretScore:
    """Test recruiter-facing score bands."""

    @pytest.mark.parametrize(
        "score,level",
        [
            (100, "Exceptional"),
            (90, "Exceptional"),
            (89, "Strong"),
            (75, "Strong"),
            (74, "Good"),
            (60, "Good"),
            (59, "Moderate"),
            (40, "Moderate"),
            (39, "Poor"),
            (0, "Poor"),
        ],
    )
    def test_bands(self, score, level):
        assert interpret_score(score).level == level

    def test_recommendation_text(self):
        assert interpret_score(80).recommendation == "Recommended - Schedule interview"


class TestRunToDict:
    """Test the exported payload."""

    def test_comparisons(self, run):
        payload = run_to_dict(run)
        good, failed = payload["comparisons"]

        assert good["job_id"] == 1
        assert good["match_score"] == 88
        assert good["score_level"] == "Strong"
        assert good["distance_info"] == {
            "distance_km": 3.1,
            "distance_miles": 1.9,
            "commute_reasonable": True,
            "commute_description": "Short commute (reasonable)",
        }
        assert failed["success"] is False
        assert failed["distance_info"] is None
        assert failed["interview_questions"] is None
        assert "score_level" not in failed

    def test_interview_questions_exported(self, run):
        run.notifications[0].interview_questions = InterviewQuestionSet(
            questions=(InterviewQuestion(question="How long have you driven forklifts?", category="Skills"),)
        )

        good = run_to_dict(run)["comparisons"][0]

        assert good["interview_questions"]["total_count"] == 1
        assert good["interview_questions"]["questions"][0]["question"] == "How long have you driven forklifts?"
        assert good["interview_questions"]["success"] is True

    def test_candidate_and_notifications(self, run):
        payload = run_to_dict(run)
        assert payload["candidate"]["name"] == "Jordan Rivera"
        assert payload["notifications"] == [1]
        assert payload["notification_threshold"] == 75


class TestWriteMatchesJson:
    def test_writes_file(self, run, tmp_path):
        output = tmp_path / "nested" / "matches.json"
        write_matches_json(run, output)

        payload = json.loads(output.read_text(encoding="utf-8"))
        assert [item["job_id"] for item in payload["comparisons"]] == [1, 2]
