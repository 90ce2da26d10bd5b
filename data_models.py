"""
Shared data models used across the application.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

QUESTION_TYPES = ("technical", "behavioral", "situational")


@dataclass
class JobRequisition:
    """Open job requisition as published by the job board feed."""

    id: Any
    title: str
    description: str = ""
    required_skills: str = ""
    preferred_skills: str = ""
    experience_level: str = ""
    education_requirements: str = ""
    job_site_address: str = ""
    sector: str = ""
    job_type: str = ""
    salary_hourly: str = ""
    status: str = "active"

    @property
    def is_active(self) -> bool:
        return (self.status or "").strip().lower() == "active"

    def validate(self) -> None:
        """
        Check the fields every matching run depends on.

        Raises:
            ValueError: If the requisition has no id or no title.
        """
        if self.id is None or str(self.id).strip() == "":
            raise ValueError(f"Job requisition is missing an id (title={self.title!r})")
        if not self.title or not self.title.strip():
            raise ValueError(f"Job requisition {self.id} is missing a title")


@dataclass
class CandidateProfile:
    """Candidate details extracted from an uploaded resume."""

    resume_text: str
    id: Any = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


@dataclass(frozen=True)
class Assessment:
    """Outcome of comparing one resume to one job."""

    match_score: int
    strengths: str
    gaps: str
    recommendations: str
    detailed_analysis: str
    employment_gap_detected: bool = False
    employment_gap_details: str = "No gaps detected"
    commute_info: str = "Commute information not available"
    commute_reasonable: Optional[bool] = None
    success: bool = True
    parse_method: str = "json"

    @classmethod
    def failed(cls, message: str) -> "Assessment":
        """Build the record used when the completion call itself failed."""
        return cls(
            match_score=0,
            strengths="Error processing resume",
            gaps="Unable to analyze",
            recommendations="Please try again",
            detailed_analysis=message,
            employment_gap_details="",
            success=False,
            parse_method="error",
        )


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class GeocodeResult:
    """Result of resolving one address, successful or not."""

    success: bool
    coordinates: Optional[Coordinates] = None
    formatted_address: Optional[str] = None
    provider: Optional[str] = None
    error: Optional[str] = None
    cached: bool = False


@dataclass(frozen=True)
class CommuteEstimate:
    """Great-circle commute estimate between a candidate and a job site."""

    candidate_address: str
    candidate_coords: Coordinates
    job_site_address: str
    job_site_coords: Coordinates
    distance_km: float
    distance_miles: float
    commute_reasonable: bool
    commute_tier: str
    commute_description: str
    calculation_method: str = "Haversine (straight-line distance)"
    success: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "distance_km": self.distance_km,
            "distance_miles": self.distance_miles,
            "commute_reasonable": self.commute_reasonable,
            "commute_description": self.commute_description,
        }


@dataclass
class CommuteLookup:
    """Commute estimate plus the per-side geocoding errors that prevented one."""

    estimate: Optional[CommuteEstimate] = None
    errors: Dict[str, str] = field(default_factory=dict)
    reason: Optional[str] = None


@dataclass(frozen=True)
class InterviewQuestion:
    """One tailored interview question with its follow-up."""

    question: str
    question_type: str = "technical"
    category: str = ""
    purpose: str = ""
    follow_up: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "type": self.question_type,
            "category": self.category,
            "question": self.question,
            "purpose": self.purpose,
            "follow_up": self.follow_up,
        }


@dataclass(frozen=True)
class InterviewQuestionSet:
    """Questions prepared for one candidate and one job."""

    questions: Tuple[InterviewQuestion, ...]
    success: bool = True
    error: Optional[str] = None

    def by_type(self) -> Dict[str, List[InterviewQuestion]]:
        """Group questions by type; unknown types are filed as technical."""
        grouped: Dict[str, List[InterviewQuestion]] = {kind: [] for kind in QUESTION_TYPES}
        for question in self.questions:
            grouped.get(question.question_type, grouped["technical"]).append(question)
        return grouped

    def to_dict(self) -> Dict[str, Any]:
        return {
            "questions": [question.to_dict() for question in self.questions],
            "total_count": len(self.questions),
            "success": self.success,
            "error": self.error,
        }


@dataclass
class MatchResult:
    """Assessment and optional commute estimate for one job."""

    job: JobRequisition
    assessment: Assessment
    commute: Optional[CommuteEstimate] = None
    geocoding_errors: Dict[str, str] = field(default_factory=dict)
    interview_questions: Optional[InterviewQuestionSet] = None

    @property
    def match_score(self) -> int:
        return self.assessment.match_score

    @property
    def success(self) -> bool:
        return self.assessment.success

    def to_dict(self) -> Dict[str, Any]:
        """Render the record handed to the API layer."""
        assessment = self.assessment
        return {
            "job_id": self.job.id,
            "job_title": self.job.title,
            "match_score": assessment.match_score,
            "employment_gap_detected": assessment.employment_gap_detected,
            "employment_gap_details": assessment.employment_gap_details,
            "strengths": assessment.strengths,
            "gaps": assessment.gaps,
            "recommendations": assessment.recommendations,
            "detailed_analysis": assessment.detailed_analysis,
            "commute_info": assessment.commute_info,
            "distance_info": self.commute.to_dict() if self.commute else None,
            "success": assessment.success,
            "interview_questions": (
                self.interview_questions.to_dict() if self.interview_questions else None
            ),
        }


@dataclass
class MatchRun:
    """Ranked results of matching one candidate against the active jobs."""

    candidate: CandidateProfile
    results: List[MatchResult]
    notifications: List[MatchResult]
    notification_threshold: int
