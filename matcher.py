"""
Core pipeline coordinating LLM assessments and commute estimates for one candidate.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

from data_models import (
    Assessment,
    CandidateProfile,
    CommuteLookup,
    JobRequisition,
    MatchResult,
    MatchRun,
)
from distance_calculator import DistanceCalculator
from geocoding import GeocodeCache, build_geocoding_provider
from interview_questions import generate_interview_questions
from llm_handler import CompletionClient, GeminiClient
from prompts import build_assessment_prompt
from response_parser import interpret_response

LOGGER = logging.getLogger(__name__)


def rank_by_score(results: Sequence[MatchResult]) -> List[MatchResult]:
    """Sort by score, highest first; equal scores keep their input order."""
    return sorted(results, key=lambda result: result.match_score, reverse=True)


class JobMatcher:
    """
    Matches one candidate against every active job.

    Each job gets two independent units of work, the LLM assessment and the
    commute estimate, run concurrently on a thread pool. A failure in one unit is
    recorded on that job's result and never affects the other jobs.
    """

    def __init__(
        self,
        llm: CompletionClient,
        distance_calculator: DistanceCalculator,
        notification_threshold: int = 75,
        max_workers: int = 8,
        interview_questions: bool = True,
    ) -> None:
        """
        Initialize the job matcher.

        Args:
            llm: Completion client exposing ``complete(prompt) -> str``.
            distance_calculator: Commute estimator (shares its geocoding cache across runs).
            notification_threshold: Minimum score for a result to be notification-worthy.
            max_workers: Upper bound on concurrent threads.
            interview_questions: Prepare interview questions for notification-worthy results.
        """
        self.llm = llm
        self.distance_calculator = distance_calculator
        self.notification_threshold = notification_threshold
        self.max_workers = max_workers
        self.interview_questions = interview_questions

    @classmethod
    def from_settings(cls, settings) -> "JobMatcher":
        """Wire the Gemini client, the configured geocoder and a bounded cache."""
        llm = GeminiClient(
            settings.gemini_api_key,
            settings.gemini_model,
            temperature=settings.llm_temperature,
            max_output_tokens=settings.llm_max_output_tokens,
            timeout=settings.llm_timeout,
        )
        cache = GeocodeCache(
            maxsize=settings.geocode_cache_size,
            ttl_seconds=settings.geocode_cache_ttl_seconds,
        )
        calculator = DistanceCalculator(build_geocoding_provider(settings), cache)
        return cls(
            llm,
            calculator,
            notification_threshold=settings.notification_threshold,
            max_workers=settings.max_workers,
            interview_questions=settings.interview_questions,
        )

    def assess(self, resume_text: str, job: JobRequisition) -> Assessment:
        """
        Ask the LLM for an assessment of one resume against one job.

        Raises:
            Exception: Whatever the completion client raises; parsing never raises.
        """
        prompt = build_assessment_prompt(resume_text, job)
        reply = self.llm.complete(prompt)
        return interpret_response(reply)

    def _assess_safely(self, resume_text: str, job: JobRequisition) -> Assessment:
        try:
            assessment = self.assess(resume_text, job)
        except Exception as exc:
            LOGGER.error("Assessment failed for job %s (%s): %s", job.id, job.title, exc)
            return Assessment.failed(str(exc))
        LOGGER.info("Match score for %s: %d%%", job.title, assessment.match_score)
        return assessment

    def _commute_safely(self, address: Optional[str], job: JobRequisition) -> CommuteLookup:
        try:
            return self.distance_calculator.lookup(address, job.job_site_address)
        except Exception as exc:
            LOGGER.error("Distance calculation failed for job %s (%s): %s", job.id, job.title, exc)
            return CommuteLookup(errors={"calculation": str(exc)}, reason=str(exc))

    def _pool_size(self, tasks: int) -> int:
        return max(1, min(self.max_workers, tasks))

    def _fan_out(self, units: Sequence[Tuple[CandidateProfile, JobRequisition]]) -> List[MatchResult]:
        """Run assessment and commute work for every (candidate, job) pair; output keeps input order."""
        if not units:
            return []

        with ThreadPoolExecutor(max_workers=self._pool_size(2 * len(units))) as executor:
            assessment_futures = [
                executor.submit(self._assess_safely, candidate.resume_text, job) for candidate, job in units
            ]
            commute_futures = [
                executor.submit(self._commute_safely, candidate.address, job) for candidate, job in units
            ]
            results = []
            for (_, job), assessment_future, commute_future in zip(units, assessment_futures, commute_futures):
                lookup = commute_future.result()
                results.append(
                    MatchResult(
                        job=job,
                        assessment=assessment_future.result(),
                        commute=lookup.estimate,
                        geocoding_errors=dict(lookup.errors),
                    )
                )
        return results

    def _attach_interview_questions(self, candidate: CandidateProfile, results: Sequence[MatchResult]) -> None:
        if not results:
            return
        with ThreadPoolExecutor(max_workers=self._pool_size(len(results))) as executor:
            futures = [
                executor.submit(
                    generate_interview_questions,
                    self.llm,
                    candidate.resume_text,
                    result.job,
                    result.assessment,
                    candidate.name,
                )
                for result in results
            ]
            for result, future in zip(results, futures):
                result.interview_questions = future.result()

    def run(self, candidate: CandidateProfile, jobs: Sequence[JobRequisition]) -> MatchRun:
        """
        Execute the matching pipeline for one candidate.

        Args:
            candidate: Candidate profile with resume text and (optional) home address.
            jobs: Job requisitions; inactive ones are skipped.

        Returns:
            MatchRun with every active job's result ranked by score and the
            notification-worthy subset.

        Raises:
            ValueError: If an active job violates the requisition contract.
        """
        active = [job for job in jobs if job.is_active]
        if len(active) != len(jobs):
            LOGGER.info("Skipping %d inactive jobs", len(jobs) - len(active))
        for job in active:
            job.validate()

        if not candidate.address:
            LOGGER.info("No address for candidate %s; commute estimates skipped", candidate.name or candidate.id)

        LOGGER.info("Matching candidate %s against %d active jobs", candidate.name or candidate.id, len(active))

        ranked = rank_by_score(self._fan_out([(candidate, job) for job in active]))
        notifications = [
            result for result in ranked
            if result.success and result.match_score >= self.notification_threshold
        ]
        if self.interview_questions:
            self._attach_interview_questions(candidate, notifications)
        LOGGER.info(
            "Processed %d jobs total, %d at or above threshold %d",
            len(ranked),
            len(notifications),
            self.notification_threshold,
        )
        return MatchRun(
            candidate=candidate,
            results=ranked,
            notifications=notifications,
            notification_threshold=self.notification_threshold,
        )

    def rank_candidates(
        self, candidates: Sequence[CandidateProfile], job: JobRequisition
    ) -> List[Tuple[CandidateProfile, MatchResult]]:
        """
        Assess several candidates against one job.

        Args:
            candidates: Candidate profiles to compare.
            job: The job requisition.

        Returns:
            (candidate, result) pairs sorted by score, highest first.
        """
        job.validate()
        results = self._fan_out([(candidate, job) for candidate in candidates])
        pairs = list(zip(candidates, results))
        return sorted(pairs, key=lambda pair: pair[1].match_score, reverse=True)
