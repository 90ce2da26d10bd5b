"""
Pytest configuration and shared fixtures.
"""

import json
import threading
from typing import Dict, List, Optional, Tuple

import pytest

from data_models import CandidateProfile, Coordinates, GeocodeResult, JobRequisition
from distance_calculator import DistanceCalculator
from geocoding import GeocodeCache, GeocodingProvider

AUSTIN_MAIN_ST = (30.2500, -97.7500)
AUSTIN_CONGRESS_AVE = (30.2770, -97.7430)
ROUND_ROCK = (30.5083, -97.6789)
SAN_ANTONIO = (29.4241, -98.4936)


class FakeGeocodingProvider(GeocodingProvider):
    """Provider answering from a fixed table and counting calls."""

    name = "fake"

    def __init__(self, known: Dict[str, Tuple[float, float]]):
        self.known = {address.lower(): coords for address, coords in known.items()}
        self.calls: List[str] = []
        self._lock = threading.Lock()

    def resolve(self, address: str) -> GeocodeResult:
        with self._lock:
            self.calls.append(address)
        coords = self.known.get(address.lower())
        if coords is None:
            return GeocodeResult(success=False, provider=self.name, error="Address not found")
        return GeocodeResult(success=True, coordinates=Coordinates(*coords), provider=self.name)


class ScriptedCompletionClient:
    """Completion client returning canned replies keyed by job title found in the prompt."""

    def __init__(
        self,
        replies: Dict[str, str],
        failures: Optional[Dict[str, Exception]] = None,
        question_reply: str = "",
    ):
        self.replies = replies
        self.failures = failures or {}
        self.question_reply = question_reply
        self.prompts: List[str] = []
        self._lock = threading.Lock()

    def complete(self, prompt: str) -> str:
        with self._lock:
            self.prompts.append(prompt)
        if "preparing interview questions" in prompt:
            return self.question_reply
        for title, exc in self.failures.items():
            if f"Title: {title}\n" in prompt:
                raise exc
        for title, reply in self.replies.items():
            if f"Title: {title}\n" in prompt:
                return reply
        return ""

    @property
    def assessment_prompts(self) -> List[str]:
        return [prompt for prompt in self.prompts if "CANDIDATE RESUME" in prompt]

    @property
    def question_prompts(self) -> List[str]:
        return [prompt for prompt in self.prompts if "preparing interview questions" in prompt]


def assessment_reply(score: int, **overrides) -> str:
    payload = {
        "match_score": score,
        "employment_gap_detected": False,
        "employment_gap_details": "Continuous employment history",
        "commute_info": "Approximately 3 miles / 10 minutes drive",
        "commute_reasonable": True,
        "strengths": "- Forklift certified\n- 4 years warehouse experience",
        "gaps": "- No reach truck experience",
        "recommendations": "- Phone screen\n- Verify certification",
        "summary": f"Candidate scored {score}.",
    }
    payload.update(overrides)
    return json.dumps(payload)


@pytest.fixture
def known_addresses() -> Dict[str, Tuple[float, float]]:
    return {
        "100 Main St, Austin, TX 78701": AUSTIN_MAIN_ST,
        "500 Congress Ave, Austin, TX 78701": AUSTIN_CONGRESS_AVE,
        "Round Rock, TX 78664": ROUND_ROCK,
        "San Antonio, TX 78205": SAN_ANTONIO,
    }


@pytest.fixture
def fake_provider(known_addresses) -> FakeGeocodingProvider:
    return FakeGeocodingProvider(known_addresses)


@pytest.fixture
def distance_calculator(fake_provider) -> DistanceCalculator:
    return DistanceCalculator(fake_provider, GeocodeCache(maxsize=64, ttl_seconds=None))


@pytest.fixture
def candidate() -> CandidateProfile:
    return CandidateProfile(
        id=1,
        name="Jordan Rivera",
        email="jordan@example.com",
        phone="512-555-0100",
        address="100 Main St, Austin, TX 78701",
        resume_text=(
            "Jordan Rivera\n100 Main St, Austin, TX 78701\n"
            "Warehouse Associate, Acme Logistics (June 2019 - Present)\n"
            "Forklift certified, OSHA 10"
        ),
    )


@pytest.fixture
def five_jobs() -> List[JobRequisition]:
    addresses = [
        "500 Congress Ave, Austin, TX 78701",
        "Round Rock, TX 78664",
        "500 Congress Ave, Austin, TX 78701",
        "San Antonio, TX 78205",
        "500 Congress Ave, Austin, TX 78701",
    ]
    return [
        JobRequisition(
            id=index,
            title=f"Job {index}",
            description="Operate equipment on the warehouse floor",
            required_skills="Forklift",
            job_site_address=address,
            sector="Logistics",
        )
        for index, address in enumerate(addresses, start=1)
    ]


@pytest.fixture
def make_completion_client():
    """Factory for scripted completion clients."""
    return ScriptedCompletionClient


@pytest.fixture
def make_reply():
    """Factory for well-formed JSON assessment replies."""
    return assessment_reply


def questions_reply(count: int) -> str:
    questions = [
        {
            "type": ("technical", "behavioral", "situational")[index % 3],
            "category": f"Category {index}",
            "question": f"Question {index}?",
            "purpose": f"Purpose {index}",
            "followUp": f"Follow-up {index}",
        }
        for index in range(1, count + 1)
    ]
    return json.dumps({"questions": questions})


@pytest.fixture
def make_questions_reply():
    """Factory for JSON interview question replies."""
    return questions_reply
