"""
Tailored interview questions for candidates who cleared the notification threshold.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from data_models import QUESTION_TYPES, Assessment, InterviewQuestion, InterviewQuestionSet, JobRequisition
from llm_handler import CompletionClient
from prompts import build_interview_questions_prompt
from response_parser import find_json_object

LOGGER = logging.getLogger(__name__)

MIN_QUESTIONS = 5
MAX_QUESTIONS = 7


def default_questions(job_title: str = "this position") -> List[InterviewQuestion]:
    """Generic screening questions used when the model's questions are missing or too few."""
    return [
        InterviewQuestion(
            question_type="technical",
            category="Skills",
            question=f"Can you describe your most relevant experience for {job_title}?",
            purpose="Assess technical background and relevance",
            follow_up="What specific equipment or tools did you use?",
        ),
        InterviewQuestion(
            question_type="behavioral",
            category="Safety",
            question=(
                "Tell me about a time when you had to follow strict safety protocols. "
                "How did you ensure compliance?"
            ),
            purpose="Evaluate safety awareness and compliance mindset",
            follow_up="What would you do if you saw someone violating safety rules?",
        ),
        InterviewQuestion(
            question_type="technical",
            category="Problem Solving",
            question="Describe a technical problem you encountered in your previous role and how you resolved it.",
            purpose="Assess troubleshooting and problem-solving skills",
            follow_up="How did you prevent that issue from happening again?",
        ),
        InterviewQuestion(
            question_type="behavioral",
            category="Teamwork",
            question="How do you handle working as part of a production team? Can you give an example?",
            purpose="Evaluate teamwork and communication skills",
            follow_up="How do you handle conflicts with team members?",
        ),
        InterviewQuestion(
            question_type="situational",
            category="Quality Control",
            question=(
                "If you noticed a defect in a product you just finished, but your supervisor was "
                "rushing to meet a deadline, what would you do?"
            ),
            purpose="Assess quality commitment vs. production pressure",
            follow_up="How would you communicate this to your supervisor?",
        ),
        InterviewQuestion(
            question_type="behavioral",
            category="Reliability",
            question="What does reliability and punctuality mean to you in a manufacturing environment?",
            purpose="Gauge work ethic and commitment",
            follow_up="Tell me about your attendance record in your last position",
        ),
        InterviewQuestion(
            question_type="situational",
            category="Adaptability",
            question="How would you handle being asked to work overtime or switch shifts on short notice?",
            purpose="Assess flexibility and availability",
            follow_up="Are there any shift restrictions we should know about?",
        ),
    ]


def _text(item: dict, *keys: str) -> str:
    for key in keys:
        value = item.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return ""


def _to_question(item: Any) -> Optional[InterviewQuestion]:
    if isinstance(item, str):
        return InterviewQuestion(question=item.strip()) if item.strip() else None
    if not isinstance(item, dict):
        return None

    question = _text(item, "question")
    if not question:
        return None
    question_type = _text(item, "type").lower()
    return InterviewQuestion(
        question=question,
        question_type=question_type if question_type in QUESTION_TYPES else "technical",
        category=_text(item, "category"),
        purpose=_text(item, "purpose"),
        follow_up=_text(item, "followUp", "follow_up"),
    )


def parse_interview_questions(raw: Optional[str]) -> InterviewQuestionSet:
    """
    Turn the model's reply into 5-7 questions.

    Short lists are padded with default questions and long ones trimmed. A
    reply without a ``questions`` array yields the defaults with
    ``success=False``. Never raises.
    """
    text = (raw or "").strip()
    payload = find_json_object(text, lambda candidate: isinstance(candidate.get("questions"), list))
    if payload is None:
        LOGGER.error("Could not parse interview questions. Reply (first 200 chars): %s", text[:200])
        return InterviewQuestionSet(
            questions=tuple(default_questions()),
            success=False,
            error="Failed to parse AI response, using default questions",
        )

    questions = [question for question in map(_to_question, payload["questions"]) if question is not None]
    if len(questions) < MIN_QUESTIONS:
        LOGGER.warning("Only %d interview questions generated, padding with defaults", len(questions))
        questions.extend(default_questions()[: MIN_QUESTIONS - len(questions)])
    elif len(questions) > MAX_QUESTIONS:
        LOGGER.warning("Too many interview questions (%d), trimming to %d", len(questions), MAX_QUESTIONS)
        questions = questions[:MAX_QUESTIONS]

    return InterviewQuestionSet(questions=tuple(questions))


def generate_interview_questions(
    llm: CompletionClient,
    resume_text: str,
    job: JobRequisition,
    assessment: Assessment,
    candidate_name: Optional[str] = None,
) -> InterviewQuestionSet:
    """
    Ask the model for interview questions tailored to one assessed candidate.

    Args:
        llm: Completion client.
        resume_text: Candidate's resume text.
        job: Job requisition the candidate was matched to.
        assessment: Finished assessment (strengths and gaps steer the questions).
        candidate_name: Name used in the prompt.

    Returns:
        InterviewQuestionSet; on a completion failure the defaults for the job
        title with ``success=False``.
    """
    prompt = build_interview_questions_prompt(resume_text, job, assessment, candidate_name or "the candidate")
    try:
        reply = llm.complete(prompt)
    except Exception as exc:
        LOGGER.error("Interview question generation failed for job %s (%s): %s", job.id, job.title, exc)
        return InterviewQuestionSet(
            questions=tuple(default_questions(job.title)),
            success=False,
            error=str(exc),
        )

    question_set = parse_interview_questions(reply)
    LOGGER.info("Generated %d interview questions for %s", len(question_set.questions), job.title)
    return question_set
