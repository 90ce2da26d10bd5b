"""
Tests for tailored interview question generation.
"""

import json

import pytest

from data_models import Assessment, InterviewQuestion, InterviewQuestionSet, JobRequisition
from interview_questions import (
    MAX_QUESTIONS,
    MIN_QUESTIONS,
    default_questions,
    generate_interview_questions,
    parse_interview_questions,
)
from llm_handler import CompletionError
from prompts import RESUME_EXCERPT_CHARS, build_interview_questions_prompt


@pytest.fixture
def job():
    return JobRequisition(
        id=7,
        title="Forklift Operator",
        description="Move pallets between receiving and staging",
        required_skills="Forklift certification",
        experience_level="Mid",
        sector="Logistics",
    )


@pytest.fixture
def assessment():
    return Assessment(
        match_score=88,
        strengths="- Forklift certified",
        gaps="- No reach truck experience",
        recommendations="- Phone screen",
        detailed_analysis="Strong fit.",
        employment_gap_detected=True,
        employment_gap_details="Gap from Jan 2020 to Aug 2020",
    )


class RecordingClient:
    def __init__(self, reply="", error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    def complete(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


class TestParseInterviewQuestions:
    """Test reading question lists out of model replies."""

    def test_valid_reply(self, make_questions_reply):
        question_set = parse_interview_questions(make_questions_reply(6))

        assert question_set.success is True
        assert question_set.error is None
        assert len(question_set.questions) == 6
        first = question_set.questions[0]
        assert first.question == "Question 1?"
        assert first.question_type == "behavioral"
        assert first.category == "Category 1"
        assert first.follow_up == "Follow-up 1"

    def test_fenced_reply(self, make_questions_reply):
        reply = "Here you go:\n```json\n" + make_questions_reply(5) + "\n```"
        assert len(parse_interview_questions(reply).questions) == 5

    def test_reply_wrapped_in_prose(self, make_questions_reply):
        reply = "Sure! " + make_questions_reply(5) + " Good luck."
        assert parse_interview_questions(reply).success is True

    def test_short_list_padded_with_defaults(self, make_questions_reply, caplog):
        question_set = parse_interview_questions(make_questions_reply(2))

        assert len(question_set.questions) == MIN_QUESTIONS
        assert [q.question for q in question_set.questions[:2]] == ["Question 1?", "Question 2?"]
        assert list(question_set.questions[2:]) == default_questions()[:3]
        assert "padding with defaults" in caplog.text

    def test_long_list_trimmed(self, make_questions_reply):
        question_set = parse_interview_questions(make_questions_reply(9))

        assert len(question_set.questions) == MAX_QUESTIONS
        assert question_set.questions[-1].question == "Question 7?"

    @pytest.mark.parametrize("reply", ["", None, "No questions today.", '{"questions": "none"}'])
    def test_unusable_reply_gives_defaults(self, reply):
        question_set = parse_interview_questions(reply)

        assert question_set.success is False
        assert "default questions" in question_set.error
        assert len(question_set.questions) == 7

    def test_question_fields_normalized(self):
        reply = json.dumps(
            {
                "questions": [
                    {"type": "Behavioral", "question": " Why logistics? ", "follow_up": "Why now?"},
                    {"type": "trivia", "question": "Favorite pallet?"},
                    {"type": "technical", "question": "  "},
                    "What shifts can you work?",
                    42,
                ]
            }
        )

        questions = parse_interview_questions(reply).questions

        assert questions[0] == InterviewQuestion(
            question="Why logistics?", question_type="behavioral", follow_up="Why now?"
        )
        assert questions[1].question_type == "technical"
        assert questions[2] == InterviewQuestion(question="What shifts can you work?")
        assert len(questions) == MIN_QUESTIONS


class TestGenerateInterviewQuestions:
    """Test the completion round trip."""

    def test_prompt_and_result(self, job, assessment, make_questions_reply):
        client = RecordingClient(make_questions_reply(5))

        question_set = generate_interview_questions(client, "Jordan Rivera\nForklift", job, assessment, "Jordan")

        assert question_set.success is True
        assert len(client.prompts) == 1
        assert "Name: Jordan\n" in client.prompts[0]

    def test_completion_failure_gives_job_defaults(self, job, assessment, caplog):
        client = RecordingClient(error=CompletionError("quota exceeded"))

        question_set = generate_interview_questions(client, "resume", job, assessment)

        assert question_set.success is False
        assert question_set.error == "quota exceeded"
        assert "Forklift Operator" in question_set.questions[0].question
        assert "Interview question generation failed" in caplog.text

    def test_missing_name(self, job, assessment, make_questions_reply):
        client = RecordingClient(make_questions_reply(5))
        generate_interview_questions(client, "resume", job, assessment, None)
        assert "Name: the candidate\n" in client.prompts[0]


class TestBuildInterviewQuestionsPrompt:
    """Test the question prompt text."""

    def test_assessment_details_included(self, job, assessment):
        prompt = build_interview_questions_prompt("Jordan Rivera\nForklift", job, assessment, "Jordan")

        assert "preparing interview questions for a Logistics candidate" in prompt
        assert "Match Score: 88%" in prompt
        assert "Title: Forklift Operator\n" in prompt
        assert "Strengths: - Forklift certified" in prompt
        assert "Gaps: - No reach truck experience" in prompt
        assert "Employment Gap: Gap from Jan 2020 to Aug 2020" in prompt
        assert prompt.endswith("Respond with ONLY the JSON object, no other text.")

    def test_no_employment_gap(self, job):
        assessment = Assessment(
            match_score=80, strengths="- a", gaps="- b", recommendations="- c", detailed_analysis="ok"
        )
        prompt = build_interview_questions_prompt("resume", job, assessment)
        assert "Employment Gap: None detected" in prompt

    def test_long_resume_truncated(self, job, assessment):
        resume = "x" * (RESUME_EXCERPT_CHARS + 500)
        prompt = build_interview_questions_prompt(resume, job, assessment)

        assert "x" * RESUME_EXCERPT_CHARS + " ..." in prompt
        assert "x" * (RESUME_EXCERPT_CHARS + 1) not in prompt


class TestInterviewQuestionSet:
    """Test grouping and export."""

    def test_by_type(self):
        question_set = InterviewQuestionSet(
            questions=(
                InterviewQuestion(question="a", question_type="situational"),
                InterviewQuestion(question="b", question_type="odd"),
                InterviewQuestion(question="c"),
            )
        )

        grouped = question_set.by_type()

        assert [q.question for q in grouped["technical"]] == ["b", "c"]
        assert [q.question for q in grouped["situational"]] == ["a"]
        assert grouped["behavioral"] == []

    def test_to_dict(self):
        question_set = InterviewQuestionSet(
            questions=(InterviewQuestion(question="Why?", category="Motivation", follow_up="Really?"),),
            success=False,
            error="boom",
        )

        assert question_set.to_dict() == {
            "questions": [
                {
                    "type": "technical",
                    "category": "Motivation",
                    "question": "Why?",
                    "purpose": "",
                    "follow_up": "Really?",
                }
            ],
            "total_count": 1,
            "success": False,
            "error": "boom",
        }
