"""
Prompt construction for resume-to-job assessments.
"""

from __future__ import annotations

from data_models import Assessment, JobRequisition

NOT_SPECIFIED = "Not specified"

RESPONSE_EXAMPLE_WITH_GAP = """{
  "match_score": 85,
  "employment_gap_detected": true,
  "employment_gap_details": "Gap from Jan 2020 to Aug 2020 (7 months)",
  "commute_info": "Approximately 15 miles / 20-25 minutes drive",
  "commute_reasonable": true,
  "strengths": "- 3+ years CNC operation experience\\n- Proficient with Haas and Fanuc controllers\\n- Blueprint reading certified",
  "gaps": "- No G-code programming mentioned\\n- EMPLOYMENT GAP: 7 months between jobs (Jan 2020 - Aug 2020) - requires explanation",
  "recommendations": "- Strong candidate, recommend phone screen\\n- IMPORTANT: Ask about 7-month employment gap in 2020",
  "summary": "Experienced CNC operator with solid technical skills. The 7-month gap in 2020 should be discussed during screening."
}"""

RESPONSE_EXAMPLE_NO_GAP = """{
  "match_score": 85,
  "employment_gap_detected": false,
  "employment_gap_details": "Continuous employment history",
  "commute_info": "Approximately 15 miles / 20-25 minutes drive",
  "commute_reasonable": true,
  "strengths": "- 3+ years CNC operation experience\\n- Continuous employment shows reliability",
  "gaps": "- No G-code programming mentioned",
  "recommendations": "- Strong candidate, recommend phone screen\\n- Ask about programming skills",
  "summary": "Experienced CNC operator with solid technical skills and continuous employment."
}"""


def _field(value) -> str:
    text = "" if value is None else str(value).strip()
    return text or NOT_SPECIFIED


def _pay(job: JobRequisition) -> str:
    rate = _field(job.salary_hourly)
    if rate == NOT_SPECIFIED:
        return rate
    return f"${rate.lstrip('$')}/hour"


def build_assessment_prompt(resume_text: str, job: JobRequisition) -> str:
    """
    Render the assessment instructions for one resume and one job.

    Args:
        resume_text: Full resume text of the candidate.
        job: Job requisition being matched.

    Returns:
        Prompt asking for a single JSON object and nothing else.
    """
    sector = _field(job.sector)
    role = "a" if sector == NOT_SPECIFIED else f"a {sector}"

    return f"""You are an expert HR recruiter analyzing a candidate's resume for {role} position.

**JOB POSTING:**
Title: {_field(job.title)}
Description: {_field(job.description)}
Required Skills: {_field(job.required_skills)}
Preferred Skills: {_field(job.preferred_skills)}
Experience Level: {_field(job.experience_level)}
Education Requirements: {_field(job.education_requirements)}
Job Site Location: {_field(job.job_site_address)}
Sector: {sector}
Job Type: {_field(job.job_type)}
Pay Rate: {_pay(job)}

**CANDIDATE RESUME:**
{resume_text}

IMPORTANT: You must respond with ONLY valid JSON. Use \\n for line breaks within strings.

**EMPLOYMENT HISTORY (do this first):**
Before analyzing skills, examine ALL employment dates in the resume:
1. List each job with its dates (e.g., "March 2020 - Present", "June 2018 - March 2020")
2. Calculate the gap between consecutive jobs
3. If there is a gap of 3 or more months between jobs, set "employment_gap_detected" to true and describe it

**COMMUTE ANALYSIS:**
Find the candidate's home address in the resume (header or contact section) and estimate the commute to the job site:
- Under 30 minutes: reasonable (commute_reasonable: true)
- 30-45 minutes: moderate - discuss with candidate (commute_reasonable: true)
- Over 45 minutes: long - verify candidate is willing to commute (commute_reasonable: false)
If no address is found in the resume, set "commute_info" to "Address not found in resume" and "commute_reasonable" to null.

Respond in this EXACT JSON format:

{RESPONSE_EXAMPLE_WITH_GAP}

If NO employment gaps are detected, use this format:

{RESPONSE_EXAMPLE_NO_GAP}

**Scoring Criteria:**
- 90-100: Exceptional match - has all required skills plus multiple preferred skills
- 75-89: Strong match - has most required skills and some preferred skills
- 60-74: Good match - has core required skills, consider for interview
- 40-59: Moderate match - missing some key qualifications, may need training
- 0-39: Poor match - lacks essential requirements

**Important Notes:**
- Employment gaps alone should NOT drastically reduce the match score if the candidate has the required skills
- Always FLAG employment gaps (3+ months) in "gaps" or "recommendations" so the recruiter can discuss them
- Gaps can have valid explanations (family care, education, health); flag them, do not penalize them
- Focus on hands-on experience, relevant certifications and evidence of reliability

RESPOND WITH ONLY THE JSON OBJECT. Do not include any other text before or after the JSON."""


RESUME_EXCERPT_CHARS = 1500

QUESTIONS_EXAMPLE = """{
  "questions": [
    {
      "type": "technical",
      "category": "Skills Verification",
      "question": "Can you walk me through your experience with CNC programming using Fanuc controllers?",
      "purpose": "Verify claimed Fanuc controller expertise mentioned in resume",
      "followUp": "Ask for specific G-code examples or a program they are most proud of"
    },
    {
      "type": "behavioral",
      "category": "Problem Solving",
      "question": "Tell me about a time when you identified and resolved a quality issue on the production line.",
      "purpose": "Assess quality control experience and attention to detail",
      "followUp": "How did you prevent similar issues from occurring again?"
    },
    {
      "type": "situational",
      "category": "Safety & Compliance",
      "question": "If you noticed a coworker not following safety protocols, how would you handle that situation?",
      "purpose": "Evaluate safety awareness and communication skills",
      "followUp": "What if they were a senior employee or supervisor?"
    }
  ]
}"""


def _excerpt(resume_text: str) -> str:
    if len(resume_text) <= RESUME_EXCERPT_CHARS:
        return resume_text
    return resume_text[:RESUME_EXCERPT_CHARS] + " ..."


def build_interview_questions_prompt(
    resume_text: str,
    job: JobRequisition,
    assessment: Assessment,
    candidate_name: str = "the candidate",
) -> str:
    """Render the request for 5-7 interview questions tailored to an assessed candidate."""
    sector = _field(job.sector)
    role = "a" if sector == NOT_SPECIFIED else f"a {sector}"

    return f"""You are an expert HR interviewer preparing interview questions for {role} candidate.

**CANDIDATE PROFILE:**
Name: {candidate_name or "the candidate"}
Match Score: {assessment.match_score}%
Resume Excerpt:
{_excerpt(resume_text)}

**JOB POSITION:**
Title: {_field(job.title)}
Description: {_field(job.description)}
Required Skills: {_field(job.required_skills)}
Experience Level: {_field(job.experience_level)}

**ASSESSMENT:**
Strengths: {assessment.strengths}
Gaps: {assessment.gaps}
Recommendations: {assessment.recommendations}
Employment Gap: {assessment.employment_gap_details if assessment.employment_gap_detected else "None detected"}

**YOUR TASK:**
Generate exactly 5-7 interview questions tailored to this candidate for this specific position.

**QUESTION REQUIREMENTS:**
1. Mix of question types:
   - 2-3 technical questions (verify specific skills they claim)
   - 1-2 behavioral questions (past experience and problem-solving)
   - 1-2 situational questions (how they would handle scenarios)
2. Questions must be specific to the resume and the job requirements, address the gaps
   identified above, verify claimed skills and certifications, and be open-ended (not yes/no).
3. Include a follow-up for deeper assessment.

**OUTPUT FORMAT:**
Respond with ONLY valid JSON in this exact structure:

{QUESTIONS_EXAMPLE}

**IMPORTANT FOCUS AREAS:**
- If gaps were identified: create questions to explore those gaps
- If certifications are mentioned: ask to verify them
- If an employment gap was detected: include a tactful question about the career timeline
- Workplace safety: always include at least one safety-related question
- Teamwork: include a question about working in a team environment
- Shift flexibility: ask about availability if relevant

Respond with ONLY the JSON object, no other text."""
