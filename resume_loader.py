"""
Utilities for loading a candidate's resume into a CandidateProfile.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from addresses import extract_address, is_valid_address
from data_models import CandidateProfile

LOGGER = logging.getLogger(__name__)


def resume_to_text(resume: Dict[str, Any]) -> str:
    """
    Convert structured resume content into a single text block for LLM consumption.

    Args:
        resume: Resume dictionary.

    Returns:
        Concatenated textual representation.
    """
    sections = []

    header = [resume.get(key) for key in ("name", "address", "email", "phone")]
    header = [str(value) for value in header if value]
    if header:
        sections.extend(header)

    summary = resume.get("summary")
    if summary:
        sections.append(f"Summary: {summary}")

    for key in ("skills", "certifications"):
        values = resume.get(key)
        if isinstance(values, list) and values:
            sections.append(f"{key.capitalize()}: {', '.join(str(v) for v in values)}")

    exp_lines = []
    for exp in resume.get("experience", []):
        title = exp.get("title", "")
        company = exp.get("company", "")
        desc = exp.get("description", "")
        period = exp.get("period") or exp.get("years", "")
        exp_lines.append(f"{title} at {company} ({period}): {desc}")
    if exp_lines:
        sections.append("Experience:\n" + "\n".join(exp_lines))

    edu_lines = []
    for edu in resume.get("education", []):
        degree = edu.get("degree", "")
        institution = edu.get("institution") or edu.get("university", "")
        edu_lines.append(f"{degree} - {institution}")
    if edu_lines:
        sections.append("Education:\n" + "\n".join(edu_lines))

    return "\n".join(sections).strip()


def load_candidate(path: Path) -> CandidateProfile:
    """
    Load a candidate from a JSON profile or a plain-text resume.

    JSON profiles may carry ``resume_text`` directly or structured sections that
    are flattened with ``resume_to_text``. When no address is given it is looked
    up in the resume text.

    Args:
        path: Location of the resume file.

    Returns:
        CandidateProfile for the matching run.
    """
    path = Path(path)
    if path.suffix.lower() == ".json":
        with path.open("r", encoding="utf-8") as handle:
            resume = json.load(handle)
        resume_text = resume.get("resume_text") or resume_to_text(resume)
        candidate = CandidateProfile(
            resume_text=resume_text,
            id=resume.get("id"),
            name=resume.get("name"),
            email=resume.get("email"),
            phone=resume.get("phone"),
            address=resume.get("address"),
        )
    else:
        candidate = CandidateProfile(resume_text=path.read_text(encoding="utf-8"))

    if not candidate.resume_text.strip():
        raise ValueError(f"Resume is empty: {path}")

    if not candidate.address:
        candidate.address = extract_address(candidate.resume_text)
        if candidate.address:
            LOGGER.info("Extracted address: %s", candidate.address)
        else:
            LOGGER.warning("No address found in resume %s", path.name)
    elif not is_valid_address(candidate.address):
        LOGGER.warning("Candidate address %r looks incomplete; geocoding may fail", candidate.address)

    return candidate
