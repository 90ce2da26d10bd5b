"""
Fetching and parsing job requisitions from the job board feed.
"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import Dict, Iterable, List

import requests

from data_models import JobRequisition

LOGGER = logging.getLogger(__name__)

# Requisition field -> accepted CSV column names (lower-case)
COLUMN_ALIASES = {
    "id": ("id", "job_id"),
    "title": ("title", "job_title"),
    "description": ("description", "job_description"),
    "required_skills": ("required_skills",),
    "preferred_skills": ("preferred_skills",),
    "experience_level": ("experience_level", "experience"),
    "education_requirements": ("education_requirements", "education"),
    "job_site_address": ("job_site_address", "address", "location"),
    "sector": ("sector",),
    "job_type": ("job_type", "type"),
    "salary_hourly": ("salary_hourly", "hourly_rate", "pay"),
    "status": ("status",),
}


def _read_feed(source: str) -> str:
    if source.lower().startswith(("http://", "https://")):
        try:
            response = requests.get(source, timeout=30)
            response.raise_for_status()
        except requests.RequestException as exc:
            LOGGER.error("Failed to fetch job requisitions: %s", exc)
            raise
        return response.text
    return Path(source).read_text(encoding="utf-8")


def _row_to_job(row: Dict[str, str]) -> JobRequisition:
    normalized_row = {
        (k or "").strip().lower(): (v.strip() if isinstance(v, str) else "") for k, v in row.items()
    }
    values = {}
    for field_name, aliases in COLUMN_ALIASES.items():
        values[field_name] = next((normalized_row[a] for a in aliases if normalized_row.get(a)), "")
    values["status"] = values["status"] or "active"
    values["id"] = values["id"] or None
    return JobRequisition(**values)


def parse_job_requisitions(csv_text: str) -> List[JobRequisition]:
    """Parse CSV text into requisitions, matching column names case-insensitively."""
    reader = csv.DictReader(io.StringIO(csv_text))
    if reader.fieldnames:
        LOGGER.debug("CSV columns found: %s", list(reader.fieldnames))
    return [_row_to_job(row) for row in reader]


def fetch_job_requisitions(source: str) -> List[JobRequisition]:
    """
    Download (or read) and parse the job requisition feed.

    Args:
        source: HTTP(S) URL or local path of the CSV feed.

    Returns:
        List of JobRequisition records, active and inactive.
    """
    jobs = parse_job_requisitions(_read_feed(source))
    LOGGER.info("Fetched %d job requisitions", len(jobs))
    return jobs


def active_jobs(jobs: Iterable[JobRequisition]) -> List[JobRequisition]:
    return [job for job in jobs if job.is_active]
