"""
Tests for the job requisition feed.
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from data_models import JobRequisition
from job_board import active_jobs, fetch_job_requisitions, parse_job_requisitions

FEED = """Job_ID,Job_Title,Description,Required_Skills,Location,Sector,Hourly_Rate,Status
101,Forklift Operator,"Load trailers
and stage pallets",Forklift,"500 Congress Ave, Austin, TX 78701",Logistics,18.50,Active
102,Welder,MIG welding,AWS cert,"Round Rock, TX 78664",Manufacturing,24,closed
103,Picker,,,"San Antonio, TX 78205",Logistics,,
"""


class TestParseJobRequisitions:
    """Test CSV parsing."""

    def test_rows_parsed(self):
        jobs = parse_job_requisitions(FEED)

        assert [job.id for job in jobs] == ["101", "102", "103"]
        first = jobs[0]
        assert first.title == "Forklift Operator"
        assert first.description == "Load trailers\nand stage pallets"
        assert first.job_site_address == "500 Congress Ave, Austin, TX 78701"
        assert first.salary_hourly == "18.50"
        assert first.sector == "Logistics"

    def test_status_defaults_to_active(self):
        jobs = parse_job_requisitions(FEED)
        assert jobs[2].status == "active"
        assert jobs[2].is_active

    def test_blank_id_becomes_none(self):
        jobs = parse_job_requisitions("id,title\n,Welder\n")
        assert jobs[0].id is None
        with pytest.raises(ValueError):
            jobs[0].validate()

    def test_empty_feed(self):
        assert parse_job_requisitions("") == []


class TestActiveJobs:
    def test_filters_inactive(self):
        jobs = parse_job_requisitions(FEED)
        assert [job.id for job in active_jobs(jobs)] == ["101", "103"]

    def test_status_case_insensitive(self):
        assert active_jobs([JobRequisition(id=1, title="x", status=" ACTIVE ")])


class TestFetchJobRequisitions:
    """Test reading the feed from disk or HTTP."""

    def test_local_file(self, tmp_path):
        path = tmp_path / "jobs.csv"
        path.write_text(FEED, encoding="utf-8")
        assert len(fetch_job_requisitions(str(path))) == 3

    def test_http(self):
        response = MagicMock(text=FEED)
        with patch("job_board.requests.get", return_value=response) as get:
            jobs = fetch_job_requisitions("https://jobs.example.com/feed.csv")

        get.assert_called_once_with("https://jobs.example.com/feed.csv", timeout=30)
        response.raise_for_status.assert_called_once()
        assert len(jobs) == 3

    def test_http_error_propagates(self):
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("503 Server Error")
        with patch("job_board.requests.get", return_value=response):
            with pytest.raises(requests.HTTPError):
                fetch_job_requisitions("https://jobs.example.com/feed.csv")
