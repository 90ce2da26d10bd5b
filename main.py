"""
CLI entry point for the resume-to-job matching pipeline.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from config import DEFAULT_CONFIG_PATH, load_settings
from job_board import active_jobs, fetch_job_requisitions
from matcher import JobMatcher
from reporting import write_matches_json
from resume_loader import load_candidate


class TruncatingFormatter(logging.Formatter):
    """Formatter that truncates log messages to a maximum length."""

    def __init__(self, max_length: int = 200, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.max_length = max_length

    def format(self, record):
        formatted = super().format(record)
        if len(formatted) > self.max_length:
            formatted = formatted[:self.max_length] + "... (truncated)"
        return formatted


def configure_logging(settings) -> None:
    """
    Configure logging according to settings.

    Args:
        settings: Application settings dataclass.
    """
    log_format = settings.log_format or "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    datefmt = settings.log_date_format or "%Y-%m-%d %H:%M:%S"

    console_formatter = TruncatingFormatter(max_length=200, fmt=log_format, datefmt=datefmt)
    file_formatter = logging.Formatter(fmt=log_format, datefmt=datefmt)

    handlers = []
    if settings.log_file:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(settings.log_file, encoding="utf-8")
        file_handler.setFormatter(file_formatter)
        handlers.append(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(console_formatter)
    handlers.append(console_handler)

    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(level=log_level, handlers=handlers, force=True)

    # Suppress verbose HTTP logging from various libraries
    for noisy in ("urllib3", "urllib3.connectionpool", "geopy", "httpcore", "httpx"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Match a resume against the active job requisitions.")
    parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to the JSON configuration file")
    return parser.parse_args(argv)


def main(argv=None) -> None:
    """Execute one matching run."""
    args = parse_args(argv)
    try:
        settings = load_settings(args.config)
    except (FileNotFoundError, ValueError) as exc:
        logging.basicConfig(level=logging.INFO)
        logging.error("Configuration error: %s", exc)
        sys.exit(1)

    configure_logging(settings)

    logging.info("Starting resume matching run")
    logging.info(
        "Configuration: jobs=%s, notification_threshold=%d, geocoder=%s",
        settings.jobs_source,
        settings.notification_threshold,
        settings.geocoder,
    )

    try:
        candidate = load_candidate(settings.resume_path)
        jobs = active_jobs(fetch_job_requisitions(settings.jobs_source))
        if not jobs:
            logging.warning("No active job requisitions found in %s", settings.jobs_source)

        matcher = JobMatcher.from_settings(settings)
        run = matcher.run(candidate, jobs)
        write_matches_json(run, settings.output_file)

        for result in run.notifications:
            logging.info(
                "High-match candidate alert: %s - %s (%d%% match)",
                candidate.name or "New applicant",
                result.job.title,
                result.match_score,
            )
            if result.interview_questions:
                logging.info(
                    "Prepared %d interview questions for %s", len(result.interview_questions.questions), result.job.title
                )
        logging.info(
            "Processed %d jobs total, %d at or above threshold %d. Results: %s",
            len(run.results),
            len(run.notifications),
            settings.notification_threshold,
            settings.output_file,
        )
        logging.info("Finished run successfully.")
    except Exception as exc:
        logging.exception("Fatal error occurred: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
