"""
Application configuration management.

Loads non-sensitive configuration from JSON and sensitive values
(Gemini and OpenCage API keys) from environment variables or secret files.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("resume_matcher_config.json")
DEFAULT_OUTPUT_FILE = Path("match_results.json")
DEFAULT_NOTIFICATION_THRESHOLD = 75
GEOCODER_CHOICES = ("auto", "opencage", "nominatim")
NOMINATIM_MIN_DELAY_SECONDS = 1.0


@dataclass(frozen=True)
class Settings:
    """Container for application configuration."""

    resume_path: Path
    jobs_source: str
    output_file: Path
    notification_threshold: int
    max_workers: int
    interview_questions: bool
    gemini_api_key: str
    gemini_model: str
    llm_temperature: float
    llm_max_output_tokens: int
    llm_timeout: float
    geocoder: str
    opencage_api_key: Optional[str]
    nominatim_user_agent: str
    nominatim_delay_seconds: float
    geocode_timeout: float
    geocode_cache_size: int
    geocode_cache_ttl_seconds: Optional[float]
    log_file: Optional[Path]
    log_format: Optional[str]
    log_date_format: Optional[str]
    debug: bool


def _read_json(path: Path) -> Dict[str, Any]:
    """Read a JSON file into a dictionary."""
    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except FileNotFoundError:
        raise FileNotFoundError(f"Configuration file missing: {path}") from None
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in configuration file: {path}") from exc


def _resolve_path(base: Path, value: Optional[str]) -> Optional[Path]:
    """Resolve a possibly relative path against a base directory."""
    if not value:
        return None
    candidate = Path(value)
    return candidate if candidate.is_absolute() else (base / candidate).resolve()


def _lookup_secret(base: Path, key_file: Optional[str], env_var: str) -> Optional[str]:
    """Return a secret from its key file if one is configured and present, else from the environment."""
    if key_file:
        secret_file = _resolve_path(base, key_file)
        if secret_file.exists():
            secret = secret_file.read_text(encoding="utf-8").strip()
            if secret:
                return secret
        else:
            LOGGER.warning("Key file %s not found; falling back to %s", secret_file, env_var)
    return os.environ.get(env_var, "").strip() or None


def _number(config: Dict[str, Any], key: str, default, cast=int, minimum=None, maximum=None):
    """Read a numeric setting and check its bounds."""
    raw = config.get(key, default)
    try:
        value = cast(raw)
    except (TypeError, ValueError):
        raise ValueError(f"Config '{key}' must be a number, got {raw!r}.") from None
    if minimum is not None and value < minimum:
        raise ValueError(f"Config '{key}' must be >= {minimum}, got {value}.")
    if maximum is not None and value > maximum:
        raise ValueError(f"Config '{key}' must be <= {maximum}, got {value}.")
    return value


def _resolve_jobs_source(base: Path, value: Optional[str]) -> str:
    """Keep URLs as-is and resolve local CSV paths against the config directory."""
    if not value:
        raise ValueError("Config must define 'jobs' (job requisition feed URL or CSV path).")
    if value.lower().startswith(("http://", "https://")):
        return value
    return str(_resolve_path(base, value))


def load_settings(config_path: Path = DEFAULT_CONFIG_PATH) -> Settings:
    """
    Load matcher settings from the JSON config, key files and the environment.

    Relative paths are resolved against the config file's directory.

    Args:
        config_path: Path to the JSON configuration file.

    Returns:
        Validated Settings.

    Raises:
        FileNotFoundError: If the config or resume file is missing.
        ValueError: If a value is malformed, out of range, or a required API key is absent.
    """
    config_path = Path(config_path).resolve()
    config = _read_json(config_path)
    base_dir = config_path.parent

    resume_path = _resolve_path(base_dir, config.get("resume"))
    if resume_path is None or not resume_path.exists():
        raise FileNotFoundError(f"Resume file not found: {resume_path}")

    gemini_key = _lookup_secret(base_dir, config.get("google_api_key_file"), "GEMINI_API_KEY")
    if not gemini_key:
        raise ValueError("Gemini API key missing. Set GEMINI_API_KEY or provide google_api_key_file.")

    geocoder = str(config.get("geocoder", "auto")).strip().lower()
    if geocoder not in GEOCODER_CHOICES:
        raise ValueError(f"Config 'geocoder' must be one of {', '.join(GEOCODER_CHOICES)}.")

    opencage_key = _lookup_secret(base_dir, config.get("opencage_api_key_file"), "OPENCAGE_API_KEY")
    if geocoder == "opencage" and not opencage_key:
        raise ValueError("OpenCage API key missing. Set OPENCAGE_API_KEY or provide opencage_api_key_file.")

    cache_ttl = config.get("geocode_cache_ttl_seconds", 86400)
    if cache_ttl is not None:
        cache_ttl = _number(config, "geocode_cache_ttl_seconds", 86400, cast=float)
        if cache_ttl <= 0:
            raise ValueError("Config 'geocode_cache_ttl_seconds' must be > 0 or null.")

    log_file = None
    if config.get("log_file"):
        stamped = config["log_file"].replace("YYYYMMDD_HHMMSS", datetime.now().strftime("%Y%m%d_%H%M%S"))
        log_file = _resolve_path(base_dir, stamped)

    return Settings(
        resume_path=resume_path,
        jobs_source=_resolve_jobs_source(base_dir, config.get("jobs")),
        output_file=_resolve_path(base_dir, config.get("output_file")) or DEFAULT_OUTPUT_FILE.resolve(),
        notification_threshold=_number(
            config, "notification_threshold", DEFAULT_NOTIFICATION_THRESHOLD, minimum=0, maximum=100
        ),
        max_workers=_number(config, "max_workers", 8, minimum=1),
        interview_questions=bool(config.get("interview_questions", True)),
        gemini_api_key=gemini_key,
        gemini_model=config.get("gemini_model", "gemini-1.5-flash-latest"),
        llm_temperature=_number(config, "llm_temperature", 0.2, cast=float, minimum=0.0),
        llm_max_output_tokens=_number(config, "llm_max_output_tokens", 4096, minimum=1),
        llm_timeout=_number(config, "llm_timeout", 60, cast=float, minimum=1),
        geocoder=geocoder,
        opencage_api_key=opencage_key,
        nominatim_user_agent=config.get("nominatim_user_agent", "resume-matcher/1.0"),
        nominatim_delay_seconds=_number(
            config, "nominatim_delay_seconds", NOMINATIM_MIN_DELAY_SECONDS, cast=float,
            minimum=NOMINATIM_MIN_DELAY_SECONDS,
        ),
        geocode_timeout=_number(config, "geocode_timeout", 10, cast=float, minimum=1),
        geocode_cache_size=_number(config, "geocode_cache_size", 2048, minimum=1),
        geocode_cache_ttl_seconds=cache_ttl,
        log_file=log_file,
        log_format=config.get("log_format"),
        log_date_format=config.get("log_date_format"),
        debug=bool(config.get("debug", False)),
    )
