"""
Address helpers: normalization before geocoding and extraction from resume text.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

LOGGER = logging.getLogger(__name__)

# "FL" doubles as a state code, so floor IDs after it stay short ("3", "12B") and never swallow a ZIP.
_SHORT_ID = r"(?:\d{1,4}[a-z]?|[a-z]\d{0,4}|\d{1,4}-[a-z0-9]{1,4})(?![\w-])"
_UNIT_ID = r"(?:\d+[a-z]?|[a-z]\d*|\d+-[a-z0-9]+)(?![\w-])"

SUITE_PATTERNS = (
    re.compile(r"#\s*" + _UNIT_ID, re.I),
    re.compile(
        r"\b(?:suite|ste|apt|apartment|unit|rm|room|floor)\b\.?\s*#?\s*" + _UNIT_ID,
        re.I,
    ),
    re.compile(r"\bfl\b\.?\s*#?\s*" + _SHORT_ID, re.I),
    re.compile(r"\b(?:building|bldg)\b\.?\s*" + _UNIT_ID, re.I),
)

_STREET_SUFFIX = (
    r"(?:street|st|avenue|ave|road|rd|drive|dr|lane|ln|way|court|ct|circle|cir"
    r"|boulevard|blvd|parkway|pkwy)"
)
FULL_ADDRESS_PATTERN = re.compile(
    r"\d+\s+[\w\s.]+?\b" + _STREET_SUFFIX + r"\b\.?[,\s]+[\w\s]+,\s*[A-Z]{2}\s+\d{5}(?:-\d{4})?",
    re.I,
)
CITY_STATE_ZIP_PATTERN = re.compile(r"([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*),\s*([A-Z]{2})\s+(\d{5}(?:-\d{4})?)")
STREET_LINE_PATTERN = re.compile(r"^\d+\s+[\w\s.]+?\b" + _STREET_SUFFIX + r"\b", re.I)


def _normalize_once(address: str) -> str:
    normalized = address
    for pattern in SUITE_PATTERNS:
        normalized = pattern.sub("", normalized)

    normalized = re.sub(r"\s*,(?:\s*,)*", ",", normalized)
    normalized = re.sub(r",\s*", ", ", normalized)
    normalized = re.sub(r"\s{2,}", " ", normalized).strip()
    normalized = re.sub(r"^,\s*", "", normalized)
    normalized = re.sub(r",\s*$", "", normalized)
    return normalized


def normalize_address(address: Optional[str]) -> str:
    """
    Canonicalize an address for geocoding.

    Suite, unit, floor and building designators are dropped because they do not
    change a building's coordinates. City, state and ZIP tokens are left intact.

    Args:
        address: Free-text address.

    Returns:
        Normalized address (empty string for empty input).
    """
    if not address:
        return ""

    normalized = address
    while True:
        cleaned = _normalize_once(normalized)
        if cleaned == normalized:
            break
        normalized = cleaned

    if normalized != address:
        LOGGER.debug("Normalized address: %r -> %r", address, normalized)
    return normalized


def extract_address(text: Optional[str], max_lines: int = 20) -> Optional[str]:
    """
    Find the candidate's home address in the header of a resume.

    Args:
        text: Resume text.
        max_lines: Number of leading non-empty lines to inspect.

    Returns:
        The address as written in the resume, or None if nothing address-like was found.
    """
    if not text:
        return None

    lines = [line.strip() for line in text.splitlines() if line.strip()]
    header = lines[:max_lines]

    for index, line in enumerate(header):
        full = FULL_ADDRESS_PATTERN.search(line)
        if full:
            return full.group(0).strip()

        city_state = CITY_STATE_ZIP_PATTERN.search(line)
        if city_state:
            if index > 0 and STREET_LINE_PATTERN.search(header[index - 1]):
                return f"{header[index - 1]}, {city_state.group(0)}".strip()
            return city_state.group(0).strip()

        if index < len(lines) - 1:
            next_line = lines[index + 1]
            combined = FULL_ADDRESS_PATTERN.search(f"{line}, {next_line}")
            if combined:
                return combined.group(0).strip()
            if STREET_LINE_PATTERN.search(line):
                next_match = CITY_STATE_ZIP_PATTERN.search(next_line)
                if next_match:
                    return f"{line}, {next_match.group(0)}".strip()

    return None


def is_valid_address(address: Optional[str]) -> bool:
    """Return True if the string carries at least two of: state code, ZIP, street suffix."""
    if not address or len(address) < 5:
        return False

    has_state = re.search(r"\b[A-Z]{2}\b", address) is not None
    has_zip = re.search(r"\b\d{5}(?:-\d{4})?\b", address) is not None
    has_street = re.search(r"\b" + _STREET_SUFFIX + r"\b", address, re.I) is not None
    return sum((has_state, has_zip, has_street)) >= 2
