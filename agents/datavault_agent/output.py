"""
Extraction of macro results from `dbt run-operation` output.

dbt prefixes every log line with a ``HH:MM:SS`` timestamp followed by two
spaces. Macro output produced via ``log(..., info=True)`` arrives the same
way, mixed with startup banners. Lines without a timestamp (multi-line
banners, raw tracebacks) are never part of the result.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

_FRAMEWORK_LINE = re.compile(r"^\d{2}:\d{2}:\d{2}\s{2}(.*)$")

# Prefix match: dbt appends versions, counts and ids to these.
BANNER_PREFIXES = (
    "Running with dbt=",
    "Registered adapter:",
    "[WARNING]",
    "There are",
    "- models.",
    "Found ",
)


def parse_framework_line(line: str) -> str | None:
    """Content of a timestamped dbt log line, or None for any other line."""
    match = _FRAMEWORK_LINE.match(line)
    return match.group(1) if match else None


def is_banner(content: str) -> bool:
    return content.startswith(BANNER_PREFIXES)


def extract_payload(raw: str) -> str:
    """
    Reduce raw dbt stdout to the macro's own output lines.

    Keeps the content of timestamped lines that are not startup banners, in
    their original order. If nothing survives, the raw text is returned
    unchanged so output from an unexpected log format is never lost.
    """
    kept: list[str] = []
    dropped = 0

    for line in raw.split("\n"):
        content = parse_framework_line(line.removesuffix("\r"))
        if content is None or is_banner(content):
            dropped += 1
            continue
        kept.append(content)

    payload = "\n".join(kept).strip()
    if not payload:
        logger.debug("No macro output found in %d line(s), returning raw output", dropped)
        return raw

    logger.debug("Extracted %d line(s), dropped %d", len(kept), dropped)
    return payload
