"""Shared helpers for mittorch (logging setup, status lines, SHA formatting, URL masking).

Used by build, supervisor, and cli modules.
"""

from __future__ import annotations

import logging
import os
import re
import sys

# --- Logging ---

LOG_LEVEL_ENV = "MITTORCH_LOG_LEVEL"


def configure_logging() -> None:
    """Root logger from MITTORCH_LOG_LEVEL (default WARNING). Unknown levels fall back to WARNING."""
    name = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


# --- Status lines ---

SUCCESS = "SUCCESS:"
UPDATED = "UPDATED:"
WARNING = "WARNING:"
FAILURE = "FAILURE:"


def status(prefix: str, message: str) -> None:
    """Print a prefixed status line. FAILURE goes to stderr, everything else to stdout."""
    stream = sys.stderr if prefix == FAILURE else sys.stdout
    print(f"{prefix} {message}", file=stream)


# --- Git ---


def short_sha(sha: str) -> str:
    """First 8 characters of a commit SHA, or the whole string if shorter."""
    return sha[:8] if len(sha) >= 8 else sha


def mask_token(text: str) -> str:
    """Replace credentials in https://<token>@host URLs with ***."""
    return re.sub(r"(https?://)[^@/\s]+@", r"\1***@", text)


def normalize_token(token: str | None) -> str | None:
    """Strip a token; blank or whitespace-only tokens become None."""
    if token is None:
        return None
    token = token.strip()
    return token or None
