"""
Runtime configuration.

Everything that depends on the environment lives here so other modules
can stay pure:
- where the JSON state files are stored
- which key/model the assistant uses
- the holiday markers used by the tracking view
"""

from __future__ import annotations

import os
from pathlib import Path

PACKAGE_DIR = Path(__file__).resolve().parent

ASSISTANT_MODEL = os.getenv("CULIPLAN_ASSISTANT_MODEL", "gemini-2.0-flash")
ASSISTANT_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
ASSISTANT_TIMEOUT = 30

# Legend markers that turn a calendar day into a non-teaching day
HOLIDAY_COLOR = "#DC2626"
HOLIDAY_KEYWORDS = ("festivo", "inicio")


def data_dir() -> Path:
    """
    Return the directory holding the persisted collections.

    CULIPLAN_DATA_DIR wins; otherwise the data folder inside the package.
    A function instead of a constant, so tests can point it elsewhere.
    """
    override = os.getenv("CULIPLAN_DATA_DIR", "").strip()
    if override:
        return Path(override)
    return PACKAGE_DIR / "data"


def assistant_api_key() -> str | None:
    key = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
    return key.strip() if key and key.strip() else None
