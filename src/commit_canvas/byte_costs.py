"""Empirical per-commit payload sizes of the synthesized activity files.

GitHub's language bar is computed from bytes, not commit counts, so the
selector divides each requested ratio by these numbers. Recalibrate here when
the templates in ``languages`` change size.
"""

from __future__ import annotations

DEFAULT_AVERAGE_BYTES = 500

AVERAGE_BYTES: dict[str, int] = {
    "java": 650,
    "python": 650,
    "javascript": 550,
    "typescript": 950,
    "go": 850,
    "rust": 800,
    "cpp": 750,
    "c": 550,
    "csharp": 720,
    "php": 620,
    "ruby": 600,
    "swift": 650,
    "kotlin": 720,
    "shell": 450,
    "vue": 1300,
    "html": 900,
    "css": 700,
    "scss": 750,
    "sql": 500,
    "markdown": 30,
}


def average_bytes(language: str) -> int:
    """Return the calibrated payload size for ``language``."""
    return AVERAGE_BYTES.get(language.strip().lower(), DEFAULT_AVERAGE_BYTES)
