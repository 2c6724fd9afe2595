"""Fire-and-forget progress messages toward whatever front end is listening."""

from __future__ import annotations

from collections.abc import Callable

from commit_canvas.logging import get_logger

logger = get_logger("progress")

ProgressCallback = Callable[[str], None]


def emit(progress_callback: ProgressCallback | None, message: str) -> None:
    """Log ``message`` and hand it to ``progress_callback``.

    A failing sink is logged and otherwise ignored; callers never branch on
    whether a message was observed.
    """
    logger.info(message)
    if progress_callback is None:
        return
    try:
        progress_callback(message)
    except Exception:
        logger.debug("progress sink raised for %r", message, exc_info=True)
