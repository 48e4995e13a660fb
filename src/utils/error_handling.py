"""Error reporting helpers shared by the services and the UI layer.

``user_message`` turns any failure from the store or the generation pipeline
into the text shown to the user, and ``log_exception`` records the same
failure with its traceback. Callers typically do both::

    try:
        controller.generate_image(request)
    except Exception as e:
        log_exception(e, "Image generation failed")
        show_error(user_message(e))

``timed`` profiles slow calls when SDD_PERF_DEBUG=1.
"""

from __future__ import annotations

import logging
import os
import time
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

from services.errors import (
    AlreadyExists,
    FileWriteError,
    GenerationFailed,
    MissingCredential,
    NoActiveProject,
    NoOpenProject,
    NotAProject,
    StoreIOError,
)

logger = logging.getLogger(__name__)

# Environment variable to enable performance timing
PERF_DEBUG = os.environ.get("SDD_PERF_DEBUG", "0") == "1"

F = TypeVar("F", bound=Callable[..., Any])

INSUFFICIENT_CREDIT_MARKERS = (
    "insufficient",
    "no credit",
    "payment required",
    "402",
)

INSUFFICIENT_CREDIT_MESSAGE = (
    "Generation failed: insufficient credits. Please top up your Stability account."
)


def timed(func: F) -> F:
    """Log how long ``func`` took at DEBUG level when SDD_PERF_DEBUG=1.

    Used on the Stability API call, which dominates generation latency.
    """
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        if not PERF_DEBUG:
            return func(*args, **kwargs)

        name = f"{func.__module__}.{func.__name__}"
        start = time.perf_counter()
        outcome = "failed after"
        try:
            result = func(*args, **kwargs)
            outcome = "took"
            return result
        finally:
            logger.debug(f"PERF: {name} {outcome} {time.perf_counter() - start:.3f}s")

    return wrapper  # type: ignore


def format_error_message(
    error: Exception,
    context: Optional[str] = None,
    include_type: bool = True,
) -> str:
    """``"<context> - <Type>: <text>"``, dropping the parts that are absent.

    An exception without text is shown by its type name alone.
    """
    text = str(error)
    if not text or text == "None":
        detail = type(error).__name__
    elif include_type:
        detail = f"{type(error).__name__}: {text}"
    else:
        detail = text
    return f"{context} - {detail}" if context else detail


def log_exception(
    error: Exception,
    context: str,
    extra: Optional[dict] = None,
    level: int = logging.ERROR,
) -> None:
    """Log ``error`` with its traceback under ``context``.

    The record carries ``event="error"`` and ``error_type`` plus any ``extra``
    fields, which the JSON log file keeps as separate keys.
    """
    fields = {"event": "error", "error_type": type(error).__name__, **(extra or {})}
    logger.log(level, f"{context}: {error}", extra=fields, exc_info=True)


def is_insufficient_credit(error: Exception) -> bool:
    """Heuristic: does this failure look like the account ran out of credits?"""
    if isinstance(error, GenerationFailed) and error.status == 402:
        return True
    lower = str(error).lower()
    return any(marker in lower for marker in INSUFFICIENT_CREDIT_MARKERS)


def user_message(error: Exception) -> str:
    """Map an error to the message shown to the user.

    Known failures get a dedicated message; anything else surfaces its raw text.
    """
    if isinstance(error, MissingCredential):
        return "Please set your Stability API key in Settings before generating images."
    if isinstance(error, (NoOpenProject, NoActiveProject)):
        return "Open or create a project first."
    if isinstance(error, NotAProject):
        return f"The selected folder is not a project: {error.path}"
    if isinstance(error, AlreadyExists):
        return f"This directory is already a project: {error.path}"
    if isinstance(error, GenerationFailed):
        if is_insufficient_credit(error):
            return INSUFFICIENT_CREDIT_MESSAGE
        return str(error)
    if isinstance(error, FileWriteError):
        return f"Could not save the generated image: {error}"
    if isinstance(error, StoreIOError):
        return f"Project database error: {error}"
    return format_error_message(error, include_type=False) or "An error occurred"
