"""
Sectioned log output for the imagecheck CLIs.

Two situations get a framed block in the log instead of a single line:
a fatal error that stops verification before any probe runs, and the
classifier falling back to its default because the image type could not
be determined.
"""

import logging
from typing import Iterable, Optional

from core.exceptions import ImageCheckException, PreconditionException
from core.models import Classification

SECTION_WIDTH = 60

DOCKERFILE_HINT = "Pass --dockerfile to classify from the build descriptor instead."


def _log_section(
    level: int,
    title: str,
    lines: Iterable[str],
    logger: logging.Logger,
    width: int,
) -> None:
    separator = "=" * width
    logger.log(level, separator)
    logger.log(level, title)
    for line in lines:
        logger.log(level, line)
    logger.log(level, separator)


def log_fatal_error(
    error: ImageCheckException,
    logger: Optional[logging.Logger] = None,
    width: int = SECTION_WIDTH,
) -> None:
    """
    Log why verification could not start.

    A PreconditionException contributes its reason as the title and its
    hints as follow-up lines; any other ImageCheckException is shown under
    a generic title.

    Examples:
        >>> log_fatal_error(PreconditionException(
        ...     "Container web is not running",
        ...     ["Start it first, e.g.: docker run -d --name web <image>"],
        ... ))
        ============================================================
        Container web is not running
        Start it first, e.g.: docker run -d --name web <image>
        ============================================================
    """
    if isinstance(error, PreconditionException):
        title, lines = error.reason, error.hints
    else:
        title, lines = "Verification could not start.", [str(error)]
    _log_section(logging.ERROR, title, lines, logger or logging.getLogger(), width)


def log_classification_fallback(
    classification: Classification,
    logger: Optional[logging.Logger] = None,
    width: int = SECTION_WIDTH,
) -> None:
    """Warn that the image type was assumed rather than detected."""
    label = "scratch-based" if classification.image_class.is_scratch else "regular Linux"
    _log_section(
        logging.WARNING,
        f"Image type could not be determined, assuming a {label} image.",
        [classification.detail, DOCKERFILE_HINT],
        logger or logging.getLogger(),
        width,
    )
