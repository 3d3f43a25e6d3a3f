"""
Error classification for command results.

Categorizes the outcome of commands run inside a target image or container
so probes can tell "the executable is missing" apart from "the runtime is
broken" or "the command ran and failed".
"""

from enum import Enum
import re

from constants import (
    EXECUTABLE_NOT_FOUND_EXIT_CODES,
    EXECUTABLE_NOT_FOUND_SIGNATURES,
    RUNTIME_ERROR_EXIT_CODE,
)
from core.models import CommandResult


class CommandErrorCategory(str, Enum):
    """
    Error categories for a completed (or aborted) command.
    """
    NONE = "none"
    """Command ran and exited 0"""

    EXECUTABLE_NOT_FOUND = "executable_not_found"
    """Requested executable is missing or cannot be executed in the image"""

    TIMEOUT = "timeout"
    """Host-side timeout fired"""

    RUNTIME_UNAVAILABLE = "runtime_unavailable"
    """Container runtime could not be launched"""

    RUNTIME_ERROR = "runtime_error"
    """Runtime started but failed before running the command"""

    NONZERO_EXIT = "nonzero_exit"
    """Command ran and exited non-zero"""


class CommandErrorClassifier:
    """
    Classifies CommandResult values into categories.
    """

    NOT_FOUND_PATTERNS = [re.escape(s) for s in EXECUTABLE_NOT_FOUND_SIGNATURES]

    @classmethod
    def matches_not_found(cls, text: str) -> bool:
        """Check output text against the executable-not-found signatures."""
        text_lower = text.lower()
        return any(re.search(pattern, text_lower) for pattern in cls.NOT_FOUND_PATTERNS)

    @classmethod
    def classify(cls, result: CommandResult) -> CommandErrorCategory:
        """
        Classify a command result, structured fields first, then output text.

        Args:
            result: Result returned by a CommandExecutor

        Returns:
            CommandErrorCategory for the result
        """
        # Priority 1: structured fields
        if result.launch_error is not None:
            return CommandErrorCategory.RUNTIME_UNAVAILABLE
        if result.timed_out:
            return CommandErrorCategory.TIMEOUT
        if result.exit_code == 0:
            return CommandErrorCategory.NONE
        if result.exit_code in EXECUTABLE_NOT_FOUND_EXIT_CODES:
            return CommandErrorCategory.EXECUTABLE_NOT_FOUND

        # Priority 2: the runtime CLI only reports some failures as text
        if cls.matches_not_found(result.output):
            return CommandErrorCategory.EXECUTABLE_NOT_FOUND
        if result.exit_code == RUNTIME_ERROR_EXIT_CODE:
            return CommandErrorCategory.RUNTIME_ERROR

        return CommandErrorCategory.NONZERO_EXIT

    @classmethod
    def probe_could_not_run(cls, result: CommandResult) -> bool:
        """True when the outcome says nothing about the image itself."""
        return cls.classify(result) in (
            CommandErrorCategory.RUNTIME_UNAVAILABLE,
            CommandErrorCategory.RUNTIME_ERROR,
            CommandErrorCategory.TIMEOUT,
        )
