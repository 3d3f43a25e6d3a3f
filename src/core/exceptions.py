"""
Exception hierarchy for imagecheck.

Provides a standardized exception hierarchy for consistent error handling
across the application. All exceptions inherit from ImageCheckException.
"""


class ImageCheckException(Exception):
    """Base exception for all imagecheck errors."""
    pass


class PreconditionException(ImageCheckException):
    """A fatal precondition failed before any probe ran."""

    def __init__(self, reason: str, hints: list[str] = None):
        """
        Initialize precondition exception.

        Args:
            reason: What precondition failed
            hints: Optional follow-up lines shown to the user
        """
        self.reason = reason
        self.hints = hints or []
        super().__init__(reason)


class ConfigurationException(ImageCheckException):
    """Configuration is invalid or missing."""

    def __init__(self, message: str, field: str = None):
        """
        Initialize configuration exception.

        Args:
            message: Validation error message
            field: Configuration key that failed validation (optional)
        """
        self.field = field
        if field:
            super().__init__(f"Invalid configuration for {field}: {message}")
        else:
            super().__init__(f"Invalid configuration: {message}")


class CommandException(ImageCheckException):
    """A collaborator command could not be launched."""

    def __init__(self, command: str, reason: str):
        """
        Initialize command exception.

        Args:
            command: Command that failed to launch
            reason: Reason for failure
        """
        self.command = command
        self.reason = reason
        super().__init__(f"Failed to run {command}: {reason}")


__all__ = [
    "ImageCheckException",
    "PreconditionException",
    "ConfigurationException",
    "CommandException",
]
