"""
Command executor interface for the container runtime.

Defines the contract the classifier and runners use to run commands
inside the target, so probes never touch the runtime directly and can be
exercised against scripted executors in tests.
"""

from abc import ABC, abstractmethod
from typing import Optional

from core.models import CommandResult


class CommandExecutor(ABC):
    """
    Abstract base class for running commands inside a target.

    Implementations must never raise for probe-level failures; every
    outcome, including a missing runtime or a timeout, is reported
    through the returned CommandResult.
    """

    @abstractmethod
    def target(self) -> str:
        """
        Return the reference commands run against.

        Returns:
            Image reference or container name
        """
        pass

    @abstractmethod
    def run(
        self,
        command: list[str],
        env: Optional[dict[str, str]] = None,
        timeout: Optional[float] = None,
        stdin: Optional[str] = None,
    ) -> CommandResult:
        """
        Run a command inside the target.

        Args:
            command: argv to run inside the target
            env: Extra environment variables to inject
            timeout: Host-side timeout in seconds (None uses the default)
            stdin: Text fed to the command's standard input

        Returns:
            CommandResult describing the outcome
        """
        pass


__all__ = [
    "CommandExecutor",
]
