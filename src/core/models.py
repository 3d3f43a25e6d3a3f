"""
Domain models for image verification.

This module defines the core data structures used throughout the application.
Value objects are immutable (frozen dataclasses); the run report is the only
accumulator and is appended to by the runners.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ImageClass(str, Enum):
    """Classification of the final image layer."""

    SCRATCH = "scratch"
    REGULAR = "regular"

    @property
    def is_scratch(self) -> bool:
        return self is ImageClass.SCRATCH


class ClassificationMethod(str, Enum):
    """Evidence source that decided the image class."""

    DOCKERFILE = "dockerfile"
    RUNTIME = "runtime"
    DEFAULT = "default"


class ProbeStatus(str, Enum):
    """Outcome of a single probe."""

    PASS = "pass"
    FAIL = "fail"
    WARN = "warn"
    INFO = "info"
    """Skipped or informational entry; never a verdict."""


@dataclass(frozen=True)
class Classification:
    """
    Result of image classification with the evidence that produced it.

    Attributes:
        image_class: Scratch or Regular
        method: Which signal decided the class
        detail: Human-readable description of the evidence
    """

    image_class: ImageClass
    method: ClassificationMethod
    detail: str = ""


@dataclass(frozen=True)
class CommandResult:
    """
    Structured outcome of a command run through the container runtime.

    Attributes:
        command: Full argv that was launched on the host
        exit_code: Process exit code (None if the process never completed)
        stdout: Captured standard output
        stderr: Captured standard error
        timed_out: True if the host-side timeout fired
        launch_error: Set when the runtime binary itself could not be started
    """

    command: tuple[str, ...]
    exit_code: Optional[int] = None
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False
    launch_error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        """True only when the command ran to completion with exit code 0."""
        return (
            self.launch_error is None
            and not self.timed_out
            and self.exit_code == 0
        )

    @property
    def output(self) -> str:
        """Combined stdout and stderr."""
        return f"{self.stdout}{self.stderr}"

    def describe_failure(self) -> str:
        """Short explanation of why the command did not succeed."""
        if self.launch_error:
            return self.launch_error
        if self.timed_out:
            return "timed out"
        message = self.stderr.strip().splitlines()
        if message:
            return f"exit code {self.exit_code}: {message[-1]}"
        return f"exit code {self.exit_code}"


@dataclass(frozen=True)
class ProbeResult:
    """
    Outcome of a single verification probe.

    Attributes:
        name: Probe identifier (e.g., "shell_access")
        status: Pass / Fail / Warn / Info
        message: Human-readable description
        details: Extra lines rendered beneath the message
    """

    name: str
    status: ProbeStatus
    message: str
    details: tuple[str, ...] = ()

    @classmethod
    def passed(cls, name: str, message: str, *details: str) -> "ProbeResult":
        return cls(name, ProbeStatus.PASS, message, tuple(details))

    @classmethod
    def failed(cls, name: str, message: str, *details: str) -> "ProbeResult":
        return cls(name, ProbeStatus.FAIL, message, tuple(details))

    @classmethod
    def warning(cls, name: str, message: str, *details: str) -> "ProbeResult":
        return cls(name, ProbeStatus.WARN, message, tuple(details))

    @classmethod
    def info(cls, name: str, message: str, *details: str) -> "ProbeResult":
        return cls(name, ProbeStatus.INFO, message, tuple(details))


@dataclass
class RunReport:
    """
    Ordered probe results for one invocation.

    Attributes:
        image: Image or container reference the probes ran against
        image_class: Classification shared by every probe in the run
        results: Probe results in execution order
    """

    image: str
    image_class: ImageClass
    results: list[ProbeResult] = field(default_factory=list)

    def add(self, result: ProbeResult) -> ProbeResult:
        """Append a probe result and return it."""
        self.results.append(result)
        return result

    def extend(self, results: list[ProbeResult]) -> None:
        for result in results:
            self.add(result)

    @property
    def has_failures(self) -> bool:
        """True if and only if any result is a Fail."""
        return any(r.status is ProbeStatus.FAIL for r in self.results)

    @property
    def exit_code(self) -> int:
        return 1 if self.has_failures else 0

    def count(self, status: ProbeStatus) -> int:
        return sum(1 for r in self.results if r.status is status)

    def by_name(self, name: str) -> list[ProbeResult]:
        """Return all results produced under a probe name."""
        return [r for r in self.results if r.name == name]
