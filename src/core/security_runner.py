"""
Security verification runner.

Runs a fixed battery of probes against an image, each adapted to the
image class decided once up front, and aggregates the outcomes into a
RunReport.
"""

import logging
import secrets
from typing import Callable, Optional

from constants import (
    APP_HELP_FLAG,
    BASH_PATH,
    ENV_DUMP_COMMAND,
    ENV_SENTINEL_NAME,
    IDENTITY_COMMAND,
    SHELL_PATH,
    USER_ID_COMMAND,
)
from core.config import VerificationConfig
from core.error_classification import CommandErrorClassifier
from core.executor_interface import CommandExecutor
from core.models import ImageClass, ProbeResult, RunReport
from outputs.console import ReportConsole
from utils.dockerfile import BuildDescriptor

logger = logging.getLogger(__name__)

ProbeFunction = Callable[[ImageClass], list[ProbeResult]]


class SecurityVerificationRunner:
    """
    Runs the security probe battery against a single image.

    Probes run sequentially in a fixed order. A probe that raises is
    recorded as a failure and the remaining probes still run.
    """

    def __init__(
        self,
        executor: CommandExecutor,
        config: Optional[VerificationConfig] = None,
        image_size_lookup: Optional[Callable[[str], Optional[str]]] = None,
        console: Optional[ReportConsole] = None,
    ):
        """
        Initialize the runner.

        Args:
            executor: Runs commands in fresh containers from the image
            config: Verification configuration (defaults used if None)
            image_size_lookup: Returns the human-readable size of an image
            console: Optional console that prints results as they happen
        """
        self.executor = executor
        self.config = config or VerificationConfig()
        self.image_size_lookup = image_size_lookup
        self.console = console
        self._descriptor = None
        self._descriptor_loaded = False

    @property
    def descriptor(self) -> Optional[BuildDescriptor]:
        """Build descriptor, loaded lazily once."""
        if not self._descriptor_loaded:
            self._descriptor = BuildDescriptor.load(self.config.dockerfile)
            self._descriptor_loaded = True
        return self._descriptor

    def probes(self) -> list[tuple[str, ProbeFunction]]:
        """Return (title, probe) pairs in execution order."""
        return [
            ("Checking shell access...", self.check_shell_access),
            ("Checking bash access...", self.check_bash_access),
            ("Checking environment variable exposure...", self.check_env_exposure),
            ("Checking arbitrary command execution...", self.check_arbitrary_command),
            ("Checking if container runs as root...", self.check_root_user),
            ("Checking for sensitive system files...", self.check_sensitive_files),
            ("Checking application binary...", self.check_app_binary),
            ("Checking image size...", self.check_image_size),
            ("Checking for CA certificates...", self.check_ca_certificates),
        ]

    def run(self, image_class: ImageClass) -> RunReport:
        """
        Run every probe for the given image class.

        Args:
            image_class: Classification computed once for this invocation

        Returns:
            RunReport with results in probe order
        """
        report = RunReport(image=self.executor.target(), image_class=image_class)

        for index, (title, probe) in enumerate(self.probes(), start=1):
            if self.console:
                self.console.section(f"{index}. {title}")
            try:
                results = probe(image_class)
            except Exception as e:
                logger.error(f"Probe '{probe.__name__}' crashed: {e}", exc_info=True)
                results = [ProbeResult.failed(probe.__name__, f"Probe could not complete: {e}")]

            for result in results:
                report.add(result)
                if self.console:
                    self.console.result(result)

        return report

    # ------------------------------------------------------------------ probes

    def _check_interpreter(self, name: str, path: str, label: str) -> list[ProbeResult]:
        result = self.executor.run([path])
        if result.succeeded:
            return [ProbeResult.failed(name, f"{label} access is possible")]
        if CommandErrorClassifier.probe_could_not_run(result):
            return [ProbeResult.failed(
                name,
                f"{label} access check could not run",
                result.describe_failure(),
            )]
        return [ProbeResult.passed(name, f"{label} access blocked")]

    def check_shell_access(self, image_class: ImageClass) -> list[ProbeResult]:
        return self._check_interpreter("shell_access", SHELL_PATH, "Shell")

    def check_bash_access(self, image_class: ImageClass) -> list[ProbeResult]:
        return self._check_interpreter("bash_access", BASH_PATH, "Bash")

    def check_env_exposure(self, image_class: ImageClass) -> list[ProbeResult]:
        """Inject a sentinel variable and try to read it back."""
        name = "env_exposure"
        if image_class.is_scratch:
            return [ProbeResult.passed(name, "Environment variables not exposed (scratch image)")]

        sentinel = secrets.token_hex(8)
        result = self.executor.run(ENV_DUMP_COMMAND, env={ENV_SENTINEL_NAME: sentinel})
        if CommandErrorClassifier.probe_could_not_run(result):
            return [ProbeResult.failed(
                name,
                "Environment exposure check could not run",
                result.describe_failure(),
            )]
        if sentinel in result.stdout:
            return [ProbeResult.failed(name, "Environment variables are exposed")]
        return [ProbeResult.passed(name, "Environment variables not exposed")]

    def check_arbitrary_command(self, image_class: ImageClass) -> list[ProbeResult]:
        name = "arbitrary_command"
        if image_class.is_scratch:
            return [ProbeResult.passed(name, "Arbitrary commands blocked (scratch image)")]

        result = self.executor.run(IDENTITY_COMMAND)
        if result.succeeded:
            return [ProbeResult.failed(
                name,
                "Arbitrary command executed",
                f"{' '.join(IDENTITY_COMMAND)} -> {result.stdout.strip()}",
            )]
        if CommandErrorClassifier.probe_could_not_run(result):
            return [ProbeResult.failed(
                name,
                "Arbitrary command check could not run",
                result.describe_failure(),
            )]
        return [ProbeResult.passed(name, "Arbitrary commands blocked")]

    def check_root_user(self, image_class: ImageClass) -> list[ProbeResult]:
        """Running as root is common, so uid 0 is only a warning."""
        name = "root_user"
        if image_class.is_scratch:
            return [ProbeResult.info(name, "Skipping root user check (scratch image)")]

        result = self.executor.run(USER_ID_COMMAND)
        if not result.succeeded:
            return [ProbeResult.warning(
                name,
                "Could not determine container user",
                result.describe_failure(),
            )]

        user_id = result.stdout.strip()
        if not user_id.isdigit():
            return [ProbeResult.warning(
                name,
                "Could not determine container user",
                f"unexpected output: {user_id!r}",
            )]
        if int(user_id) == 0:
            return [ProbeResult.warning(name, "Container runs as root (this is common for many applications)")]
        return [ProbeResult.passed(name, f"Container runs as non-root (UID={user_id})")]

    def check_sensitive_files(self, image_class: ImageClass) -> list[ProbeResult]:
        name = "sensitive_files"
        results = []
        for path in self.config.sensitive_files:
            if image_class.is_scratch:
                results.append(ProbeResult.passed(name, f"{path} not found (scratch image)"))
                continue

            result = self.executor.run(["test", "-f", path])
            if result.succeeded:
                results.append(ProbeResult.failed(name, f"{path} found"))
            elif CommandErrorClassifier.probe_could_not_run(result):
                results.append(ProbeResult.failed(name, f"Could not check {path}", result.describe_failure()))
            else:
                results.append(ProbeResult.passed(name, f"{path} not found"))
        return results

    def check_app_binary(self, image_class: ImageClass) -> list[ProbeResult]:
        name = "app_binary"
        app_binary = self.config.app_binary
        if not app_binary:
            return [ProbeResult.info(name, "Skipping application binary check (no path provided)")]

        result = self.executor.run([app_binary, APP_HELP_FLAG])
        if result.succeeded:
            return [ProbeResult.passed(name, f"Application binary {app_binary} is accessible")]
        return [ProbeResult.failed(
            name,
            f"{app_binary} is not accessible or not executable",
            result.describe_failure(),
        )]

    def check_image_size(self, image_class: ImageClass) -> list[ProbeResult]:
        """Informational only; never affects the verdict."""
        name = "image_size"
        size = self.image_size_lookup(self.executor.target()) if self.image_size_lookup else None
        return [ProbeResult.info(name, f"Image size: {size or 'unknown'}")]

    def check_ca_certificates(self, image_class: ImageClass) -> list[ProbeResult]:
        name = "ca_certificates"
        if image_class.is_scratch:
            descriptor = self.descriptor
            if descriptor is None:
                return [ProbeResult.warning(name, "Dockerfile not found, skipping CA certificates check")]
            if descriptor.references(self.config.ca_bundle_filename):
                return [ProbeResult.passed(name, "CA certificates found in Dockerfile")]
            return [ProbeResult.failed(name, "CA certificates not found in Dockerfile")]

        for path in self.config.ca_bundle_paths:
            if self.executor.run(["test", "-f", path]).succeeded:
                return [ProbeResult.passed(name, f"CA certificates found at {path}")]
        return [ProbeResult.failed(name, "CA certificates not found in common paths")]


__all__ = [
    "SecurityVerificationRunner",
]
