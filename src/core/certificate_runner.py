"""
Certificate and connectivity verifier.

Checks that a running container ships a usable CA bundle and can open
outbound TLS connections. Results are informational: the caller decides
whether failures matter.
"""

import logging
import math
from typing import Optional

from constants import APP_HELP_FLAG, RUNTIME_OVERHEAD_TIMEOUT
from core.config import VerificationConfig
from core.executor_interface import CommandExecutor
from core.models import ImageClass, ProbeResult, RunReport
from outputs.console import ReportConsole
from utils.dockerfile import BuildDescriptor

logger = logging.getLogger(__name__)


class CertificateVerifier:
    """
    Runs CA bundle, TLS, SMTP and tooling checks inside a running container.

    Each check picks its in-image tool by image class: curl for scratch
    images (the only tool copied in), openssl/coreutils for regular ones.
    """

    def __init__(
        self,
        executor: CommandExecutor,
        config: Optional[VerificationConfig] = None,
        console: Optional[ReportConsole] = None,
    ):
        self.executor = executor
        self.config = config or VerificationConfig()
        self.console = console
        self.descriptor = BuildDescriptor.load(self.config.dockerfile)

    @property
    def _curl_timeout(self) -> str:
        # curl reads 0 as no limit, so never round down to it
        return str(max(1, math.ceil(self.config.network_timeout)))

    @property
    def _network_host_timeout(self) -> float:
        return self.config.network_timeout + RUNTIME_OVERHEAD_TIMEOUT

    def sections(self):
        """Return (title, check) pairs in execution order."""
        return [
            ("🔐 Checking certificate files...", self.check_ca_bundle),
            ("🌐 Testing SSL/TLS connections...", self.check_https),
            ("📧 Testing SMTP TLS connections...", self.check_smtp),
            ("🔍 Checking tools availability...", self.check_tools),
            ("📋 Checking container environment...", self.check_environment),
        ]

    def run(self, image_class: ImageClass) -> RunReport:
        """
        Run all certificate and connectivity checks.

        Args:
            image_class: Classification computed once for this invocation

        Returns:
            RunReport with results in section order
        """
        report = RunReport(image=self.executor.target(), image_class=image_class)

        for title, check in self.sections():
            if self.console:
                self.console.blank()
                self.console.section(title)
            try:
                results = check(image_class)
            except Exception as e:
                logger.error(f"Check '{check.__name__}' crashed: {e}", exc_info=True)
                results = [ProbeResult.failed(check.__name__, f"Check could not complete: {e}")]

            for result in results:
                report.add(result)
                if self.console:
                    self.console.result(result)

        return report

    # ------------------------------------------------------------------ checks

    def check_ca_bundle(self, image_class: ImageClass) -> list[ProbeResult]:
        if image_class.is_scratch:
            return self._check_ca_bundle_scratch()
        return self._check_ca_bundle_regular()

    def _check_ca_bundle_scratch(self) -> list[ProbeResult]:
        """Scratch images cannot be inspected, so trust the Dockerfile."""
        name = "ca_bundle"
        results = []

        app_binary = self.config.app_binary
        if app_binary:
            result = self.executor.run([app_binary, APP_HELP_FLAG])
            if result.succeeded:
                results.append(ProbeResult.passed("app_binary", "Application binary is accessible"))
            else:
                results.append(ProbeResult.failed(
                    "app_binary",
                    "Application binary is not accessible",
                    result.describe_failure(),
                ))

        if self.descriptor is None:
            results.append(ProbeResult.warning(name, "Dockerfile not found, cannot confirm CA certificates"))
        elif self.descriptor.references(self.config.ca_bundle_filename):
            results.append(ProbeResult.passed(
                name,
                f"CA certificates should be available at {self.config.ca_bundle_paths[0]}",
                "(copied from Dockerfile)",
            ))
        else:
            results.append(ProbeResult.failed(name, "CA certificates not found in Dockerfile"))
        return results

    def _check_ca_bundle_regular(self) -> list[ProbeResult]:
        name = "ca_bundle"
        for path in self.config.ca_bundle_paths:
            if not self.executor.run(["test", "-f", path]).succeeded:
                continue

            results = [ProbeResult.passed(name, f"CA certificates file exists at {path}")]
            size_result = self.executor.run(["stat", "-c%s", path])
            size = size_result.stdout.strip() if size_result.succeeded else ""
            size_bytes = int(size) if size.isdigit() else 0
            detail = f"File size: {size_bytes} bytes"
            if size_bytes > 0:
                results.append(ProbeResult.passed(name, "CA certificates file is not empty", detail))
            else:
                results.append(ProbeResult.failed(name, "CA certificates file is empty", detail))
            return results

        return [ProbeResult.failed(name, "CA certificates file does not exist")]

    def check_https(self, image_class: ImageClass) -> list[ProbeResult]:
        """Connect to each well-known HTTPS endpoint with the in-image curl."""
        results = []
        timeout = self._curl_timeout
        for label, url in self.config.https_endpoints.items():
            result = self.executor.run(
                ["curl", "-s", "-o", "/dev/null", "--connect-timeout", timeout, "--max-time", timeout, url],
                timeout=self._network_host_timeout,
            )
            if result.succeeded:
                results.append(ProbeResult.passed("https", f"HTTPS connection to {label} works"))
            else:
                results.append(ProbeResult.failed(
                    "https",
                    f"HTTPS connection to {label} fails",
                    result.describe_failure(),
                ))
        return results

    def check_smtp(self, image_class: ImageClass) -> list[ProbeResult]:
        """Failure is only a warning: egress to port 587 is often blocked."""
        name = "smtp"
        timeout = self._curl_timeout
        if image_class.is_scratch:
            label = "SMTP connection test"
            result = self.executor.run(
                ["curl", "-s", "--connect-timeout", timeout, "--max-time", timeout, f"smtp://{self.config.smtp_endpoint}"],
                timeout=self._network_host_timeout,
            )
        else:
            label = "SMTP STARTTLS connection test"
            result = self.executor.run(
                ["openssl", "s_client", "-connect", self.config.smtp_endpoint, "-starttls", "smtp", "-crlf"],
                timeout=self._network_host_timeout,
                stdin="QUIT\n",
            )

        if result.succeeded:
            return [ProbeResult.passed(name, f"{label} works")]
        return [ProbeResult.warning(
            name,
            f"{label} failed (this might be expected)",
            result.describe_failure(),
        )]

    def check_tools(self, image_class: ImageClass) -> list[ProbeResult]:
        name = "tools"
        if image_class.is_scratch:
            result = self.executor.run(["curl", "--version"])
            if not result.succeeded:
                return [ProbeResult.failed(name, "curl is not available")]
            version = (result.stdout.strip().splitlines() or ["not available"])[0]
            return [ProbeResult.passed(name, "curl is available", f"curl version: {version}")]

        if not self.executor.run(["which", "openssl"]).succeeded:
            return [ProbeResult.warning(name, "OpenSSL is not available")]
        result = self.executor.run(["openssl", "version"])
        version = result.stdout.strip() if result.succeeded else "not available"
        return [ProbeResult.passed(name, "OpenSSL is available", f"OpenSSL version: {version}")]

    def check_environment(self, image_class: ImageClass) -> list[ProbeResult]:
        name = "environment"
        if image_class.is_scratch:
            if self.descriptor is None:
                return [ProbeResult.info(name, "Scratch image contents unknown (Dockerfile not found)")]
            destinations = self.descriptor.final_stage_copy_destinations()
            return [ProbeResult.info(
                name,
                "Scratch image contents (from Dockerfile):",
                *[f"- {d}" for d in destinations],
            )]

        ca_dir = self.config.ca_certs_dir
        result = self.executor.run(["ls", "-la", ca_dir])
        if not result.succeeded:
            return [ProbeResult.info(name, f"Contents of {ca_dir}:", "Directory not accessible")]
        return [ProbeResult.info(name, f"Contents of {ca_dir}:", *result.stdout.rstrip().splitlines())]


__all__ = [
    "CertificateVerifier",
]
