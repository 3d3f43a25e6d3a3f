"""
Command-line interface for imagecheck - Container Image Verification Tool.

Provides two entry points:
- security-check: security posture probes against an image (pass/fail gated)
- certificate-check: CA bundle and TLS connectivity checks against a running
  container (informational)
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from constants import DEFAULT_APP_BINARY, DEFAULT_CONTAINER_NAME, DEFAULT_DOCKERFILE
from core.certificate_runner import CertificateVerifier
from core.config import VerificationConfig
from core.exceptions import ImageCheckException, PreconditionException
from core.security_runner import SecurityVerificationRunner
from outputs.console import ReportConsole
from utils.docker_utils import ContainerCommandExecutor, DockerClient, ImageCommandExecutor
from utils.image_classifier import ImageClassifier
from utils.logging_helpers import log_fatal_error

logger = logging.getLogger(__name__)

SECURITY_USAGE = "Usage: security-check <image_name> [binary_path]"
SECURITY_EXAMPLE = "Example: security-check my-server:latest /bin/app"


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--dockerfile", type=Path, default=None, help=f"Build descriptor to inspect (default: ./{DEFAULT_DOCKERFILE}).")
    parser.add_argument("--config", type=Path, default=None, help="YAML file overriding probe settings.")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging.")


def parse_security_args(args: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for security-check."""
    parser = argparse.ArgumentParser(
        prog="security-check",
        description="Minimal security checks for a container image",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    # Optional here so a missing image yields the usage message and exit 1
    parser.add_argument("image", nargs="?", help="Image to test (e.g., my-server:latest).")
    parser.add_argument("binary_path", nargs="?", help="Application binary inside the image (e.g., /bin/app).")
    _add_common_arguments(parser)
    return parser.parse_args(args)


def parse_certificate_args(args: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for certificate-check."""
    parser = argparse.ArgumentParser(
        prog="certificate-check",
        description="Test CA certificates and TLS connectivity inside a running container",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("container", nargs="?", default=DEFAULT_CONTAINER_NAME, help="Running container name.")
    parser.add_argument("--app-binary", default=DEFAULT_APP_BINARY, help="Application binary checked in scratch images.")
    _add_common_arguments(parser)
    return parser.parse_args(args)


def build_config(args: argparse.Namespace, app_binary: Optional[str]) -> VerificationConfig:
    """
    Build verification config from CLI flags and an optional YAML file.

    Raises:
        ConfigurationException: If configuration is invalid
    """
    if args.config:
        return VerificationConfig.from_yaml(
            args.config,
            dockerfile=args.dockerfile,
            app_binary=app_binary,
        )

    config = VerificationConfig(
        dockerfile=args.dockerfile or Path(DEFAULT_DOCKERFILE),
        app_binary=app_binary,
    )
    config.validate()
    return config


def _ensure_image_available(docker_client: DockerClient, image: str) -> None:
    """Pull the image once if it is not present locally."""
    if docker_client.image_exists_locally(image):
        return
    if not docker_client.pull_image(image):
        raise PreconditionException(
            f"Image {image} is not available locally and could not be pulled",
            [f"Build it first or check the reference: {image}"],
        )


def run_security_check(args: argparse.Namespace, console: ReportConsole) -> int:
    """
    Run the security-check workflow.

    Returns:
        Process exit code (0 if no probe failed, 1 otherwise)

    Raises:
        ImageCheckException: If a precondition or configuration check fails
    """
    config = build_config(args, args.binary_path)
    docker_client = DockerClient()
    _ensure_image_available(docker_client, args.image)

    console.header(f"🔒 Testing security of image: {args.image}")

    executor = ImageCommandExecutor(docker_client, args.image)
    image_class = ImageClassifier(executor, dockerfile=config.dockerfile).classify()
    console.line(f"Image type: {image_class.value}")
    console.blank()

    runner = SecurityVerificationRunner(
        executor,
        config=config,
        image_size_lookup=docker_client.get_image_size,
        console=console,
    )
    report = runner.run(image_class)

    console.summary(report, "All security checks passed!", "Some checks failed")
    console.counts(report)
    return report.exit_code


def run_certificate_check(args: argparse.Namespace, console: ReportConsole) -> int:
    """
    Run the certificate-check workflow.

    Returns:
        Always 0 once the container is found; results are informational

    Raises:
        ImageCheckException: If the container is not running or config is invalid
    """
    config = build_config(args, args.app_binary)
    docker_client = DockerClient()

    console.line("🔍 Testing certificates in container...")
    console.line(f"📦 Testing container: {args.container}")

    if not docker_client.is_container_running(args.container):
        console.line(f"❌ Container {args.container} is not running", style="red")
        raise PreconditionException(
            f"Container {args.container} is not running",
            [f"Start it first, e.g.: docker run -d --name {args.container} <image>"],
        )

    executor = ContainerCommandExecutor(docker_client, args.container)
    image_class = ImageClassifier(executor, dockerfile=config.dockerfile).classify()
    console.line(f"Image type: {image_class.value}")

    verifier = CertificateVerifier(executor, config=config, console=console)
    verifier.run(image_class)

    console.blank()
    console.line("🎯 Certificate test completed!")
    console.line("   If HTTPS connections work, CA certificates are properly configured")
    console.line("   If HTTPS connections fail, there might be issues with CA certificates")
    return 0


def _exit_with(runner, args: argparse.Namespace) -> None:
    """Run a workflow, mapping fatal errors to exit code 1."""
    setup_logging(args.verbose)
    console = ReportConsole(no_color=args.no_color)
    try:
        code = runner(args, console)
    except ImageCheckException as e:
        log_fatal_error(e, logger=logger)
        sys.exit(1)
    sys.exit(code)


def main_security(argv: Optional[list[str]] = None):
    """Entry point for security-check."""
    args = parse_security_args(argv)
    if not args.image:
        console = ReportConsole(no_color=args.no_color)
        console.line(SECURITY_USAGE)
        console.line(SECURITY_EXAMPLE)
        sys.exit(1)
    _exit_with(run_security_check, args)


def main_certificate(argv: Optional[list[str]] = None):
    """Entry point for certificate-check."""
    _exit_with(run_certificate_check, parse_certificate_args(argv))


if __name__ == "__main__":
    main_security()
