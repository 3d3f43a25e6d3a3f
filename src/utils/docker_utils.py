"""
Docker/Podman utility functions for image and container operations.

Provides a unified interface for working with container images,
supporting both Docker and Podman automatically.
"""

import logging
import subprocess
from typing import Optional

from constants import (
    CLI_SUBPROCESS_TIMEOUT,
    DOCKER_PULL_TIMEOUT,
    DOCKER_QUICK_CHECK_TIMEOUT,
    VERSION_CHECK_TIMEOUT,
)
from core.exceptions import CommandException
from core.executor_interface import CommandExecutor
from core.models import CommandResult

logger = logging.getLogger(__name__)


class DockerClient:
    """
    Unified client for Docker/Podman operations.

    Automatically detects available container runtime (docker or podman)
    and provides a consistent interface for image and container operations.
    """

    def __init__(self):
        """Initialize Docker client and detect available runtime."""
        self.runtime = self._detect_runtime()
        if not self.runtime:
            raise CommandException("docker", "neither docker nor podman found in PATH")
        logger.debug(f"Using container runtime: {self.runtime}")

    def _detect_runtime(self) -> Optional[str]:
        """Detect available container runtime."""
        for cmd in ["docker", "podman"]:
            try:
                result = subprocess.run(
                    [cmd, "--version"],
                    capture_output=True,
                    timeout=VERSION_CHECK_TIMEOUT,
                )
                if result.returncode == 0:
                    return cmd
            except (subprocess.TimeoutExpired, FileNotFoundError):
                continue
        return None

    def _execute(
        self,
        argv: list[str],
        timeout: Optional[float] = None,
        stdin: Optional[str] = None,
    ) -> CommandResult:
        """
        Run a runtime command and capture a structured result.

        Never raises; launch failures and timeouts are recorded on the result.
        """
        timeout = timeout or CLI_SUBPROCESS_TIMEOUT
        logger.debug(f"Running: {' '.join(argv)}")
        try:
            result = subprocess.run(
                argv,
                input=stdin,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            logger.debug(f"Timeout after {timeout}s: {' '.join(argv)}")
            return CommandResult(command=tuple(argv), timed_out=True)
        except (FileNotFoundError, PermissionError) as e:
            logger.debug(f"Could not launch {argv[0]}: {e}")
            return CommandResult(command=tuple(argv), launch_error=str(e))

        return CommandResult(
            command=tuple(argv),
            exit_code=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )

    @staticmethod
    def _env_flags(env: Optional[dict[str, str]]) -> list[str]:
        flags = []
        for key, value in (env or {}).items():
            flags.extend(["-e", f"{key}={value}"])
        return flags

    def run_in_image(
        self,
        image: str,
        command: list[str],
        env: Optional[dict[str, str]] = None,
        timeout: Optional[float] = None,
        stdin: Optional[str] = None,
    ) -> CommandResult:
        """
        Run a command in a fresh, auto-removed container from an image.

        Args:
            image: Image reference
            command: argv to run inside the container
            env: Extra environment variables
            timeout: Host-side timeout in seconds
            stdin: Text piped to the command

        Returns:
            CommandResult for the run
        """
        argv = [self.runtime, "run", "--rm"]
        if stdin is not None:
            argv.append("-i")
        argv.extend(self._env_flags(env))
        argv.append(image)
        argv.extend(command)
        return self._execute(argv, timeout=timeout, stdin=stdin)

    def exec_in_container(
        self,
        container: str,
        command: list[str],
        env: Optional[dict[str, str]] = None,
        timeout: Optional[float] = None,
        stdin: Optional[str] = None,
    ) -> CommandResult:
        """
        Run a command inside an already running container.

        Args:
            container: Container name or ID
            command: argv to run inside the container
            env: Extra environment variables
            timeout: Host-side timeout in seconds
            stdin: Text piped to the command

        Returns:
            CommandResult for the exec
        """
        argv = [self.runtime, "exec"]
        if stdin is not None:
            argv.append("-i")
        argv.extend(self._env_flags(env))
        argv.append(container)
        argv.extend(command)
        return self._execute(argv, timeout=timeout, stdin=stdin)

    def list_running_containers(self) -> list[str]:
        """
        List names of running containers.

        Raises:
            CommandException: If the runtime cannot be queried
        """
        result = self._execute(
            [self.runtime, "ps", "--format", "{{.Names}}"],
            timeout=DOCKER_QUICK_CHECK_TIMEOUT,
        )
        if not result.succeeded:
            raise CommandException(f"{self.runtime} ps", result.describe_failure())
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def is_container_running(self, name: str) -> bool:
        """Check if a container with exactly this name is running."""
        return name in self.list_running_containers()

    def image_exists_locally(self, image: str) -> bool:
        """Check if an image is present in the local image store."""
        result = self._execute(
            [self.runtime, "image", "inspect", image],
            timeout=DOCKER_QUICK_CHECK_TIMEOUT,
        )
        return result.succeeded

    def pull_image(self, image: str) -> bool:
        """
        Pull an image from registry.

        Args:
            image: Image reference to pull

        Returns:
            True if pull succeeded, False otherwise
        """
        logger.info(f"Pulling {image}")
        result = self._execute(
            [self.runtime, "pull", image],
            timeout=DOCKER_PULL_TIMEOUT,
        )
        if not result.succeeded:
            logger.warning(f"Failed to pull {image}: {result.describe_failure()}")
        return result.succeeded

    def get_image_size(self, image: str) -> Optional[str]:
        """
        Get the human-readable image size.

        Uses 'docker images' command instead of 'inspect' because the .Size field
        in inspect returns only the top layer size, not the full image size.

        Args:
            image: Image reference

        Returns:
            Size string (e.g., "12.3MB") or None if unavailable
        """
        result = self._execute(
            [self.runtime, "images", image, "--format", "{{.Size}}"],
            timeout=DOCKER_QUICK_CHECK_TIMEOUT,
        )
        if not result.succeeded:
            logger.debug(f"Failed to get size for {image}: {result.describe_failure()}")
            return None

        # Take first line in case multiple images match
        lines = [line.strip() for line in result.stdout.splitlines() if line.strip()]
        return lines[0] if lines else None


class ImageCommandExecutor(CommandExecutor):
    """Runs each command in a fresh container created from an image."""

    def __init__(self, docker_client: DockerClient, image: str):
        self.docker_client = docker_client
        self.image = image

    def target(self) -> str:
        return self.image

    def run(self, command, env=None, timeout=None, stdin=None) -> CommandResult:
        return self.docker_client.run_in_image(
            self.image, command, env=env, timeout=timeout, stdin=stdin
        )


class ContainerCommandExecutor(CommandExecutor):
    """Runs each command inside an already running container."""

    def __init__(self, docker_client: DockerClient, container: str):
        self.docker_client = docker_client
        self.container = container

    def target(self) -> str:
        return self.container

    def run(self, command, env=None, timeout=None, stdin=None) -> CommandResult:
        return self.docker_client.exec_in_container(
            self.container, command, env=env, timeout=timeout, stdin=stdin
        )
