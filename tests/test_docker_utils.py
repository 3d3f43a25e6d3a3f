"""
Tests for Docker utilities and command executors.
"""

import subprocess
from unittest.mock import Mock, patch

import pytest

from core.exceptions import CommandException
from utils.docker_utils import (
    ContainerCommandExecutor,
    DockerClient,
    ImageCommandExecutor,
)


@pytest.fixture
def docker_client():
    """Create a DockerClient instance for testing."""
    with patch.object(DockerClient, '_detect_runtime', return_value='docker'):
        return DockerClient()


class TestDockerClientInit:
    """Test runtime detection."""

    def test_no_runtime_raises(self):
        with patch.object(DockerClient, '_detect_runtime', return_value=None):
            with pytest.raises(CommandException):
                DockerClient()

    def test_falls_back_to_podman(self):
        with patch('subprocess.run') as mock_run:
            mock_run.side_effect = [FileNotFoundError("docker"), Mock(returncode=0)]
            assert DockerClient().runtime == "podman"


class TestRunCommands:
    """Test run/exec argv construction and structured results."""

    def test_run_in_image_argv(self, docker_client):
        with patch('subprocess.run') as mock_run:
            mock_run.return_value = Mock(returncode=0, stdout="ok\n", stderr="")

            result = docker_client.run_in_image("app:latest", ["env"], env={"IMAGECHECK_SENTINEL": "abc"})

            argv = mock_run.call_args[0][0]
            assert argv == ["docker", "run", "--rm", "-e", "IMAGECHECK_SENTINEL=abc", "app:latest", "env"]
            assert result.succeeded is True
            assert result.stdout == "ok\n"

    def test_exec_in_container_with_stdin(self, docker_client):
        with patch('subprocess.run') as mock_run:
            mock_run.return_value = Mock(returncode=0, stdout="", stderr="")

            docker_client.exec_in_container("web", ["openssl", "s_client"], timeout=15, stdin="QUIT\n")

            argv = mock_run.call_args[0][0]
            assert argv == ["docker", "exec", "-i", "web", "openssl", "s_client"]
            assert mock_run.call_args.kwargs["input"] == "QUIT\n"
            assert mock_run.call_args.kwargs["timeout"] == 15

    def test_timeout_is_captured(self, docker_client):
        with patch('subprocess.run') as mock_run:
            mock_run.side_effect = subprocess.TimeoutExpired("docker", 10)

            result = docker_client.run_in_image("app:latest", ["/bin/sh"])

            assert result.timed_out is True
            assert result.succeeded is False

    def test_launch_error_is_captured(self, docker_client):
        with patch('subprocess.run') as mock_run:
            mock_run.side_effect = FileNotFoundError("docker")

            result = docker_client.exec_in_container("web", ["ls"])

            assert result.launch_error is not None
            assert result.exit_code is None

    def test_nonzero_exit_is_captured(self, docker_client):
        with patch('subprocess.run') as mock_run:
            mock_run.return_value = Mock(returncode=127, stdout="", stderr="executable file not found")

            result = docker_client.run_in_image("app:latest", ["/bin/bash"])

            assert result.exit_code == 127
            assert "executable file not found" in result.stderr


class TestContainerQueries:
    """Test container and image queries."""

    def test_is_container_running_exact_match(self, docker_client):
        with patch('subprocess.run') as mock_run:
            mock_run.return_value = Mock(returncode=0, stdout="web-1\nweb\ndb\n", stderr="")

            assert docker_client.is_container_running("web") is True
            assert docker_client.is_container_running("we") is False

    def test_ps_failure_raises(self, docker_client):
        with patch('subprocess.run') as mock_run:
            mock_run.return_value = Mock(returncode=1, stdout="", stderr="Cannot connect to the Docker daemon")

            with pytest.raises(CommandException):
                docker_client.list_running_containers()

    def test_get_image_size_first_line(self, docker_client):
        with patch('subprocess.run') as mock_run:
            mock_run.return_value = Mock(returncode=0, stdout="12.3MB\n45MB\n", stderr="")

            assert docker_client.get_image_size("app:latest") == "12.3MB"

    def test_get_image_size_unavailable(self, docker_client):
        with patch('subprocess.run') as mock_run:
            mock_run.return_value = Mock(returncode=0, stdout="", stderr="")

            assert docker_client.get_image_size("app:latest") is None

    def test_pull_image(self, docker_client):
        with patch('subprocess.run') as mock_run:
            mock_run.return_value = Mock(returncode=1, stdout="", stderr="pull access denied")

            assert docker_client.pull_image("missing:latest") is False


class TestExecutors:
    """Test executors delegate to the client."""

    def test_image_executor(self):
        client = Mock()
        executor = ImageCommandExecutor(client, "app:latest")

        executor.run(["id", "-u"])

        assert executor.target() == "app:latest"
        client.run_in_image.assert_called_once_with("app:latest", ["id", "-u"], env=None, timeout=None, stdin=None)

    def test_container_executor(self):
        client = Mock()
        executor = ContainerCommandExecutor(client, "web")

        executor.run(["ls"], timeout=5)

        assert executor.target() == "web"
        client.exec_in_container.assert_called_once_with("web", ["ls"], env=None, timeout=5, stdin=None)
