"""
Pytest fixtures and configuration for imagecheck tests.

Provides shared fixtures and test utilities across the test suite.
"""

import pytest

from core.executor_interface import CommandExecutor
from core.models import CommandResult


def ok(stdout: str = "") -> CommandResult:
    """Successful command result."""
    return CommandResult(command=(), exit_code=0, stdout=stdout)


def failed(exit_code: int = 1, stderr: str = "") -> CommandResult:
    """Command that ran and exited non-zero."""
    return CommandResult(command=(), exit_code=exit_code, stderr=stderr)


def not_found(executable: str = "sh") -> CommandResult:
    """Runtime response for an executable missing from the image."""
    return CommandResult(
        command=(),
        exit_code=127,
        stderr=f'exec: "{executable}": executable file not found in $PATH',
    )


class ScriptedExecutor(CommandExecutor):
    """
    CommandExecutor returning canned results.

    Responses are looked up by the full argv, then by the executable name;
    anything unscripted returns the default result. Every call is recorded.
    """

    def __init__(self, responses=None, default=None, name="test-image:latest"):
        self.responses = responses or {}
        self.default = default if default is not None else not_found()
        self.name = name
        self.calls = []

    def target(self) -> str:
        return self.name

    def run(self, command, env=None, timeout=None, stdin=None) -> CommandResult:
        self.calls.append({"command": list(command), "env": env, "timeout": timeout, "stdin": stdin})
        for key in (tuple(command), command[0]):
            if key in self.responses:
                response = self.responses[key]
                if callable(response):
                    return response(command, env)
                return response
        return self.default

    def commands(self) -> list[list[str]]:
        return [call["command"] for call in self.calls]


@pytest.fixture
def scratch_executor():
    """Executor behaving like a scratch image: nothing but the app exists."""
    return ScriptedExecutor(responses={"/bin/app": ok("usage: app")})


@pytest.fixture
def regular_executor():
    """Executor behaving like a hardened regular image."""
    return ScriptedExecutor(
        responses={
            "/bin/sh": failed(126, "permission denied"),
            "/bin/bash": not_found("/bin/bash"),
            "env": ok("PATH=/usr/bin\nHOME=/\n"),
            "whoami": failed(1, "whoami: unknown uid 1000"),
            "id": ok("1000\n"),
            ("test", "-f", "/etc/passwd"): failed(1),
            ("test", "-f", "/etc/shadow"): failed(1),
            ("test", "-f", "/etc/ssl/certs/ca-certificates.crt"): ok(),
        },
        default=failed(1),
    )


@pytest.fixture
def scratch_dockerfile(tmp_path):
    """Multi-stage Dockerfile whose final stage is FROM scratch."""
    path = tmp_path / "Dockerfile"
    path.write_text(
        "FROM golang:1.24-alpine AS build\n"
        "RUN make build\n"
        "\n"
        "FROM alpine:3.19 AS curl-extract\n"
        "RUN apk add --no-cache curl\n"
        "\n"
        "FROM scratch AS prod\n"
        "COPY --from=curl-extract /curl-deps/curl /usr/bin/curl\n"
        "COPY --from=curl-extract /curl-deps/ca-certificates.crt /etc/ssl/certs/ca-certificates.crt\n"
        "COPY --from=build /src/bin/app /bin/app\n"
        'CMD ["/bin/app"]\n'
    )
    return path


@pytest.fixture
def regular_dockerfile(tmp_path):
    """Dockerfile with an early scratch stage but an alpine final stage."""
    path = tmp_path / "Dockerfile"
    path.write_text(
        "FROM scratch AS empty\n"
        "FROM golang:1.24-alpine AS build\n"
        "RUN make build\n"
        "FROM alpine:3.19 AS prod\n"
        "RUN apk add --no-cache ca-certificates\n"
        "COPY --from=build /src/bin/app /bin/app\n"
        "USER appuser\n"
    )
    return path
