"""
Centralized configuration constants for imagecheck.

This module provides a single source of truth for configuration values
that are used across multiple modules, making them easier to update
and maintain.
"""

# ============================================================================
# Invocation Defaults
# ============================================================================

DEFAULT_DOCKERFILE = "Dockerfile"
"""Build descriptor inspected when no --dockerfile is given."""

DEFAULT_CONTAINER_NAME = "your-project-name"
"""Placeholder container name used by certificate-check."""

DEFAULT_APP_BINARY = "/bin/app"
"""Application binary path baked into the project's images."""

APP_HELP_FLAG = "--help"
"""Introspection flag used to prove the application binary runs."""

# ============================================================================
# Timeouts (in seconds)
# ============================================================================

VERSION_CHECK_TIMEOUT = 5
"""Timeout for runtime detection / tool version checks (5 seconds)."""

DOCKER_QUICK_CHECK_TIMEOUT = 5
"""Timeout for quick Docker status checks (5 seconds)."""

CLI_SUBPROCESS_TIMEOUT = 60
"""Timeout for commands run inside the target image or container (1 minute)."""

DOCKER_PULL_TIMEOUT = 600
"""Timeout for Docker image pull operations (10 minutes)."""

NETWORK_PROBE_TIMEOUT = 10
"""Bound for TLS / SMTP connectivity probes (10 seconds)."""

RUNTIME_OVERHEAD_TIMEOUT = 5
"""Extra host-side allowance on top of an in-container network timeout."""

# ============================================================================
# Probe Targets
# ============================================================================

CA_BUNDLE_FILENAME = "ca-certificates.crt"
"""CA bundle file name searched for in the build descriptor."""

CA_BUNDLE_PATHS = [
    "/etc/ssl/certs/ca-certificates.crt",
    "/etc/ssl/certs/ca-bundle.crt",
    "/etc/pki/tls/certs/ca-bundle.crt",
]
"""Well-known CA bundle locations, checked in order."""

CA_CERTS_DIR = "/etc/ssl/certs/"
"""Directory listed by certificate-check for regular images."""

SENSITIVE_FILES = [
    "/etc/passwd",
    "/etc/shadow",
]
"""Credential / user database files that must not ship in the image."""

SHELL_PATH = "/bin/sh"
BASH_PATH = "/bin/bash"

ENV_SENTINEL_NAME = "IMAGECHECK_SENTINEL"
"""Environment variable injected by the env-exposure probe."""

ENV_DUMP_COMMAND = ["env"]
IDENTITY_COMMAND = ["whoami"]
USER_ID_COMMAND = ["id", "-u"]
CLASSIFY_PROBE_COMMAND = ["echo", "test"]

HTTPS_ENDPOINTS = {
    "Google": "https://www.google.com",
    "GitHub": "https://api.github.com",
}
"""Well-known HTTPS endpoints used for outbound TLS checks."""

SMTP_HOST = "smtp.gmail.com"
SMTP_PORT = 587

# ============================================================================
# Runtime Error Signatures
# ============================================================================

EXECUTABLE_NOT_FOUND_SIGNATURES = [
    "no such file or directory",
    "not found",
    "executable file not found",
    "exec format error",
]
"""
Output fragments emitted by container runtimes when the requested
executable does not exist in the image. Matched case-insensitively.
"""

EXECUTABLE_NOT_FOUND_EXIT_CODES = (126, 127)
"""Exit codes docker/podman use for "cannot invoke" and "command not found"."""

RUNTIME_ERROR_EXIT_CODE = 125
"""Exit code docker/podman use when the runtime itself failed."""
