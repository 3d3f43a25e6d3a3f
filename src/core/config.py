"""
Configuration dataclass for verification runs.

Provides a strongly-typed configuration object for the classifier and
runners, with optional overrides loaded from a YAML file.
"""

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

import yaml

from constants import (
    CA_BUNDLE_FILENAME,
    CA_BUNDLE_PATHS,
    CA_CERTS_DIR,
    DEFAULT_APP_BINARY,
    DEFAULT_DOCKERFILE,
    HTTPS_ENDPOINTS,
    NETWORK_PROBE_TIMEOUT,
    SENSITIVE_FILES,
    SMTP_HOST,
    SMTP_PORT,
)
from core.exceptions import ConfigurationException

logger = logging.getLogger(__name__)


@dataclass
class VerificationConfig:
    """Configuration shared by security-check and certificate-check."""

    dockerfile: Path = Path(DEFAULT_DOCKERFILE)
    app_binary: Optional[str] = None
    ca_bundle_filename: str = CA_BUNDLE_FILENAME
    ca_bundle_paths: list[str] = field(default_factory=lambda: list(CA_BUNDLE_PATHS))
    ca_certs_dir: str = CA_CERTS_DIR
    sensitive_files: list[str] = field(default_factory=lambda: list(SENSITIVE_FILES))
    https_endpoints: dict[str, str] = field(default_factory=lambda: dict(HTTPS_ENDPOINTS))
    smtp_host: str = SMTP_HOST
    smtp_port: int = SMTP_PORT
    network_timeout: float = NETWORK_PROBE_TIMEOUT

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigurationException: If configuration is invalid
        """
        if not isinstance(self.dockerfile, (str, Path)):
            raise ConfigurationException(f"expected a path, got {self.dockerfile!r}", field="dockerfile")
        self.dockerfile = Path(self.dockerfile)

        for name in ("ca_bundle_filename", "ca_certs_dir", "smtp_host"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ConfigurationException(f"expected a non-empty string, got {value!r}", field=name)

        for name in ("ca_bundle_paths", "sensitive_files"):
            paths = getattr(self, name)
            if not isinstance(paths, list):
                raise ConfigurationException(f"expected a list of paths, got {paths!r}", field=name)
            for path in paths:
                if not isinstance(path, str) or not path.startswith("/"):
                    raise ConfigurationException(f"expected an absolute path, got {path!r}", field=name)
        if not self.ca_bundle_paths:
            raise ConfigurationException("at least one path is required", field="ca_bundle_paths")

        if self.app_binary is not None and (not isinstance(self.app_binary, str) or not self.app_binary.strip()):
            raise ConfigurationException("must be a non-empty path", field="app_binary")

        if not isinstance(self.https_endpoints, dict):
            raise ConfigurationException(
                f"expected a mapping of label to URL, got {self.https_endpoints!r}",
                field="https_endpoints",
            )
        for name, url in self.https_endpoints.items():
            if not isinstance(url, str) or not url.startswith("https://"):
                raise ConfigurationException(f"{name} must be an https:// URL", field="https_endpoints")

        # bool is a subclass of int
        if isinstance(self.smtp_port, bool) or not isinstance(self.smtp_port, int) or not 0 < self.smtp_port < 65536:
            raise ConfigurationException(f"{self.smtp_port!r} is not a valid port", field="smtp_port")

        # curl treats a zero timeout as no limit
        if (
            isinstance(self.network_timeout, bool)
            or not isinstance(self.network_timeout, (int, float))
            or self.network_timeout < 1
        ):
            raise ConfigurationException("must be at least 1 second", field="network_timeout")

    @property
    def smtp_endpoint(self) -> str:
        return f"{self.smtp_host}:{self.smtp_port}"

    @classmethod
    def from_yaml(cls, path: Path, **overrides) -> "VerificationConfig":
        """
        Load configuration overrides from a YAML file.

        Keyword overrides (typically from CLI flags) win over file values.
        None-valued overrides are ignored.

        Raises:
            ConfigurationException: If the file is missing, malformed or has unknown keys
        """
        path = Path(path)
        if not path.exists():
            raise ConfigurationException(f"file not found: {path}")

        try:
            with open(path, "r") as f:
                content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationException(f"could not parse {path}: {e}")

        if content is None:
            content = {}
        if not isinstance(content, dict):
            raise ConfigurationException(f"{path} must contain a mapping")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(content) - known)
        if unknown:
            raise ConfigurationException(f"unknown keys in {path}: {', '.join(unknown)}")

        content.update({k: v for k, v in overrides.items() if v is not None})
        logger.debug(f"Loaded configuration from {path}")

        config = cls(**content)
        config.validate()
        return config


__all__ = [
    "VerificationConfig",
]
