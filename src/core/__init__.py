"""Core classification-independent logic: models, config, probe runners."""

from core.models import (
    Classification,
    CommandResult,
    ImageClass,
    ProbeResult,
    ProbeStatus,
    RunReport,
)
from core.certificate_runner import CertificateVerifier
from core.security_runner import SecurityVerificationRunner

__all__ = [
    "Classification",
    "CommandResult",
    "ImageClass",
    "ProbeResult",
    "ProbeStatus",
    "RunReport",
    "CertificateVerifier",
    "SecurityVerificationRunner",
]
