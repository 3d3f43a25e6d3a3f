"""
imagecheck - Container Image Verification Tool

Smoke-tests container images for basic security posture and CA certificate
correctness, adapting every check to scratch-based or regular images.
"""

__version__ = "1.0.0"

from core.models import (
    ImageClass,
    ProbeResult,
    ProbeStatus,
    RunReport,
)

__all__ = [
    "ImageClass",
    "ProbeResult",
    "ProbeStatus",
    "RunReport",
]
