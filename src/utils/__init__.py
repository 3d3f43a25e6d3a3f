"""Utility modules for container runtime access and build descriptor parsing."""

from utils.docker_utils import DockerClient
from utils.dockerfile import BuildDescriptor
from utils.image_classifier import ImageClassifier

__all__ = [
    "DockerClient",
    "BuildDescriptor",
    "ImageClassifier",
]
