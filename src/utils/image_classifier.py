"""
Image classification for determining whether an image is scratch-based.

Inspects the build descriptor first and falls back to probing the image
through the container runtime when no descriptor is available.
"""

import logging
from pathlib import Path
from typing import Optional

from constants import CLASSIFY_PROBE_COMMAND
from core.error_classification import CommandErrorCategory, CommandErrorClassifier
from core.executor_interface import CommandExecutor
from core.models import Classification, ClassificationMethod, ImageClass
from utils.dockerfile import BuildDescriptor
from utils.logging_helpers import log_classification_fallback

logger = logging.getLogger(__name__)


class ImageClassifier:
    """
    Classifier for scratch-class vs regular images.

    Strategy order (first definitive signal wins):
    1. Final FROM instruction of the build descriptor
    2. Runtime probe: run a trivial command inside the image
    3. Default to Regular (logged)
    """

    def __init__(self, executor: CommandExecutor, dockerfile: Optional[Path] = None):
        """
        Initialize image classifier.

        Args:
            executor: Runs commands inside the target image/container
            dockerfile: Optional path to the build descriptor
        """
        self.executor = executor
        self.dockerfile = dockerfile

    def classify(self) -> ImageClass:
        """
        Classify the target image.

        Returns:
            ImageClass enum value
        """
        return self.classify_with_evidence().image_class

    def classify_with_evidence(self) -> Classification:
        """
        Classify the target image and report which signal decided it.

        Returns:
            Classification with class, method and detail
        """
        classification = self._classify_from_dockerfile()
        if classification is None:
            classification = self._classify_from_runtime()

        self._log_classification(classification)
        return classification

    def _classify_from_dockerfile(self) -> Optional[Classification]:
        """Classify from the final build stage; None if no descriptor applies."""
        if self.dockerfile is None:
            return None

        descriptor = BuildDescriptor.load(self.dockerfile)
        if descriptor is None:
            logger.warning(f"Dockerfile not found at {self.dockerfile}, using fallback detection")
            return None

        is_scratch = descriptor.is_scratch()
        if is_scratch is None:
            logger.warning(f"No FROM instruction in {self.dockerfile}, using fallback detection")
            return None

        final_from = descriptor.final_from_line()
        if is_scratch:
            return Classification(
                ImageClass.SCRATCH,
                ClassificationMethod.DOCKERFILE,
                f"FROM scratch in {self.dockerfile}",
            )
        return Classification(
            ImageClass.REGULAR,
            ClassificationMethod.DOCKERFILE,
            final_from,
        )

    def _classify_from_runtime(self) -> Classification:
        """Run a trivial command in the target and inspect how it fails."""
        target = self.executor.target()
        result = self.executor.run(CLASSIFY_PROBE_COMMAND)
        category = CommandErrorClassifier.classify(result)

        if category is CommandErrorCategory.NONE:
            return Classification(
                ImageClass.REGULAR,
                ClassificationMethod.RUNTIME,
                f"'{' '.join(CLASSIFY_PROBE_COMMAND)}' ran inside {target}",
            )

        if category is CommandErrorCategory.EXECUTABLE_NOT_FOUND:
            return Classification(
                ImageClass.SCRATCH,
                ClassificationMethod.RUNTIME,
                f"no executable for '{CLASSIFY_PROBE_COMMAND[0]}' inside {target}",
            )

        # Inconclusive: runtime failure, timeout, or an unexpected non-zero exit
        return Classification(
            ImageClass.REGULAR,
            ClassificationMethod.DEFAULT,
            f"runtime probe inconclusive ({result.describe_failure()})",
        )

    def _log_classification(self, classification: Classification) -> None:
        if classification.method is ClassificationMethod.DEFAULT:
            log_classification_fallback(classification, logger=logger)
            return

        label = (
            "Scratch-based image"
            if classification.image_class.is_scratch
            else "Regular Linux image"
        )
        source = (
            "Dockerfile"
            if classification.method is ClassificationMethod.DOCKERFILE
            else "fallback detection"
        )
        logger.info(f"Detected: {label} ({source}: {classification.detail})")
