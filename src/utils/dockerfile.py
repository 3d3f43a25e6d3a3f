"""
Build descriptor (Dockerfile) inspection helpers.

Reads a Dockerfile as plain text to find the final build stage, its base
image, and what the stage copies into the image.
"""

import logging
import re
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

FROM_PATTERN = re.compile(r"^\s*FROM\s+(.*)$", re.IGNORECASE)
COPY_PATTERN = re.compile(r"^\s*(?:COPY|ADD)\s+(.*)$", re.IGNORECASE)

SCRATCH_IMAGE = "scratch"


class BuildDescriptor:
    """
    Parsed view of a Dockerfile.

    Only the instructions needed for image classification and CA bundle
    checks are interpreted; everything else is kept as raw text.
    """

    def __init__(self, text: str, path: Optional[Path] = None):
        self.text = text
        self.path = path
        self.lines = text.splitlines()

    @classmethod
    def load(cls, path: Path) -> Optional["BuildDescriptor"]:
        """
        Load a Dockerfile from disk.

        Args:
            path: Path to the Dockerfile

        Returns:
            BuildDescriptor, or None if the file does not exist
        """
        path = Path(path)
        if not path.is_file():
            logger.debug(f"Build descriptor not found: {path}")
            return None
        return cls(path.read_text(), path=path)

    def from_lines(self) -> list[str]:
        """Return every FROM instruction, in file order."""
        return [line.strip() for line in self.lines if FROM_PATTERN.match(line)]

    def final_from_line(self) -> Optional[str]:
        """Return the last FROM instruction (the final build stage)."""
        from_lines = self.from_lines()
        return from_lines[-1] if from_lines else None

    def final_base_image(self) -> Optional[str]:
        """
        Return the base image token of the final build stage.

        Flags such as --platform=linux/amd64 are skipped.

        Examples:
            "FROM scratch AS prod"                 -> "scratch"
            "FROM --platform=$X alpine:3.19 AS a" -> "alpine:3.19"
        """
        line = self.final_from_line()
        if line is None:
            return None

        match = FROM_PATTERN.match(line)
        for token in match.group(1).split():
            if token.startswith("--"):
                continue
            return token
        return None

    def is_scratch(self) -> Optional[bool]:
        """
        Check whether the final stage is built FROM scratch.

        Returns:
            True/False, or None if the file has no FROM instruction
        """
        base = self.final_base_image()
        if base is None:
            return None
        return base == SCRATCH_IMAGE

    def references(self, needle: str) -> bool:
        """Check whether the raw Dockerfile text mentions a string."""
        return needle in self.text

    def final_stage_lines(self) -> list[str]:
        """Return the instructions that belong to the final build stage."""
        start = None
        for index, line in enumerate(self.lines):
            if FROM_PATTERN.match(line):
                start = index
        if start is None:
            return []
        return self.lines[start + 1:]

    def final_stage_copy_destinations(self) -> list[str]:
        """
        Return destinations of COPY/ADD instructions in the final stage.

        Examples:
            "COPY --from=build /src/bin/app /bin/app" -> "/bin/app"
        """
        destinations = []
        for line in self.final_stage_lines():
            match = COPY_PATTERN.match(line)
            if not match:
                continue
            args = [t for t in match.group(1).split() if not t.startswith("--")]
            if len(args) >= 2:
                destinations.append(args[-1])
        return destinations
