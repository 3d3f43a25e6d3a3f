"""Tests for image classifier."""

import logging

import pytest

from conftest import ScriptedExecutor, failed, not_found, ok
from core.models import ClassificationMethod, CommandResult, ImageClass
from utils.image_classifier import ImageClassifier


class TestDockerfileClassification:
    """Tests for classification from the build descriptor."""

    def test_final_scratch_stage_is_scratch(self, scratch_dockerfile):
        """Test FROM scratch in the last stage classifies as scratch."""
        executor = ScriptedExecutor()
        classifier = ImageClassifier(executor, dockerfile=scratch_dockerfile)

        assert classifier.classify() is ImageClass.SCRATCH

    def test_earlier_scratch_stage_is_regular(self, regular_dockerfile):
        """Test only the final stage counts."""
        executor = ScriptedExecutor()
        classifier = ImageClassifier(executor, dockerfile=regular_dockerfile)

        assert classifier.classify() is ImageClass.REGULAR

    def test_dockerfile_is_authoritative(self, scratch_dockerfile):
        """Test the runtime is never probed when the descriptor decides."""
        executor = ScriptedExecutor(default=ok("test"))
        classification = ImageClassifier(executor, dockerfile=scratch_dockerfile).classify_with_evidence()

        assert classification.image_class is ImageClass.SCRATCH
        assert classification.method is ClassificationMethod.DOCKERFILE
        assert executor.calls == []


class TestRuntimeClassification:
    """Tests for fallback detection through the container runtime."""

    def test_missing_dockerfile_falls_back(self, tmp_path):
        """Test a missing descriptor triggers the runtime probe."""
        executor = ScriptedExecutor(default=ok("test\n"))
        classification = ImageClassifier(executor, dockerfile=tmp_path / "Dockerfile").classify_with_evidence()

        assert classification.image_class is ImageClass.REGULAR
        assert classification.method is ClassificationMethod.RUNTIME
        assert executor.commands() == [["echo", "test"]]

    def test_no_dockerfile_path_falls_back(self):
        executor = ScriptedExecutor(default=not_found("echo"))
        assert ImageClassifier(executor).classify() is ImageClass.SCRATCH

    @pytest.mark.parametrize("stderr", [
        'exec: "echo": executable file not found in $PATH',
        "stat echo: no such file or directory",
        "exec /bin/echo: exec format error",
        "echo: not found",
    ])
    def test_not_found_signatures_classify_scratch(self, stderr):
        """Test each known signature classifies as scratch regardless of exit code."""
        executor = ScriptedExecutor(default=failed(1, stderr))
        assert ImageClassifier(executor).classify() is ImageClass.SCRATCH

    def test_exec_format_error_in_output(self, tmp_path):
        """Test exec format error with no descriptor classifies as scratch."""
        executor = ScriptedExecutor(
            default=CommandResult(command=(), exit_code=1, stdout="exec format error\n")
        )
        classifier = ImageClassifier(executor, dockerfile=tmp_path / "missing")
        assert classifier.classify() is ImageClass.SCRATCH

    def test_dockerfile_without_from_falls_back(self, tmp_path):
        path = tmp_path / "Dockerfile"
        path.write_text("# empty\n")
        executor = ScriptedExecutor(default=ok("test"))

        classification = ImageClassifier(executor, dockerfile=path).classify_with_evidence()
        assert classification.method is ClassificationMethod.RUNTIME


class TestDefaultClassification:
    """Tests for the explicit Regular default."""

    @pytest.mark.parametrize("result", [
        CommandResult(command=(), timed_out=True),
        CommandResult(command=(), launch_error="docker: command not launched"),
        CommandResult(command=(), exit_code=2, stderr="something odd"),
    ])
    def test_inconclusive_defaults_to_regular(self, result):
        """Test inconclusive probes default to regular."""
        classification = ImageClassifier(ScriptedExecutor(default=result)).classify_with_evidence()

        assert classification.image_class is ImageClass.REGULAR
        assert classification.method is ClassificationMethod.DEFAULT

    def test_default_is_logged_as_warning(self, caplog):
        """Test the default is never silent."""
        executor = ScriptedExecutor(default=CommandResult(command=(), timed_out=True))
        with caplog.at_level(logging.WARNING):
            ImageClassifier(executor).classify()

        assert any("assuming a regular Linux image" in r.message for r in caplog.records)
