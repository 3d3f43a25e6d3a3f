"""Tests for build descriptor parsing."""

import pytest

from utils.dockerfile import BuildDescriptor


class TestFinalStage:
    """Tests for final FROM detection."""

    def test_last_from_wins(self, scratch_dockerfile):
        """Test only the last FROM line is considered."""
        descriptor = BuildDescriptor.load(scratch_dockerfile)
        assert descriptor.final_from_line() == "FROM scratch AS prod"
        assert descriptor.final_base_image() == "scratch"
        assert descriptor.is_scratch() is True

    def test_earlier_scratch_stage_ignored(self, regular_dockerfile):
        """Test an earlier scratch stage does not make the image scratch."""
        descriptor = BuildDescriptor.load(regular_dockerfile)
        assert descriptor.final_base_image() == "alpine:3.19"
        assert descriptor.is_scratch() is False

    @pytest.mark.parametrize("line", [
        "from scratch",
        "From scratch AS prod",
        "  FROM scratch",
        "FROM --platform=linux/amd64 scratch",
    ])
    def test_keyword_case_insensitive(self, line):
        """Test the FROM keyword is matched case-insensitively."""
        assert BuildDescriptor(f"FROM alpine\n{line}\n").is_scratch() is True

    @pytest.mark.parametrize("line", [
        "FROM Scratch",
        "FROM scratch-base:1.0",
        "FROM prod-scratch AS prod",
        "FROM docker.io/library/scratch",
    ])
    def test_base_token_exact_match(self, line):
        """Test only the literal token 'scratch' counts."""
        assert BuildDescriptor(f"FROM scratch\n{line}\n").is_scratch() is False

    def test_no_from_returns_none(self):
        """Test a descriptor without FROM yields no decision."""
        descriptor = BuildDescriptor("# just a comment\nRUN echo hi\n")
        assert descriptor.final_from_line() is None
        assert descriptor.is_scratch() is None

    def test_comment_mentioning_from_is_ignored(self):
        """Test lines that merely mention FROM are not instructions."""
        descriptor = BuildDescriptor("FROM scratch\n# FROM alpine later maybe\n")
        assert descriptor.is_scratch() is True


class TestLoad:
    """Tests for loading descriptors from disk."""

    def test_missing_file_returns_none(self, tmp_path):
        assert BuildDescriptor.load(tmp_path / "Dockerfile") is None

    def test_directory_returns_none(self, tmp_path):
        assert BuildDescriptor.load(tmp_path) is None


class TestContents:
    """Tests for text references and copy destinations."""

    def test_references_ca_bundle(self, scratch_dockerfile):
        descriptor = BuildDescriptor.load(scratch_dockerfile)
        assert descriptor.references("ca-certificates.crt") is True
        assert descriptor.references("ca-bundle.crt") is False

    def test_final_stage_copy_destinations(self, scratch_dockerfile):
        """Test COPY destinations come from the final stage only."""
        descriptor = BuildDescriptor.load(scratch_dockerfile)
        assert descriptor.final_stage_copy_destinations() == [
            "/usr/bin/curl",
            "/etc/ssl/certs/ca-certificates.crt",
            "/bin/app",
        ]

    def test_copy_destinations_ignore_earlier_stages(self):
        descriptor = BuildDescriptor(
            "FROM alpine AS build\n"
            "COPY . /src\n"
            "FROM scratch\n"
            "ADD --chown=1000 app.tar /opt/\n"
        )
        assert descriptor.final_stage_copy_destinations() == ["/opt/"]
