"""Tests for junitwatch.core.launch."""

from __future__ import annotations

from pathlib import Path

from junitwatch.core.launch import Launch, build_runner_command, default_junit_xml_file
from junitwatch.core.models import TestingTargets
from tests.conftest import FakeProcess


class TestBuildRunnerCommand:
    """Tests for build_runner_command."""

    def test_minimal(self) -> None:
        assert build_runner_command("phpunit", "tests/") == ["phpunit", "tests/"]

    def test_with_prepare_script(self) -> None:
        cmd = build_runner_command("phpunit", "tests/", prepare_script="bootstrap.php")
        assert cmd == ["phpunit", "-p", "bootstrap.php", "tests/"]

    def test_extra_args_come_first(self) -> None:
        cmd = build_runner_command(
            Path("/usr/bin/phpunit"),
            Path("tests/CalculatorTest.php"),
            prepare_script=Path("bootstrap.php"),
            extra_args=["--log-junit", "/tmp/junit.xml"],
        )
        assert cmd == [
            "/usr/bin/phpunit",
            "--log-junit",
            "/tmp/junit.xml",
            "-p",
            "bootstrap.php",
            "tests/CalculatorTest.php",
        ]


class TestDefaultJunitXmlFile:
    """Tests for default_junit_xml_file."""

    def test_in_given_directory(self, tmp_path: Path) -> None:
        path = default_junit_xml_file(tmp_path)
        assert path.parent == tmp_path
        assert path.name.startswith("junitwatch-")
        assert path.suffix == ".xml"
        assert not path.exists()

    def test_paths_are_unique(self, tmp_path: Path) -> None:
        paths = {default_junit_xml_file(tmp_path) for _ in range(100)}
        assert len(paths) == 100

    def test_defaults_to_temp_dir(self) -> None:
        assert default_junit_xml_file().is_absolute()


class TestLaunch:
    """Tests for the Launch handle."""

    def test_defaults(self, tmp_path: Path) -> None:
        launch = Launch(junit_xml_file=tmp_path / "junit.xml")
        assert launch.processes == []
        assert len(launch.testing_targets) == 0
        assert launch.command == []

    def test_add_process(self, tmp_path: Path) -> None:
        launch = Launch(junit_xml_file=tmp_path / "junit.xml")
        process = FakeProcess(0)
        launch.add_process(process)
        assert launch.processes == [process]

    def test_compared_by_identity(self, tmp_path: Path) -> None:
        targets = TestingTargets(["a"])
        first = Launch(junit_xml_file=tmp_path / "junit.xml", testing_targets=targets)
        second = Launch(junit_xml_file=tmp_path / "junit.xml", testing_targets=targets)
        assert first != second
        assert first == first
