"""Tests for mittorch.build.cross_musl."""

from pathlib import Path
from unittest.mock import MagicMock, patch

from mittorch.build import (
    BUILD_IMAGE,
    TARGET_TRIPLE,
    build_script,
    docker_command,
    run_cross_musl,
)


class TestDockerCommand:
    def test_ephemeral_container_with_bind_mount_and_workdir(self, tmp_path: Path) -> None:
        cmd = docker_command(tmp_path)
        assert cmd[:3] == ["docker", "run", "--rm"]
        assert cmd[cmd.index("-v") + 1] == f"{tmp_path}:/app"
        assert cmd[cmd.index("-w") + 1] == "/app"
        assert BUILD_IMAGE in cmd
        assert cmd[-3:-1] == ["sh", "-c"]

    def test_script_steps_in_order(self) -> None:
        lines = build_script().splitlines()
        assert lines == [
            "set -e",
            "rustup target add aarch64-unknown-linux-musl",
            "apk add --no-cache build-base musl-dev",
            "cargo build --release --target aarch64-unknown-linux-musl",
        ]

    def test_overrides(self, tmp_path: Path) -> None:
        cmd = docker_command(
            tmp_path, image="rust:alpine", target="x86_64-unknown-linux-musl", packages=("musl-dev",)
        )
        assert "rust:alpine" in cmd
        assert "--target x86_64-unknown-linux-musl" in cmd[-1]
        assert "apk add --no-cache musl-dev\n" in cmd[-1]


class TestRun:
    def test_success_prints_both_lines_in_order(self, tmp_path: Path, capsys) -> None:
        with (
            patch("mittorch.build.cross_musl.shutil.which", return_value="/usr/bin/docker"),
            patch("mittorch.build.cross_musl.subprocess.run") as m_run,
        ):
            m_run.return_value = MagicMock(returncode=0)
            assert run_cross_musl(tmp_path) == 0
        (cmd,) = m_run.call_args[0]
        assert cmd[:3] == ["docker", "run", "--rm"]
        assert TARGET_TRIPLE in cmd[-1]
        assert capsys.readouterr().out == "congratulations!\nthe build was successful\n"

    def test_failure_propagates_exit_code_without_success_lines(
        self, tmp_path: Path, capsys
    ) -> None:
        with (
            patch("mittorch.build.cross_musl.shutil.which", return_value="/usr/bin/docker"),
            patch("mittorch.build.cross_musl.subprocess.run") as m_run,
        ):
            m_run.return_value = MagicMock(returncode=101)
            assert run_cross_musl(tmp_path) == 101
        assert "congratulations!" not in capsys.readouterr().out

    def test_missing_docker_fails_before_running_anything(self, tmp_path: Path, capsys) -> None:
        with (
            patch("mittorch.build.cross_musl.shutil.which", return_value=None),
            patch("mittorch.build.cross_musl.subprocess.run") as m_run,
        ):
            assert run_cross_musl(tmp_path) == 127
        assert not m_run.called
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "FAILURE: docker is not installed" in captured.err

    def test_missing_project_root_returns_1(self, tmp_path: Path) -> None:
        with patch("mittorch.build.cross_musl.subprocess.run") as m_run:
            assert run_cross_musl(tmp_path / "nope") == 1
        assert not m_run.called

    def test_dry_run_prints_command_only(self, tmp_path: Path, capsys) -> None:
        with patch("mittorch.build.cross_musl.subprocess.run") as m_run:
            assert run_cross_musl(tmp_path, dry_run=True) == 0
        assert not m_run.called
        out = capsys.readouterr().out
        assert out.startswith("[dry-run] would: docker run --rm")
        assert "congratulations!" not in out

    def test_runs_in_project_root(self, tmp_path: Path) -> None:
        with (
            patch("mittorch.build.cross_musl.shutil.which", return_value="/usr/bin/docker"),
            patch("mittorch.build.cross_musl.subprocess.run") as m_run,
        ):
            m_run.return_value = MagicMock(returncode=0)
            run_cross_musl(tmp_path)
        assert m_run.call_args[1]["cwd"] == str(tmp_path.resolve())
