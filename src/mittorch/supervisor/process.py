"""Start, stop, and run shell commands for the supervised process."""

from __future__ import annotations

import subprocess
from pathlib import Path

from mittorch.helpers import FAILURE, SUCCESS, UPDATED, status


def start_process(cmd: str, repo_path: Path) -> subprocess.Popen:
    """Spawn `bash -c cmd` in repo_path. Spawn failures (OSError) propagate."""
    status(UPDATED, "Starting supervised process...")
    child = subprocess.Popen(["bash", "-c", cmd], cwd=repo_path)
    status(SUCCESS, f"Process started (PID {child.pid}).")
    return child


def run_command(name: str, cmd: str, repo_path: Path) -> bool:
    """Run `bash -c cmd` in repo_path to completion. Returns True on exit code 0."""
    status(UPDATED, f"Executing {name}...")
    r = subprocess.run(["bash", "-c", cmd], cwd=repo_path)
    if r.returncode != 0:
        status(FAILURE, f"{name} command failed.")
        return False
    status(SUCCESS, f"{name} completed.")
    return True


def stop_process(child: subprocess.Popen) -> None:
    """Kill child if it is still running, then reap it."""
    if child.poll() is None:
        child.kill()
    child.wait()
