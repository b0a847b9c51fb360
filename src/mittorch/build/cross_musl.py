"""Cross-compile the cargo project in project_root for aarch64 musl inside a throwaway container.

The container is started with --rm so it is removed whether the build passes or fails.
Inside it a single `sh -c` script with `set -e` adds the rustup target, installs the
musl build dependencies with apk, and runs the release build. Artifacts land in
project_root/target/aarch64-unknown-linux-musl/release on the host.
"""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from pathlib import Path

from mittorch.helpers import FAILURE, status

log = logging.getLogger(__name__)

BUILD_IMAGE = "rust:alpine3.20"
MOUNT_POINT = "/app"
TARGET_TRIPLE = "aarch64-unknown-linux-musl"
APK_PACKAGES = ("build-base", "musl-dev")
SUCCESS_LINES = ("congratulations!", "the build was successful")

# Shell convention for "command not found".
RUNTIME_MISSING_EXIT = 127


def build_script(target: str = TARGET_TRIPLE, packages: tuple[str, ...] = APK_PACKAGES) -> str:
    """Shell script run inside the container. set -e stops at the first failing step."""
    lines = [
        "set -e",
        f"rustup target add {shlex.quote(target)}",
        "apk add --no-cache " + " ".join(shlex.quote(p) for p in packages),
        f"cargo build --release --target {shlex.quote(target)}",
    ]
    return "\n".join(lines) + "\n"


def docker_command(
    project_root: Path,
    image: str = BUILD_IMAGE,
    target: str = TARGET_TRIPLE,
    packages: tuple[str, ...] = APK_PACKAGES,
    mount_point: str = MOUNT_POINT,
) -> list[str]:
    """docker run argv: ephemeral container, project_root bound to mount_point as workdir."""
    return [
        "docker",
        "run",
        "--rm",
        "-v",
        f"{project_root}:{mount_point}",
        "-w",
        mount_point,
        image,
        "sh",
        "-c",
        build_script(target, packages),
    ]


def run(
    project_root: Path,
    dry_run: bool = False,
    image: str = BUILD_IMAGE,
    target: str = TARGET_TRIPLE,
    packages: tuple[str, ...] = APK_PACKAGES,
) -> int:
    """Run the containerized release build. Returns 0 on success, else the container's exit code."""
    project_root = project_root.resolve()
    if not project_root.is_dir():
        status(FAILURE, f"Project root is not a directory: {project_root}")
        return 1
    cmd = docker_command(project_root, image=image, target=target, packages=packages)
    if dry_run:
        print(f"[dry-run] would: {shlex.join(cmd)}")
        return 0
    if not shutil.which("docker"):
        status(FAILURE, "docker is not installed or not on PATH")
        return RUNTIME_MISSING_EXIT
    log.debug("running %s in %s", cmd[:8], project_root)
    r = subprocess.run(cmd, cwd=str(project_root))
    if r.returncode != 0:
        log.debug("container build exited with %s", r.returncode)
        return r.returncode
    for line in SUCCESS_LINES:
        print(line)
    return 0
