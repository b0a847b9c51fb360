"""Containerized musl cross-build (docker + rustup + apk + cargo)."""

from .cross_musl import (
    APK_PACKAGES,
    BUILD_IMAGE,
    MOUNT_POINT,
    SUCCESS_LINES,
    TARGET_TRIPLE,
    build_script,
    docker_command,
    run as run_cross_musl,
)

__all__ = [
    "APK_PACKAGES",
    "BUILD_IMAGE",
    "MOUNT_POINT",
    "SUCCESS_LINES",
    "TARGET_TRIPLE",
    "build_script",
    "docker_command",
    "run_cross_musl",
]
