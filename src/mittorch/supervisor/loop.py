"""Supervisor loop: keep the start-command running and reload it when the tracked branch moves.

Each iteration waits `interval` seconds, then either recovers a crashed process
(pulling a new checkout first if one is available) or compares the local HEAD with the
branch tip on GitHub and reloads on change. Failures are reported and retried on the
next iteration; only a missing start-command or a spawn failure ends the run.
"""

from __future__ import annotations

import logging
import shutil
import signal
import subprocess
import threading
import time
from pathlib import Path

from mittorch.helpers import FAILURE, SUCCESS, UPDATED, WARNING, short_sha, status
from mittorch.supervisor.config import DEFAULT_DATA_DIR, Config
from mittorch.supervisor.github import (
    RemoteShaError,
    RepositoryError,
    get_latest_remote_sha,
    get_local_commit_hash,
    is_repository,
    prepare_repository,
)
from mittorch.supervisor.process import run_command, start_process, stop_process

log = logging.getLogger(__name__)

# Grace period after stop-command before the checkout is removed.
STOP_GRACE_SECONDS = 1


class Supervisor:
    def __init__(self, config: Config, data_dir: Path = DEFAULT_DATA_DIR) -> None:
        self.config = config
        self.data_dir = data_dir
        self.repo_path = config.repo_dir(data_dir)
        self.child: subprocess.Popen | None = None
        self._stop = threading.Event()

    # --- repository ---

    def _prepare(self) -> bool:
        """Fresh clone; prints and returns False on failure."""
        try:
            prepare_repository(
                self.config.account,
                self.config.repository,
                self.config.branch,
                self.config.token,
                data_dir=self.data_dir,
            )
        except (RepositoryError, OSError) as e:
            status(FAILURE, str(e))
            return False
        return True

    def _remote_sha(self) -> str | None:
        try:
            return get_latest_remote_sha(
                self.config.account,
                self.config.repository,
                self.config.branch,
                self.config.token,
            )
        except RemoteShaError as e:
            status(FAILURE, f"Failed to query remote SHA: {e}")
            return None

    def _local_sha(self) -> str:
        try:
            return get_local_commit_hash(self.repo_path)
        except RepositoryError as e:
            log.debug("local SHA unavailable: %s", e)
            return ""

    # --- lifecycle ---

    def request_stop(self, signum: int | None = None, frame: object = None) -> None:
        """Signal handler: ask the loop to finish after the current step."""
        if not self._stop.is_set():
            print()
            status(WARNING, "Signal received, stopping...")
        self._stop.set()

    def install_signal_handlers(self) -> None:
        signal.signal(signal.SIGINT, self.request_stop)
        signal.signal(signal.SIGTERM, self.request_stop)

    def _start(self) -> None:
        # start_command presence is checked in run().
        self.child = start_process(self.config.start_command or "", self.repo_path)

    def run(self, install_signals: bool = True) -> int:
        """Prepare, start, and supervise until a stop is requested. Returns 0 or 1."""
        status(UPDATED, "Starting mittorch orchestrator")

        if self._prepare():
            status(SUCCESS, "Repository prepared.")
        else:
            status(FAILURE, "Initial clone failed.")

        if not self.config.start_command:
            status(FAILURE, "No start-command configured.")
            return 1
        self._start()

        if install_signals:
            self.install_signal_handlers()

        try:
            while not self._stop.wait(self.config.interval):
                self.tick()
        finally:
            status(WARNING, "Stopping supervised process...")
            if self.child is not None:
                stop_process(self.child)
        status(SUCCESS, "Mittorch exited cleanly.")
        return 0

    def tick(self) -> None:
        """One poll iteration: crash recovery if the child exited, else an update check."""
        if self.child is not None and self.child.poll() is not None:
            self._recover_crash(self.child.returncode)
        else:
            self._check_for_update()

    def _recover_crash(self, code: int | None) -> None:
        status(WARNING, f"Supervised process exited with code {code}")
        status(UPDATED, "Checking for possible updates before restart...")

        if is_repository(self.repo_path):
            local_sha = self._local_sha()
            remote_sha = self._remote_sha()
            if remote_sha is not None:
                if local_sha and remote_sha and local_sha != remote_sha:
                    status(
                        UPDATED,
                        f"Update available: {short_sha(local_sha)} → {short_sha(remote_sha)}",
                    )
                    status(WARNING, "Updating repository before restart...")
                    try:
                        shutil.rmtree(self.repo_path)
                    except OSError as e:
                        status(FAILURE, f"Cleanup failed: {e}")
                    else:
                        if self._prepare():
                            status(SUCCESS, "Repository updated successfully.")
                        else:
                            status(FAILURE, "Re-clone failed.")
                else:
                    status(UPDATED, "No new commits detected.")
        else:
            status(FAILURE, "Could not open local repository during crash recovery.")

        self._start()
        status(SUCCESS, "Process restarted after crash.")

    def _check_for_update(self) -> None:
        if not is_repository(self.repo_path):
            status(WARNING, "Local repo missing — retrying clone.")
            if self._prepare():
                status(SUCCESS, "Repository re-cloned successfully.")
            else:
                status(FAILURE, "Retry failed.")
            return

        local_sha = self._local_sha()
        remote_sha = self._remote_sha()
        if remote_sha is None:
            return

        if not local_sha or not remote_sha:
            status(WARNING, "Skipping (invalid SHAs)")
            return

        if local_sha == remote_sha:
            status(UPDATED, "No changes detected.")
            return

        status(UPDATED, f"Change detected: {short_sha(local_sha)} → {short_sha(remote_sha)}")

        if self.config.stop_command:
            run_command("stop", self.config.stop_command, self.repo_path)
            time.sleep(STOP_GRACE_SECONDS)
        elif self.child is not None:
            status(WARNING, "Killing supervised process...")
            stop_process(self.child)

        status(WARNING, "Removing old repository...")
        try:
            shutil.rmtree(self.repo_path)
        except OSError as e:
            status(FAILURE, f"Cleanup failed: {e}")
            return

        if not self._prepare():
            status(FAILURE, "Re-clone failed.")
            return

        self._start()
        status(SUCCESS, "Reloaded cleanly.")


def run(config: Config, data_dir: Path = DEFAULT_DATA_DIR) -> int:
    """Run the supervisor for config. Returns 0 on clean stop, 1 without a start-command."""
    return Supervisor(config, data_dir=data_dir).run()
