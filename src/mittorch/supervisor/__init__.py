"""Repository-watching supervisor: config, GitHub/git access, process control, poll loop."""

from mittorch.supervisor.config import Config, ConfigError, load_config
from mittorch.supervisor.github import (
    RemoteShaError,
    RepositoryError,
    clone_url,
    get_latest_remote_sha,
    get_local_commit_hash,
    prepare_repository,
)
from mittorch.supervisor.loop import Supervisor
from mittorch.supervisor.loop import run as run_supervisor
from mittorch.supervisor.process import run_command, start_process, stop_process

__all__ = [
    "Config",
    "ConfigError",
    "RemoteShaError",
    "RepositoryError",
    "Supervisor",
    "clone_url",
    "get_latest_remote_sha",
    "get_local_commit_hash",
    "load_config",
    "prepare_repository",
    "run_command",
    "run_supervisor",
    "start_process",
    "stop_process",
]
