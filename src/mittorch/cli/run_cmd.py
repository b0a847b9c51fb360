"""`mittorch run` — load config and supervise the start-command."""

import sys
from pathlib import Path

from mittorch.helpers import FAILURE, status
from mittorch.supervisor.config import DEFAULT_CONFIG_PATH, DEFAULT_DATA_DIR, ConfigError, load_config
from mittorch.supervisor.loop import run as run_supervisor


def run_supervisor_argv(argv: list[str] | None = None) -> None:
    """Parse --config/--data-dir from argv and run the supervisor. Exits with its return code."""
    import argparse

    if argv is None:
        argv = sys.argv[2:] if len(sys.argv) > 2 else []  # skip 'mittorch run'
    ap = argparse.ArgumentParser(
        prog="mittorch run",
        description="Keep start-command running and reload it when the tracked branch moves",
    )
    ap.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="Config file, JSON or YAML (default: mittorch.json)",
    )
    ap.add_argument(
        "--data-dir",
        type=lambda s: Path(s).resolve(),
        default=DEFAULT_DATA_DIR,
        help="Directory holding the checkout (default: .data)",
    )
    args = ap.parse_args(argv)
    try:
        config = load_config(args.config)
    except ConfigError as e:
        status(FAILURE, str(e))
        sys.exit(1)
    # The supervised child is stopped by Supervisor.run before a spawn failure gets here.
    try:
        rc = run_supervisor(config, data_dir=args.data_dir)
    except OSError as e:
        status(FAILURE, f"Supervisor stopped: {e}")
        sys.exit(1)
    sys.exit(rc)
