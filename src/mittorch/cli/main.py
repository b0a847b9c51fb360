"""Main CLI entry point for mittorch."""

import sys

from mittorch.cli import build as build_cli
from mittorch.cli import run_cmd
from mittorch.helpers import configure_logging


def _usage() -> None:
    print("Usage: mittorch <command> [args...]", file=sys.stderr)
    print("Commands:", file=sys.stderr)
    print(
        "  run [--config PATH] [--data-dir DIR]  - Supervise start-command, reload on new commits",
        file=sys.stderr,
    )
    print(
        "  build [--project-root DIR] [--dry-run] - Cross-compile for aarch64 musl in docker",
        file=sys.stderr,
    )


def main() -> None:
    """Main CLI entry point."""
    configure_logging()
    if len(sys.argv) < 2:
        _usage()
        sys.exit(1)

    command = sys.argv[1]

    if command == "run":
        run_cmd.run_supervisor_argv()
    elif command == "build":
        build_cli.run_build_argv()
    else:
        print(f"Error: Unknown command: {command}", file=sys.stderr)
        _usage()
        sys.exit(1)


if __name__ == "__main__":
    main()
