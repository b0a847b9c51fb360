"""`mittorch build` / `mittorch-build` — containerized aarch64 musl release build."""

import sys
from pathlib import Path

from mittorch.build.cross_musl import run as run_cross_musl


def run_build_argv(argv: list[str] | None = None) -> None:
    """Parse argv (--project-root, --dry-run) and run the cross build. Exits with its return code."""
    import argparse

    if argv is None:
        argv = sys.argv[2:] if len(sys.argv) > 2 else []  # skip 'mittorch build'
    ap = argparse.ArgumentParser(
        prog="mittorch build",
        description="Cross-compile for aarch64-unknown-linux-musl in a throwaway container",
    )
    ap.add_argument(
        "--project-root",
        type=Path,
        default=Path.cwd(),
        help="Cargo project to build (default: cwd)",
    )
    ap.add_argument("--dry-run", action="store_true", help="Print the docker command only")
    args = ap.parse_args(argv)
    rc = run_cross_musl(args.project_root, dry_run=args.dry_run)
    sys.exit(rc)


def main() -> None:
    """`mittorch-build` entry point: no arguments, builds the current directory."""
    if len(sys.argv) > 1:
        print("Usage: mittorch-build", file=sys.stderr)
        print("  (takes no arguments; use `mittorch build --help` for options)", file=sys.stderr)
        sys.exit(1)
    sys.exit(run_cross_musl(Path.cwd()))
