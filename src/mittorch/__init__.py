"""mittorch: repository-watching process supervisor and its musl cross-build tooling."""

__version__ = "0.1.0"
