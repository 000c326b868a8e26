"""Top-level package for the Central report builder."""

from importlib import metadata


def get_version() -> str:
    """Return the installed package version."""
    try:
        return metadata.version("central-reports")
    except metadata.PackageNotFoundError:
        return "0.1.0"


__all__ = ["get_version"]
