"""Expose the package version and the outbound User-Agent string."""

from __future__ import annotations

from importlib import metadata


def _resolve_version() -> str:
    """Return the installed package version or fall back to the project default."""

    try:
        return metadata.version("bynder-async-sdk")
    except metadata.PackageNotFoundError:
        # Fallback for development checkouts where the distribution is not installed.
        return "0.1.0"


__version__ = _resolve_version()

USER_AGENT = f"bynder-python-sdk/{__version__}"
