"""ChapterRelay: resilient batch translation of title/content records."""

import importlib.metadata


def _get_version() -> str:
    """
    Retrieve the package version from metadata.

    Returns:
        The version string, or a development version if not installed.

    """
    try:
        return importlib.metadata.version("ChapterRelay")
    except importlib.metadata.PackageNotFoundError:
        # Running from a source checkout without an install.
        return "0.0.0-dev"


__version__ = _get_version()
