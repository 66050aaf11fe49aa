"""Version of the WIT API distribution."""

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION_NAME = "wit-api"

# src/api/infrastructure/version.py -> repository root
_PYPROJECT = Path(__file__).parents[3] / "pyproject.toml"


def _version_from_pyproject() -> str:
    with _PYPROJECT.open("rb") as f:
        return tomllib.load(f)["project"]["version"]


def get_version() -> str:
    """Return the installed distribution version.

    A source checkout that was never installed reads ``pyproject.toml``.
    """
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return _version_from_pyproject()


__version__ = get_version()
