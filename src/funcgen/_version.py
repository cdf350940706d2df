"""Version lookup for funcgen."""

import re
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version
from pathlib import Path

DISTRIBUTION_NAME = "funcgen"
FALLBACK_VERSION = "0.0.0"

# Present in a source checkout (src/funcgen/_version.py -> ./pyproject.toml)
_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"
_VERSION_LINE = re.compile(r'^version\s*=\s*["\']([^"\']+)["\']', re.MULTILINE)


def get_version() -> str:
    """Version from the checkout's pyproject.toml, else the installed distribution."""
    if _PYPROJECT.exists():
        match = _VERSION_LINE.search(_PYPROJECT.read_text(encoding="utf-8"))
        if match:
            return match.group(1)
    try:
        return _metadata_version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return FALLBACK_VERSION
