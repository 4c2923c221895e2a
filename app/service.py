# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Service identity shared by the version, status and routing layers.

Build metadata is read from the ``VERSION`` file and from ``.meta/``
files written by the image build. In a checkout without them git is
asked instead.
"""

import subprocess  # nosec B404
import sys
from pathlib import Path

SERVICE_NAME = "cso-settlement-portal"

ROOT_DIR = Path(__file__).parent.parent
UNKNOWN = "unknown"


def _read_file(path: Path) -> str | None:
    try:
        with path.open(encoding="utf-8") as f:
            return f.read().strip()
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError):
        return UNKNOWN


def _git(*args: str) -> str:
    try:
        result = subprocess.run(  # nosec B603 B607
            ["git", *args],
            capture_output=True,
            text=True,
            check=True,
            timeout=2,
            cwd=ROOT_DIR,
        )
        return result.stdout.strip() or UNKNOWN
    except (
        subprocess.CalledProcessError,
        FileNotFoundError,
        subprocess.TimeoutExpired,
    ):
        return UNKNOWN


def read_version() -> str:
    """Semantic version from the VERSION file, ``"unknown"`` if absent."""
    return _read_file(ROOT_DIR / "VERSION") or UNKNOWN


def read_commit() -> str:
    """Short commit hash of the build."""
    return _read_file(ROOT_DIR / ".meta" / "COMMIT") or _git(
        "rev-parse", "--short", "HEAD"
    )


def read_build_date() -> str:
    """Build date, or the last commit date in development."""
    return _read_file(ROOT_DIR / ".meta" / "BUILD_DATE") or _git(
        "log", "-1", "--format=%cd", "--date=iso-strict"
    )


def python_version() -> str:
    return f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"


def api_prefix(version: str | None = None) -> str:
    """URL prefix ``v{major}`` of the REST API; ``v0`` when unknown.

    Example:
        >>> api_prefix("1.4.2")
        'v1'
    """
    version = version if version is not None else read_version()
    major = version.split(".")[0]
    if not major.isdigit():
        return "v0"
    return f"v{major}"
