# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Version resource module.

This module defines the VersionResource for exposing the build metadata of
the portal through a REST endpoint.
"""

from flask import current_app
from flask_restful import Resource

from app.service import (
    SERVICE_NAME,
    python_version,
    read_build_date,
    read_commit,
    read_version,
)
from app.utils.limiter import limiter

API_VERSION = read_version()
API_COMMIT = read_commit()
API_BUILD_DATE = read_build_date()
PYTHON_VERSION = python_version()


class VersionResource(Resource):
    """Resource for providing the portal version."""

    @limiter.limit(lambda: current_app.config["RATE_LIMIT_CONFIGURATION"])
    def get(self):
        """Retrieve the current version.

        Returns:
            dict: Service name, version, commit hash, build date and Python
            version, with HTTP status code 200.
        """
        return {
            "service": SERVICE_NAME,
            "version": API_VERSION,
            "commit": API_COMMIT,
            "build_date": API_BUILD_DATE,
            "python_version": PYTHON_VERSION,
        }, 200
