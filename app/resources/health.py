# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Health check resource module.

Liveness check of the portal: it answers as long as the process serves
requests and never touches the database. Dependency checks live in /ready.
"""

from datetime import UTC, datetime

from flask import current_app
from flask_restful import Resource

from app.service import SERVICE_NAME
from app.utils import logger
from app.utils.limiter import limiter


class HealthResource(Resource):
    """Resource for the liveness endpoint."""

    @limiter.limit(lambda: current_app.config["RATE_LIMIT_CONFIGURATION"])
    def get(self):
        """GET /health.

        Returns:
            dict: ``{"status": "ok", "service", "timestamp"}`` with 200.
        """
        logger.debug("Health check requested")

        return {
            "status": "ok",
            "service": SERVICE_NAME,
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        }, 200
