# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Readiness check resource module.

The portal is ready when its database answers and, if Redis is enabled
for rate limiting, when Redis answers too. The column registry is also
loaded, since uploads and the analysis views cannot work without it.
"""

from datetime import datetime, timezone
from typing import Any

from flask import current_app
from flask_restful import Resource
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.models.db import db
from app.services.column_registry import header_map
from app.utils import logger
from app.utils.limiter import limiter


def _elapsed_ms(start: datetime) -> float:
    return round((datetime.now(timezone.utc) - start).total_seconds() * 1000, 2)


class ReadyResource(Resource):
    """Resource for the readiness endpoint."""

    @limiter.limit(lambda: current_app.config["RATE_LIMIT_CONFIGURATION"])
    def get(self):
        """GET /ready.

        Returns:
            dict: Overall status and one entry per check.

        Status Codes:
            - 200: Every check passed (``ready``)
            - 503: At least one check failed (``degraded``)
        """
        logger.debug("Readiness check requested")

        ready_data: dict[str, Any] = {
            "status": "ready",
            "checks": {},
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        }

        all_checks_passed = True
        all_checks_passed &= self._add_check_result(
            ready_data, "database", self._check_database()
        )
        all_checks_passed &= self._add_check_result(
            ready_data, "column_registry", self._check_column_registry()
        )
        if current_app.config.get("USE_REDIS_CACHE", False):
            all_checks_passed &= self._add_check_result(
                ready_data, "redis", self._check_redis()
            )
        else:
            ready_data["checks"]["redis"] = {"status": "disabled", "latency_ms": 0}

        if not all_checks_passed:
            ready_data["status"] = "degraded"
            return ready_data, 503

        return ready_data, 200

    def _add_check_result(
        self, ready_data: dict[str, Any], check_name: str, check_result: dict[str, Any]
    ) -> bool:
        ready_data["checks"][check_name] = {
            "status": "ok" if check_result["healthy"] else "error",
            "latency_ms": check_result.get("latency_ms", 0),
        }
        return bool(check_result["healthy"])

    def _check_database(self):
        """Run ``SELECT 1`` and measure its latency."""
        try:
            start_time = datetime.now(timezone.utc)
            result = db.session.execute(text("SELECT 1"))
            if result.scalar() == 1:
                return {"healthy": True, "latency_ms": _elapsed_ms(start_time)}
            return {"healthy": False, "latency_ms": 0}
        except (OSError, SQLAlchemyError) as e:
            logger.error("Database readiness check failed.", error=str(e))
            return {"healthy": False, "latency_ms": 0}

    def _check_column_registry(self):
        try:
            start_time = datetime.now(timezone.utc)
            healthy = bool(header_map())
            return {"healthy": healthy, "latency_ms": _elapsed_ms(start_time)}
        except (FileNotFoundError, ValueError) as e:
            logger.error("Column registry readiness check failed.", error=str(e))
            return {"healthy": False, "latency_ms": 0}

    def _check_redis(self):
        """Ping Redis and measure the round trip."""
        redis_url = current_app.config.get("REDIS_URL")
        if not redis_url:
            return {"healthy": False, "latency_ms": 0}

        import redis

        try:
            start_time = datetime.now(timezone.utc)
            client = redis.from_url(redis_url, socket_connect_timeout=2)
            client.ping()
            return {"healthy": True, "latency_ms": _elapsed_ms(start_time)}
        except (OSError, redis.RedisError) as e:
            logger.error("Redis readiness check failed.", error=str(e))
            return {"healthy": False, "latency_ms": 0}
