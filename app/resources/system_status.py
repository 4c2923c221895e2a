# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""System status resource module.

Admin dashboard summary: whether the database is configured and reachable,
how much data the portal holds and the operator company on record. A
database failure is reported in the payload instead of failing the call.
"""

from typing import Any

from flask import current_app
from flask_restful import Resource
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.models.company_settings import CompanySettings
from app.models.db import db
from app.models.email_log import EmailLog
from app.models.settlement import Settlement
from app.models.user import User
from app.resources.constants import LOG_SYSTEM_STATUS, LOG_SYSTEM_STATUS_DB_FAILED
from app.service import SERVICE_NAME, read_version
from app.services.settlement_service import available_months
from app.utils.limiter import limiter
from app.utils.logger import logger


def _data_summary() -> dict[str, Any]:
    db.session.execute(text("SELECT 1"))
    company = CompanySettings.get_current()
    return {
        "connected": True,
        "userCount": User.query.count(),
        "memberCount": User.query.filter_by(is_admin=False, is_approved=True).count(),
        "pendingApprovalCount": User.query.filter_by(
            is_admin=False, is_approved=False
        ).count(),
        "settlementCount": Settlement.query.count(),
        "settlementMonths": available_months(),
        "emailStats": EmailLog.get_stats(),
        "company": company.to_dict() if company else None,
    }


class SystemStatusResource(Resource):
    """Resource for the admin system status endpoint."""

    @limiter.limit(lambda: current_app.config["RATE_LIMIT_CONFIGURATION"])
    def get(self):
        """GET /system/status.

        Returns:
            tuple: ``{"success": true, "data": {...}}`` and HTTP 200. The
            data holds ``database`` (configured, connected), the counts,
            the settlement months, email log statistics, the company
            settings, the version and the environment.
        """
        logger.info(LOG_SYSTEM_STATUS)

        status: dict[str, Any] = {
            "configured": bool(current_app.config.get("SQLALCHEMY_DATABASE_URI")),
            "connected": False,
            "userCount": None,
            "memberCount": None,
            "pendingApprovalCount": None,
            "settlementCount": None,
            "settlementMonths": [],
            "emailStats": None,
            "company": None,
        }
        try:
            status.update(_data_summary())
        except SQLAlchemyError as err:
            db.session.rollback()
            logger.error(LOG_SYSTEM_STATUS_DB_FAILED, str(err))

        environment = current_app.config.get("ENVIRONMENT", "development")
        return {
            "success": True,
            "data": {
                "service": SERVICE_NAME,
                "database": {
                    "configured": status.pop("configured"),
                    "connected": status.pop("connected"),
                },
                **status,
                "companyName": (
                    status["company"]["company_name"] if status["company"] else None
                ),
                "version": read_version(),
                "environment": (
                    "Production" if environment == "production" else "Development"
                ),
            },
        }, 200
