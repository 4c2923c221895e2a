# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""CSO matching integrity REST API resource."""

from flask import current_app, request
from flask_restful import Resource
from marshmallow import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.models.db import db
from app.resources.constants import (
    ERROR_DATABASE,
    ERROR_DATABASE_LOG,
    ERROR_VALIDATION,
    ERROR_VALIDATION_LOG,
    LOG_CHECKING_INTEGRITY,
    LOG_INTEGRITY_RESULT,
)
from app.schemas.settlement_schema import IntegrityQuerySchema
from app.services.integrity_service import check_integrity
from app.utils.limiter import limiter
from app.utils.logger import logger


class CsoIntegrityResource(Resource):
    """Classify the CSO names found in settlements against CSO matching."""

    @limiter.limit(lambda: current_app.config["RATE_LIMIT_CONFIGURATION"])
    def get(self):
        """Run the integrity check.

        Query Parameters:
            month (str, optional): YYYY-MM; every month when omitted.

        Returns:
            tuple: ``{"success": true, "data": {results, availableMonths,
            stats}}`` and HTTP 200.
        """
        try:
            params = IntegrityQuerySchema().load(request.args.to_dict())
        except ValidationError as err:
            logger.error(ERROR_VALIDATION_LOG, err.messages)
            return {
                "success": False,
                "message": ERROR_VALIDATION,
                "errors": err.messages,
            }, 422

        month = params.get("month")
        logger.info(LOG_CHECKING_INTEGRITY, month or "all")
        try:
            report = check_integrity(month)
        except SQLAlchemyError as err:
            db.session.rollback()
            logger.error(ERROR_DATABASE_LOG, str(err))
            return {"success": False, "message": ERROR_DATABASE}, 500

        logger.info(
            LOG_INTEGRITY_RESULT,
            report["stats"]["total"],
            report["stats"]["unregistered"],
        )
        return {"success": True, "data": report}, 200
