# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Column mapping REST API resource.

Before a workbook is uploaded, the client sends its header row and gets
back the registry header proposed for each column, so the admin can fix
the mapping before the rows are stored.
"""

from flask import current_app, request
from flask_restful import Resource
from marshmallow import ValidationError

from app.resources.constants import (
    ERROR_VALIDATION,
    ERROR_VALIDATION_LOG,
    LOG_MAPPING_COLUMNS,
    LOG_MISSING_REQUIRED_HEADERS,
    MSG_NO_INPUT_DATA,
)
from app.schemas.column_mapping_schema import ColumnMappingRequestSchema
from app.services.column_matcher import auto_map_columns
from app.utils.limiter import limiter
from app.utils.logger import logger


class ColumnMappingResource(Resource):
    """Propose settlement columns for spreadsheet headers."""

    @limiter.limit(lambda: current_app.config["RATE_LIMIT_CONFIGURATION"])
    def post(self):
        """Auto-map a header row.

        Expected JSON payload:
            {
                "headers": ["사업자번호", "정산 월", ...] (required),
                "threshold": 0.6 (optional)
            }

        Returns:
            tuple: ``{"success": true, "data": {mappings, dbColumnOptions,
            missingRequired}}`` and HTTP 200, or 400/422 on bad input.
        """
        json_data = request.get_json()
        if not json_data:
            return {"success": False, "message": MSG_NO_INPUT_DATA}, 400

        try:
            payload = ColumnMappingRequestSchema().load(json_data)
        except ValidationError as err:
            logger.error(ERROR_VALIDATION_LOG, err.messages)
            return {
                "success": False,
                "message": ERROR_VALIDATION,
                "errors": err.messages,
            }, 422

        logger.info(LOG_MAPPING_COLUMNS, len(payload["headers"]))
        result = auto_map_columns(payload["headers"], payload.get("threshold"))
        if result["missingRequired"]:
            logger.warning(LOG_MISSING_REQUIRED_HEADERS, result["missingRequired"])

        return {"success": True, "data": result}, 200
