# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Flask application routes.

This module is responsible for registering the routes of the REST API
and linking them to the corresponding resources.
"""

from flask_restful import Api

from app.resources.column_mappings import ColumnMappingResource
from app.resources.config import ConfigResource
from app.resources.health import HealthResource
from app.resources.integrity import CsoIntegrityResource
from app.resources.mail_merge import (
    MailMergePreviewResource,
    MailMergeRecipientsResource,
    MailMergeRenderResource,
)
from app.resources.ready import ReadyResource
from app.resources.settlements import (
    MonthlySummaryResource,
    SettlementMonthsResource,
    SettlementPivotResource,
    SettlementStatsResource,
    SettlementSummaryResource,
    SettlementTotalsResource,
)
from app.resources.system_status import SystemStatusResource
from app.resources.version import VersionResource
from app.service import api_prefix
from app.utils.logger import logger


def register_routes(app):
    """Register the REST API routes on the Flask application.

    Args:
        app (Flask): The Flask application instance.

    Every route lives under ``/v{major}``, the major version read from
    the VERSION file.
    """
    api = Api(app)
    api_version = api_prefix()

    # Operational endpoints
    api.add_resource(HealthResource, f"/{api_version}/health")
    api.add_resource(ReadyResource, f"/{api_version}/ready")
    api.add_resource(VersionResource, f"/{api_version}/version")
    api.add_resource(ConfigResource, f"/{api_version}/configuration")
    api.add_resource(SystemStatusResource, f"/{api_version}/system/status")

    # Spreadsheet header auto-mapping
    api.add_resource(ColumnMappingResource, f"/{api_version}/column-mappings")

    # Settlement analysis (read-only)
    api.add_resource(SettlementPivotResource, f"/{api_version}/settlements/pivot")
    api.add_resource(SettlementTotalsResource, f"/{api_version}/settlements/totals")
    api.add_resource(SettlementStatsResource, f"/{api_version}/settlements/stats")
    api.add_resource(SettlementMonthsResource, f"/{api_version}/settlements/months")
    api.add_resource(
        MonthlySummaryResource, f"/{api_version}/settlements/monthly-summary"
    )
    api.add_resource(
        SettlementSummaryResource, f"/{api_version}/settlements/summary"
    )

    # CSO matching integrity
    api.add_resource(CsoIntegrityResource, f"/{api_version}/cso-matching/integrity")

    # Mail merge rendering
    api.add_resource(MailMergePreviewResource, f"/{api_version}/mail-merge/preview")
    api.add_resource(MailMergeRenderResource, f"/{api_version}/mail-merge/render")
    api.add_resource(
        MailMergeRecipientsResource, f"/{api_version}/mail-merge/recipients"
    )

    logger.info("Routes registered successfully.", api_version=api_version)
