# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Settlement analysis REST API resources.

Read-only views over the stored settlement rows:

- /settlements/pivot: rows grouped by CSO and customer with subtotals
- /settlements/totals: grand totals, CSO subtotals and one page of rows
- /settlements/stats: row and business counts per month
- /settlements/months: available settlement months
- /settlements/monthly-summary: summary columns per month for a member
- /settlements/summary: mail-merge figures for a member and month

Passing ``business_number`` scopes the rows to what CSO matching
attributes to that member.
"""

from flask import current_app, request
from flask_restful import Resource
from marshmallow import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.models.company_settings import CompanySettings
from app.models.db import db
from app.resources.constants import (
    ERROR_DATABASE,
    ERROR_DATABASE_LOG,
    ERROR_VALIDATION,
    ERROR_VALIDATION_LOG,
    LOG_BUILDING_PIVOT,
    LOG_COMPUTING_STATS,
    LOG_COMPUTING_TOTALS,
    LOG_LISTING_MONTHS,
    LOG_MONTHLY_SUMMARY,
    LOG_SETTLEMENT_SUMMARY,
    MSG_BUSINESS_NUMBER_REQUIRED,
    MSG_SUMMARY_PARAMS_REQUIRED,
)
from app.schemas.settlement_schema import SettlementQuerySchema
from app.services.aggregation import (
    build_pivot,
    compute_totals,
    cso_subtotals,
    monthly_summary,
    paginate,
    pivot_table,
    settlement_stats_by_month,
    settlement_summary,
)
from app.services.column_registry import select_columns, summary_columns
from app.services.merge_service import render_notice
from app.services.settlement_service import (
    available_months,
    query_settlements,
    settlements_for_business,
)
from app.utils.limiter import limiter
from app.utils.logger import logger


def _load_query():
    """Validate the query string.

    Returns:
        ``(params, None)``, or ``(None, response)`` with the 422 response.
    """
    try:
        return SettlementQuerySchema().load(request.args.to_dict()), None
    except ValidationError as err:
        logger.error(ERROR_VALIDATION_LOG, err.messages)
        return None, (
            {"success": False, "message": ERROR_VALIDATION, "errors": err.messages},
            422,
        )


def _database_error(err: SQLAlchemyError):
    db.session.rollback()
    logger.error(ERROR_DATABASE_LOG, str(err))
    return {"success": False, "message": ERROR_DATABASE}, 500


def _statement_notice(month: str | None) -> str | None:
    """Notice printed under a statement, from the operator's settings."""
    company = CompanySettings.get_current()
    if company is None or not company.additional_info:
        return None
    return render_notice(company.additional_info, month, company.ceo_name)


class SettlementPivotResource(Resource):
    """Settlement rows grouped by CSO company and customer."""

    @limiter.limit(lambda: current_app.config["RATE_LIMIT_CONFIGURATION"])
    def get(self):
        """Build the pivot report.

        Query Parameters:
            settlement_month (str, optional): YYYY-MM, alias year_month.
            business_number (str, optional): Scope rows to one member.
            search (str, optional): Product, customer or sales rep filter.
            columns (str, optional): Comma separated column keys; the
                visible columns by default.

        Returns:
            tuple: ``{"success": true, "data": {columns, groups, table,
            totals, rowCount, notice}}`` and HTTP 200.
        """
        params, error = _load_query()
        if error:
            return error

        month = params.get("settlement_month")
        logger.info(LOG_BUILDING_PIVOT, month or "all")
        try:
            rows = query_settlements(
                month, params.get("business_number"), params.get("search")
            )
            columns = select_columns(params.get("columns"))
            notice = _statement_notice(month)
        except SQLAlchemyError as err:
            return _database_error(err)

        pivot = build_pivot(rows, current_app.config["PIVOT_UNASSIGNED_LABEL"])
        return {
            "success": True,
            "data": {
                "columns": columns,
                "groups": pivot["groups"],
                "table": pivot_table(pivot, columns),
                "totals": pivot["grandTotal"],
                "rowCount": len(rows),
                "notice": notice,
            },
        }, 200


class SettlementTotalsResource(Resource):
    """Grand totals and CSO subtotals, with one page of rows."""

    @limiter.limit(lambda: current_app.config["RATE_LIMIT_CONFIGURATION"])
    def get(self):
        """Compute totals over the filtered rows.

        Query Parameters:
            settlement_month, business_number, search: Row filters.
            page (int, optional): 1-based page. Default: 1
            page_size (int, optional): Default from SETTLEMENT_PAGE_SIZE.

        Returns:
            tuple: ``{"success": true, "data": {totals, pagination,
            csoSubtotals, rows}}`` and HTTP 200.
        """
        params, error = _load_query()
        if error:
            return error

        month = params.get("settlement_month")
        logger.info(LOG_COMPUTING_TOTALS, month or "all")
        try:
            rows = query_settlements(
                month, params.get("business_number"), params.get("search")
            )
        except SQLAlchemyError as err:
            return _database_error(err)

        page_size = (
            params.get("page_size") or current_app.config["SETTLEMENT_PAGE_SIZE"]
        )
        page_rows, pagination = paginate(rows, params["page"], page_size)
        return {
            "success": True,
            "data": {
                "totals": compute_totals(rows),
                "pagination": pagination,
                "csoSubtotals": cso_subtotals(
                    rows, current_app.config["PIVOT_UNASSIGNED_LABEL"]
                ),
                "rows": page_rows,
            },
        }, 200


class SettlementStatsResource(Resource):
    """Row and business counts per settlement month."""

    @limiter.limit(lambda: current_app.config["RATE_LIMIT_CONFIGURATION"])
    def get(self):
        logger.info(LOG_COMPUTING_STATS)
        try:
            rows = query_settlements()
        except SQLAlchemyError as err:
            return _database_error(err)
        return {"success": True, "data": settlement_stats_by_month(rows)}, 200


class SettlementMonthsResource(Resource):
    """Settlement months available, newest first."""

    @limiter.limit(lambda: current_app.config["RATE_LIMIT_CONFIGURATION"])
    def get(self):
        """List months, optionally those visible to one member.

        Query Parameters:
            business_number (str, optional): Restrict to a member's rows.
        """
        params, error = _load_query()
        if error:
            return error

        logger.info(LOG_LISTING_MONTHS)
        try:
            months = available_months(params.get("business_number"))
        except SQLAlchemyError as err:
            return _database_error(err)
        return {"success": True, "data": {"months": months}}, 200


class MonthlySummaryResource(Resource):
    """Summary columns of one member, summed per settlement month."""

    @limiter.limit(lambda: current_app.config["RATE_LIMIT_CONFIGURATION"])
    def get(self):
        """Summarize a member's rows by month.

        Query Parameters:
            business_number (str, required): The member.

        Returns:
            tuple: ``{months: [{settlement_month, summaries, row_count}],
            summary_columns}`` in the success envelope, or 400 without a
            business number.
        """
        params, error = _load_query()
        if error:
            return error

        business_number = params.get("business_number")
        if not business_number:
            return {"success": False, "message": MSG_BUSINESS_NUMBER_REQUIRED}, 400

        logger.info(LOG_MONTHLY_SUMMARY, business_number)
        try:
            rows = settlements_for_business(business_number)
            columns = summary_columns()
        except SQLAlchemyError as err:
            return _database_error(err)

        keys = [column["column_key"] for column in columns]
        return {
            "success": True,
            "data": {
                "months": monthly_summary(rows, keys),
                "summary_columns": columns,
            },
        }, 200


class SettlementSummaryResource(Resource):
    """Mail-merge figures of one member for one month."""

    @limiter.limit(lambda: current_app.config["RATE_LIMIT_CONFIGURATION"])
    def get(self):
        params, error = _load_query()
        if error:
            return error

        business_number = params.get("business_number")
        month = params.get("settlement_month")
        if not business_number or not month:
            return {"success": False, "message": MSG_SUMMARY_PARAMS_REQUIRED}, 400

        logger.info(LOG_SETTLEMENT_SUMMARY, business_number, month)
        try:
            rows = settlements_for_business(business_number, month)
        except SQLAlchemyError as err:
            return _database_error(err)

        return {
            "success": True,
            "data": {
                "business_number": business_number,
                "settlement_month": month,
                **settlement_summary(rows),
            },
        }, 200
