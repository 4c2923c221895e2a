# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Mail-merge REST API resources.

Admins preview a template with sample values, render it for one member
and resolve who a bulk send would reach. Nothing is sent from here.
"""

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
    LOG_MAIL_MERGE_BUSINESS_NOT_APPROVED,
    LOG_MAIL_MERGE_BUSINESS_NOT_FOUND,
    LOG_MAIL_MERGE_PREVIEW,
    LOG_MAIL_MERGE_RENDER,
    LOG_NO_RECIPIENTS,
    LOG_RESOLVING_RECIPIENTS,
    MSG_BUSINESS_NOT_APPROVED,
    MSG_BUSINESS_NOT_FOUND,
    MSG_NO_INPUT_DATA,
    MSG_NO_RECIPIENTS,
)
from app.schemas.mail_merge_schema import (
    MailMergePreviewSchema,
    MailMergeRecipientsSchema,
    MailMergeRenderSchema,
)
from app.services.merge_service import (
    preview,
    render_for_business,
    resolve_recipients,
)
from app.utils.limiter import limiter
from app.utils.logger import logger


def _load_json(schema):
    """Validate the JSON body.

    Returns:
        ``(data, None)``, or ``(None, response)`` for a missing or
        invalid body.
    """
    json_data = request.get_json()
    if not json_data:
        return None, ({"success": False, "message": MSG_NO_INPUT_DATA}, 400)
    try:
        return schema.load(json_data), None
    except ValidationError as err:
        logger.error(ERROR_VALIDATION_LOG, err.messages)
        return None, (
            {"success": False, "message": ERROR_VALIDATION, "errors": err.messages},
            422,
        )


class MailMergePreviewResource(Resource):
    """Render a template with sample values."""

    @limiter.limit(lambda: current_app.config["RATE_LIMIT_CONFIGURATION"])
    def post(self):
        """Preview a template.

        Expected JSON payload:
            {
                "subject": "{{정산월}} 정산서 안내" (required),
                "body": "{{업체명}} 담당자님 ..." (required),
                "year_month": "2026-01" (optional)
            }

        Returns:
            tuple: ``{subject, body, html, variables}`` in the success
            envelope and HTTP 200.
        """
        payload, error = _load_json(MailMergePreviewSchema())
        if error:
            return error

        logger.info(LOG_MAIL_MERGE_PREVIEW)
        result = preview(payload["subject"], payload["body"], payload.get("year_month"))
        return {"success": True, "data": result}, 200


class MailMergeRenderResource(Resource):
    """Render a template for one member and settlement month."""

    @limiter.limit(lambda: current_app.config["RATE_LIMIT_CONFIGURATION"])
    def post(self):
        """Render a personalised message.

        Expected JSON payload:
            {
                "subject": "..." (required),
                "body": "..." (required),
                "business_number": "123-45-67890" (required),
                "settlement_month": "2026-01" (optional)
            }

        Returns:
            tuple: ``{business_number, email, subject, body, html}`` and
            HTTP 200; 404 for an unknown business, 400 when not approved.
        """
        payload, error = _load_json(MailMergeRenderSchema())
        if error:
            return error

        business_number = payload["business_number"]
        logger.info(LOG_MAIL_MERGE_RENDER, business_number)
        try:
            result = render_for_business(
                business_number,
                payload.get("settlement_month"),
                payload["subject"],
                payload["body"],
            )
        except LookupError:
            logger.warning(LOG_MAIL_MERGE_BUSINESS_NOT_FOUND, business_number)
            return {"success": False, "message": MSG_BUSINESS_NOT_FOUND}, 404
        except PermissionError:
            logger.warning(LOG_MAIL_MERGE_BUSINESS_NOT_APPROVED, business_number)
            return {"success": False, "message": MSG_BUSINESS_NOT_APPROVED}, 400
        except SQLAlchemyError as err:
            db.session.rollback()
            logger.error(ERROR_DATABASE_LOG, str(err))
            return {"success": False, "message": ERROR_DATABASE}, 500

        return {"success": True, "data": result}, 200


class MailMergeRecipientsResource(Resource):
    """Resolve a recipient selector into business numbers."""

    @limiter.limit(lambda: current_app.config["RATE_LIMIT_CONFIGURATION"])
    def post(self):
        payload, error = _load_json(MailMergeRecipientsSchema())
        if error:
            return error

        logger.info(LOG_RESOLVING_RECIPIENTS, len(payload["recipients"]))
        try:
            numbers = resolve_recipients(payload["recipients"])
        except SQLAlchemyError as err:
            db.session.rollback()
            logger.error(ERROR_DATABASE_LOG, str(err))
            return {"success": False, "message": ERROR_DATABASE}, 500

        if not numbers:
            logger.warning(LOG_NO_RECIPIENTS, payload["recipients"])
            return {"success": False, "message": MSG_NO_RECIPIENTS}, 400

        return {
            "success": True,
            "data": {"businessNumbers": numbers, "count": len(numbers)},
        }, 200
