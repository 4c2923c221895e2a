# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Offline import of members, CSO matching and settlement rows.

Import files are JSON: either a list of records, or an object
``{"records": [...], "mapping": {...}}`` where ``mapping`` maps
spreadsheet headers to registry headers for settlement files whose
headers differ from the registry.

Record problems are reported as ``행 N: ...`` (N counts records from 1)
and never abort the import; at most MAX_REPORTED_ERRORS are listed.
"""

import json
from pathlib import Path

from marshmallow import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.models.cso_matching import CsoMatching
from app.models.db import db
from app.models.settlement import parse_text
from app.models.user import User
from app.schemas.constants import BUSINESS_NUMBER_NOT_UNIQUE
from app.schemas.user_schema import UserImportSchema
from app.services.column_matcher import apply_mapping
from app.services.settlement_service import replace_settlement_months
from app.utils.business_number import is_valid_business_number
from app.utils.logger import logger

MAX_REPORTED_ERRORS = 10
MORE_ERRORS = "... 외 다수"
NO_VALID_ROWS = "유효한 데이터가 없습니다. 사업자번호를 확인해주세요."


class ImportFileError(ValueError):
    """The import file cannot be read as records."""


def load_import_file(path: Path) -> tuple[list[dict], dict | None]:
    """Read an import file.

    Returns:
        ``(records, mapping)``; mapping is None for a plain list.

    Raises:
        ImportFileError: Missing file, invalid JSON or unexpected shape.
    """
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ImportFileError(f"Import file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ImportFileError(f"Invalid JSON in {path}: {e}") from e

    mapping = None
    if isinstance(data, dict):
        mapping = data.get("mapping")
        data = data.get("records")
        if mapping is not None and not isinstance(mapping, dict):
            raise ImportFileError("'mapping' must be an object")
    if not isinstance(data, list):
        raise ImportFileError("Import file must hold a list of records")
    if not all(isinstance(record, dict) for record in data):
        raise ImportFileError("Every record must be an object")
    return data, mapping


def cap_errors(errors: list[str], has_more: bool = False) -> list[str]:
    """Keep the first MAX_REPORTED_ERRORS errors, flagging the rest."""
    capped = errors[:MAX_REPORTED_ERRORS]
    if has_more or len(errors) > MAX_REPORTED_ERRORS:
        capped.append(MORE_ERRORS)
    return capped


def default_password(business_number: str) -> str:
    """Initial password of imported members: ``u`` followed by the 10 digits."""
    return f"u{business_number}"


def _describe(messages) -> str:
    if isinstance(messages, dict):
        return "; ".join(
            f"{field}: {_describe(value)}" for field, value in messages.items()
        )
    if isinstance(messages, (list, tuple)):
        return " ".join(_describe(value) for value in messages)
    return str(messages)


def import_users(records: list[dict], dry_run: bool = False) -> dict:
    """Create member accounts from import records.

    Members without a password get default_password() and must change it
    at first login. Imported members are approved unless the record says
    otherwise. Business numbers already registered, or repeated in the
    file, are reported and skipped.

    Returns:
        ``{"imported", "skipped", "errors", "dry_run"}``
    """
    schema = UserImportSchema()
    users = []
    seen = set()
    errors = []
    skipped = 0

    for index, record in enumerate(records, start=1):
        try:
            data = schema.load(record)
        except ValidationError as err:
            if err.messages.get("business_number") == [BUSINESS_NUMBER_NOT_UNIQUE]:
                skipped += 1
                errors.append(
                    f"행 {index}: 이미 등록된 사업자번호 ({record.get('business_number')})"
                )
            else:
                errors.append(f"행 {index}: {_describe(err.messages)}")
            continue

        business_number = data["business_number"]
        if business_number in seen:
            skipped += 1
            errors.append(f"행 {index}: 중복된 사업자번호 ({business_number})")
            continue
        seen.add(business_number)

        password = data.pop("password", None)
        if not password:
            password = default_password(business_number)
            data["must_change_password"] = True
        data.setdefault("is_approved", True)
        users.append(User(password=password, **data))

    if users and not dry_run:
        try:
            db.session.add_all(users)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.error("Failed to import members.", count=len(users), exc_info=True)
            raise

    logger.info(
        "Members import finished.",
        imported=len(users),
        skipped=skipped,
        errors=len(errors),
        dry_run=dry_run,
    )
    return {
        "imported": len(users),
        "skipped": skipped,
        "errors": cap_errors(errors),
        "dry_run": dry_run,
    }


def import_cso_matching(records: list[dict], dry_run: bool = False) -> dict:
    """Upsert CSO matching entries by company name.

    Returns:
        ``{"imported", "errors", "dry_run"}``
    """
    try:
        result = CsoMatching.upsert_many(records, dry_run=dry_run)
    except SQLAlchemyError:
        db.session.rollback()
        logger.error("Failed to import CSO matching.", exc_info=True)
        raise

    logger.info(
        "CSO matching import finished.",
        upserted=result["upserted"],
        errors=len(result["errors"]),
        dry_run=dry_run,
    )
    return {
        "imported": result["upserted"],
        "errors": cap_errors(result["errors"], result["has_more_errors"]),
        "dry_run": dry_run,
    }


def import_settlements(
    records: list[dict], mapping: dict | None = None, dry_run: bool = False
) -> dict:
    """Store header-keyed settlement records, replacing their months.

    Headers are resolved through the registry and the optional custom
    mapping. Records without a valid 사업자번호 are reported and left out;
    when none remain nothing is stored.

    Returns:
        ``{"rowCount", "settlementMonths", "skipped", "errors", "dry_run"}``
    """
    rows = []
    errors = []
    for index, record in enumerate(records, start=1):
        row = apply_mapping(record, mapping)
        raw_number = row.get("business_number")
        if raw_number is None or str(raw_number).strip() == "":
            errors.append(f"행 {index}: 사업자번호가 없습니다.")
            continue
        if not is_valid_business_number(raw_number):
            errors.append(f'행 {index}: 유효하지 않은 사업자번호 "{raw_number}"')
            continue
        rows.append(row)

    reported = cap_errors(errors)
    if not rows:
        reported.append(NO_VALID_ROWS)
        logger.warning("Settlement import has no valid rows.", errors=len(errors))
        return {
            "rowCount": 0,
            "settlementMonths": [],
            "skipped": len(records),
            "errors": reported,
            "dry_run": dry_run,
        }

    if dry_run:
        months = {parse_text(row.get("정산월")) for row in rows}
        months.discard(None)
        with_month = [row for row in rows if parse_text(row.get("정산월"))]
        result = {
            "rowCount": len(with_month),
            "settlementMonths": sorted(months, reverse=True),
            "skipped": len(rows) - len(with_month),
        }
    else:
        result = replace_settlement_months(rows)

    result["skipped"] += len(records) - len(rows)
    logger.info(
        "Settlement import finished.",
        row_count=result["rowCount"],
        months=result["settlementMonths"],
        dry_run=dry_run,
    )
    return {**result, "errors": reported, "dry_run": dry_run}
