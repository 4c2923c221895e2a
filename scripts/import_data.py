# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""
import_data.py
--------------

Load portal data from JSON files, outside of the web application.

Usage:
    python scripts/import_data.py users FILE [--dry-run]
    python scripts/import_data.py cso-matching FILE [--dry-run]
    python scripts/import_data.py settlements FILE [--dry-run]
    python scripts/import_data.py column-settings [--reset] [--dry-run]
    python scripts/import_data.py delete-month YYYY-MM [--dry-run]

Options:
    --dry-run   Validate and report without writing anything
    --reset     Replace every column setting with the defaults

Settlement files replace the settlement months they contain, so the same
file can be imported twice safely. delete-month removes one settlement
month entirely. The configuration is chosen from FLASK_ENV like run.py
does.
"""

import argparse
import os
import re
import sys
from pathlib import Path

# Add parent directory to path to import from app
sys.path.insert(0, str(Path(__file__).parent.parent))
from sqlalchemy.exc import SQLAlchemyError

from app.schemas.constants import SETTLEMENT_MONTH_INVALID, SETTLEMENT_MONTH_PATTERN
from app.services.column_registry import ColumnSettingsSeeder
from app.services.importer import (
    ImportFileError,
    import_cso_matching,
    import_settlements,
    import_users,
    load_import_file,
)
from app.services.settlement_service import delete_settlement_month


def settlement_month(value: str) -> str:
    if not re.match(SETTLEMENT_MONTH_PATTERN, value):
        raise argparse.ArgumentTypeError(SETTLEMENT_MONTH_INVALID)
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Import or delete portal data outside of the web application"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for command, help_text in (
        ("users", "Create member accounts"),
        ("cso-matching", "Upsert CSO company name mappings"),
        ("settlements", "Replace settlement months with the file rows"),
    ):
        sub = subparsers.add_parser(command, help=help_text)
        sub.add_argument("file", type=Path, help="JSON import file")
        sub.add_argument("--dry-run", action="store_true", help="Do not write")

    columns = subparsers.add_parser(
        "column-settings", help="Seed the default column settings"
    )
    columns.add_argument("--reset", action="store_true", help="Restore defaults")
    columns.add_argument("--dry-run", action="store_true", help="Do not write")

    delete = subparsers.add_parser(
        "delete-month", help="Delete every settlement row of one month"
    )
    delete.add_argument("month", type=settlement_month, help="Month as YYYY-MM")
    delete.add_argument("--dry-run", action="store_true", help="Do not write")
    return parser


def _print_errors(errors: list[str]) -> None:
    for error in errors:
        print(f"   ⚠️  {error}")


def run_command(args: argparse.Namespace) -> int:
    """Run one import command; needs an application context.

    Returns:
        Process exit code: 0 on success, 1 when nothing could be imported.
    """
    prefix = "[DRY RUN] " if args.dry_run else ""

    if args.command == "column-settings":
        seeder = ColumnSettingsSeeder()
        if args.reset and not args.dry_run:
            count = seeder.reset()
            print(f"✅ {count} column settings restored to defaults")
        else:
            result = seeder.seed(dry_run=args.dry_run)
            print(
                f"✅ {prefix}Column settings: {result['created']} created, "
                f"{result['unchanged']} unchanged"
            )
        return 0

    if args.command == "delete-month":
        deleted = delete_settlement_month(args.month, dry_run=args.dry_run)
        print(f"✅ {prefix}Settlements: {deleted} rows deleted for {args.month}")
        return 0 if deleted else 1

    records, mapping = load_import_file(args.file)

    if args.command == "users":
        result = import_users(records, dry_run=args.dry_run)
        print(
            f"✅ {prefix}Members: {result['imported']} imported, "
            f"{result['skipped']} skipped"
        )
        _print_errors(result["errors"])
        return 0 if result["imported"] or not records else 1

    if args.command == "cso-matching":
        result = import_cso_matching(records, dry_run=args.dry_run)
        print(f"✅ {prefix}CSO matching: {result['imported']} upserted")
        _print_errors(result["errors"])
        return 0 if result["imported"] or not records else 1

    result = import_settlements(records, mapping, dry_run=args.dry_run)
    months = ", ".join(result["settlementMonths"]) or "-"
    print(
        f"✅ {prefix}Settlements: {result['rowCount']} rows for {months}, "
        f"{result['skipped']} skipped"
    )
    _print_errors(result["errors"])
    return 0 if result["rowCount"] else 1


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    from app import create_app
    from app.config import config_class_for

    app = create_app(config_class_for(os.environ.get("FLASK_ENV")))

    with app.app_context():
        try:
            return run_command(args)
        except ImportFileError as e:
            print(f"❌ {e}")
            return 2
        except SQLAlchemyError as e:
            print(f"❌ Database error: {e}")
            return 2


if __name__ == "__main__":
    sys.exit(main())
