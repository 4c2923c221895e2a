# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Settlement column registry and column settings seeder.

The registry lives in ``app/data/settlement_columns.json``:

- ``headers``: spreadsheet header text mapped to settlement column keys.
  Several headers wrap over two lines in the source workbook and carry
  ``\\n\\n``.
- ``columns``: default display settings of every settlement column.

ColumnSettingsSeeder writes the default settings into ``column_settings``
without touching rows an admin already edited.
"""

import json
from functools import lru_cache
from pathlib import Path

from app.models.column_setting import ColumnSetting
from app.models.db import db
from app.utils.logger import logger

REGISTRY_FILE = Path(__file__).parent.parent / "data" / "settlement_columns.json"

# Headers every uploaded workbook must provide
REQUIRED_HEADERS = ("사업자번호", "정산월")

_SETTING_FIELDS = (
    "column_key",
    "column_name",
    "display_order",
    "is_visible",
    "is_required",
    "is_summary",
)


def load_registry(registry_file: Path | None = None) -> dict:
    """Load and check the registry file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the JSON is invalid or a section is malformed.
    """
    registry_file = registry_file or REGISTRY_FILE
    if not registry_file.exists():
        raise FileNotFoundError(f"Column registry not found: {registry_file}")

    try:
        with registry_file.open(encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in column registry: {e}") from e

    if not isinstance(data.get("headers"), dict):
        raise ValueError("Column registry must contain a 'headers' object")
    if not isinstance(data.get("columns"), list):
        raise ValueError("Column registry must contain a 'columns' array")

    for entry in data["columns"]:
        missing = [field for field in _SETTING_FIELDS if field not in entry]
        if missing:
            raise ValueError(
                f"Column setting {entry.get('column_key')!r} is missing {missing}"
            )
    return data


@lru_cache(maxsize=1)
def _default_registry() -> dict:
    return load_registry()


def header_map() -> dict[str, str]:
    """Spreadsheet header to column key, in registry order."""
    return dict(_default_registry()["headers"])


def default_column_settings() -> list[dict]:
    """Default column settings sorted by display order."""
    columns = _default_registry()["columns"]
    return sorted((dict(c) for c in columns), key=lambda c: c["display_order"])


def _current_settings(stored_query, flag: str | None = None) -> list[dict]:
    """Column settings in display order, the defaults when none are stored.

    Args:
        stored_query: ColumnSetting query method for the stored settings.
        flag: Setting flag the defaults must carry (``is_visible`` ...).
    """
    if ColumnSetting.query.first() is None:
        defaults = default_column_settings()
        return [s for s in defaults if flag is None or s[flag]]
    return [setting.to_dict() for setting in stored_query()]


def _column_refs(settings) -> list[dict]:
    return [
        {"column_key": s["column_key"], "column_name": s["column_name"]}
        for s in settings
    ]


def select_columns(column_keys: list[str] | None = None) -> list[dict]:
    """Columns of an analysis view as ``{"column_key", "column_name"}``.

    Columns always come in display order, whatever the order of the
    requested keys; unknown keys are skipped. Without keys the visible
    columns are used.
    """
    if not column_keys:
        return _column_refs(_current_settings(ColumnSetting.get_visible, "is_visible"))
    requested = set(column_keys)
    settings = _current_settings(ColumnSetting.get_ordered)
    return _column_refs(s for s in settings if s["column_key"] in requested)


def summary_columns() -> list[dict]:
    """Columns summed by the monthly summary, in display order."""
    return _column_refs(
        _current_settings(ColumnSetting.get_summary_columns, "is_summary")
    )


class ColumnSettingsSeeder:
    """Seed the default column settings into the database."""

    def __init__(self, registry_file: Path | None = None):
        self.registry_file = registry_file

    def load_settings(self) -> list[dict]:
        if self.registry_file is None:
            return default_column_settings()
        data = load_registry(self.registry_file)
        return sorted(data["columns"], key=lambda c: c["display_order"])

    def seed(self, dry_run: bool = False) -> dict[str, int]:
        """Create the column settings that do not exist yet.

        Existing settings are left as they are, since admins edit labels,
        order and visibility.

        Args:
            dry_run: Only report what would be created.

        Returns:
            ``{"created": int, "unchanged": int}``
        """
        created = 0
        unchanged = 0
        existing = {s.column_key for s in ColumnSetting.query.all()}

        for setting in self.load_settings():
            if setting["column_key"] in existing:
                unchanged += 1
                continue
            if not dry_run:
                db.session.add(
                    ColumnSetting(**{f: setting[f] for f in _SETTING_FIELDS})
                )
            action = "[DRY RUN] Would create" if dry_run else "Created"
            logger.debug(f"{action} column setting: {setting['column_key']}")
            created += 1

        if not dry_run:
            db.session.commit()
            logger.info(
                "Column settings seeding completed.",
                created=created,
                unchanged=unchanged,
            )
        else:
            logger.info(
                "[DRY RUN] Column settings seeding.",
                created=created,
                unchanged=unchanged,
            )

        return {"created": created, "unchanged": unchanged}

    def reset(self) -> int:
        """Replace every column setting with the defaults.

        Returns:
            Number of settings written.
        """
        settings = self.load_settings()
        ColumnSetting.query.delete()
        for setting in settings:
            db.session.add(ColumnSetting(**{f: setting[f] for f in _SETTING_FIELDS}))
        db.session.commit()
        logger.info("Column settings reset to defaults.", count=len(settings))
        return len(settings)


def seed_column_settings_on_startup() -> None:
    """Seed column settings while the application starts.

    Must run inside an application context. A broken registry is logged
    and startup continues.
    """
    try:
        results = ColumnSettingsSeeder().seed()
        logger.info(
            "Column settings seeded.",
            created=results["created"],
            unchanged=results["unchanged"],
        )
    except FileNotFoundError as e:
        logger.warning("Skipping column settings seeding.", error=str(e))
    except ValueError as e:
        logger.error("Invalid column registry.", error=str(e))
