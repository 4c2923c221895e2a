# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Configuration endpoint resource."""

from datetime import datetime, timedelta

from flask import current_app
from flask_restful import Resource

from app.utils.constants import SENSITIVE_CONFIG_KEYS
from app.utils.limiter import limiter

# Settlement settings, also reported on their own
DOMAIN_KEYS = (
    "COLUMN_MATCH_THRESHOLD",
    "CURRENCY_SUFFIX",
    "PIVOT_UNASSIGNED_LABEL",
    "SEED_COLUMN_SETTINGS",
    "SETTLEMENT_PAGE_SIZE",
)


class ConfigResource(Resource):
    """API resource for retrieving the portal configuration.

    Every configuration variable is returned; sensitive values (database
    URLs, passwords, Redis URL) are replaced by ``"<KEY> is set"``.
    """

    SENSITIVE_KEYS = set(SENSITIVE_CONFIG_KEYS)

    HOST_PORT_DISPLAY = {
        "DATABASE": ("DATABASE_HOST", "DATABASE_PORT"),
        "REDIS": ("REDIS_HOST", "REDIS_PORT"),
    }

    @limiter.limit(lambda: current_app.config["RATE_LIMIT_CONFIGURATION"])
    def get(self):
        """Retrieve application configuration.

        Returns:
            dict: ``configuration`` (all keys, alphabetical, masked),
                ``settlement`` (the domain settings) and a note.
        """
        config = current_app.config
        result = {}

        for service, (host_key, port_key) in self.HOST_PORT_DISPLAY.items():
            host = config.get(host_key)
            port = config.get(port_key)
            if host and port:
                result[f"{service}_ENDPOINT"] = f"{host}:{port}"
            elif host:
                result[f"{service}_ENDPOINT"] = host

        for key in sorted(config.keys()):
            if key.startswith("_"):
                continue

            value = config.get(key)
            if key in self.SENSITIVE_KEYS:
                result[key] = f"{key} is set" if value else f"{key} is not set"
            else:
                result[key] = self._serialize_value(value)

        return {
            "configuration": result,
            "settlement": {key: result.get(key) for key in DOMAIN_KEYS},
            "note": "Sensitive values are masked for security",
        }

    @staticmethod
    def _serialize_value(value):
        """Convert a value to a JSON-serializable format."""
        if isinstance(value, timedelta):
            return str(value)
        if isinstance(value, datetime):
            return value.isoformat()
        if isinstance(value, (list, tuple, set)):
            return [ConfigResource._serialize_value(item) for item in value]
        if isinstance(value, dict):
            return {k: ConfigResource._serialize_value(v) for k, v in value.items()}
        if isinstance(value, (str, int, float, bool)) or value is None:
            return value
        return str(value)
