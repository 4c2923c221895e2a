# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Utility modules for the application.

- business_number: 사업자번호 normalization and formatting
- constants: configuration defaults and error messages
- limiter: Flask-Limiter instance for rate limiting
- logger: structured logging configuration
- text: name normalization for matching
"""

from app.utils.business_number import (
    format_business_number,
    is_valid_business_number,
    normalize_business_number,
)
from app.utils.limiter import limiter
from app.utils.logger import logger

__all__ = [
    # Business numbers
    "format_business_number",
    "is_valid_business_number",
    "normalize_business_number",
    # Rate limiting
    "limiter",
    # Logging
    "logger",
]
