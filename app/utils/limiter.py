# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Shared Flask-Limiter instance.

Analysis endpoints run aggregation over whole settlement months, so each
resource method carries its own limit taken from RATE_LIMIT_CONFIGURATION.
Clients are keyed by remote address.
"""

from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

limiter = Limiter(key_func=get_remote_address, default_limits=[])

__all__ = ["limiter"]
