# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Shared Flask-SQLAlchemy instance.

Every portal table (users, settlements, column settings, CSO matching,
email logs, company settings, reset tokens) is declared on this ``db``.
"""

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
