# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Mail-merge variable rendering.

Admins write one subject and body with ``{{변수}}`` placeholders; each
member gets a copy filled with its own settlement figures. This module
only renders text, delivery is handled elsewhere.
"""

import re

from flask import current_app, has_app_context
from markupsafe import escape

from app.models.user import User
from app.services.aggregation import settlement_summary
from app.services.settlement_service import (
    business_numbers_for_month,
    settlements_for_business,
)
from app.utils.business_number import format_business_number
from app.utils.constants import DEFAULT_CURRENCY_SUFFIX

_PLACEHOLDER = re.compile(r"\{\{([^{}]+)\}\}")

MAIL_FOOTER = "이 메일은 CSO 정산서 포털에서 발송되었습니다."
SAMPLE_MONTH = "2026-01"


def format_count(value) -> str:
    """Group digits by thousands: ``1250`` -> ``"1,250"``."""
    value = float(value or 0)
    if value.is_integer():
        return f"{int(value):,}"
    return f"{value:,.3f}".rstrip("0").rstrip(".")


def format_currency(value, suffix: str | None = None) -> str:
    """Format an amount in won: ``1234`` -> ``"1,234원"``."""
    if suffix is None:
        suffix = (
            current_app.config.get("CURRENCY_SUFFIX", DEFAULT_CURRENCY_SUFFIX)
            if has_app_context()
            else DEFAULT_CURRENCY_SUFFIX
        )
    return f"{format_count(value)}{suffix}"


def render_template(text: str | None, variables: dict) -> str:
    """Replace every ``{{name}}`` found in variables; leave the rest."""
    if not text:
        return ""

    def _replace(match):
        name = match.group(1)
        if name in variables:
            return str(variables[name])
        return match.group(0)

    return _PLACEHOLDER.sub(_replace, text)


SAMPLE_VARIABLES = {
    "업체명": "ABC 상사",
    "사업자번호": "123-45-67890",
    "이메일": "sample@example.com",
    "정산월": SAMPLE_MONTH,
    "총_금액": "15,234,000원",
    "총_수수료": "1,781,729원",
    "제약수수료_합계": "1,781,729원",
    "담당수수료_합계": "523,400원",
    "데이터_건수": 127,
    "총_수량": "1,250",
}


def build_variables(user: User, summary: dict, month: str | None) -> dict:
    """Template variables for one member and settlement month."""
    return {
        "업체명": user.company_name,
        "사업자번호": format_business_number(user.business_number),
        "이메일": user.email,
        "정산월": month or "",
        "총_금액": format_currency(summary["총_금액"]),
        "총_수수료": format_currency(summary["총_수수료"]),
        "제약수수료_합계": format_currency(summary["제약수수료_합계"]),
        "담당수수료_합계": format_currency(summary["담당수수료_합계"]),
        "데이터_건수": summary["데이터_건수"],
        "총_수량": format_count(summary["총_수량"]),
    }


def body_to_html(body: str) -> str:
    """Wrap each body line in a paragraph, escaping HTML, and add the footer."""
    paragraphs = "".join(f"<p>{escape(line)}</p>" for line in body.split("\n"))
    return (
        '<div style="font-family: sans-serif; max-width: 600px; margin: 0 auto;">'
        f"{paragraphs}"
        '<hr style="margin: 30px 0; border: none; border-top: 1px solid #e5e7eb;" />'
        f'<p style="color: #6b7280; font-size: 12px;">{MAIL_FOOTER}</p>'
        "</div>"
    )


def preview(subject: str, body: str, year_month: str | None = None) -> dict:
    """Render a template with SAMPLE_VARIABLES."""
    variables = {**SAMPLE_VARIABLES, "정산월": year_month or SAMPLE_MONTH}
    rendered_body = render_template(body, variables)
    return {
        "subject": render_template(subject, variables),
        "body": rendered_body,
        "html": body_to_html(rendered_body),
        "variables": [f"{{{{{name}}}}}" for name in variables],
    }


def render_for_business(
    business_number, month: str | None, subject: str, body: str
) -> dict:
    """Render a template for one member.

    Figures cover the member's settlement rows of ``month``; without a
    month every figure is zero.

    Raises:
        LookupError: No account has this business number.
        PermissionError: The account is not approved.
    """
    user = User.get_by_business_number(business_number)
    if user is None:
        raise LookupError(business_number)
    if not user.is_approved:
        raise PermissionError(business_number)

    rows = settlements_for_business(user.business_number, month) if month else []
    variables = build_variables(user, settlement_summary(rows), month)
    rendered_body = render_template(body, variables)
    return {
        "business_number": user.business_number,
        "email": user.email,
        "subject": render_template(subject, variables),
        "body": rendered_body,
        "html": body_to_html(rendered_body),
    }


def resolve_recipients(recipients: list[str]) -> list[str]:
    """Expand a recipient selector into business numbers.

    ``["all"]`` selects every approved member; ``["year_month:YYYY-MM"]``
    the business numbers present in that settlement month; anything else
    is taken as a list of business numbers.
    """
    if "all" in recipients:
        return [user.business_number for user in User.get_members()]
    if len(recipients) == 1 and recipients[0].startswith("year_month:"):
        return business_numbers_for_month(recipients[0].split(":", 1)[1])
    return list(recipients)


def render_notice(text: str, month: str | None, ceo_name: str | None = None) -> str:
    """Fill the statement notice placeholders.

    ``{{정산월}}`` becomes ``"3월"``, ``{{정산월+1}}`` the following month
    and ``{{대표자명}}`` the operator's representative.
    """
    if not month:
        return text
    month_number = int(month.split("-")[1])
    next_month = 1 if month_number == 12 else month_number + 1
    return (
        text.replace("{{정산월}}", f"{month_number}월")
        .replace("{{정산월+1}}", f"{next_month}월")
        .replace("{{대표자명}}", ceo_name or "대표자")
    )
