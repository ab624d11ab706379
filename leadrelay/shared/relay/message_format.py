"""Telegram notification text for an accepted lead."""

import html
from datetime import datetime

from fastapi import Request

from leadrelay.shared.relay.schemas import LeadSubmission

EMPTY_MESSAGE_PLACEHOLDER = "Не указано"
TIMESTAMP_FORMAT = "%d.%m.%Y %H:%M:%S"


def get_client_ip(request: Request) -> str:
    """Get client IP address, preferring the proxy's X-Forwarded-For header."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # Take the first IP in the chain
        return forwarded.split(",")[0].strip()
    # Fallback to direct connection
    return request.client.host if request.client else "unknown"


def format_lead_message(lead: LeadSubmission, submitted_at: datetime, site_name: str, client_ip: str) -> str:
    """Builds the HTML message. lead.message is expected to be escaped already."""
    lines = [
        "🚀 <b>Новая заявка с сайта!</b>",
        "",
        f"👤 <b>Имя:</b> {html.escape(lead.name)}",
        f"📱 <b>Telegram:</b> @{html.escape(lead.contact)}",
        f"💬 <b>Сообщение:</b> {lead.message or EMPTY_MESSAGE_PLACEHOLDER}",
        "",
        f"📅 <b>Дата:</b> {submitted_at.strftime(TIMESTAMP_FORMAT)}",
        f"🌐 <b>Источник:</b> {html.escape(site_name)}",
        f"🔗 <b>IP:</b> {html.escape(client_ip)}",
    ]
    return "\n".join(lines)
