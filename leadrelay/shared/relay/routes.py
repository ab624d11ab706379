"""Lead relay route: validates a landing page lead and forwards it to Telegram."""

import json
import logging
from datetime import datetime
from typing import Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from leadrelay.shared.config.settings import Settings
from leadrelay.shared.relay.errors import MethodNotAllowed, MalformedJSON, InvalidPayload
from leadrelay.shared.relay.input_validation import validate_lead
from leadrelay.shared.relay.message_format import format_lead_message, get_client_ip
from leadrelay.shared.relay.rate_limit import check_rate_limit, record_submission
from leadrelay.shared.relay.schemas import LeadRequest, RelayResponse
from leadrelay.shared.session.dependencies import (
    get_settings,
    get_session_id,
    get_session_store,
    get_telegram_client,
    get_clock,
)
from leadrelay.shared.session.store import SessionStore
from leadrelay.shared.telegram.client import TelegramClient

router = APIRouter(prefix="/api", tags=["relay"])

# Registered for every method so unsupported ones get the relay's own 405 body
RELAY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
SUCCESS_MESSAGE = "Заявка успешно отправлена"


def cors_headers(settings: Settings) -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": settings.allowed_origin,
        "Access-Control-Allow-Methods": "POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
    }


async def parse_lead_request(request: Request) -> LeadRequest:
    """
    Decode the JSON body into a LeadRequest.

    Raises:
        MalformedJSON if the body is not a non-empty JSON object
        InvalidPayload if a field has the wrong type
    """
    body = await request.body()
    try:
        payload = json.loads(body)
    except ValueError:
        raise MalformedJSON()

    if not isinstance(payload, dict) or not payload:
        raise MalformedJSON()

    try:
        return LeadRequest.model_validate(payload)
    except ValidationError as e:
        raise InvalidPayload(detail=str(e))


@router.api_route("/relay", methods=RELAY_METHODS, response_model=RelayResponse)
async def relay_lead(
    request: Request,
    settings: Settings = Depends(get_settings),
    store: SessionStore = Depends(get_session_store),
    telegram: TelegramClient = Depends(get_telegram_client),
    clock=Depends(get_clock),
):
    """
    Forward a contact form lead to the configured Telegram chat.

    Order of checks:
    - OPTIONS preflight answers immediately, anything but POST is refused
    - Per-session rate limit, before the body is read
    - Body validation and sanitization
    - One sendMessage call; the session is stamped only when Telegram accepts it
    """
    headers = cors_headers(settings)

    if request.method == "OPTIONS":
        return Response(status_code=200, headers=headers)

    if request.method != "POST":
        raise MethodNotAllowed()

    session_id = get_session_id(request)
    now = clock()
    check_rate_limit(store, session_id, now, settings.rate_limit_seconds)

    lead_request = await parse_lead_request(request)
    lead = validate_lead(lead_request, settings.max_message_length)

    text = format_lead_message(
        lead,
        submitted_at=datetime.fromtimestamp(now),
        site_name=settings.site_name,
        client_ip=get_client_ip(request),
    )

    if settings.debug_mode:
        logging.debug(f"Sending message to Telegram: {text}")

    await telegram.send_message(text)

    record_submission(store, session_id, now)

    if settings.log_submissions:
        logging.info(f"Form submitted successfully: {lead.name} (@{lead.contact})")

    return JSONResponse(
        status_code=200,
        content=RelayResponse(success=True, message=SUCCESS_MESSAGE).model_dump(),
        headers=headers,
    )
