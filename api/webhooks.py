"""
Polka subscription webhooks.

Polka retries on any non-2xx answer, so events we do not care about are
acknowledged with 204.
"""
from __future__ import annotations

import logging
import uuid

from flask import Blueprint, request, abort

from models import storage
from models.schemas.webhook import WebhookEventSchema
from utils.decorators import api_key_required

logger = logging.getLogger(__name__)

bp = Blueprint("webhooks", __name__)

UPGRADE_EVENT = "user.upgraded"

webhook_event_schema = WebhookEventSchema()


@bp.post("/webhooks")
@api_key_required("POLKA_KEY")
def polka_webhook():
    """
    Receive a Polka payment event
    ---
    tags:
      - Webhooks
    security:
      - ApiKey: []
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            event: { type: string, example: user.upgraded }
            data:
              type: object
              properties:
                user_id: { type: string }
    responses:
      204: { description: Handled or ignored }
      401: { description: Bad API key }
      404: { description: Unknown user }
    """
    payload = request.get_json(silent=True) or {}
    event = webhook_event_schema.load(payload)

    if event["event"] != UPGRADE_EVENT:
        return ("", 204)

    raw_user_id = event["data"].get("user_id")
    try:
        user_id = str(uuid.UUID(raw_user_id))
    except (ValueError, TypeError):
        abort(404, description="User not found")

    if not storage.upgrade_user(user_id):
        abort(404, description="User not found")

    logger.info("user %s upgraded to Chirpy Red", user_id)
    return ("", 204)
