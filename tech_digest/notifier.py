"""Slack webhook delivery of the finished digest."""

from __future__ import annotations

import logging
from typing import Optional

import requests

from .models import DeliveryResult

LOGGER = logging.getLogger(__name__)

LABEL = "🧪 *Tech News*\n\n"


def format_message(text: str) -> str:
    return f"{LABEL}{text}"


def post_to_slack(
    session: requests.Session, webhook_url: str, text: str, timeout: Optional[float] = None
) -> DeliveryResult:
    """Post the digest once to the Slack incoming webhook.

    Transport and HTTP errors are not raised; they are reported through the
    returned DeliveryResult so the caller decides how to escalate them.
    """

    try:
        response = session.post(webhook_url, json={"text": format_message(text)}, timeout=timeout)
    except requests.RequestException as exc:
        return DeliveryResult(ok=False, error=str(exc))

    if not response.ok:
        return DeliveryResult(ok=False, status_code=response.status_code, error=response.text[:200])
    LOGGER.debug("Slack accepted digest with status %s", response.status_code)
    return DeliveryResult(ok=True, status_code=response.status_code)
