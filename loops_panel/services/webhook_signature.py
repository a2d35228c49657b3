"""Loops.so webhook signature check.

Loops signs ``"{webhook-id}.{webhook-timestamp}.{body}"`` with HMAC-SHA256,
keyed by the base64 part of the ``whsec_...`` signing secret, and sends
one or more ``v1,<base64 digest>`` entries separated by spaces.
"""
import base64
import binascii
import hashlib
import hmac
from typing import Optional

from loops_panel.exceptions import WebhookVerificationError


def _secret_bytes(secret: str) -> bytes:
    encoded = secret.split("_", 1)[1] if "_" in secret else secret
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise WebhookVerificationError("Webhook signing secret is not valid base64.", status_code=500) from e


def compute_signature(secret: str, event_id: str, timestamp: str, body: bytes) -> str:
    signed_content = f"{event_id}.{timestamp}.".encode("utf-8") + body
    digest = hmac.new(_secret_bytes(secret), signed_content, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_signature(
    secret: Optional[str],
    event_id: Optional[str],
    timestamp: Optional[str],
    signature_header: Optional[str],
    body: bytes,
) -> None:
    """Raise WebhookVerificationError unless one of the signatures matches"""
    if not event_id or not timestamp or not signature_header or not secret:
        raise WebhookVerificationError("Missing required webhook header or secret.", status_code=400)

    expected = compute_signature(secret, event_id, timestamp, body)
    for candidate in signature_header.split(" "):
        _, _, signature = candidate.partition(",")
        if signature and hmac.compare_digest(signature, expected):
            return

    raise WebhookVerificationError("Invalid signature.")
