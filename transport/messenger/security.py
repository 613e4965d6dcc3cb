"""
Messenger Webhook Verification

SECURITY BOUNDARY - Static shared-secret check on the subscription handshake.
No retries. No logic.
"""

import hmac
import os
from typing import Optional

from fastapi import HTTPException, status


def verify_webhook_challenge(
    hub_verify_token: Optional[str],
    hub_challenge: Optional[str],
    expected_token: Optional[str] = None,
) -> str:
    """
    Verify webhook subscription challenge from Meta.

    Meta calls GET /webhook with:
    - hub.mode=subscribe
    - hub.challenge=random_string
    - hub.verify_token=configured_token

    We verify the token and echo back the challenge.

    Args:
        hub_verify_token: Token sent by Meta
        hub_challenge: Random string to echo back
        expected_token: Configured token (defaults to VERIFY_TOKEN env var)

    Returns:
        The challenge string to echo back

    Raises:
        HTTPException(403): Token missing, unconfigured, or wrong
    """
    if expected_token is None:
        expected_token = os.getenv("VERIFY_TOKEN", "")

    # An unset token must never verify
    if not expected_token or not hub_verify_token:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Verification failed."
        )

    if not hmac.compare_digest(hub_verify_token, expected_token):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Verification failed."
        )

    return hub_challenge or ""
