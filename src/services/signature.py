"""Webhook authenticity checks: verify-token comparison and payload signatures."""

import hashlib
import hmac

import logfire


def tokens_match(candidate: str | None, expected: str) -> bool:
    """Compare a supplied verify token with the configured one in constant time."""
    if candidate is None:
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


def verify_payload_signature(
    payload_body: bytes,
    signature_header: str | None,
    app_secret: str,
) -> bool:
    """Verify the X-Hub-Signature-256 header of a webhook delivery.

    Facebook signs every delivery with the app secret as
    `sha256=<hex HMAC-SHA256 of the raw body>`.

    Args:
        payload_body: Raw request body bytes
        signature_header: Value of the X-Hub-Signature-256 header
        app_secret: Facebook App secret

    Returns:
        True if the signature is valid, False otherwise
    """
    if not signature_header or not signature_header.startswith("sha256="):
        logfire.warning("Webhook signature missing or malformed")
        return False

    expected_signature = signature_header[len("sha256="):]
    computed_signature = hmac.new(
        app_secret.encode("utf-8"),
        payload_body,
        hashlib.sha256,
    ).hexdigest()

    is_valid = hmac.compare_digest(
        expected_signature.encode("utf-8"), computed_signature.encode("utf-8")
    )
    if not is_valid:
        logfire.warning("Webhook signature mismatch")
    return is_valid
