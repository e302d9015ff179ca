"""
HMAC-SHA256 verification of Acuity static webhook signatures.

Acuity signs the raw ``application/x-www-form-urlencoded`` body with the
account API key and sends ``base64(HMAC-SHA256(key, body))`` in the
``X-Acuity-Signature`` header.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
from collections.abc import Mapping
from typing import Any

from .body import RawBody, encode_text, normalize_body
from .errors import WebhookError, WebhookErrorCode
from .headers import DEFAULT_SIGNATURE_HEADER, resolve_signature


def compute_signature(secret: str, body: RawBody) -> str:
    """Compute the base64 HMAC-SHA256 signature Acuity sends for ``body``."""
    digest = hmac.new(
        encode_text(secret),
        normalize_body(body),
        hashlib.sha256,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def safe_compare(expected: str, actual: str) -> bool:
    """
    Compare two signatures in constant time.

    Unequal lengths are an immediate mismatch; equal lengths are compared
    with :func:`hmac.compare_digest`, which visits every byte.
    """
    expected_bytes = encode_text(expected)
    actual_bytes = encode_text(actual)

    if len(expected_bytes) != len(actual_bytes):
        return False

    return hmac.compare_digest(expected_bytes, actual_bytes)


def require_secret(secret: str | None) -> str:
    """
    Return the trimmed secret.

    Raises:
        WebhookError: invalid_payload if the secret is missing or blank
    """
    trimmed = secret.strip() if secret else ""
    if not trimmed:
        raise WebhookError(
            WebhookErrorCode.INVALID_PAYLOAD,
            "Static webhook verification requires a non-empty secret.",
        )
    return trimmed


def verify_or_fail(
    secret: str | None,
    body: RawBody,
    signature: str | None = None,
    headers: Mapping[str, Any] | Any | None = None,
    header_name: str | None = None,
) -> None:
    """
    Verify a static webhook request, raising on any failure.

    Args:
        secret: API key configured for the static webhook
        body: Raw request body exactly as delivered
        signature: Explicit signature, takes precedence over headers
        headers: Request headers to extract the signature from
        header_name: Signature header name. Default: x-acuity-signature

    Raises:
        WebhookError: invalid_payload for a blank secret, signature_missing
            when no signature was supplied, signature_mismatch otherwise
        UnsupportedBodyType: If body has an unsupported type
    """
    key = require_secret(secret)
    name = header_name or DEFAULT_SIGNATURE_HEADER
    check_signature(key, body, resolve_signature(signature, headers, name), name)


def check_signature(
    key: str,
    body: RawBody,
    claimed: str | None,
    header_name: str = DEFAULT_SIGNATURE_HEADER,
) -> None:
    """
    Compare an already resolved signature against ``key``, which must be a
    validated, trimmed secret (see :func:`require_secret`).

    Raises:
        WebhookError: signature_missing or signature_mismatch
    """
    if not claimed:
        raise WebhookError(
            WebhookErrorCode.SIGNATURE_MISSING,
            f'Missing "{header_name}" header on static webhook request.',
        )

    expected = compute_signature(key, body)
    if not safe_compare(expected, claimed):
        raise WebhookError(WebhookErrorCode.SIGNATURE_MISMATCH)


def verify_signature(
    secret: str | None,
    body: RawBody,
    signature: str | None = None,
    headers: Mapping[str, Any] | Any | None = None,
    header_name: str | None = None,
) -> bool:
    """
    Boolean form of :func:`verify_or_fail`.

    Returns False for a missing or mismatched signature. A blank secret is a
    configuration error and still raises.

    Example:
        >>> sig = compute_signature("s3cr3t", "action=canceled&id=9")
        >>> verify_signature("s3cr3t", "action=canceled&id=9", signature=sig)
        True
    """
    try:
        verify_or_fail(secret, body, signature, headers, header_name)
    except WebhookError as e:
        if e.code is WebhookErrorCode.INVALID_PAYLOAD:
            raise
        return False
    return True
