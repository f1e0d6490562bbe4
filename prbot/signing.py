"""
External account access tokens.

Tokens are compact RS256 JWTs carrying ``iat`` (issue time, seconds since
the epoch) and ``iss`` (the external account username). The signing flow:
header + claims -> JSON -> base64url -> sign "header.claims" -> base64url.
"""

import base64
import binascii
import json
import time
from typing import Any

from prbot.exceptions import TokenError
from prbot.logging import log_signing_operation
from prbot.signers import RsaSigner, load_public_key, verify_signature
from prbot.types.accounts import ExternalAccount

_HEADER = {"alg": "RS256", "typ": "JWT"}


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64url_decode(segment: str) -> bytes:
    padded = segment + "=" * (-len(segment) % 4)
    try:
        return base64.urlsafe_b64decode(padded.encode("ascii"))
    except (binascii.Error, UnicodeEncodeError) as e:
        raise TokenError(f"Invalid base64url segment: {e}") from e


def _json_segment(value: dict[str, Any]) -> str:
    return _b64url_encode(json.dumps(value, separators=(",", ":"), sort_keys=True).encode())


def _split(token: str) -> tuple[dict[str, Any], dict[str, Any], bytes, bytes]:
    parts = token.split(".")
    if len(parts) != 3:
        raise TokenError("Token must have three dot-separated segments")

    try:
        header = json.loads(_b64url_decode(parts[0]))
        claims = json.loads(_b64url_decode(parts[1]))
    except ValueError as e:
        raise TokenError(f"Token segments are not JSON: {e}") from e

    if not isinstance(header, dict) or not isinstance(claims, dict):
        raise TokenError("Token header and claims must be JSON objects")

    signing_input = f"{parts[0]}.{parts[1]}".encode("ascii")
    return header, claims, signing_input, _b64url_decode(parts[2])


def create_external_token(
    account: ExternalAccount, issued_at: int | None = None
) -> str:
    """
    Create an access token for an external account.

    Args:
        account: External account holding a PEM private key
        issued_at: Issue time in epoch seconds (default: now)

    Returns:
        Compact RS256 token string

    Raises:
        TokenError: If the account has no usable private key
    """
    if not account.private_key:
        raise TokenError(f"External account {account.username!r} has no private key")
    try:
        signer = RsaSigner.from_pem(account.private_key)
    except (ValueError, TypeError) as e:
        raise TokenError(f"Invalid private key for {account.username!r}: {e}") from e

    claims = {
        "iat": int(time.time()) if issued_at is None else issued_at,
        "iss": account.username,
    }
    signing_input = f"{_json_segment(_HEADER)}.{_json_segment(claims)}"
    signature = signer.sign(signing_input.encode("ascii"))

    log_signing_operation("create_token", account.username)
    return f"{signing_input}.{_b64url_encode(signature)}"


def decode_external_token(token: str) -> dict[str, Any]:
    """
    Read a token's claims without checking its signature.

    Used to find which account issued a token before its key is looked up.
    """
    _, claims, _, _ = _split(token)
    return claims


def verify_external_token(token: str, public_key_pem: str) -> dict[str, Any]:
    """
    Verify a token against an external account public key.

    Args:
        token: Compact RS256 token
        public_key_pem: The account's public key (PEM)

    Returns:
        The token claims

    Raises:
        TokenError: If the token is malformed, uses another algorithm, or
            its signature does not match
    """
    header, claims, signing_input, signature = _split(token)
    if header.get("alg") != "RS256":
        raise TokenError(f"Unsupported token algorithm: {header.get('alg')!r}")

    try:
        public_key = load_public_key(public_key_pem)
    except (ValueError, TypeError) as e:
        raise TokenError(f"Invalid public key: {e}") from e

    if not verify_signature(public_key, signature, signing_input):
        raise TokenError("Token signature does not match")

    log_signing_operation("verify_token", str(claims.get("iss")))
    return claims
