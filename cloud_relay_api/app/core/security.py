"""
Token helpers and the authenticated-owner dependency.

The internal client authenticates with an HS256 JSON Web Token signed
with the shared ``jwt_secret``.  Tokens are verified with HMAC‑SHA256
and base64url decoding; the owner identity is read from the ``u``
claim, falling back to ``id`` and then ``sub``.  ``get_current_user``
turns the ``Authorization`` header into a :class:`CurrentUser` that
endpoints pass explicitly to services and stores.
"""

import base64
import hashlib
import hmac
import json
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import Settings


@dataclass(frozen=True)
class CurrentUser:
    """Owner identity resolved from the request's bearer token."""

    id: str
    email: str = ""
    name: str = ""
    token: str = ""


def _b64_url_encode(data: bytes) -> str:
    """Base64‑url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64‑url encoded string, adding padding if necessary."""
    padding = '=' * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    """Compute HMAC‑SHA256 signature of a message using the given secret."""
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(
    data: Dict[str, Any],
    secret: str,
    expires_delta: Optional[int] = None,
) -> str:
    """Create a signed JWT token with the given payload.

    The payload is extended with an ``exp`` field representing the
    expiration time as a UNIX timestamp.  The token is a string of the
    form ``header.payload.signature``, where each part is base64url
    encoded.

    Parameters
    ----------
    data : dict
        Claims to embed in the token (e.g. ``{"u": "user-1"}``).
    secret : str
        Shared signing secret.
    expires_delta : Optional[int]
        Lifetime of the token in seconds.  Defaults to one day.
    """
    to_encode = data.copy()
    exp_seconds = expires_delta or 24 * 60 * 60
    to_encode["exp"] = int(time.time()) + exp_seconds
    header = {"alg": "HS256", "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(',', ':')).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(',', ':')).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, secret))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str, secret: str) -> Optional[Dict[str, Any]]:
    """Verify and decode a JWT token.

    Returns the payload dictionary if the signature matches and the
    token has not expired (tokens without ``exp`` are accepted, as the
    issuing service does not always set it); otherwise ``None``.
    """
    parts = token.split('.')
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    try:
        header = json.loads(_b64_url_decode(header_b64).decode("utf-8"))
        actual_sig = _b64_url_decode(signature_b64)
        data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(header, dict) or header.get("alg") != "HS256":
        return None
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    # Constant‑time comparison to prevent timing attacks
    if not hmac.compare_digest(_sign(signing_input, secret), actual_sig):
        return None
    if not isinstance(data, dict):
        return None
    exp = data.get("exp")
    if exp is not None:
        try:
            expired = int(exp) < int(time.time())
        except (TypeError, ValueError):
            return None
        if expired:
            return None
    return data


security = HTTPBearer(auto_error=False)


def _unauthorized(error: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> CurrentUser:
    """Dependency that resolves the authenticated owner.

    Raises HTTP 401 when the ``Authorization`` header is missing, the
    token is invalid or expired, or it carries no owner identifier.
    """
    if credentials is None:
        raise _unauthorized("No token provided", "Access token is required")
    settings: Settings = request.app.state.settings
    token = credentials.credentials
    payload = decode_access_token(token, settings.jwt_secret)
    if not payload:
        raise _unauthorized("Invalid token", "Token is invalid or expired")
    owner_id = payload.get("u") or payload.get("id") or payload.get("sub")
    if not owner_id:
        raise _unauthorized("Invalid token", "Token does not identify a user")
    return CurrentUser(
        id=str(owner_id),
        email=payload.get("email") or "",
        name=payload.get("name") or "",
        token=token,
    )
