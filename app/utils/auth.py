"""
Authentication utilities - principal resolution and ownership checks

Credentials are verified upstream (API gateway authorizer or the access-key
service). This module only works out which owner key a request acts for and
refuses requests that carry nothing usable.
"""
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from app.config.settings import settings
from app.models.form import FormDefinition
from app.utils.errors import AuthenticationError, AuthorizationError

logger = logging.getLogger(__name__)

_ACCESS_KEY_RE = re.compile(settings.ACCESS_KEY_PATTERN)


def get_header(event: Dict[str, Any], name: str) -> Optional[str]:
    """Case-insensitive header lookup on a proxy event"""
    headers = event.get("headers") or {}
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def create_access_token(data: Dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token"""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=24))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Dict:
    """Decode and verify a JWT token"""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.warning("JWT verification failed: %s", e)
        raise AuthenticationError()


def resolve_principal(event: Dict[str, Any]) -> str:
    """Return the owner key the request acts for.

    Checked in order: the gateway authorizer context, a Bearer JWT, then an
    ``X-Access-Key`` / ``X-Api-Key`` header.
    """
    authorizer = (event.get("requestContext") or {}).get("authorizer") or {}
    owner_key = authorizer.get("ownerKey") or authorizer.get("principalId")
    if owner_key:
        return str(owner_key)

    authorization = get_header(event, "Authorization")
    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise AuthenticationError()
        payload = decode_access_token(token.strip())
        if not payload.get("sub"):
            raise AuthenticationError("Invalid authentication credentials")
        return str(payload["sub"])

    access_key = get_header(event, "X-Access-Key") or get_header(event, "X-Api-Key")
    if access_key:
        if not _ACCESS_KEY_RE.match(access_key.strip()):
            raise AuthenticationError("Invalid access key")
        return access_key.strip()

    raise AuthenticationError("Missing credentials")


def ensure_owner(form: FormDefinition, principal: str) -> None:
    if form.owner_key != principal:
        raise AuthorizationError()
