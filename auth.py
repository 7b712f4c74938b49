"""
Caller identity from a Bearer token.

Tokens are issued by the account service; this module only verifies them
and exposes the `{id, email}` they carry.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from config import settings
from errors import AuthenticationError

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CallerIdentity:
    id: str
    email: Optional[str] = None


def _token_from_request(request: Request, credentials: Optional[HTTPAuthorizationCredentials]):
    token = None

    # Try to get token from Bearer header
    if credentials:
        token = credentials.credentials
    # Try to get token from cookie
    if not token:
        token = request.cookies.get("access_token")
    return token


def decode_identity(token: str) -> CallerIdentity:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise AuthenticationError("Invalid or expired token")

    user_id = payload.get("id") or payload.get("sub")
    if not user_id:
        raise AuthenticationError("Invalid or expired token")
    return CallerIdentity(id=str(user_id), email=payload.get("email"))


async def get_optional_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[CallerIdentity]:
    """Identity if a valid token was sent, otherwise anonymous (None)"""
    token = _token_from_request(request, credentials)
    if not token:
        return None
    try:
        return decode_identity(token)
    except AuthenticationError:
        return None


async def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> CallerIdentity:
    """Identity from the token; fails with 401 when it is missing or invalid"""
    token = _token_from_request(request, credentials)
    if not token:
        raise AuthenticationError()
    return decode_identity(token)
