from typing import Optional
from fastapi import Cookie, Depends, Request
from fastapi.responses import PlainTextResponse
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from src.config import CLERK_JWT_KEY, CLERK_JWT_ALGORITHM, CLERK_AUTHORIZED_PARTIES
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

SESSION_COOKIE = "__session"


class Unauthenticated(Exception):
    """The request carries no valid session token."""


async def unauthenticated_handler(
    request: Request, exc: Unauthenticated
) -> PlainTextResponse:
    logger.info(f"Rejected unauthenticated request to {request.url.path}: {exc}")
    return PlainTextResponse("Unauthenticated!", status_code=401)


def verify_session_token(token: str) -> str:
    """Verify a session token and return the user id it was issued for."""
    if not CLERK_JWT_KEY:
        raise Unauthenticated("Session verification key is not configured")
    try:
        payload = jwt.decode(
            token,
            CLERK_JWT_KEY,
            algorithms=[CLERK_JWT_ALGORITHM],
            options={"verify_aud": False},
        )
    except JWTError as e:
        raise Unauthenticated(f"Invalid token: {e}")

    user_id = payload.get("sub")
    if not user_id:
        raise Unauthenticated("Invalid token payload")

    if CLERK_AUTHORIZED_PARTIES and payload.get("azp") not in CLERK_AUTHORIZED_PARTIES:
        raise Unauthenticated(f"Unauthorized party {payload.get('azp')!r}")

    return user_id


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session: Optional[str] = Cookie(default=None, alias=SESSION_COOKIE),
) -> str:
    if credentials is not None:
        return verify_session_token(credentials.credentials)
    if session:
        return verify_session_token(session)
    raise Unauthenticated("Missing session token")
