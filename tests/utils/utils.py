import time
import uuid
from typing import Dict, Optional, Tuple

from jose import jwt

TEST_SESSION_SECRET = "test-session-secret"


def create_session_token(
    user_id: Optional[str],
    *,
    expires_in: int = 300,
    authorized_party: Optional[str] = None,
    secret: str = TEST_SESSION_SECRET,
) -> str:
    """Mint a session token like the identity provider would, signed with HS256."""
    now = int(time.time())
    claims = {"iat": now, "nbf": now, "exp": now + expires_in}
    if user_id is not None:
        claims["sub"] = user_id
    if authorized_party is not None:
        claims["azp"] = authorized_party
    return jwt.encode(claims, secret, algorithm="HS256")


def create_test_user_and_headers() -> Tuple[str, Dict[str, str]]:
    """A fresh user id together with the headers that authenticate it."""
    user_id = f"user_{uuid.uuid4().hex[:12]}"
    token = create_session_token(user_id)
    return user_id, {"Authorization": f"Bearer {token}"}
