from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from passlib.context import CryptContext
from jose import jwt

from tripplanner.utils.config import JWT_SECRET, JWT_ALGORITHM

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# tokens are only accepted by the trip planner API
TOKEN_AUDIENCE = "trip-planner"
TOKEN_ISSUER = "trip-planner-auth"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(subject: str, expires_delta: timedelta, username: Optional[str] = None) -> str:
    """Bearer token for the owner whose saved trips the request may read and write."""
    now = datetime.now(timezone.utc)
    claims: Dict[str, Any] = {
        "sub": subject,
        "iat": now,
        "exp": now + expires_delta,
        "aud": TOKEN_AUDIENCE,
        "iss": TOKEN_ISSUER,
    }
    if username:
        claims["username"] = username
    return jwt.encode(claims, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """Raises jose.JWTError for expired, tampered or foreign tokens."""
    return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM],
                      audience=TOKEN_AUDIENCE, issuer=TOKEN_ISSUER)
