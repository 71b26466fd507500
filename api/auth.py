"""Bearer token authentication.

Access tokens are HS256 JWTs signed with ``JWT_SECRET_KEY``. The ``sub`` claim
holds the user id and the ``role`` claim the user's role. Tokens are issued by
whatever service owns the user accounts; ``create_access_token`` exists for
operators and tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Annotated, Optional
from uuid import UUID
import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import ValidationError

from api.schemas.user import Actor, TokenPayload
from config import settings
from database.models import UserRole

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(
    user_id: UUID,
    role: UserRole,
    expires_delta: Optional[timedelta] = None,
) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    payload = {
        "sub": str(user_id),
        "role": role.value,
        "exp": int(expire.timestamp()),
        "iat": int(now.timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY.get_secret_value(), algorithm=settings.JWT_ALGORITHM)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_access_token(token: str) -> Actor:
    try:
        claims = jwt.decode(token, settings.JWT_SECRET_KEY.get_secret_value(), algorithms=[settings.JWT_ALGORITHM])
        payload = TokenPayload.model_validate(claims)
    except ExpiredSignatureError:
        logger.warning("Rejected expired access token")
        raise _unauthorized("Token has expired")
    except (JWTError, ValidationError) as e:
        logger.warning(f"Rejected invalid access token: {e}")
        raise _unauthorized("Invalid authentication credentials")

    return Actor(id=payload.sub, role=payload.role)


async def get_current_actor(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
) -> Actor:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise _unauthorized("Not authenticated")
    return decode_access_token(credentials.credentials)


ActorDep = Annotated[Actor, Depends(get_current_actor)]
