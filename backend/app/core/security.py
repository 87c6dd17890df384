from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from app.core.config import settings


class TokenDecodeError(Exception):
    pass


def _create_token(payload: dict[str, Any], secret: str, expires_delta: timedelta) -> str:
    data = payload.copy()
    expire = datetime.now(UTC) + expires_delta
    data.update({'exp': expire})
    return jwt.encode(data, secret, algorithm=settings.JWT_ALGORITHM)


def create_access_token(subject: str, *, is_admin: bool = False, organization_id: int | None = None) -> str:
    # Tokens are normally minted by the host platform; this is used by tooling and tests.
    payload: dict[str, Any] = {'sub': subject, 'token_type': 'access', 'is_admin': is_admin}
    if organization_id is not None:
        payload['org_id'] = organization_id
    return _create_token(
        payload=payload,
        secret=settings.JWT_SECRET_KEY,
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def decode_access_token(token: str) -> dict[str, Any]:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as exc:
        raise TokenDecodeError('Invalid access token') from exc

    if payload.get('token_type') != 'access':
        raise TokenDecodeError('Unexpected token type for access token')
    return payload
