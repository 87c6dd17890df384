from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.clock import Clock, system_clock
from app.core.security import TokenDecodeError, decode_access_token
from app.db.session import get_db
from app.services import access_service


bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Actor:
    user_id: str
    is_admin: bool
    organization_id: int | None


def get_clock() -> Clock:
    return system_clock


def get_current_actor(credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme)) -> Actor:
    if not credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Authentication required')
    try:
        payload = decode_access_token(credentials.credentials)
        subject = payload.get('sub')
        if not subject:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Invalid access token subject')
        organization_id = payload.get('org_id')
        return Actor(
            user_id=str(subject),
            is_admin=bool(payload.get('is_admin', False)),
            organization_id=int(organization_id) if organization_id is not None else None,
        )
    except (TokenDecodeError, ValueError) as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Invalid access token') from exc


def require_admin(actor: Actor = Depends(get_current_actor)) -> Actor:
    if not actor.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail='Administrator access required')
    return actor


def require_organization_access(organization_id: int, actor: Actor = Depends(get_current_actor)) -> Actor:
    if actor.is_admin:
        return actor
    # Do not reveal whether another tenant's organization exists.
    if actor.organization_id != organization_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Organization does not exist')
    return actor


def require_usable_subscription(
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> Actor:
    if actor.is_admin:
        return actor
    if actor.organization_id is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail='You are not a member of a valid organization.'
        )
    usable, reason = access_service.check_subscription_access(db, actor.organization_id, clock=clock)
    if not usable:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=reason)
    return actor
