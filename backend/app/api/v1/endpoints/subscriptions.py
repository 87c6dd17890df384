from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import Actor, get_clock, require_admin
from app.core.clock import Clock
from app.db.session import get_db, transaction
from app.schemas.subscription import SweepResultOut
from app.services.expiry_sweeper import sweep_expired_subscriptions


router = APIRouter(prefix='/subscriptions', tags=['subscriptions'])


@router.post('/sweep', response_model=SweepResultOut)
def trigger_expiry_sweep(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    _: Actor = Depends(require_admin),
) -> SweepResultOut:
    with transaction(db):
        expired = sweep_expired_subscriptions(db, now=clock.now())
    return SweepResultOut(expired=expired)
