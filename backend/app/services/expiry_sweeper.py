from __future__ import annotations

from datetime import datetime
import logging

from sqlalchemy.orm import Session, sessionmaker

from app.core.clock import Clock, system_clock
from app.db.session import SessionLocal, transaction
from app.services.subscription_store import SubscriptionStore


logger = logging.getLogger(__name__)


def sweep_expired_subscriptions(db: Session, *, now: datetime) -> int:
    # Sweep-induced expirations are not written to the subscription history.
    return SubscriptionStore.sweep_expired(db, now=now)


def run_expiry_sweep(*, clock: Clock = system_clock, session_factory: sessionmaker = SessionLocal) -> int:
    """
    Scheduled entry point: expire lapsed subscriptions in a fresh session.

    Failures are logged and reported as zero changes; the next run retries.
    """
    db = session_factory()
    try:
        with transaction(db):
            expired = sweep_expired_subscriptions(db, now=clock.now())
    except Exception:  # noqa: BLE001
        logger.exception('Subscription expiry sweep failed')
        return 0
    finally:
        db.close()

    logger.info('Subscription expiry sweep expired %s subscriptions', expired)
    return expired
