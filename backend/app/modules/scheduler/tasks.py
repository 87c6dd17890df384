from __future__ import annotations

from app.modules.scheduler.celery_app import celery_app
from app.services.expiry_sweeper import run_expiry_sweep


@celery_app.task(name='app.modules.scheduler.tasks.sweep_expired_subscriptions')
def sweep_expired_subscriptions() -> int:
    return run_expiry_sweep()
