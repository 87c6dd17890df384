from __future__ import annotations

from celery import Celery

from app.core.config import settings

celery_app = Celery(
    'subscriptions',
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=['app.modules.scheduler.tasks'],
)

celery_app.conf.update(
    task_default_queue='subscriptions',
    broker_connection_retry_on_startup=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
)

celery_app.conf.beat_schedule = {
    'subscriptions-expiry-sweep': {
        'task': 'app.modules.scheduler.tasks.sweep_expired_subscriptions',
        'schedule': settings.SUBSCRIPTION_SWEEP_INTERVAL_SECONDS,
    }
}
