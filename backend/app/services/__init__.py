from app.services import (
    access_service,
    bootstrap_service,
    expiry_sweeper,
    history_service,
    organization_service,
    plan_service,
    subscription_service,
)

__all__ = [
    'access_service',
    'bootstrap_service',
    'expiry_sweeper',
    'history_service',
    'organization_service',
    'plan_service',
    'subscription_service',
]
