from app.models.organization import Organization
from app.models.plan import Plan
from app.models.subscription import Subscription, SubscriptionHistory

__all__ = [
    'Organization',
    'Plan',
    'Subscription',
    'SubscriptionHistory',
]
