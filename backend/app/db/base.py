from app.db.base_class import Base
from app.models.organization import Organization
from app.models.plan import Plan
from app.models.subscription import Subscription, SubscriptionHistory


__all__ = [
    'Base',
    'Organization',
    'Plan',
    'Subscription',
    'SubscriptionHistory',
]
