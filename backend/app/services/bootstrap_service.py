from decimal import Decimal

from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.constants import GIB, MIB
from app.services.plan_store import PlanStore


PUBLIC_PLANS = [
    # name, max_projects, max_members, shared storage per project, private storage per user, price
    ('Free', 1, 1, 50 * MIB, 1 * GIB, Decimal('0')),
    ('Pro', 2, 5, 100 * MIB, 5 * GIB, Decimal('10')),
    ('Gold', 5, 20, 1 * GIB, 20 * GIB, Decimal('25')),
]


def ensure_reference_data(db: Session) -> int:
    """Seed the public plan catalogue into an empty plans table."""
    if PlanStore.count(db) > 0:
        return 0

    for name, max_projects, max_members, shared_storage, private_storage, price in PUBLIC_PLANS:
        PlanStore.create(
            db,
            name=name,
            max_members=max_members,
            max_projects=max_projects,
            shared_storage_per_project=shared_storage,
            private_storage_per_user=private_storage,
            price=price,
            currency=settings.DEFAULT_CURRENCY,
            is_public=True,
        )
    return len(PUBLIC_PLANS)
