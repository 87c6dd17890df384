from __future__ import annotations

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.plan import Plan
from app.models.subscription import Subscription


class PlanStore:
    @staticmethod
    def create(
        db: Session,
        *,
        name: str,
        max_members: int,
        max_projects: int,
        shared_storage_per_project: int,
        private_storage_per_user: int,
        price: Decimal | None,
        currency: str,
        is_public: bool = False,
    ) -> Plan:
        plan = Plan(
            name=name,
            max_members=max_members,
            max_projects=max_projects,
            shared_storage_per_project=shared_storage_per_project,
            private_storage_per_user=private_storage_per_user,
            price=price,
            currency=currency,
            is_public=is_public,
        )
        db.add(plan)
        db.flush()
        return plan

    @staticmethod
    def find(db: Session, plan_id: int | None) -> Plan | None:
        if plan_id is None:
            return None
        return db.scalar(select(Plan).where(Plan.id == plan_id))

    @staticmethod
    def find_all_public(db: Session) -> list[Plan]:
        return db.scalars(select(Plan).where(Plan.is_public.is_(True)).order_by(Plan.id.asc())).all()

    @staticmethod
    def find_all_admin(db: Session, *, search: str = '', limit: int | None = None, offset: int = 0) -> list[Plan]:
        query = select(Plan)
        term = (search or '').strip()
        if term:
            query = query.where(func.lower(Plan.name).contains(term.lower()))
        query = query.order_by(Plan.id.asc()).offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return db.scalars(query).all()

    @staticmethod
    def update(db: Session, plan: Plan) -> Plan:
        db.add(plan)
        db.flush()
        return plan

    @staticmethod
    def delete(db: Session, plan: Plan) -> None:
        db.delete(plan)
        db.flush()

    @staticmethod
    def count_subscriptions_referencing(db: Session, plan_id: int) -> int:
        total = db.scalar(select(func.count()).select_from(Subscription).where(Subscription.plan_id == plan_id))
        return int(total or 0)

    @staticmethod
    def count(db: Session) -> int:
        return int(db.scalar(select(func.count()).select_from(Plan)) or 0)
