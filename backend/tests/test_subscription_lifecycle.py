from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError, StorageError, ValidationError
from app.db.session import transaction
from app.models.organization import Organization
from app.models.subscription import Subscription, SubscriptionHistory
from app.services import history_service, organization_service, subscription_service
from app.services.plan_store import PlanStore
from app.services.subscription_store import SubscriptionStore
from tests.conftest import NOW, make_organization, make_plan


def _update(db: Session, organization_id: int, clock, **overrides) -> Subscription:
    params = {
        'organization_id': organization_id,
        'display_name': 'Acme',
        'new_plan_id': None,
        'max_members': 10,
        'max_projects': 3,
        'shared_storage_per_project': 100,
        'private_storage_per_user': 200,
        'status': 'active',
        'changed_by_user_id': 'platform-admin',
        'clock': clock,
    }
    params.update(overrides)
    return subscription_service.update_subscription(db, **params)


def test_create_subscription_with_custom_plan(db_session: Session, clock) -> None:
    organization = make_organization(db_session)

    subscription = subscription_service.create_subscription(
        db_session,
        organization_id=organization.id,
        validity='1 year',
        member_limit=10,
        projects_limit=3,
        price=0,
        clock=clock,
    )

    assert subscription.status == 'active'
    assert subscription.started_at == NOW
    assert subscription.ended_at - subscription.started_at == timedelta(days=365)
    plan = PlanStore.find(db_session, subscription.plan_id)
    assert plan.is_public is False
    assert plan.name == f'Custom Plan for Org {organization.id}'
    assert plan.max_members == 10
    assert plan.max_projects == 3
    assert plan.price == Decimal('0.00')
    assert plan.currency == 'EUR'


def test_create_subscription_on_public_plan(db_session: Session, clock) -> None:
    organization = make_organization(db_session)
    public = make_plan(db_session, 'Pro')

    subscription = subscription_service.create_subscription(
        db_session, organization_id=organization.id, validity='3 months', plan_id=public.id, clock=clock
    )

    assert subscription.plan_id == public.id
    assert PlanStore.count(db_session) == 1


def test_create_subscription_rejects_bad_input(db_session: Session, clock) -> None:
    organization = make_organization(db_session)

    with pytest.raises(NotFoundError):
        subscription_service.create_subscription(db_session, organization_id=404, validity='1 year', clock=clock)
    with pytest.raises(NotFoundError):
        subscription_service.create_subscription(
            db_session, organization_id=organization.id, validity='1 year', plan_id=999, clock=clock
        )
    with pytest.raises(ValidationError):
        subscription_service.create_subscription(
            db_session, organization_id=organization.id, validity='-1 day', clock=clock
        )
    with pytest.raises(ValidationError):
        subscription_service.create_subscription(
            db_session, organization_id=organization.id, validity='someday', clock=clock
        )


def test_second_subscription_for_organization_conflicts(db_session: Session, clock) -> None:
    organization = make_organization(db_session)
    subscription_service.create_subscription(db_session, organization_id=organization.id, validity='1 year', clock=clock)

    with pytest.raises(ConflictError):
        subscription_service.create_subscription(
            db_session, organization_id=organization.id, validity='1 year', clock=clock
        )


@pytest.mark.parametrize(
    ('start', 'requested', 'paused_set', 'cancelled_set'),
    [
        ('active', 'paused', True, False),
        ('active', 'cancelled', False, True),
        ('paused', 'active', False, False),
        ('paused', 'cancelled', False, True),
        ('cancelled', 'paused', True, False),
        ('expired', 'active', False, False),
    ],
)
def test_status_transitions(start: str, requested: str, paused_set: bool, cancelled_set: bool) -> None:
    earlier = NOW - timedelta(days=3)
    subscription = Subscription(
        status=start,
        paused_at=earlier if start == 'paused' else None,
        cancelled_at=earlier if start == 'cancelled' else None,
    )

    assert subscription_service.apply_status_transition(subscription, requested, now=NOW) is True

    assert subscription.status == requested
    assert (subscription.paused_at == NOW) is paused_set
    assert (subscription.cancelled_at == NOW) is cancelled_set
    if not paused_set:
        assert subscription.paused_at is None
    if not cancelled_set:
        assert subscription.cancelled_at is None


def test_requesting_current_status_is_a_no_op() -> None:
    paused_at = NOW - timedelta(days=1)
    subscription = Subscription(status='paused', paused_at=paused_at)

    assert subscription_service.apply_status_transition(subscription, 'paused', now=NOW) is False
    assert subscription.paused_at == paused_at


@pytest.mark.parametrize('requested', ['expired', 'suspended', ''])
def test_unsupported_status_requests_are_rejected(requested: str) -> None:
    subscription = Subscription(status='active')
    with pytest.raises(ValidationError):
        subscription_service.apply_status_transition(subscription, requested, now=NOW)
    assert subscription.status == 'active'


def test_update_renames_organization_and_records_history(db_session: Session, clock) -> None:
    organization = make_organization(db_session)
    subscription_service.create_subscription(db_session, organization_id=organization.id, validity='1 year', clock=clock)
    clock.advance(days=1)

    subscription = _update(db_session, organization.id, clock, display_name='Acme Labs', status='paused', notes='Paused on request')

    assert organization.name == 'Acme Labs'
    assert subscription.status == 'paused'
    assert subscription.paused_at == clock.now()
    rows = history_service.list_history(db_session, subscription_id=subscription.id)
    assert len(rows) == 1
    assert rows[0].previous_status == 'active'
    assert rows[0].new_status == 'paused'
    assert rows[0].changed_by_user_id == 'platform-admin'
    assert rows[0].notes == 'Paused on request'


def test_extension_is_added_to_current_end_date(db_session: Session, clock) -> None:
    organization = make_organization(db_session)
    subscription = subscription_service.create_subscription(
        db_session, organization_id=organization.id, validity='1 year', clock=clock
    )
    original_end = subscription.ended_at
    clock.advance(days=100)

    updated = _update(db_session, organization.id, clock, extend_duration='+15 days')

    assert updated.ended_at == original_end + timedelta(days=15)


def test_extension_starts_from_now_when_end_date_is_missing(db_session: Session, clock) -> None:
    organization = make_organization(db_session)
    subscription = subscription_service.create_subscription(
        db_session, organization_id=organization.id, validity='1 year', clock=clock
    )
    subscription.ended_at = None
    db_session.flush()

    updated = _update(db_session, organization.id, clock, extend_duration='1 month')

    assert updated.ended_at == NOW.replace(month=4)


def test_every_update_appends_history(db_session: Session, clock) -> None:
    organization = make_organization(db_session)
    subscription = subscription_service.create_subscription(
        db_session, organization_id=organization.id, validity='1 year', clock=clock
    )

    for status in ('paused', 'active', 'cancelled', 'cancelled'):
        clock.advance(hours=1)
        _update(db_session, organization.id, clock, status=status)

    rows = history_service.list_history(db_session, subscription_id=subscription.id)
    assert len(rows) == 4
    assert [row.new_status for row in rows] == ['cancelled', 'cancelled', 'active', 'paused']


def test_custom_plan_is_mutated_in_place(db_session: Session, clock) -> None:
    organization = make_organization(db_session)
    subscription = subscription_service.create_subscription(
        db_session, organization_id=organization.id, validity='1 year', clock=clock
    )
    custom_plan_id = subscription.plan_id

    _update(db_session, organization.id, clock, max_members=25, price=Decimal('99'), currency='usd')

    assert subscription.plan_id == custom_plan_id
    assert PlanStore.count(db_session) == 1
    plan = PlanStore.find(db_session, custom_plan_id)
    assert plan.max_members == 25
    assert plan.price == Decimal('99.00')
    assert plan.currency == 'USD'


def test_repeated_custom_plan_updates_keep_single_reference(db_session: Session, clock) -> None:
    organization = make_organization(db_session)
    subscription = subscription_service.create_subscription(
        db_session, organization_id=organization.id, validity='1 year', clock=clock
    )
    custom_plan_id = subscription.plan_id

    _update(db_session, organization.id, clock, max_members=20)
    _update(db_session, organization.id, clock, max_members=30, max_projects=6)

    assert subscription.plan_id == custom_plan_id
    assert PlanStore.count_subscriptions_referencing(db_session, custom_plan_id) == 1
    assert PlanStore.count(db_session) == 1
    plan = PlanStore.find(db_session, custom_plan_id)
    assert plan.max_members == 30
    assert plan.max_projects == 6


def test_switching_to_public_plan_deletes_orphaned_custom_plan(db_session: Session, clock) -> None:
    organization = make_organization(db_session)
    public = make_plan(db_session, 'Gold')
    subscription = subscription_service.create_subscription(
        db_session, organization_id=organization.id, validity='1 year', clock=clock
    )
    custom_plan_id = subscription.plan_id

    _update(db_session, organization.id, clock, new_plan_id=public.id)

    assert subscription.plan_id == public.id
    assert PlanStore.find(db_session, custom_plan_id) is None
    history = history_service.list_history(db_session, subscription_id=subscription.id)[0]
    assert history.previous_plan_id == custom_plan_id
    assert history.new_plan_id == public.id


def test_switching_off_a_shared_custom_plan_keeps_it(db_session: Session, clock) -> None:
    first = make_organization(db_session, 'First', 'first-admin')
    second = make_organization(db_session, 'Second', 'second-admin')
    public = make_plan(db_session, 'Gold')
    subscription = subscription_service.create_subscription(
        db_session, organization_id=first.id, validity='1 year', clock=clock
    )
    shared_plan_id = subscription.plan_id
    subscription_service.create_subscription(
        db_session, organization_id=second.id, validity='1 year', plan_id=shared_plan_id, clock=clock
    )

    _update(db_session, first.id, clock, display_name='First', new_plan_id=public.id)

    assert PlanStore.find(db_session, shared_plan_id) is not None


def test_leaving_public_plan_forks_custom_plan(db_session: Session, clock) -> None:
    organization = make_organization(db_session)
    public = make_plan(db_session, 'Pro')
    subscription_service.create_subscription(
        db_session, organization_id=organization.id, validity='1 year', plan_id=public.id, clock=clock
    )

    subscription = _update(db_session, organization.id, clock, max_members=40)

    assert subscription.plan_id != public.id
    assert PlanStore.find(db_session, public.id).max_members == 5
    assert PlanStore.find(db_session, subscription.plan_id).max_members == 40


def test_update_rejects_bad_requests(db_session: Session, clock) -> None:
    organization = make_organization(db_session)
    subscription_service.create_subscription(db_session, organization_id=organization.id, validity='1 year', clock=clock)

    with pytest.raises(NotFoundError):
        _update(db_session, 4040, clock)
    with pytest.raises(ValidationError):
        _update(db_session, organization.id, clock, status='expired')
    with pytest.raises(ValidationError):
        _update(db_session, organization.id, clock, changed_by_user_id=' ')
    with pytest.raises(ValidationError):
        _update(db_session, organization.id, clock, display_name='')


def test_update_without_subscription_is_not_found(db_session: Session, clock) -> None:
    organization = make_organization(db_session)
    with pytest.raises(NotFoundError):
        _update(db_session, organization.id, clock)


def test_failed_update_rolls_back_every_change(db_session: Session, clock, monkeypatch) -> None:
    organization = make_organization(db_session)
    subscription = subscription_service.create_subscription(
        db_session, organization_id=organization.id, validity='1 year', clock=clock
    )
    db_session.commit()
    custom_plan_id = subscription.plan_id

    def _fail(*args, **kwargs):
        raise RuntimeError('history unavailable')

    monkeypatch.setattr(history_service, 'record_change', _fail)

    with pytest.raises(RuntimeError):
        with transaction(db_session):
            _update(db_session, organization.id, clock, display_name='Renamed', max_members=50, status='paused')

    stored_org = db_session.scalar(select(Organization).where(Organization.id == organization.id))
    assert stored_org.name == 'Acme'
    stored = SubscriptionStore.find_by_organization_id(db_session, organization.id)
    assert stored.status == 'active'
    assert PlanStore.find(db_session, custom_plan_id).max_members == 5
    assert db_session.scalars(select(SubscriptionHistory)).all() == []


def test_storage_failures_surface_as_storage_error(db_session: Session, clock) -> None:
    organization = make_organization(db_session)
    subscription = subscription_service.create_subscription(
        db_session, organization_id=organization.id, validity='1 year', clock=clock
    )
    db_session.commit()

    with pytest.raises(StorageError):
        with transaction(db_session):
            SubscriptionStore.insert(
                db_session,
                Subscription(
                    organization_id=organization.id,
                    plan_id=subscription.plan_id,
                    status='active',
                    started_at=NOW,
                    ended_at=NOW,
                ),
            )

    assert SubscriptionStore.find_by_organization_id(db_session, organization.id).id == subscription.id


def test_create_organization_with_subscription(db_session: Session, clock) -> None:
    organization, subscription = organization_service.create_organization_with_subscription(
        db_session,
        name=' Initech ',
        admin_uid='initech-admin',
        validity='1 month',
        member_limit=3,
        contact_email='ops@initech.example',
        clock=clock,
    )

    assert organization.name == 'Initech'
    assert subscription.organization_id == organization.id
    overview = organization_service.get_organization_overview(db_session, organization.id)
    assert overview.plan.max_members == 3
    assert overview.subscription.ended_at == NOW.replace(month=4)


def test_create_organization_requires_admin(db_session: Session, clock) -> None:
    with pytest.raises(ValidationError):
        organization_service.create_organization_with_subscription(
            db_session, name='Initech', admin_uid='', validity='1 month', clock=clock
        )


def test_member_capacity_guard(db_session: Session, clock) -> None:
    organization = make_organization(db_session)
    subscription_service.create_subscription(
        db_session, organization_id=organization.id, validity='1 year', member_limit=2, clock=clock
    )

    organization_service.assert_member_capacity(db_session, organization.id, current_members=1)
    with pytest.raises(ConflictError):
        organization_service.assert_member_capacity(db_session, organization.id, current_members=2)
