from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.api.deps import Actor, require_admin
from app.db.session import get_db, transaction
from app.schemas.plan import PlanCreate, PlanDetailOut, PlanListResponse, PlanOut, PlanUpdate
from app.services import plan_service


router = APIRouter(prefix='/plans', tags=['plans'])


@router.get('', response_model=PlanListResponse)
def list_plans(
    search: str = '',
    limit: int | None = None,
    offset: int = 0,
    db: Session = Depends(get_db),
    _: Actor = Depends(require_admin),
) -> PlanListResponse:
    plans = plan_service.list_plans(db, search=search, limit=limit, offset=offset)
    return PlanListResponse(plans=[PlanOut.model_validate(plan) for plan in plans])


@router.get('/public', response_model=list[PlanOut])
def list_public_plans(
    db: Session = Depends(get_db),
    _: Actor = Depends(require_admin),
) -> list[PlanOut]:
    return [PlanOut.model_validate(plan) for plan in plan_service.list_public_plans(db)]


@router.get('/{plan_id}', response_model=PlanDetailOut)
def get_plan(
    plan_id: int,
    db: Session = Depends(get_db),
    _: Actor = Depends(require_admin),
) -> PlanDetailOut:
    plan = plan_service.get_plan(db, plan_id)
    payload = PlanOut.model_validate(plan).model_dump()
    return PlanDetailOut(**payload, subscription_count=plan_service.subscription_count(db, plan_id))


@router.post('', response_model=PlanOut, status_code=status.HTTP_201_CREATED)
def create_plan(
    payload: PlanCreate,
    db: Session = Depends(get_db),
    _: Actor = Depends(require_admin),
) -> PlanOut:
    with transaction(db):
        plan = plan_service.create_plan(db, **payload.model_dump())
    return PlanOut.model_validate(plan)


@router.put('/{plan_id}', response_model=PlanOut)
def update_plan(
    plan_id: int,
    payload: PlanUpdate,
    db: Session = Depends(get_db),
    _: Actor = Depends(require_admin),
) -> PlanOut:
    with transaction(db):
        plan = plan_service.update_plan(db, plan_id, **payload.model_dump())
    return PlanOut.model_validate(plan)


@router.delete('/{plan_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_plan(
    plan_id: int,
    db: Session = Depends(get_db),
    _: Actor = Depends(require_admin),
) -> Response:
    with transaction(db):
        plan_service.delete_plan(db, plan_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
