from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.session import get_db


router = APIRouter(tags=['health'])


@router.get('/health')
def health(db: Session = Depends(get_db)) -> dict[str, str]:
    try:
        db.execute(text('SELECT 1'))
        database = 'ok'
    except SQLAlchemyError:
        database = 'unavailable'
    return {'status': 'ok', 'environment': settings.APP_ENV, 'database': database}
