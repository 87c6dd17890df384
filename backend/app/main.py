from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1.router import api_router
from app.core.config import settings
from app.core.errors import SubscriptionServiceError
from app.db.session import SessionLocal
from app.services.bootstrap_service import ensure_reference_data


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    if settings.SEED_PUBLIC_PLANS:
        db = SessionLocal()
        try:
            seeded = ensure_reference_data(db)
            db.commit()
            if seeded:
                logger.info('Seeded %s public plans', seeded)
        except Exception as exc:  # noqa: BLE001
            db.rollback()
            logger.warning('Bootstrap seed skipped: %s', exc)
        finally:
            db.close()

    yield


app = FastAPI(
    title='Organization Subscription API',
    version='0.1.0',
    openapi_url='/api/v1/openapi.json',
    docs_url='/api/v1/docs',
    redoc_url='/api/v1/redoc',
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)


@app.exception_handler(SubscriptionServiceError)
async def subscription_error_handler(_: Request, exc: SubscriptionServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error('%s: %s', exc.error_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(api_router, prefix='/api/v1')


@app.get('/')
def root() -> dict[str, str]:
    return {'service': 'organization-subscription-api', 'status': 'running'}
