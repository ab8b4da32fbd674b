import asyncio
import logging
import sys

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from doctor_booking.core import config
from doctor_booking.database import ensure_schema
from doctor_booking.models import appointment, doctor, schedule, user  # noqa: F401
from doctor_booking.routes import admin_routes, auth_routes, doctor_routes, patient_routes, user_routes

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)

API_PREFIX = '/api/v1'
REQUEST_TIMEOUT_DETAIL = 'Request timed out; its outcome is unknown'

app = FastAPI(title='Doctor Booking API', version=config.APP_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)


@app.middleware('http')
async def enforce_request_deadline(request: Request, call_next):
    # Only the wait is abandoned. A handler already running in the threadpool
    # still finishes and may commit.
    try:
        return await asyncio.wait_for(call_next(request), timeout=config.REQUEST_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        logger.warning('%s %s exceeded %.1fs deadline', request.method, request.url.path, config.REQUEST_TIMEOUT_SECONDS)
        return JSONResponse(status_code=status.HTTP_504_GATEWAY_TIMEOUT, content={'error': REQUEST_TIMEOUT_DETAIL})


def format_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return 'Invalid request'

    first = errors[0]
    message = str(first.get('msg', 'Invalid value')).removeprefix('Value error, ')
    field = '.'.join(str(part) for part in first.get('loc', ()) if part not in ('body', 'query', 'path'))
    return f'{field}: {message}' if field else message


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={'error': exc.detail},
        headers=getattr(exc, 'headers', None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={'error': format_validation_error(exc)},
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception('Database error on %s %s', request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={'error': 'Internal server error'},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception('Unhandled error on %s %s', request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={'error': 'Internal server error'},
    )


@app.on_event('startup')
def initialize_database() -> None:
    config.validate_runtime_config()
    try:
        ensure_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and Postgres credentials.')


@app.get('/health')
def health():
    return {'status': 'ok', 'version': config.APP_VERSION}


app.include_router(auth_routes.router, prefix=f'{API_PREFIX}/auth')
app.include_router(user_routes.router, prefix=f'{API_PREFIX}/users')
app.include_router(doctor_routes.router, prefix=f'{API_PREFIX}/doctors')
app.include_router(patient_routes.router, prefix=f'{API_PREFIX}/patients')
app.include_router(admin_routes.router, prefix=f'{API_PREFIX}/admin')
