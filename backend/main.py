import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from backend.core import config
from backend.core.logging_config import configure_logging
from backend.database import engine, ensure_appointment_schema
from backend.models import appointment
from backend.routes import admin_routes, auth_routes, booking_routes

configure_logging(config.LOG_LEVEL)
config.validate_runtime_config()

app = FastAPI(title='Barbershop Booking API', debug=config.DEBUG)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(config.CORS_ORIGINS),
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize_database() -> None:
    try:
        appointment.Base.metadata.create_all(bind=engine)
        ensure_appointment_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@app.get('/')
def root():
    return {'status': 'Barbershop Booking API Running'}


app.include_router(auth_routes.router, prefix='/auth')
app.include_router(booking_routes.router, prefix='/booking')
app.include_router(admin_routes.router, prefix='/admin')
