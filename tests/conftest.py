import os

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from backend.database import Base  # noqa: E402
from backend.models.appointment import Appointment  # noqa: E402
from backend.store.appointment_store import AppointmentStore  # noqa: E402


@pytest.fixture
def appointment_db():
    engine = create_engine('sqlite:///:memory:')
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine, tables=[Appointment.__table__])

    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine, tables=[Appointment.__table__])
        engine.dispose()


@pytest.fixture
def store(appointment_db):
    return AppointmentStore(appointment_db)


@pytest.fixture
def skip_schema_check(monkeypatch: pytest.MonkeyPatch):
    for module_path in (
        'backend.routes.booking_routes',
        'backend.routes.admin_routes',
    ):
        monkeypatch.setattr(f'{module_path}.ensure_database_ready', lambda: None)
