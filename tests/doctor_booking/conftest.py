import os
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault('DATABASE_URL', 'sqlite://')
os.environ.setdefault('BCRYPT_ROUNDS', '4')
os.environ.setdefault('JWT_SECRET_KEY', 'test-secret-key')

from doctor_booking.auth.jwt_handler import create_access_token  # noqa: E402
from doctor_booking.auth.passwords import hash_password  # noqa: E402
from doctor_booking.database import Base, get_db  # noqa: E402
from doctor_booking.main import app  # noqa: E402
from doctor_booking.models.appointment import Appointment  # noqa: E402
from doctor_booking.models.doctor import Doctor  # noqa: E402
from doctor_booking.models.enums import AppointmentStatus, Specialization, UserRole  # noqa: E402
from doctor_booking.models.user import User  # noqa: E402

DEFAULT_PASSWORD = 'password123'


@pytest.fixture
def db_session():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def create_user(db_session):
    def _create_user(
        email: str = 'patient@example.com',
        role: UserRole = UserRole.PATIENT,
        name: str = 'Test Patient',
        password: str = DEFAULT_PASSWORD,
        active: bool = True,
    ) -> User:
        user = User(
            name=name,
            email=email,
            hashed_password=hash_password(password),
            role=role,
            active=active,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _create_user


@pytest.fixture
def create_doctor(db_session, create_user):
    def _create_doctor(
        email: str = 'doctor@example.com',
        name: str = 'Dr. Test',
        specialization: Specialization = Specialization.CARDIOLOGY,
        available: bool = True,
    ) -> Doctor:
        user = create_user(email=email, role=UserRole.DOCTOR, name=name)
        doctor = Doctor(
            user_id=user.id,
            specialization=specialization,
            qualification='MD',
            experience=5,
            consultation_fee=100.0,
            available=available,
        )
        db_session.add(doctor)
        db_session.commit()
        db_session.refresh(doctor)
        return doctor

    return _create_doctor


@pytest.fixture
def create_appointment(db_session):
    def _create_appointment(
        patient: User,
        doctor: Doctor,
        start_time: datetime,
        status: AppointmentStatus = AppointmentStatus.PENDING,
    ) -> Appointment:
        appointment = Appointment(
            patient_id=patient.id,
            doctor_id=doctor.id,
            appointment_date=start_time,
            start_time=start_time,
            end_time=start_time + timedelta(minutes=30),
            status=status,
        )
        db_session.add(appointment)
        db_session.commit()
        db_session.refresh(appointment)
        return appointment

    return _create_appointment


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> dict:
        token = create_access_token(user_id=user.id, email=user.email, role=user.role.value)
        return {'Authorization': f'Bearer {token}'}

    return _auth_headers
