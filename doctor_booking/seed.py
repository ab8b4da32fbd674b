"""Sample data: one admin, three doctors and a week of weekday schedules."""

import logging
from datetime import date, timedelta

from sqlalchemy.orm import Session

from doctor_booking.auth.passwords import hash_password
from doctor_booking.models.doctor import Doctor
from doctor_booking.models.enums import Specialization, UserRole
from doctor_booking.models.schedule import Schedule
from doctor_booking.models.user import User

logger = logging.getLogger(__name__)

ADMIN_EMAIL = 'admin@example.com'
ADMIN_PASSWORD = 'admin123'
DOCTOR_PASSWORD = 'doctor123'
SCHEDULE_DAYS = 7
SCHEDULE_PERIODS = (('09:00', '12:00'), ('14:00', '17:00'))

SAMPLE_DOCTORS = (
    {
        'name': 'Dr. Sarah Johnson',
        'email': 'sarah.johnson@example.com',
        'specialization': Specialization.CARDIOLOGY,
        'qualification': 'MD, Cardiology',
        'experience': 10,
        'bio': 'Senior Cardiologist with 10+ years of experience in interventional cardiology.',
        'consultation_fee': 150.0,
    },
    {
        'name': 'Dr. Michael Chen',
        'email': 'michael.chen@example.com',
        'specialization': Specialization.NEUROLOGY,
        'qualification': 'MD, Neurology',
        'experience': 8,
        'bio': 'Neurologist specializing in movement disorders and neurophysiology.',
        'consultation_fee': 175.0,
    },
    {
        'name': 'Dr. Emily Wilson',
        'email': 'emily.wilson@example.com',
        'specialization': Specialization.PEDIATRICS,
        'qualification': 'MD, Pediatrics',
        'experience': 12,
        'bio': 'Pediatrician with extensive experience in child healthcare and development.',
        'consultation_fee': 125.0,
    },
)


def _get_or_create_user(db: Session, name: str, email: str, password: str, role: UserRole) -> tuple[User, bool]:
    user = db.query(User).filter(User.email == email).first()
    if user is not None:
        return user, False

    user = User(name=name, email=email, hashed_password=hash_password(password), role=role, active=True)
    db.add(user)
    db.flush()
    return user, True


def _weekday_dates(start: date, days: int) -> list[date]:
    return [
        start + timedelta(days=offset)
        for offset in range(days)
        if (start + timedelta(days=offset)).weekday() < 5
    ]


def seed_database(db: Session, today: date | None = None) -> None:
    today = today or date.today()

    _, created = _get_or_create_user(db, 'Admin User', ADMIN_EMAIL, ADMIN_PASSWORD, UserRole.ADMIN)
    if created:
        logger.info('Created admin user %s', ADMIN_EMAIL)

    for sample in SAMPLE_DOCTORS:
        user, created = _get_or_create_user(db, sample['name'], sample['email'], DOCTOR_PASSWORD, UserRole.DOCTOR)
        if not created:
            logger.info('Doctor %s already present, skipping', sample['email'])
            continue

        doctor = Doctor(
            user_id=user.id,
            specialization=sample['specialization'],
            qualification=sample['qualification'],
            experience=sample['experience'],
            bio=sample['bio'],
            consultation_fee=sample['consultation_fee'],
            available=True,
        )
        db.add(doctor)
        db.flush()

        for schedule_date in _weekday_dates(today, SCHEDULE_DAYS):
            for start_time, end_time in SCHEDULE_PERIODS:
                db.add(Schedule(
                    doctor_id=doctor.id,
                    date=schedule_date,
                    start_time=start_time,
                    end_time=end_time,
                    is_available=True,
                ))
        logger.info('Created doctor %s', sample['name'])

    db.commit()
    logger.info('Database seeding completed')
