import logging
from datetime import datetime, timedelta

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, contains_eager, joinedload

from doctor_booking.models.appointment import Appointment
from doctor_booking.models.doctor import Doctor
from doctor_booking.models.enums import Specialization
from doctor_booking.models.schedule import Schedule
from doctor_booking.models.user import User
from doctor_booking.schemas.doctors import CreateScheduleRequest

logger = logging.getLogger(__name__)

UPCOMING_APPOINTMENTS_LIMIT = 10


def get_doctor_or_404(db: Session, doctor_id: int) -> Doctor:
    doctor = db.query(Doctor).options(joinedload(Doctor.user)).filter(
        Doctor.id == doctor_id,
        Doctor.deleted_at.is_(None),
    ).first()
    if doctor is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Doctor not found')
    return doctor


def get_doctor_for_user(db: Session, user: User) -> Doctor:
    doctor = db.query(Doctor).filter(
        Doctor.user_id == user.id,
        Doctor.deleted_at.is_(None),
    ).first()
    if doctor is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Doctor not found')
    return doctor


def list_doctors(
    db: Session,
    specialization: Specialization | None = None,
    name: str | None = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Doctor], int]:
    query = db.query(Doctor).join(Doctor.user).filter(
        Doctor.available.is_(True),
        Doctor.deleted_at.is_(None),
        User.deleted_at.is_(None),
    )

    if specialization is not None:
        query = query.filter(Doctor.specialization == specialization)

    if name and name.strip():
        query = query.filter(User.name.ilike(f'%{name.strip()}%'))

    total = query.count()
    doctors = (
        query.options(contains_eager(Doctor.user))
        .order_by(Doctor.id.asc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return doctors, total


def create_schedule(db: Session, doctor: Doctor, data: CreateScheduleRequest) -> Schedule:
    schedule = Schedule(
        doctor_id=doctor.id,
        date=data.date,
        start_time=data.start_time,
        end_time=data.end_time,
        is_available=True,
    )
    try:
        db.add(schedule)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(schedule)

    logger.info('Doctor %s declared schedule %s %s-%s', doctor.id, data.date, data.start_time, data.end_time)
    return schedule


def list_schedules(db: Session, doctor: Doctor) -> list[Schedule]:
    return db.query(Schedule).filter(
        Schedule.doctor_id == doctor.id,
        Schedule.deleted_at.is_(None),
    ).order_by(Schedule.date.asc(), Schedule.start_time.asc()).all()


def get_dashboard_appointments(
    db: Session,
    doctor: Doctor,
    now: datetime,
) -> tuple[list[Appointment], list[Appointment]]:
    day_start = datetime.combine(now.date(), datetime.min.time())
    day_end = day_start + timedelta(days=1)

    base_query = db.query(Appointment).options(joinedload(Appointment.patient)).filter(
        Appointment.doctor_id == doctor.id,
        Appointment.deleted_at.is_(None),
    )

    today = base_query.filter(
        Appointment.appointment_date >= day_start,
        Appointment.appointment_date < day_end,
    ).order_by(Appointment.start_time.asc()).all()

    upcoming = base_query.filter(
        Appointment.appointment_date > now,
    ).order_by(Appointment.appointment_date.asc()).limit(UPCOMING_APPOINTMENTS_LIMIT).all()

    return today, upcoming
