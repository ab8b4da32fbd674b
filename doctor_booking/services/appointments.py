from datetime import date, datetime, time, timedelta

from fastapi import HTTPException, status
from sqlalchemy.orm import Query, Session, joinedload

from doctor_booking.models.appointment import Appointment
from doctor_booking.models.doctor import Doctor
from doctor_booking.models.enums import AppointmentStatus
from doctor_booking.models.user import User


def _base_query(db: Session) -> Query:
    return db.query(Appointment).options(
        joinedload(Appointment.patient),
        joinedload(Appointment.doctor).joinedload(Doctor.user),
    ).filter(Appointment.deleted_at.is_(None))


def apply_appointment_filters(
    query: Query,
    status_filter: AppointmentStatus | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> Query:
    if start_date and end_date and start_date > end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='start_date must be on or before end_date',
        )

    if status_filter is not None:
        query = query.filter(Appointment.status == status_filter)
    if start_date is not None:
        query = query.filter(Appointment.appointment_date >= datetime.combine(start_date, time.min))
    if end_date is not None:
        # inclusive of the whole end day
        query = query.filter(
            Appointment.appointment_date < datetime.combine(end_date, time.min) + timedelta(days=1)
        )
    return query


def _newest_first(query: Query) -> Query:
    return query.order_by(Appointment.appointment_date.desc(), Appointment.start_time.desc())


def list_doctor_appointments(
    db: Session,
    doctor: Doctor,
    status_filter: AppointmentStatus | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[Appointment]:
    query = _base_query(db).filter(Appointment.doctor_id == doctor.id)
    query = apply_appointment_filters(query, status_filter, start_date, end_date)
    return _newest_first(query).all()


def list_patient_appointments(
    db: Session,
    patient: User,
    status_filter: AppointmentStatus | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[Appointment]:
    query = _base_query(db).filter(Appointment.patient_id == patient.id)
    query = apply_appointment_filters(query, status_filter, start_date, end_date)
    return _newest_first(query).all()


def list_all_appointments(
    db: Session,
    status_filter: AppointmentStatus | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    doctor_id: int | None = None,
    patient_id: int | None = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Appointment], int]:
    query = apply_appointment_filters(
        db.query(Appointment).filter(Appointment.deleted_at.is_(None)),
        status_filter,
        start_date,
        end_date,
    )
    if doctor_id is not None:
        query = query.filter(Appointment.doctor_id == doctor_id)
    if patient_id is not None:
        query = query.filter(Appointment.patient_id == patient_id)

    total = query.count()
    appointments = _newest_first(query.options(
        joinedload(Appointment.patient),
        joinedload(Appointment.doctor).joinedload(Doctor.user),
    )).offset((page - 1) * limit).limit(limit).all()
    return appointments, total
