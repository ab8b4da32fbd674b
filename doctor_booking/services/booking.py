import logging
from datetime import datetime, timedelta, timezone

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from doctor_booking.models.appointment import Appointment
from doctor_booking.models.enums import AppointmentStatus
from doctor_booking.models.user import User
from doctor_booking.schemas.appointments import BookAppointmentRequest
from doctor_booking.services.availability import SLOT_DURATION_MINUTES
from doctor_booking.services.doctors import get_doctor_or_404

logger = logging.getLogger(__name__)

APPOINTMENT_DURATION = timedelta(minutes=SLOT_DURATION_MINUTES)
SLOT_TAKEN_DETAIL = 'Doctor is not available at the requested time'


def normalize_scheduled_at(value: datetime) -> datetime:
    """Store timestamps as naive UTC."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def find_conflicting_appointment(db: Session, doctor_id: int, start_time: datetime) -> Appointment | None:
    return db.query(Appointment).filter(
        Appointment.doctor_id == doctor_id,
        Appointment.start_time == start_time,
        Appointment.deleted_at.is_(None),
    ).first()


def book_appointment(db: Session, patient: User, data: BookAppointmentRequest) -> Appointment:
    doctor = get_doctor_or_404(db, data.doctor_id)
    start_time = normalize_scheduled_at(data.scheduled_at)

    # Not atomic with the insert below; uq_appointments_doctor_start catches the race.
    if find_conflicting_appointment(db, doctor.id, start_time) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=SLOT_TAKEN_DETAIL)

    appointment = Appointment(
        patient_id=patient.id,
        doctor_id=doctor.id,
        appointment_date=start_time,
        start_time=start_time,
        end_time=start_time + APPOINTMENT_DURATION,
        status=AppointmentStatus.PENDING,
        notes=data.notes,
        reason=data.reason,
    )

    try:
        db.add(appointment)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning('Lost booking race for doctor %s at %s', doctor.id, start_time)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=SLOT_TAKEN_DETAIL) from exc
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(appointment)

    logger.info(
        'Patient %s booked appointment %s with doctor %s at %s',
        patient.id,
        appointment.id,
        doctor.id,
        start_time.isoformat(),
    )
    return appointment
