"""Appointment status transitions driven by doctors and patients."""

import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from doctor_booking.models.appointment import Appointment
from doctor_booking.models.doctor import Doctor
from doctor_booking.models.enums import AppointmentStatus
from doctor_booking.models.user import User

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    AppointmentStatus.PENDING: frozenset({
        AppointmentStatus.CONFIRMED,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.COMPLETED,
    }),
    AppointmentStatus.CONFIRMED: frozenset({
        AppointmentStatus.CANCELLED,
        AppointmentStatus.COMPLETED,
    }),
    AppointmentStatus.CANCELLED: frozenset(),
    AppointmentStatus.COMPLETED: frozenset(),
}


def can_transition(current: AppointmentStatus, target: AppointmentStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def is_terminal(current: AppointmentStatus) -> bool:
    return not ALLOWED_TRANSITIONS[current]


def _save_transition(db: Session, appointment: Appointment) -> Appointment:
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(appointment)
    return appointment


def update_status_by_doctor(
    db: Session,
    doctor: Doctor,
    appointment_id: int,
    target: AppointmentStatus,
    cancellation_reason: str | None = None,
) -> Appointment:
    appointment = db.query(Appointment).filter(
        Appointment.id == appointment_id,
        Appointment.doctor_id == doctor.id,
        Appointment.deleted_at.is_(None),
    ).first()
    if appointment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Appointment not found')

    current = appointment.status
    if not can_transition(current, target):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f'Cannot change appointment status from {current.value} to {target.value}',
        )

    appointment.status = target
    if target == AppointmentStatus.CANCELLED and cancellation_reason:
        appointment.cancellation_reason = cancellation_reason

    _save_transition(db, appointment)
    logger.info('Doctor %s moved appointment %s from %s to %s', doctor.id, appointment.id, current.value, target.value)
    return appointment


def cancel_by_patient(
    db: Session,
    patient: User,
    appointment_id: int,
    reason: str | None = None,
) -> Appointment:
    appointment = db.query(Appointment).filter(
        Appointment.id == appointment_id,
        Appointment.patient_id == patient.id,
        Appointment.deleted_at.is_(None),
    ).first()
    if appointment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Appointment not found')

    if appointment.status == AppointmentStatus.CANCELLED:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Appointment is already cancelled')

    if is_terminal(appointment.status):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f'{appointment.status.value.capitalize()} appointments cannot be cancelled',
        )

    appointment.status = AppointmentStatus.CANCELLED
    if reason:
        appointment.cancellation_reason = reason

    _save_transition(db, appointment)
    logger.info('Patient %s cancelled appointment %s', patient.id, appointment.id)
    return appointment
