from datetime import date

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from doctor_booking.auth.dependencies import require_patient
from doctor_booking.database import get_db
from doctor_booking.models.enums import AppointmentStatus, Specialization
from doctor_booking.models.user import User
from doctor_booking.routes import doctor_routes
from doctor_booking.schemas.appointments import (
    AppointmentListResponse,
    AppointmentResponse,
    BookAppointmentRequest,
    CancelAppointmentRequest,
    MessageResponse,
)
from doctor_booking.schemas.doctors import AvailabilityResponse, DoctorListResponse
from doctor_booking.services import appointments, booking, lifecycle

router = APIRouter(tags=['patients'])


@router.get('/doctors', response_model=DoctorListResponse)
def list_doctors(
    specialization: Specialization | None = Query(default=None),
    name: str | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=doctor_routes.DEFAULT_PAGE_SIZE, ge=1, le=doctor_routes.MAX_PAGE_SIZE),
    current_user: User = Depends(require_patient),
    db: Session = Depends(get_db),
):
    return doctor_routes.list_doctors(specialization=specialization, name=name, page=page, limit=limit, db=db)


@router.get('/doctors/{doctor_id}/availability', response_model=AvailabilityResponse)
def get_doctor_availability(
    doctor_id: int,
    slot_date: str | None = Query(default=None, alias='date'),
    current_user: User = Depends(require_patient),
    db: Session = Depends(get_db),
):
    return doctor_routes.get_doctor_availability(doctor_id=doctor_id, slot_date=slot_date, db=db)


@router.post('/appointments', response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def book_appointment(
    data: BookAppointmentRequest,
    current_user: User = Depends(require_patient),
    db: Session = Depends(get_db),
):
    appointment = booking.book_appointment(db, current_user, data)
    return AppointmentResponse.from_appointment(appointment)


@router.get('/appointments', response_model=AppointmentListResponse)
def list_my_appointments(
    status_filter: AppointmentStatus | None = Query(default=None, alias='status'),
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    current_user: User = Depends(require_patient),
    db: Session = Depends(get_db),
):
    items = appointments.list_patient_appointments(db, current_user, status_filter, start_date, end_date)
    return AppointmentListResponse(
        data=[AppointmentResponse.from_appointment(item) for item in items],
        total=len(items),
    )


@router.put('/appointments/{appointment_id}/cancel', response_model=MessageResponse)
def cancel_my_appointment(
    appointment_id: int,
    data: CancelAppointmentRequest | None = Body(default=None),
    current_user: User = Depends(require_patient),
    db: Session = Depends(get_db),
):
    reason = data.reason if data else None
    lifecycle.cancel_by_patient(db, current_user, appointment_id, reason=reason)
    return MessageResponse(message='Appointment cancelled successfully')
