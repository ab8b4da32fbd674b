from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from doctor_booking.auth.dependencies import require_doctor
from doctor_booking.database import get_db
from doctor_booking.models.enums import AppointmentStatus, Specialization
from doctor_booking.models.user import User
from doctor_booking.schemas.appointments import (
    AppointmentListResponse,
    AppointmentResponse,
    UpdateAppointmentStatusRequest,
)
from doctor_booking.schemas.doctors import (
    AvailabilityResponse,
    CreateScheduleRequest,
    DashboardResponse,
    DoctorListResponse,
    DoctorProfileResponse,
    DoctorSummaryResponse,
    ScheduleListResponse,
    ScheduleResponse,
)
from doctor_booking.services import appointments, availability, doctors, lifecycle

router = APIRouter(tags=['doctors'])

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


# Doctor portal. Declared before /{doctor_id} so the static paths win.

@router.get('/dashboard', response_model=DashboardResponse)
def get_dashboard(current_user: User = Depends(require_doctor), db: Session = Depends(get_db)):
    doctor = doctors.get_doctor_for_user(db, current_user)
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    today, upcoming = doctors.get_dashboard_appointments(db, doctor, now)

    return DashboardResponse(
        doctor_id=doctor.id,
        name=current_user.name,
        today_appointments=[AppointmentResponse.from_appointment(item) for item in today],
        upcoming_appointments=[AppointmentResponse.from_appointment(item) for item in upcoming],
    )


@router.post('/schedules', response_model=ScheduleResponse, status_code=status.HTTP_201_CREATED)
def create_schedule(
    data: CreateScheduleRequest,
    current_user: User = Depends(require_doctor),
    db: Session = Depends(get_db),
):
    doctor = doctors.get_doctor_for_user(db, current_user)
    return doctors.create_schedule(db, doctor, data)


@router.get('/schedules', response_model=ScheduleListResponse)
def list_schedules(current_user: User = Depends(require_doctor), db: Session = Depends(get_db)):
    doctor = doctors.get_doctor_for_user(db, current_user)
    schedules = doctors.list_schedules(db, doctor)
    return ScheduleListResponse(
        data=[ScheduleResponse.model_validate(schedule) for schedule in schedules],
        total=len(schedules),
    )


@router.get('/appointments', response_model=AppointmentListResponse)
def list_doctor_appointments(
    status_filter: AppointmentStatus | None = Query(default=None, alias='status'),
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    current_user: User = Depends(require_doctor),
    db: Session = Depends(get_db),
):
    doctor = doctors.get_doctor_for_user(db, current_user)
    items = appointments.list_doctor_appointments(db, doctor, status_filter, start_date, end_date)
    return AppointmentListResponse(
        data=[AppointmentResponse.from_appointment(item) for item in items],
        total=len(items),
    )


@router.put('/appointments/{appointment_id}/status', response_model=AppointmentResponse)
def update_appointment_status(
    appointment_id: int,
    data: UpdateAppointmentStatusRequest,
    current_user: User = Depends(require_doctor),
    db: Session = Depends(get_db),
):
    doctor = doctors.get_doctor_for_user(db, current_user)
    appointment = lifecycle.update_status_by_doctor(
        db,
        doctor,
        appointment_id,
        data.status,
        cancellation_reason=data.cancellation_reason,
    )
    return AppointmentResponse.from_appointment(appointment)


# Public directory

@router.get('', response_model=DoctorListResponse)
def list_doctors(
    specialization: Specialization | None = Query(default=None),
    name: str | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    items, total = doctors.list_doctors(db, specialization, name, page, limit)
    return DoctorListResponse(
        data=[DoctorSummaryResponse.from_doctor(doctor) for doctor in items],
        total=total,
        page=page,
        limit=limit,
    )


@router.get('/{doctor_id}', response_model=DoctorProfileResponse)
def get_doctor_profile(doctor_id: int, db: Session = Depends(get_db)):
    doctor = doctors.get_doctor_or_404(db, doctor_id)
    return DoctorProfileResponse.from_doctor(doctor)


@router.get('/{doctor_id}/availability', response_model=AvailabilityResponse)
def get_doctor_availability(
    doctor_id: int,
    slot_date: str | None = Query(default=None, alias='date'),
    db: Session = Depends(get_db),
):
    day = availability.parse_slot_date(slot_date)
    slots = availability.list_available_slots(db, doctor_id, day)
    return AvailabilityResponse(doctor_id=doctor_id, date=day, available_slots=slots)
