from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from doctor_booking.models.appointment import Appointment
from doctor_booking.models.enums import AppointmentStatus

MAX_APPOINTMENT_TEXT_LENGTH = 2000
DOCTOR_SETTABLE_STATUSES = (
    AppointmentStatus.CONFIRMED,
    AppointmentStatus.CANCELLED,
    AppointmentStatus.COMPLETED,
)


def normalize_appointment_text(value: str | None) -> str | None:
    if value is None:
        return None

    normalized = value.strip()
    if not normalized:
        return None

    if len(normalized) > MAX_APPOINTMENT_TEXT_LENGTH:
        raise ValueError(f'Text must be {MAX_APPOINTMENT_TEXT_LENGTH} characters or fewer.')

    return normalized


class BookAppointmentRequest(BaseModel):
    doctor_id: int = Field(gt=0)
    scheduled_at: datetime
    notes: str | None = None
    reason: str | None = None

    @field_validator('notes', 'reason')
    @classmethod
    def validate_text(cls, value: str | None) -> str | None:
        return normalize_appointment_text(value)


class UpdateAppointmentStatusRequest(BaseModel):
    status: AppointmentStatus
    cancellation_reason: str | None = None

    @field_validator('status')
    @classmethod
    def validate_status(cls, value: AppointmentStatus) -> AppointmentStatus:
        if value not in DOCTOR_SETTABLE_STATUSES:
            raise ValueError('Status must be one of confirmed, cancelled, completed.')
        return value

    @field_validator('cancellation_reason')
    @classmethod
    def validate_reason(cls, value: str | None) -> str | None:
        return normalize_appointment_text(value)


class CancelAppointmentRequest(BaseModel):
    reason: str | None = None

    @field_validator('reason')
    @classmethod
    def validate_reason(cls, value: str | None) -> str | None:
        return normalize_appointment_text(value)


class AppointmentResponse(BaseModel):
    id: int
    patient_id: int
    patient_name: str | None = None
    doctor_id: int
    doctor_name: str | None = None
    appointment_date: datetime
    start_time: datetime
    end_time: datetime
    status: AppointmentStatus
    reason: str | None = None
    notes: str | None = None
    is_follow_up: bool = False
    follow_up_notes: str | None = None
    is_paid: bool = False
    payment_amount: float = 0
    payment_reference: str | None = None
    cancellation_reason: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_appointment(cls, appointment: Appointment) -> 'AppointmentResponse':
        patient = appointment.patient
        doctor = appointment.doctor
        return cls(
            id=appointment.id,
            patient_id=appointment.patient_id,
            patient_name=patient.name if patient else None,
            doctor_id=appointment.doctor_id,
            doctor_name=doctor.user.name if doctor and doctor.user else None,
            appointment_date=appointment.appointment_date,
            start_time=appointment.start_time,
            end_time=appointment.end_time,
            status=appointment.status,
            reason=appointment.reason,
            notes=appointment.notes,
            is_follow_up=bool(appointment.is_follow_up),
            follow_up_notes=appointment.follow_up_notes,
            is_paid=bool(appointment.is_paid),
            payment_amount=appointment.payment_amount or 0,
            payment_reference=appointment.payment_reference,
            cancellation_reason=appointment.cancellation_reason,
            created_at=appointment.created_at,
            updated_at=appointment.updated_at,
        )


class AppointmentListResponse(BaseModel):
    data: list[AppointmentResponse]
    total: int
    page: int | None = None
    limit: int | None = None


class MessageResponse(BaseModel):
    message: str
