from datetime import date, datetime

from pydantic import BaseModel, field_validator, model_validator

from doctor_booking.models.doctor import Doctor
from doctor_booking.models.enums import Specialization
from doctor_booking.schemas.appointments import AppointmentResponse

SCHEDULE_TIME_FORMAT = '%H:%M'


class DoctorSummaryResponse(BaseModel):
    id: int
    name: str
    specialization: Specialization
    qualification: str
    experience: int
    bio: str | None = None
    consultation_fee: float

    @classmethod
    def from_doctor(cls, doctor: Doctor) -> 'DoctorSummaryResponse':
        return cls(
            id=doctor.id,
            name=doctor.user.name,
            specialization=doctor.specialization,
            qualification=doctor.qualification or '',
            experience=doctor.experience or 0,
            bio=doctor.bio,
            consultation_fee=doctor.consultation_fee or 0,
        )


class DoctorProfileResponse(DoctorSummaryResponse):
    email: str

    @classmethod
    def from_doctor(cls, doctor: Doctor) -> 'DoctorProfileResponse':
        summary = DoctorSummaryResponse.from_doctor(doctor)
        return cls(**summary.model_dump(), email=doctor.user.email)


class DoctorDetailsResponse(BaseModel):
    id: int
    user_id: int
    specialization: Specialization
    qualification: str
    experience: int
    bio: str | None = None
    consultation_fee: float
    available: bool
    average_rating: float
    total_ratings: int
    hospital_affiliation: str | None = None
    languages: str | None = None
    education: str | None = None
    awards: str | None = None

    class Config:
        from_attributes = True


class DoctorListResponse(BaseModel):
    data: list[DoctorSummaryResponse]
    total: int
    page: int
    limit: int


class AvailabilityResponse(BaseModel):
    doctor_id: int
    date: date
    available_slots: list[str]


def parse_schedule_time(value: str, label: str) -> str:
    try:
        parsed = datetime.strptime(value.strip(), SCHEDULE_TIME_FORMAT)
    except ValueError as exc:
        raise ValueError(f'Invalid {label} format. Use HH:MM') from exc
    return parsed.strftime(SCHEDULE_TIME_FORMAT)


class CreateScheduleRequest(BaseModel):
    date: date
    start_time: str
    end_time: str

    @field_validator('start_time')
    @classmethod
    def validate_start_time(cls, value: str) -> str:
        return parse_schedule_time(value, 'start time')

    @field_validator('end_time')
    @classmethod
    def validate_end_time(cls, value: str) -> str:
        return parse_schedule_time(value, 'end time')

    @model_validator(mode='after')
    def validate_range(self) -> 'CreateScheduleRequest':
        # zero-padded HH:MM strings order lexicographically
        if self.end_time <= self.start_time:
            raise ValueError('End time must be after start time')
        return self


class ScheduleResponse(BaseModel):
    id: int
    doctor_id: int
    date: date
    start_time: str
    end_time: str
    is_available: bool

    class Config:
        from_attributes = True


class ScheduleListResponse(BaseModel):
    data: list[ScheduleResponse]
    total: int
    page: int | None = None
    limit: int | None = None


class DashboardResponse(BaseModel):
    doctor_id: int
    name: str
    today_appointments: list[AppointmentResponse]
    upcoming_appointments: list[AppointmentResponse]
