from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from doctor_booking.models.enums import Specialization, UserRole

MIN_PASSWORD_LENGTH = 8
SELF_REGISTRATION_ROLES = {UserRole.PATIENT, UserRole.DOCTOR}


def normalize_email(value: str) -> str:
    normalized = value.strip().lower()
    local_part, _, domain = normalized.partition('@')
    if not local_part or '.' not in domain or ' ' in normalized:
        raise ValueError('A valid email address is required.')
    return normalized


def normalize_optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip()
    return normalized or None


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: str
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    role: UserRole
    # doctor profile fields
    specialization: Specialization | None = None
    qualification: str | None = None
    experience: int = Field(default=0, ge=0)
    bio: str | None = None
    consultation_fee: float = Field(default=0, ge=0)

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Name is required.')
        return normalized

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return normalize_email(value)

    @field_validator('role')
    @classmethod
    def validate_role(cls, value: UserRole) -> UserRole:
        if value not in SELF_REGISTRATION_ROLES:
            raise ValueError('Role must be patient or doctor.')
        return value

    @model_validator(mode='after')
    def validate_doctor_profile(self) -> 'RegisterRequest':
        if self.role == UserRole.DOCTOR and self.specialization is None:
            raise ValueError('Specialization is required for doctors.')
        return self


class LoginRequest(BaseModel):
    email: str
    password: str = Field(min_length=1)

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return value.strip().lower()


class AuthUser(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    token: str
    user: AuthUser


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole
    active: bool
    phone: str | None = None
    date_of_birth: date | None = None
    gender: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    postal_code: str | None = None
    profile_picture: str | None = None
    last_login: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class UpdateProfileRequest(BaseModel):
    name: str | None = Field(default=None, max_length=100)
    email: str | None = None
    password: str | None = Field(default=None, min_length=MIN_PASSWORD_LENGTH)
    phone: str | None = Field(default=None, max_length=20)
    date_of_birth: date | None = None
    gender: str | None = Field(default=None, max_length=10)
    address: str | None = None
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=100)
    country: str | None = Field(default=None, max_length=100)
    postal_code: str | None = Field(default=None, max_length=20)
    profile_picture: str | None = Field(default=None, max_length=255)

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return normalize_email(value)

    @field_validator('name', 'phone', 'gender', 'address', 'city', 'state', 'country', 'postal_code', 'profile_picture')
    @classmethod
    def strip_text(cls, value: str | None) -> str | None:
        return normalize_optional_text(value)


class UpdateUserStatusRequest(BaseModel):
    active: bool


class UserListResponse(BaseModel):
    data: list[UserResponse]
    total: int
    page: int
    limit: int
