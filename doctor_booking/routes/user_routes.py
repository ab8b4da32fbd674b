from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from doctor_booking.auth.dependencies import get_current_user
from doctor_booking.database import get_db
from doctor_booking.models.doctor import Doctor
from doctor_booking.models.enums import UserRole
from doctor_booking.models.user import User
from doctor_booking.schemas.doctors import DoctorDetailsResponse
from doctor_booking.schemas.users import UpdateProfileRequest, UserResponse
from doctor_booking.services import accounts

router = APIRouter(tags=['users'])


class ProfileResponse(BaseModel):
    user: UserResponse
    doctor: DoctorDetailsResponse | None = None


class ProfileUpdateResponse(BaseModel):
    message: str
    user: UserResponse


@router.get('/profile', response_model=ProfileResponse)
def get_profile(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    doctor = None
    if current_user.role == UserRole.DOCTOR:
        doctor = db.query(Doctor).filter(
            Doctor.user_id == current_user.id,
            Doctor.deleted_at.is_(None),
        ).first()

    return ProfileResponse(
        user=UserResponse.model_validate(current_user),
        doctor=DoctorDetailsResponse.model_validate(doctor) if doctor else None,
    )


@router.put('/profile', response_model=ProfileUpdateResponse)
def update_profile(
    data: UpdateProfileRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = accounts.update_profile(db, current_user, data)
    return ProfileUpdateResponse(
        message='Profile updated successfully',
        user=UserResponse.model_validate(user),
    )
