from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from doctor_booking.auth.dependencies import require_admin
from doctor_booking.database import get_db
from doctor_booking.models.enums import AppointmentStatus, UserRole
from doctor_booking.models.user import User
from doctor_booking.schemas.appointments import AppointmentListResponse, AppointmentResponse
from doctor_booking.schemas.users import UpdateUserStatusRequest, UserListResponse, UserResponse
from doctor_booking.services import accounts, appointments

router = APIRouter(tags=['admin'])

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


@router.get('/users', response_model=UserListResponse)
def list_users(
    role: UserRole | None = Query(default=None),
    active: bool | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    users, total = accounts.list_users(db, role, active, page, limit)
    return UserListResponse(
        data=[UserResponse.model_validate(user) for user in users],
        total=total,
        page=page,
        limit=limit,
    )


@router.put('/users/{user_id}/status', response_model=UserResponse)
def update_user_status(
    user_id: int,
    data: UpdateUserStatusRequest,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = accounts.set_user_active(db, user_id, data.active)
    return UserResponse.model_validate(user)


@router.get('/appointments', response_model=AppointmentListResponse)
def list_appointments(
    status_filter: AppointmentStatus | None = Query(default=None, alias='status'),
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    doctor_id: int | None = Query(default=None),
    patient_id: int | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    items, total = appointments.list_all_appointments(
        db,
        status_filter=status_filter,
        start_date=start_date,
        end_date=end_date,
        doctor_id=doctor_id,
        patient_id=patient_id,
        page=page,
        limit=limit,
    )
    return AppointmentListResponse(
        data=[AppointmentResponse.from_appointment(item) for item in items],
        total=total,
        page=page,
        limit=limit,
    )
