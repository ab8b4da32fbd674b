from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from doctor_booking.auth import jwt_handler
from doctor_booking.database import get_db
from doctor_booking.models.user import User
from doctor_booking.schemas.users import AuthResponse, AuthUser, LoginRequest, RegisterRequest
from doctor_booking.services import accounts

router = APIRouter(tags=['auth'])


def build_auth_response(user: User) -> AuthResponse:
    token = jwt_handler.create_access_token(
        user_id=user.id,
        email=user.email,
        role=user.role.value,
    )
    return AuthResponse(token=token, user=AuthUser.model_validate(user))


@router.post('/register', response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    user = accounts.register_user(db, data)
    return build_auth_response(user)


@router.post('/login', response_model=AuthResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    user = accounts.authenticate_user(db, data.email, data.password)
    return build_auth_response(user)
