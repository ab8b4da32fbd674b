"""Registration, login and profile management.

Passwords are hashed here, before anything reaches the session; the models
only ever see ``hashed_password``.
"""

import logging
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from doctor_booking.auth.passwords import hash_password, verify_password
from doctor_booking.models.doctor import Doctor
from doctor_booking.models.enums import UserRole
from doctor_booking.models.user import User
from doctor_booking.schemas.users import RegisterRequest, UpdateProfileRequest

logger = logging.getLogger(__name__)

PROFILE_FIELDS = (
    'name',
    'phone',
    'date_of_birth',
    'gender',
    'address',
    'city',
    'state',
    'country',
    'postal_code',
    'profile_picture',
)


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email, User.deleted_at.is_(None)).first()


def register_user(db: Session, data: RegisterRequest) -> User:
    if get_user_by_email(db, data.email) is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Email already registered')

    user = User(
        name=data.name,
        email=data.email,
        hashed_password=hash_password(data.password),
        role=data.role,
        active=True,
    )

    try:
        db.add(user)
        if data.role == UserRole.DOCTOR:
            db.flush()
            db.add(Doctor(
                user_id=user.id,
                specialization=data.specialization,
                qualification=(data.qualification or '').strip(),
                experience=data.experience,
                bio=data.bio,
                consultation_fee=data.consultation_fee,
                available=True,
            ))
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Email already registered') from exc
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(user)

    logger.info('Registered %s account %s', user.role.value, user.id)
    return user


def authenticate_user(db: Session, email: str, password: str) -> User:
    user = get_user_by_email(db, email)
    if user is None or not verify_password(password, user.hashed_password):
        logger.info('Failed login attempt for %s', email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail='Invalid email or password',
            headers={'WWW-Authenticate': 'Bearer'},
        )

    if not user.active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail='Account is deactivated')

    user.last_login = datetime.now(timezone.utc).replace(tzinfo=None)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(user)
    return user


def update_profile(db: Session, user: User, data: UpdateProfileRequest) -> User:
    """Apply every requested change in one transaction or none of them."""
    changes = data.model_dump(exclude_unset=True)

    try:
        if data.email and data.email != user.email:
            if get_user_by_email(db, data.email) is not None:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Email already in use')
            user.email = data.email

        if data.password:
            user.hashed_password = hash_password(data.password)

        for field in PROFILE_FIELDS:
            if field in changes and changes[field] is not None:
                setattr(user, field, changes[field])

        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Email already in use') from exc
    except (HTTPException, SQLAlchemyError):
        db.rollback()
        raise
    db.refresh(user)

    logger.info('User %s updated their profile', user.id)
    return user


def list_users(
    db: Session,
    role: UserRole | None = None,
    active: bool | None = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[User], int]:
    query = db.query(User).filter(User.deleted_at.is_(None))
    if role is not None:
        query = query.filter(User.role == role)
    if active is not None:
        query = query.filter(User.active.is_(active))

    total = query.count()
    users = query.order_by(User.id.asc()).offset((page - 1) * limit).limit(limit).all()
    return users, total


def set_user_active(db: Session, user_id: int, active: bool) -> User:
    user = db.query(User).filter(User.id == user_id, User.deleted_at.is_(None)).first()
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='User not found')

    user.active = active
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(user)

    logger.info('User %s marked %s', user.id, 'active' if active else 'inactive')
    return user
