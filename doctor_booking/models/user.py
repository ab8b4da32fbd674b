"""User model definitions."""

from sqlalchemy import Boolean, Column, Date, DateTime, Integer, String, Text, func
from sqlalchemy.orm import relationship

from doctor_booking.database import Base
from doctor_booking.models.enums import UserRole, enum_column_type


class User(Base):
    """Represents an application user (patient, doctor or admin)."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(enum_column_type(UserRole), nullable=False, default=UserRole.PATIENT)
    active = Column(Boolean, nullable=False, default=True)

    phone = Column(String(20))
    date_of_birth = Column(Date)
    gender = Column(String(10))
    address = Column(Text)
    city = Column(String(100))
    state = Column(String(100))
    country = Column(String(100))
    postal_code = Column(String(20))
    profile_picture = Column(String(255))
    last_login = Column(DateTime)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
    deleted_at = Column(DateTime, index=True)

    doctor_profile = relationship("Doctor", back_populates="user", uselist=False)
