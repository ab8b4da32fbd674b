"""Doctor profile model definitions."""

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from doctor_booking.database import Base
from doctor_booking.models.enums import Specialization, enum_column_type


class Doctor(Base):
    """One-to-one extension of a doctor-role user."""
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    specialization = Column(enum_column_type(Specialization, length=100), nullable=False)
    qualification = Column(String(255), nullable=False, default="")
    experience = Column(Integer, nullable=False, default=0)
    bio = Column(Text)
    consultation_fee = Column(Float, nullable=False, default=0)
    available = Column(Boolean, nullable=False, default=True)
    average_rating = Column(Float, nullable=False, default=0)
    total_ratings = Column(Integer, nullable=False, default=0)
    hospital_affiliation = Column(String(255))
    languages = Column(String(255))
    education = Column(Text)
    awards = Column(Text)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
    deleted_at = Column(DateTime, index=True)

    user = relationship("User", back_populates="doctor_profile")
    schedules = relationship("Schedule", back_populates="doctor")
    appointments = relationship("Appointment", back_populates="doctor")
