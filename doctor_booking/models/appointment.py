"""Appointment model definitions."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from doctor_booking.database import Base
from doctor_booking.models.enums import AppointmentStatus, enum_column_type


class Appointment(Base):
    """Represents a patient's booking with a doctor."""
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True)
    patient_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    appointment_date = Column(DateTime, nullable=False, index=True)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    status = Column(enum_column_type(AppointmentStatus), nullable=False, default=AppointmentStatus.PENDING)
    reason = Column(Text)
    notes = Column(Text)
    is_follow_up = Column(Boolean, nullable=False, default=False)
    follow_up_notes = Column(Text)
    is_paid = Column(Boolean, nullable=False, default=False)
    payment_amount = Column(Float, nullable=False, default=0)
    payment_reference = Column(String(255))
    cancellation_reason = Column(Text)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
    deleted_at = Column(DateTime, index=True)

    patient = relationship("User", foreign_keys=[patient_id])
    doctor = relationship("Doctor", back_populates="appointments")

    __table_args__ = (
        UniqueConstraint("doctor_id", "start_time", name="uq_appointments_doctor_start"),
    )
