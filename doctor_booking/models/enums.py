"""Closed value sets shared by models, schemas and services."""

from enum import Enum

from sqlalchemy import Enum as SqlEnum


class UserRole(str, Enum):
    PATIENT = "patient"
    DOCTOR = "doctor"
    ADMIN = "admin"


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class Specialization(str, Enum):
    CARDIOLOGY = "cardiology"
    DERMATOLOGY = "dermatology"
    NEUROLOGY = "neurology"
    PEDIATRICS = "pediatrics"
    ORTHOPEDICS = "orthopedics"
    OPHTHALMOLOGY = "ophthalmology"
    PSYCHIATRY = "psychiatry"


def enum_column_type(enum_class: type[Enum], length: int = 20) -> SqlEnum:
    """Store enum values (not member names) in a plain VARCHAR column."""
    return SqlEnum(
        enum_class,
        native_enum=False,
        length=length,
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
    )
