"""Bookable slot calculation for a doctor on one calendar day.

Slots are a fixed 30-minute grid between 09:00 and 17:00. A slot is taken when
any appointment of the doctor starts at exactly the same ``HH:MM``; the
doctor's declared ``Schedule`` rows are not consulted.
"""

import logging
from datetime import date, datetime, time, timedelta, timezone

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from doctor_booking.models.appointment import Appointment
from doctor_booking.services.doctors import get_doctor_or_404

logger = logging.getLogger(__name__)

DAY_START_TIME = time(9, 0)
DAY_END_TIME = time(17, 0)
SLOT_DURATION_MINUTES = 30
SLOT_FORMAT = '%H:%M'
DATE_FORMAT = '%Y-%m-%d'


def _invalid_date() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail='Invalid date format. Use YYYY-MM-DD',
    )


def parse_slot_date(value: str | None) -> date:
    if value is None or not value.strip():
        return datetime.now(timezone.utc).date()

    raw = value.strip()
    try:
        parsed = datetime.strptime(raw, DATE_FORMAT).date()
    except ValueError as exc:
        raise _invalid_date() from exc

    # strptime also accepts unpadded fields such as 2025-1-5
    if parsed.strftime(DATE_FORMAT) != raw:
        raise _invalid_date()
    return parsed


def generate_day_slots(day: date) -> list[datetime]:
    slots: list[datetime] = []
    current = datetime.combine(day, DAY_START_TIME)
    day_end = datetime.combine(day, DAY_END_TIME)

    while current < day_end:
        slots.append(current)
        current += timedelta(minutes=SLOT_DURATION_MINUTES)

    return slots


def get_booked_slot_times(db: Session, doctor_id: int, day: date) -> set[str]:
    day_start = datetime.combine(day, time.min)
    day_end = day_start + timedelta(days=1)

    booked_starts = db.query(Appointment.start_time).filter(
        Appointment.doctor_id == doctor_id,
        Appointment.start_time >= day_start,
        Appointment.start_time < day_end,
        Appointment.deleted_at.is_(None),
    ).all()

    return {start_time.strftime(SLOT_FORMAT) for (start_time,) in booked_starts}


def list_available_slots(db: Session, doctor_id: int, day: date) -> list[str]:
    get_doctor_or_404(db, doctor_id)

    booked = get_booked_slot_times(db, doctor_id, day)
    available = [
        slot.strftime(SLOT_FORMAT)
        for slot in generate_day_slots(day)
        if slot.strftime(SLOT_FORMAT) not in booked
    ]

    logger.debug('Doctor %s on %s: %d slots open', doctor_id, day, len(available))
    return available
