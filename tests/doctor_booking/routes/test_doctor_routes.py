from datetime import date, datetime, timedelta, timezone

import pytest
from fastapi import HTTPException

from doctor_booking.models.enums import AppointmentStatus, Specialization, UserRole
from doctor_booking.models.schedule import Schedule
from doctor_booking.routes.doctor_routes import (
    get_dashboard,
    get_doctor_availability,
    list_doctor_appointments,
    list_doctors,
    update_appointment_status,
)
from doctor_booking.schemas.appointments import UpdateAppointmentStatusRequest


def test_list_doctors_is_public_and_paginated(client, create_doctor) -> None:
    for index in range(3):
        create_doctor(email=f'doc{index}@example.com', name=f'Dr. Number {index}')

    response = client.get('/api/v1/doctors', params={'page': 2, 'limit': 2})

    assert response.status_code == 200
    body = response.json()
    assert body['total'] == 3
    assert body['page'] == 2
    assert body['limit'] == 2
    assert [doctor['name'] for doctor in body['data']] == ['Dr. Number 2']


def test_list_doctors_hides_unavailable_and_matches_partial_name(db_session, create_doctor) -> None:
    create_doctor(email='a@example.com', name='Dr. Alice Grey')
    create_doctor(email='b@example.com', name='Dr. Bob Grey', available=False)
    create_doctor(email='c@example.com', name='Dr. Carol White')

    response = list_doctors(specialization=None, name='grey', page=1, limit=10, db=db_session)

    assert response.total == 1
    assert response.data[0].name == 'Dr. Alice Grey'


def test_list_doctors_filters_by_specialization(db_session, create_doctor) -> None:
    create_doctor(email='a@example.com', specialization=Specialization.PEDIATRICS)
    create_doctor(email='b@example.com', specialization=Specialization.ORTHOPEDICS)

    response = list_doctors(
        specialization=Specialization.ORTHOPEDICS,
        name=None,
        page=1,
        limit=10,
        db=db_session,
    )

    assert [doctor.specialization for doctor in response.data] == [Specialization.ORTHOPEDICS]


def test_list_doctors_rejects_unknown_specialization(client) -> None:
    response = client.get('/api/v1/doctors', params={'specialization': 'astrology'})

    assert response.status_code == 400


def test_get_doctor_profile_includes_contact_email(client, create_doctor) -> None:
    doctor = create_doctor(email='house@example.com', name='Dr. House')

    response = client.get(f'/api/v1/doctors/{doctor.id}')

    assert response.status_code == 200
    body = response.json()
    assert body['name'] == 'Dr. House'
    assert body['email'] == 'house@example.com'
    assert body['specialization'] == 'cardiology'


def test_get_doctor_profile_unknown_id_returns_not_found(client) -> None:
    response = client.get('/api/v1/doctors/999')

    assert response.status_code == 404
    assert response.json() == {'error': 'Doctor not found'}


def test_availability_endpoint_lists_open_slots(client, create_doctor, create_user, create_appointment) -> None:
    doctor = create_doctor()
    create_appointment(create_user(), doctor, datetime(2025, 1, 10, 12, 0))

    response = client.get(f'/api/v1/doctors/{doctor.id}/availability', params={'date': '2025-01-10'})

    assert response.status_code == 200
    body = response.json()
    assert body['doctor_id'] == doctor.id
    assert body['date'] == '2025-01-10'
    assert len(body['available_slots']) == 15
    assert '12:00' not in body['available_slots']


def test_availability_endpoint_rejects_bad_date(client, create_doctor) -> None:
    doctor = create_doctor()

    response = client.get(f'/api/v1/doctors/{doctor.id}/availability', params={'date': '10/01/2025'})

    assert response.status_code == 400
    assert response.json() == {'error': 'Invalid date format. Use YYYY-MM-DD'}


def test_availability_unknown_doctor_is_not_found(db_session) -> None:
    with pytest.raises(HTTPException) as exception_info:
        get_doctor_availability(doctor_id=404, slot_date='2025-01-10', db=db_session)

    assert exception_info.value.status_code == 404


def test_dashboard_splits_today_and_upcoming(db_session, create_doctor, create_user, create_appointment) -> None:
    doctor = create_doctor(name='Dr. Dash')
    patient = create_user()
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    later_today = datetime.combine(now.date(), datetime.min.time()) + timedelta(hours=23, minutes=30)
    next_week = now + timedelta(days=7)
    create_appointment(patient, doctor, later_today)
    create_appointment(patient, doctor, next_week)

    response = get_dashboard(current_user=doctor.user, db=db_session)

    assert response.doctor_id == doctor.id
    assert response.name == 'Dr. Dash'
    assert len(response.today_appointments) == 1
    assert response.today_appointments[0].patient_name == patient.name
    assert next_week in [item.start_time for item in response.upcoming_appointments]


def test_dashboard_requires_doctor_role(client, create_user, auth_headers) -> None:
    patient = create_user()

    response = client.get('/api/v1/doctors/dashboard', headers=auth_headers(patient))

    assert response.status_code == 403


def test_admin_without_doctor_profile_gets_not_found(client, create_user, auth_headers) -> None:
    admin = create_user(email='admin@example.com', role=UserRole.ADMIN)

    response = client.get('/api/v1/doctors/dashboard', headers=auth_headers(admin))

    assert response.status_code == 404
    assert response.json() == {'error': 'Doctor not found'}


def test_create_and_list_schedules(client, db_session, create_doctor, auth_headers) -> None:
    doctor = create_doctor()
    headers = auth_headers(doctor.user)

    created = client.post(
        '/api/v1/doctors/schedules',
        json={'date': '2025-01-13', 'start_time': '09:00', 'end_time': '12:00'},
        headers=headers,
    )
    listed = client.get('/api/v1/doctors/schedules', headers=headers)

    assert created.status_code == 201
    assert created.json()['doctor_id'] == doctor.id
    assert created.json()['is_available'] is True
    assert listed.status_code == 200
    assert listed.json()['total'] == 1
    assert db_session.query(Schedule).filter(Schedule.doctor_id == doctor.id).count() == 1


def test_create_schedule_rejects_inverted_times(client, create_doctor, auth_headers) -> None:
    doctor = create_doctor()

    response = client.post(
        '/api/v1/doctors/schedules',
        json={'date': '2025-01-13', 'start_time': '12:00', 'end_time': '09:00'},
        headers=auth_headers(doctor.user),
    )

    assert response.status_code == 400
    assert 'End time must be after start time' in response.json()['error']


def test_list_doctor_appointments_only_returns_own(db_session, create_doctor, create_user, create_appointment) -> None:
    doctor = create_doctor()
    other_doctor = create_doctor(email='other@example.com')
    patient = create_user()
    own = create_appointment(patient, doctor, datetime(2025, 1, 10, 9, 0))
    create_appointment(patient, other_doctor, datetime(2025, 1, 10, 9, 0))

    response = list_doctor_appointments(
        status_filter=None,
        start_date=None,
        end_date=None,
        current_user=doctor.user,
        db=db_session,
    )

    assert [item.id for item in response.data] == [own.id]
    assert response.total == 1


def test_list_doctor_appointments_filters_by_status(db_session, create_doctor, create_user, create_appointment) -> None:
    doctor = create_doctor()
    patient = create_user()
    create_appointment(patient, doctor, datetime(2025, 1, 10, 9, 0))
    confirmed = create_appointment(patient, doctor, datetime(2025, 1, 10, 9, 30), status=AppointmentStatus.CONFIRMED)

    response = list_doctor_appointments(
        status_filter=AppointmentStatus.CONFIRMED,
        start_date=date(2025, 1, 10),
        end_date=None,
        current_user=doctor.user,
        db=db_session,
    )

    assert [item.id for item in response.data] == [confirmed.id]


def test_update_appointment_status_confirms(db_session, create_doctor, create_user, create_appointment) -> None:
    doctor = create_doctor()
    appointment = create_appointment(create_user(), doctor, datetime(2025, 1, 10, 9, 0))

    response = update_appointment_status(
        appointment.id,
        UpdateAppointmentStatusRequest(status='confirmed'),
        current_user=doctor.user,
        db=db_session,
    )

    assert response.status == AppointmentStatus.CONFIRMED


def test_update_appointment_status_rejects_pending_target(client, create_doctor, create_user, create_appointment, auth_headers) -> None:
    doctor = create_doctor()
    appointment = create_appointment(create_user(), doctor, datetime(2025, 1, 10, 9, 0))

    response = client.put(
        f'/api/v1/doctors/appointments/{appointment.id}/status',
        json={'status': 'pending'},
        headers=auth_headers(doctor.user),
    )

    assert response.status_code == 400


def test_update_appointment_status_on_completed_is_rejected(
    client,
    create_doctor,
    create_user,
    create_appointment,
    auth_headers,
) -> None:
    doctor = create_doctor()
    appointment = create_appointment(
        create_user(),
        doctor,
        datetime(2025, 1, 10, 9, 0),
        status=AppointmentStatus.COMPLETED,
    )

    response = client.put(
        f'/api/v1/doctors/appointments/{appointment.id}/status',
        json={'status': 'cancelled'},
        headers=auth_headers(doctor.user),
    )

    assert response.status_code == 400
    assert response.json() == {'error': 'Cannot change appointment status from completed to cancelled'}
