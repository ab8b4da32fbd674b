from datetime import datetime

import pytest
from fastapi import HTTPException

from doctor_booking.models.enums import AppointmentStatus, UserRole
from doctor_booking.routes.admin_routes import list_appointments, list_users, update_user_status
from doctor_booking.schemas.users import UpdateUserStatusRequest


@pytest.fixture
def admin(create_user):
    return create_user(email='admin@example.com', role=UserRole.ADMIN, name='Admin User')


def test_list_users_filters_by_role_and_paginates(db_session, admin, create_user, create_doctor) -> None:
    for index in range(3):
        create_user(email=f'patient{index}@example.com')
    create_doctor()

    response = list_users(role=UserRole.PATIENT, active=None, page=1, limit=2, current_user=admin, db=db_session)

    assert response.total == 3
    assert len(response.data) == 2
    assert all(user.role == UserRole.PATIENT for user in response.data)
    assert response.page == 1
    assert response.limit == 2


def test_list_users_filters_by_active_flag(db_session, admin, create_user) -> None:
    create_user(email='on@example.com')
    inactive = create_user(email='off@example.com', active=False)

    response = list_users(role=None, active=False, page=1, limit=10, current_user=admin, db=db_session)

    assert [user.id for user in response.data] == [inactive.id]


def test_list_users_never_exposes_password_hash(client, admin, auth_headers) -> None:
    response = client.get('/api/v1/admin/users', headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.json()['page'] == 1
    assert response.json()['limit'] == 10
    assert 'hashed_password' not in response.json()['data'][0]


def test_deactivated_user_can_no_longer_authenticate(client, admin, create_user, auth_headers) -> None:
    patient = create_user()
    headers = auth_headers(patient)

    update = client.put(
        f'/api/v1/admin/users/{patient.id}/status',
        json={'active': False},
        headers=auth_headers(admin),
    )
    blocked = client.get('/api/v1/patients/appointments', headers=headers)
    login = client.post('/api/v1/auth/login', json={'email': patient.email, 'password': 'password123'})

    assert update.status_code == 200
    assert update.json()['active'] is False
    assert blocked.status_code == 403
    assert blocked.json() == {'error': 'Account is deactivated'}
    assert login.status_code == 403


def test_update_user_status_unknown_user(db_session, admin) -> None:
    with pytest.raises(HTTPException) as exception_info:
        update_user_status(999, UpdateUserStatusRequest(active=True), current_user=admin, db=db_session)

    assert exception_info.value.status_code == 404
    assert exception_info.value.detail == 'User not found'


def test_list_appointments_spans_all_doctors_with_filters(
    db_session,
    admin,
    create_doctor,
    create_user,
    create_appointment,
) -> None:
    first_doctor = create_doctor(email='first@example.com')
    second_doctor = create_doctor(email='second@example.com')
    patient = create_user()
    create_appointment(patient, first_doctor, datetime(2025, 1, 10, 9, 0))
    wanted = create_appointment(patient, second_doctor, datetime(2025, 1, 11, 9, 0), status=AppointmentStatus.CONFIRMED)
    create_appointment(patient, second_doctor, datetime(2025, 1, 12, 9, 0))

    everything = list_appointments(
        status_filter=None,
        start_date=None,
        end_date=None,
        doctor_id=None,
        patient_id=None,
        page=1,
        limit=10,
        current_user=admin,
        db=db_session,
    )
    filtered = list_appointments(
        status_filter=AppointmentStatus.CONFIRMED,
        start_date=None,
        end_date=None,
        doctor_id=second_doctor.id,
        patient_id=patient.id,
        page=1,
        limit=10,
        current_user=admin,
        db=db_session,
    )

    assert everything.total == 3
    assert [item.id for item in filtered.data] == [wanted.id]


def test_list_appointments_total_ignores_page_window(
    db_session,
    admin,
    create_doctor,
    create_user,
    create_appointment,
) -> None:
    doctor = create_doctor()
    patient = create_user()
    for hour in (9, 10, 11):
        create_appointment(patient, doctor, datetime(2025, 1, 10, hour, 0))

    response = list_appointments(
        status_filter=None,
        start_date=None,
        end_date=None,
        doctor_id=None,
        patient_id=None,
        page=2,
        limit=2,
        current_user=admin,
        db=db_session,
    )

    assert response.total == 3
    assert len(response.data) == 1
    assert response.data[0].start_time == datetime(2025, 1, 10, 9, 0)


def test_admin_routes_reject_other_roles(client, create_doctor, create_user, auth_headers) -> None:
    patient = create_user()
    doctor = create_doctor()

    assert client.get('/api/v1/admin/users', headers=auth_headers(patient)).status_code == 403
    assert client.get('/api/v1/admin/appointments', headers=auth_headers(doctor.user)).status_code == 403
