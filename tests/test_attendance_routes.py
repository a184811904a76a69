def _post(client, path, **body):
    return client.post(path, json=body)


def test_full_clock_session(client, employee):
    # 08:00 Manila is 00:00 UTC
    resp = _post(client, '/attendance/clock-in', employee_id=employee.id, timestamp='2025-01-06 00:00:00')
    assert resp.status_code == 201
    assert resp.get_json()['work_date'] == '2025-01-06'
    assert resp.get_json()['status'] == 'clocked_in'

    resp = _post(client, '/attendance/clock-in', employee_id=employee.id, timestamp='2025-01-06 00:05:00')
    assert resp.status_code == 400
    assert resp.get_json()['message'] == 'Already clocked in.'

    resp = _post(client, '/attendance/break-start', employee_id=employee.id,
                 timestamp='2025-01-06 04:00:00', break_type='meal')
    assert resp.status_code == 201
    assert resp.get_json()['status'] == 'on_break'

    resp = _post(client, '/attendance/break-start', employee_id=employee.id, timestamp='2025-01-06 04:10:00')
    assert resp.status_code == 400
    assert resp.get_json()['message'] == 'Already on break.'

    resp = _post(client, '/attendance/clock-out', employee_id=employee.id, timestamp='2025-01-06 04:30:00')
    assert resp.status_code == 400
    assert resp.get_json()['message'] == 'Please end your break before clocking out.'

    resp = _post(client, '/attendance/break-end', employee_id=employee.id, timestamp='2025-01-06 05:00:00')
    assert resp.status_code == 200
    data = resp.get_json()
    assert data['total_break_minutes'] == 60
    assert data['breaks'][0]['break_minutes'] == 60
    assert data['breaks'][0]['break_type'] == 'meal'

    resp = _post(client, '/attendance/clock-out', employee_id=employee.id, timestamp='2025-01-06 10:00:00')
    assert resp.status_code == 200
    data = resp.get_json()
    assert data['status'] == 'clocked_out'
    assert data['total_work_minutes'] == 540
    assert data['overtime_minutes'] == 60

    resp = client.get(f'/attendance/records?employee_id={employee.id}')
    assert resp.status_code == 200
    assert len(resp.get_json()) == 1


def test_work_date_follows_payroll_timezone(client, employee):
    # 17:00 UTC on Jan 5 is 01:00 on Jan 6 in Manila
    resp = _post(client, '/attendance/clock-in', employee_id=employee.id, timestamp='2025-01-05 17:00:00')
    assert resp.get_json()['work_date'] == '2025-01-06'


def test_clock_events_require_an_open_session(client, employee):
    resp = _post(client, '/attendance/clock-out', employee_id=employee.id)
    assert resp.status_code == 400
    assert resp.get_json()['message'] == 'Not clocked in.'

    resp = _post(client, '/attendance/break-start', employee_id=employee.id)
    assert resp.status_code == 400

    resp = _post(client, '/attendance/break-end', employee_id=employee.id)
    assert resp.status_code == 400
    assert resp.get_json()['message'] == 'No active break found.'


def test_clock_out_must_follow_clock_in(client, employee):
    _post(client, '/attendance/clock-in', employee_id=employee.id, timestamp='2025-01-06 08:00:00')
    resp = _post(client, '/attendance/clock-out', employee_id=employee.id, timestamp='2025-01-06 07:00:00')
    assert resp.status_code == 400


def test_invalid_and_unknown_employee(client, employee):
    resp = _post(client, '/attendance/clock-in', timestamp='2025-01-06 08:00:00')
    assert resp.status_code == 400
    assert 'employee_id' in resp.get_json()['errors']

    resp = _post(client, '/attendance/clock-in', employee_id=9999)
    assert resp.status_code == 404
    assert resp.get_json()['message'] == 'Employee not found.'

    resp = client.get('/attendance/records')
    assert resp.status_code == 400
