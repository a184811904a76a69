import pytest

from hr_portal import create_app, db as _db
from hr_portal.models.payroll import Employee


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def employee(db):
    emp = Employee(employee_id_number='EMP-001', first_name='Elena', last_name='Torres',
                   position='Prep Cook', hourly_rate=5875, status='Active')
    db.session.add(emp)
    db.session.commit()
    return emp
