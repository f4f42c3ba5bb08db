"""Shared fixtures: an app on in-memory SQLite with a fresh schema per test."""
import pytest
from faker import Faker

from app import create_app
from app.extensions import db
from app.services.profiles import create_profile

fake = Faker()

PASSWORD = "correct horse battery staple"


@pytest.fixture
def app():
    app = create_app("config.TestConfig")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def identity(app):
    return app.extensions["identity"]


@pytest.fixture
def email():
    return fake.unique.email()


@pytest.fixture
def make_student(identity):
    """Register an account and record its profile; returns the email."""
    def _make(email=None, name=None):
        email = email or fake.unique.email()
        identity.register(email, PASSWORD)
        create_profile(email, "Computer Science", "2", name or fake.name(), fake.phone_number())
        return email
    return _make


@pytest.fixture
def logged_in(client, make_student):
    """A test client whose session belongs to a student with a profile."""
    email = make_student()
    resp = client.post("/login", data={"username": email, "password": PASSWORD})
    assert resp.status_code == 302
    return email
