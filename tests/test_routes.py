import pytest
from authlib.integrations.base_client import OAuthError
from sqlalchemy.exc import OperationalError

from app.extensions import db, oauth
from app.models import Account, Enrollment, SectionMembership

from .conftest import PASSWORD


def test_home_is_public(client):
    assert client.get("/").status_code == 200


@pytest.mark.parametrize("path", ["/main", "/board", "/signed-up", "/indicate", "/initiate"])
def test_session_routes_redirect_to_login(client, path):
    resp = client.get(path)
    assert resp.status_code == 302
    assert "/login" in resp.headers["Location"]


def test_register_logs_in_and_shows_onboarding(client, email):
    resp = client.post("/register", data={"username": email, "password": PASSWORD})
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/main")
    page = client.get("/main")
    assert b'name="studyYear"' in page.data


def test_register_existing_email_routes_to_login(client, identity, email):
    identity.register(email, PASSWORD)
    resp = client.post("/register", data={"username": email, "password": "other"})
    assert resp.headers["Location"].endswith("/login")
    assert Account.query.count() == 1


def test_bad_login_redirects_back(client, identity, email):
    identity.register(email, PASSWORD)
    wrong_password = client.post("/login", data={"username": email, "password": "nope"})
    unknown_user = client.post("/login", data={"username": "x@example.com", "password": "nope"})
    assert wrong_password.headers["Location"].endswith("/login")
    assert unknown_user.headers["Location"].endswith("/login")


def test_failed_logins_look_the_same(client, identity, email):
    identity.register(email, PASSWORD)
    client.post("/login", data={"username": email, "password": "nope"})
    first = client.get("/login").data
    client.post("/login", data={"username": "x@example.com", "password": "nope"})
    second = client.get("/login").data
    assert first == second


def test_onboarding_then_dashboard(client, identity, email):
    identity.register(email, PASSWORD)
    client.post("/login", data={"username": email, "password": PASSWORD})
    resp = client.post("/info", data={"course": "Physics", "studyYear": "1",
                                      "name": "Marie Curie", "phone": "123"})
    assert resp.headers["Location"].endswith("/main")
    page = client.get("/main")
    assert b"Marie Curie" in page.data
    assert b"Physics" in page.data


def test_group_routes_without_profile_go_to_onboarding(client, identity, email):
    identity.register(email, PASSWORD)
    client.post("/login", data={"username": email, "password": PASSWORD})
    resp = client.post("/submit-modules", data={"year": "2", "semester": "1",
                                                "modules": ["CS101"]})
    assert resp.headers["Location"].endswith("/main")
    assert Enrollment.query.count() == 0
    for path in ("/board", "/signed-up", "/indicate", "/initiate"):
        resp = client.get(path)
        assert resp.status_code == 302
        assert resp.headers["Location"].endswith("/main")


def test_submit_modules_ignores_blank_inputs(client, logged_in):
    resp = client.post("/submit-modules", data={"year": "2", "semester": "1",
                                                "modules": ["CS101", "", "CS102"]})
    assert resp.headers["Location"].endswith("/main")
    codes = sorted(e.module_code for e in Enrollment.query.filter_by(email=logged_in))
    assert codes == ["CS101", "CS102"]


def test_start_group_and_board(client, logged_in):
    client.post("/submit-modules", data={"year": "2", "semester": "1", "modules": ["CS101"]})
    resp = client.post("/start-group", data={"semester": "1", "module": "CS101", "section": "A"})
    assert resp.headers["Location"].endswith("/board")
    board = client.get("/board")
    assert board.status_code == 200
    assert b"CS101" in board.data
    member = SectionMembership.query.filter_by(email=logged_in).one()
    assert (member.module_code, member.section_code, member.study_semester) == ("CS101", "A", 1)


def test_join_group_with_code(client, logged_in):
    resp = client.post("/join-group", data={"join": "CS101 A 2025 1"})
    assert resp.headers["Location"].endswith("/board")
    roster = client.get("/signed-up")
    assert b"CS101 A 2025 1" in roster.data


def test_join_group_with_malformed_code(client, logged_in):
    resp = client.post("/join-group", data={"join": "CS101 A 2025"})
    assert resp.headers["Location"].endswith("/initiate")
    assert SectionMembership.query.count() == 0


def test_logout_clears_session(client, logged_in):
    resp = client.get("/logout")
    assert resp.headers["Location"].endswith("/")
    assert client.get("/main").status_code == 302


def test_google_callback_logs_in_and_creates_one_account(client, monkeypatch, email):
    monkeypatch.setattr(oauth.google, "authorize_access_token",
                        lambda **kwargs: {"userinfo": {"email": email}})
    for _ in range(2):
        resp = client.get("/auth/google/secrets?code=abc&state=xyz")
        assert resp.headers["Location"].endswith("/main")
    assert Account.query.filter_by(email=email).count() == 1
    assert client.get("/main").status_code == 200


def test_google_callback_failure_goes_to_login(client, monkeypatch):
    def denied(**kwargs):
        raise OAuthError(error="access_denied")
    monkeypatch.setattr(oauth.google, "authorize_access_token", denied)
    resp = client.get("/auth/google/secrets?error=access_denied")
    assert resp.headers["Location"].endswith("/login")
    assert Account.query.count() == 0


def test_store_failure_renders_generic_error(client, logged_in, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection refused"))
    monkeypatch.setattr(db.session.registry(), "get", broken)
    resp = client.get("/main")
    assert resp.status_code == 500
    assert b"Something went wrong" in resp.data
    assert b"connection refused" not in resp.data


HUGE_SEMESTER = "99999999999999999999"


def test_join_group_with_out_of_range_semester(client, logged_in):
    resp = client.post("/join-group", data={"join": f"CS101 A 2025 {HUGE_SEMESTER}"})
    assert resp.headers["Location"].endswith("/initiate")
    assert SectionMembership.query.count() == 0


@pytest.mark.parametrize("semester", ["0", "1000", HUGE_SEMESTER])
def test_start_group_with_out_of_range_semester(client, logged_in, semester):
    resp = client.post("/start-group", data={"semester": semester, "module": "CS101",
                                             "section": "A"})
    assert resp.headers["Location"].endswith("/initiate")
    assert SectionMembership.query.count() == 0


@pytest.mark.parametrize("semester", ["0", "1000", HUGE_SEMESTER])
def test_submit_modules_with_out_of_range_semester(client, logged_in, semester):
    resp = client.post("/submit-modules", data={"year": "2", "semester": semester,
                                                "modules": ["CS101"]})
    assert resp.headers["Location"].endswith("/indicate")
    assert Enrollment.query.count() == 0
