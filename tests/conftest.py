import pytest

from app import create_app
from models import Skill, User, db
from modules.common import ai


class UpstreamDown(Exception):
    pass


@pytest.fixture(autouse=True)
def ai_down(monkeypatch):
    """Every test starts with the model unreachable; no network, ever."""

    def _fail(system, prompt, temperature=0.4):
        raise UpstreamDown("model unavailable")

    monkeypatch.setattr(ai, "_chat_json", _fail)


@pytest.fixture
def ai_returns(monkeypatch):
    """ai_returns(payload) makes the next model calls answer with `payload`."""
    calls = []

    def _set(payload):
        def _fake(system, prompt, temperature=0.4):
            calls.append({"system": system, "prompt": prompt})
            return payload

        monkeypatch.setattr(ai, "_chat_json", _fake)
        return calls

    return _set


@pytest.fixture
def app():
    app = create_app(
        {
            "TESTING": True,
            "SECRET_KEY": "test-secret",
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
        }
    )
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield app


def make_user(email="ada@example.com", name="Ada", password="secret123", **profile):
    u = User(name=name, email=email, **profile)
    u.set_password(password)
    db.session.add(u)
    db.session.commit()
    return u


def add_skills(user_id, *names, category="technical", proficiency="intermediate"):
    out = []
    for n in names:
        s = Skill(user_id=user_id, name=n, category=category, proficiency=proficiency)
        db.session.add(s)
        out.append(s)
    db.session.commit()
    return out


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_client(app):
    """A test client with a freshly registered, logged-in user."""
    c = app.test_client()
    resp = c.post(
        "/auth/register",
        json={"name": "Ada", "email": "ada@example.com", "password": "secret123"},
    )
    assert resp.status_code == 201
    c.user_id = resp.get_json()["user"]["id"]
    return c
