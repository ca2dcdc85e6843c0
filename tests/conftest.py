import os

# settings are read at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from mascate_pro.core.database import Database
from mascate_pro.core.permissions import Actor
from mascate_pro.core.security import create_access_token, get_password_hash
from mascate_pro.main import create_app
from mascate_pro.models.user import User

PASSWORD = "secret123"


@pytest.fixture(scope="session")
def password_hash():
    # bcrypt is slow on purpose; hash once for every test user
    return get_password_hash(PASSWORD)


@pytest.fixture
def database():
    database = Database("sqlite://")
    database.create_all()
    yield database
    database.dispose()


@pytest.fixture
def db(database):
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def app(database):
    return create_app(database)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def make_user(db, password_hash):
    def _make_user(email, role="user", display_name=None, active=True):
        user = User(
            email=email,
            display_name=display_name or email.split("@")[0].title(),
            role=role,
            active=active,
            password_hash=password_hash,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make_user


@pytest.fixture
def staff(make_user):
    return make_user("staff@mascatepro.com.br", role="user", display_name="Staff")


@pytest.fixture
def admin(make_user):
    return make_user("admin@mascatepro.com.br", role="admin", display_name="Admin")


@pytest.fixture
def superadmin(make_user):
    return make_user("owner@mascatepro.com.br", role="superadmin", display_name="Owner")


def auth_headers(user):
    token = create_access_token(data={"sub": user.id, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def staff_headers(staff):
    return auth_headers(staff)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def superadmin_headers(superadmin):
    return auth_headers(superadmin)


@pytest.fixture
def admin_actor(admin):
    return Actor(id=admin.id, role=admin.role, ip_address="127.0.0.1", user_agent="pytest")


@pytest.fixture
def staff_actor(staff):
    return Actor(id=staff.id, role=staff.role, ip_address="127.0.0.1", user_agent="pytest")


@pytest.fixture
def superadmin_actor(superadmin):
    return Actor(id=superadmin.id, role=superadmin.role)


@pytest.fixture
def product_data():
    return {
        "name": "Seda",
        "category": "Sedas",
        "unit": "unidade",
        "packaging": "Caixa com 50",
        "purchase_price": 1.80,
        "sale_price": 2.50,
        "current_stock": 0,
        "minimum_stock": 20,
    }
