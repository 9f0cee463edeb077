import os
import tempfile

# must be set before hris.config is imported
os.environ["ENABLE_SCHEDULER"] = "false"
os.environ.setdefault("DATABASE_FILE", os.path.join(tempfile.mkdtemp(), "database.json"))
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient

from hris.config import settings
from hris.db import store, users_collection
from hris.main import app
from hris.models.users import User, UserRole
from hris.utils.app_utils import create_access_token, hash_password

PASSWORD = "password123"
PASSWORD_HASH = hash_password(PASSWORD)


@pytest.fixture(autouse=True)
def fresh_store(tmp_path, monkeypatch):
    store.load(str(tmp_path / "database.json"))
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path / "uploads"))
    yield store


def make_user(name, email, role, manager_id=None, department="Engineering"):
    user = User(
        name=name,
        email=email,
        password=PASSWORD_HASH,
        role=role,
        manager_id=manager_id,
        department=department,
    ).to_record()
    users_collection.insert_one(user)
    return user


@pytest.fixture
def users():
    """employee -> line manager -> head of unit, plus hr and admin."""
    admin = make_user("Ada Admin", "admin@company.com", UserRole.ADMIN, department="Administration")
    hr = make_user("Harriet HR", "hr@company.com", UserRole.HR, department="People")
    head = make_user("Hugo Head", "hou@company.com", UserRole.HEAD_OF_UNIT)
    manager = make_user("Lena Lead", "lm@company.com", UserRole.LINE_MANAGER, manager_id=head["id"])
    employee = make_user("Eli Employee", "employee@company.com", UserRole.EMPLOYEE, manager_id=manager["id"])
    return {"admin": admin, "hr": hr, "hou": head, "lm": manager, "employee": employee}


def token_for(user):
    return create_access_token({"id": user["id"], "email": user["email"], "role": user["role"]})


def auth(user):
    return {"Authorization": f"Bearer {token_for(user)}"}


@pytest.fixture
def client():
    return TestClient(app)
