"""
Seed the JSON database with a demo organisation.

    python -m hris.seed

Creates one user per role wired into a reporting chain
(employee -> line manager -> head of unit), the default roles and a couple of
disabled integrations. Records that already exist are left alone.
"""
import logging

from hris.db import integrations_collection, roles_collection, store, users_collection
from hris.models.integrations import Integration
from hris.models.roles import Role
from hris.models.users import User, UserRole
from hris.utils.app_utils import hash_password
from hris.utils.onboarding_utils import create_onboarding_record

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

# (key, name, email, role, position, manager key)
DEMO_USERS = [
    ("admin", "System Administrator", "admin@company.com", UserRole.ADMIN, "Administrator", None),
    ("hr", "Helen Mensah", "hr@company.com", UserRole.HR, "HR Officer", None),
    ("hou", "Kwame Asante", "hou@company.com", UserRole.HEAD_OF_UNIT, "Head of Engineering", None),
    ("lm", "Ama Owusu", "lm@company.com", UserRole.LINE_MANAGER, "Engineering Lead", "hou"),
    ("employee", "Kofi Boateng", "employee@company.com", UserRole.EMPLOYEE, "Software Engineer", "lm"),
]

DEFAULT_ROLES = [
    (UserRole.EMPLOYEE, "Regular employee"),
    (UserRole.LINE_MANAGER, "Approves leave for direct reports"),
    (UserRole.HEAD_OF_UNIT, "Approves leave for the unit"),
    (UserRole.HR, "Human resources"),
    (UserRole.ADMIN, "Full system access"),
]

DEFAULT_INTEGRATIONS = [
    ("Email", "Outbound e-mail notifications"),
    ("Payroll", "Export approved leave to payroll"),
]


def seed_users() -> dict:
    ids = {}
    for index, (key, name, email, role, position, manager_key) in enumerate(DEMO_USERS, start=1):
        existing = users_collection.find_one({"email": email})
        if existing:
            ids[key] = existing["id"]
            continue

        user = User(
            email=email,
            password=hash_password(DEMO_PASSWORD),
            name=name,
            role=role,
            department="Engineering" if role != UserRole.ADMIN else "Administration",
            position=position,
            manager_id=ids.get(manager_key),
            employee_id=f"EMP{index:03d}",
        ).to_record()
        users_collection.insert_one(user)
        create_onboarding_record(user["id"])
        ids[key] = user["id"]
        logger.info("Seeded %s (%s)", email, role.value)

    return ids


def seed_roles() -> None:
    for name, description in DEFAULT_ROLES:
        if not roles_collection.find_one({"name": name.value}):
            roles_collection.insert_one(Role(name=name.value, description=description).to_record())


def seed_integrations() -> None:
    for name, description in DEFAULT_INTEGRATIONS:
        if not integrations_collection.find_one({"name": name}):
            integrations_collection.insert_one(Integration(name=name, description=description).to_record())


def main() -> None:
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

    ids = seed_users()
    seed_roles()
    seed_integrations()
    if not store.system_settings:
        store.update_system_settings({"companyName": "Demo Company", "leaveYearStart": "01-01"})

    print(f"OK: Seeded {len(ids)} users -> {store.path} (password: {DEMO_PASSWORD})")


if __name__ == "__main__":
    main()
