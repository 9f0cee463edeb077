import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from hris.config import settings
from hris.db import onboarding_collection, users_collection
from hris.exceptions import ValidationError, get_unknown_entity_exception
from hris.models.base import now_iso
from hris.models.users import User, public_user
from hris.permissions import require_permission
from hris.schemas.employee import CreateEmployee, EditEmployee
from hris.utils.app_utils import Identity, hash_password
from hris.utils.onboarding_utils import create_onboarding_record

logger = logging.getLogger(__name__)

router = APIRouter()


def generate_employee_code() -> str:
    existing_codes = {user.get("employeeId") for user in users_collection.find()}
    number = users_collection.count_documents() + 1
    while f"EMP{number:03d}" in existing_codes:
        number += 1
    return f"EMP{number:03d}"


def _ensure_unique_email(email: str, exclude_id: Optional[str] = None):
    email = email.lower()
    for user in users_collection.find():
        if (user.get("email") or "").lower() == email and user["id"] != exclude_id:
            raise ValidationError(detail="A user with this email already exists")


def _ensure_manager_exists(manager_id: Optional[str], employee_id: Optional[str] = None):
    if not manager_id:
        return
    if manager_id == employee_id:
        raise ValidationError(detail="An employee cannot be their own manager")
    if not users_collection.find_one({"id": manager_id}):
        raise ValidationError(detail=f"Manager {manager_id} does not exist")


@router.get("")
async def list_employees(
    role: Optional[str] = Query(None, description="Filter by role"),
    department: Optional[str] = Query(None, description="Filter by department name"),
    employment_status: Optional[str] = Query(None, alias="status", description="active, inactive or suspended"),
    identity: Identity = Depends(require_permission("employees:manage")),
):
    query = {}
    if role:
        query["role"] = role
    if department:
        query["department"] = department
    if employment_status:
        query["status"] = employment_status

    return [public_user(user) for user in users_collection.find(query)]


@router.get("/{employee_id}")
async def get_employee(employee_id: str, identity: Identity = Depends(require_permission("employees:manage"))):
    employee = users_collection.find_one({"id": employee_id})
    if not employee:
        raise get_unknown_entity_exception("Employee")
    return public_user(employee)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_employee(
    employee_request: CreateEmployee,
    identity: Identity = Depends(require_permission("employees:manage")),
):
    """
    Create a new employee record.
    Args:
        employee_request (CreateEmployee): Employee details. ``password`` falls back
            to the configured default when omitted.
        identity (Identity): The HR or admin user making the request.
    Returns:
        dict: The stored employee without the password hash, including the
            generated ``employeeId`` (EMP001, EMP002, ...).
    Raises:
        ValidationError: 400 for a duplicate e-mail or an unknown ``managerId``
        AuthorizationError: 403 for callers outside hr/admin
    An onboarding checklist is created for the new employee as a side effect.
    """
    _ensure_unique_email(employee_request.email)
    _ensure_manager_exists(employee_request.manager_id)

    employee_dict = employee_request.model_dump(exclude={"password"})
    employee_dict["email"] = employee_dict["email"].lower()
    employee_dict["password"] = hash_password(employee_request.password or settings.DEFAULT_EMPLOYEE_PASSWORD)
    employee_dict["employee_id"] = generate_employee_code()

    employee = User(**employee_dict).to_record()
    users_collection.insert_one(employee)
    create_onboarding_record(employee["id"])

    logger.info("Employee %s (%s) created by %s", employee["id"], employee["employeeId"], identity.id)
    return public_user(employee)


@router.put("/{employee_id}")
async def update_employee(
    employee_id: str,
    employee_request: EditEmployee,
    identity: Identity = Depends(require_permission("employees:manage")),
):
    employee = users_collection.find_one({"id": employee_id})
    if not employee:
        raise get_unknown_entity_exception("Employee")

    changes = employee_request.model_dump(mode="json", exclude_unset=True, by_alias=True)
    if changes.get("email"):
        changes["email"] = changes["email"].lower()
        _ensure_unique_email(changes["email"], exclude_id=employee_id)
    if "managerId" in changes:
        _ensure_manager_exists(changes["managerId"], employee_id)

    changes["updatedAt"] = now_iso()
    employee = users_collection.update_one({"id": employee_id}, changes)

    return public_user(employee)


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee(employee_id: str, identity: Identity = Depends(require_permission("employees:manage"))):
    if not users_collection.delete_one({"id": employee_id}):
        raise get_unknown_entity_exception("Employee")

    onboarding_collection.delete_one({"employeeId": employee_id})
    logger.info("Employee %s deleted by %s", employee_id, identity.id)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
