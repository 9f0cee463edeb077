from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from hris.db import departments_collection, users_collection
from hris.exceptions import ValidationError, get_unknown_entity_exception
from hris.models.departments import Department
from hris.permissions import require_permission
from hris.schemas.department import DepartmentCreate, DepartmentEdit
from hris.utils.app_utils import Identity

router = APIRouter()


def with_employee_count(department: dict) -> dict:
    return {**department, "employeeCount": users_collection.count_documents({"department": department["name"]})}


def _validate_department(name: Optional[str], head_id: Optional[str], exclude_id: Optional[str] = None):
    if name:
        for department in departments_collection.find():
            if department["name"].lower() == name.lower() and department["id"] != exclude_id:
                raise ValidationError(detail="Department name already exists")

    if head_id and not users_collection.find_one({"id": head_id}):
        raise ValidationError(detail=f"Head of department {head_id} is not a valid user")


@router.get("")
async def list_departments(
    department_name: Optional[str] = Query(None, alias="name", description="Search department by name prefix"),
    identity: Identity = Depends(require_permission("departments:manage")),
):
    departments = departments_collection.find()
    if department_name:
        departments = [d for d in departments if d["name"].lower().startswith(department_name.lower())]

    return [with_employee_count(d) for d in sorted(departments, key=lambda d: d["name"].lower())]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_department(
    department_request: DepartmentCreate,
    identity: Identity = Depends(require_permission("departments:manage")),
):
    _validate_department(department_request.name, department_request.head_id)

    department = Department(**department_request.model_dump()).to_record()
    departments_collection.insert_one(department)

    return with_employee_count(department)


@router.put("/{department_id}")
async def update_department(
    department_id: str,
    department_request: DepartmentEdit,
    identity: Identity = Depends(require_permission("departments:manage")),
):
    if not departments_collection.find_one({"id": department_id}):
        raise get_unknown_entity_exception("Department")

    _validate_department(department_request.name, department_request.head_id, exclude_id=department_id)

    department = departments_collection.update_one(
        {"id": department_id},
        department_request.model_dump(exclude_unset=True, by_alias=True),
    )
    return with_employee_count(department)


@router.delete("/{department_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_department(department_id: str, identity: Identity = Depends(require_permission("departments:manage"))):
    if not departments_collection.delete_one({"id": department_id}):
        raise get_unknown_entity_exception("Department")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
