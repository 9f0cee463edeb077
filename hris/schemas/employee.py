from typing import Optional

from pydantic import ConfigDict, EmailStr

from hris.models.base import PatchModel, StrictModel
from hris.models.users import UserRole


class CreateEmployee(StrictModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    email: EmailStr
    name: str
    password: Optional[str] = None
    role: UserRole = UserRole.EMPLOYEE
    department: Optional[str] = None
    position: Optional[str] = None
    manager_id: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    hire_date: Optional[str] = None


class EditEmployee(PatchModel):
    non_nullable = ("email", "name", "role", "status")

    email: Optional[EmailStr] = None
    name: Optional[str] = None
    role: Optional[UserRole] = None
    department: Optional[str] = None
    position: Optional[str] = None
    manager_id: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    avatar: Optional[str] = None
    hire_date: Optional[str] = None
    status: Optional[str] = None
