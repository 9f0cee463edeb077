from enum import Enum
from typing import Optional

from pydantic import Field

from hris.models.base import CamelModel, new_id, now_iso


class UserRole(str, Enum):
    EMPLOYEE = "employee"
    LINE_MANAGER = "line_manager"
    HEAD_OF_UNIT = "head_of_unit"
    HR = "hr"
    ADMIN = "admin"


class User(CamelModel):
    id: str = Field(default_factory=new_id)
    email: str
    password: str  # bcrypt hash
    name: str
    role: UserRole = UserRole.EMPLOYEE
    department: Optional[str] = None
    position: Optional[str] = None
    manager_id: Optional[str] = None
    employee_id: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    avatar: Optional[str] = None
    hire_date: Optional[str] = None
    status: str = "active"  # or inactive/suspended
    two_factor_enabled: bool = False
    onboarding_status: str = "pending"
    onboarding_progress: int = 0
    created_at: str = Field(default_factory=now_iso)
    updated_at: str = Field(default_factory=now_iso)


def public_user(user: dict) -> dict:
    """Strip the password hash before a user record leaves the API."""
    return {key: value for key, value in user.items() if key != "password"}
