from typing import List, Optional

from hris.models.base import PatchModel, StrictModel


class RoleCreate(StrictModel):
    name: str
    description: Optional[str] = None
    permissions: List[str] = []


class RoleEdit(PatchModel):
    non_nullable = ("name", "permissions")

    name: Optional[str] = None
    description: Optional[str] = None
    permissions: Optional[List[str]] = None


class PermissionCreate(StrictModel):
    name: str
    description: Optional[str] = None
    resource: Optional[str] = None
    action: Optional[str] = None


class PermissionEdit(PatchModel):
    non_nullable = ("name",)

    name: Optional[str] = None
    description: Optional[str] = None
    resource: Optional[str] = None
    action: Optional[str] = None
