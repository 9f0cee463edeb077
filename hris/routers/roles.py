from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from hris.db import roles_collection, users_collection
from hris.exceptions import ValidationError, get_unknown_entity_exception
from hris.models.base import now_iso
from hris.models.roles import Role
from hris.permissions import require_permission
from hris.schemas.role import RoleCreate, RoleEdit
from hris.utils.app_utils import Identity

router = APIRouter()


def with_user_count(role: dict) -> dict:
    return {**role, "userCount": users_collection.count_documents({"role": role["name"]})}


def _ensure_unique_name(name: str, exclude_id: Optional[str] = None):
    for role in roles_collection.find():
        if role["name"].lower() == name.lower() and role["id"] != exclude_id:
            raise ValidationError(detail="Role name already exists")


@router.get("")
async def list_roles(identity: Identity = Depends(require_permission("roles:manage"))):
    return [with_user_count(role) for role in roles_collection.find()]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_role(role_request: RoleCreate, identity: Identity = Depends(require_permission("roles:manage"))):
    _ensure_unique_name(role_request.name)

    role = Role(**role_request.model_dump()).to_record()
    roles_collection.insert_one(role)

    return with_user_count(role)


@router.put("/{role_id}")
async def update_role(role_id: str, role_request: RoleEdit, identity: Identity = Depends(require_permission("roles:manage"))):
    if not roles_collection.find_one({"id": role_id}):
        raise get_unknown_entity_exception("Role")

    changes = role_request.model_dump(exclude_unset=True, by_alias=True)
    if changes.get("name"):
        _ensure_unique_name(changes["name"], exclude_id=role_id)
    changes["updatedAt"] = now_iso()

    return with_user_count(roles_collection.update_one({"id": role_id}, changes))


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_role(role_id: str, identity: Identity = Depends(require_permission("roles:manage"))):
    if not roles_collection.delete_one({"id": role_id}):
        raise get_unknown_entity_exception("Role")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
