from fastapi import APIRouter, Depends, Response, status

from hris.db import permissions_collection
from hris.exceptions import get_unknown_entity_exception
from hris.models.roles import Permission
from hris.permissions import require_permission
from hris.schemas.role import PermissionCreate, PermissionEdit
from hris.utils.app_utils import Identity

router = APIRouter()


@router.get("")
async def list_permissions(identity: Identity = Depends(require_permission("permissions:manage"))):
    return permissions_collection.find()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_permission(
    permission_request: PermissionCreate,
    identity: Identity = Depends(require_permission("permissions:manage")),
):
    permission = Permission(**permission_request.model_dump()).to_record()
    return permissions_collection.insert_one(permission)


@router.put("/{permission_id}")
async def update_permission(
    permission_id: str,
    permission_request: PermissionEdit,
    identity: Identity = Depends(require_permission("permissions:manage")),
):
    permission = permissions_collection.update_one(
        {"id": permission_id},
        permission_request.model_dump(exclude_unset=True, by_alias=True),
    )
    if not permission:
        raise get_unknown_entity_exception("Permission")
    return permission


@router.delete("/{permission_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_permission(permission_id: str, identity: Identity = Depends(require_permission("permissions:manage"))):
    if not permissions_collection.delete_one({"id": permission_id}):
        raise get_unknown_entity_exception("Permission")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
