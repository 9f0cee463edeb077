from fastapi import APIRouter, Depends

from hris.db import integrations_collection
from hris.exceptions import get_unknown_entity_exception
from hris.permissions import require_permission
from hris.schemas.system import IntegrationEdit
from hris.utils.app_utils import Identity

router = APIRouter()


@router.get("")
async def list_integrations(identity: Identity = Depends(require_permission("integrations:manage"))):
    return integrations_collection.find()


@router.put("/{integration_id}")
async def update_integration(
    integration_id: str,
    integration_request: IntegrationEdit,
    identity: Identity = Depends(require_permission("integrations:manage")),
):
    if not integrations_collection.find_one({"id": integration_id}):
        raise get_unknown_entity_exception("Integration")

    changes = integration_request.model_dump(exclude_unset=True, by_alias=True)
    return integrations_collection.update_one({"id": integration_id}, changes)
