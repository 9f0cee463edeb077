import logging

from fastapi import APIRouter, Depends, status

from hris.db import onboarding_collection, users_collection
from hris.exceptions import ValidationError, get_unknown_entity_exception
from hris.models.base import now_iso
from hris.permissions import authorize, require_permission
from hris.schemas.onboarding import CreateOnboarding, OnboardingUpdate
from hris.utils.app_utils import Identity, get_current_user
from hris.utils.onboarding_utils import (
    calculate_progress,
    create_onboarding_record,
    onboarding_status,
    sync_user_onboarding,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_onboarding(employee_id: str) -> dict:
    onboarding = onboarding_collection.find_one({"employeeId": employee_id})
    if not onboarding:
        raise get_unknown_entity_exception("Onboarding record")
    return onboarding


def _save_progress(onboarding: dict, changes: dict) -> dict:
    checklist = changes.get("checklist", onboarding["checklist"])
    progress = calculate_progress(checklist)
    changes["progress"] = progress
    changes.setdefault("status", onboarding_status(progress))
    changes["updatedAt"] = now_iso()

    onboarding = onboarding_collection.update_one({"id": onboarding["id"]}, changes)
    sync_user_onboarding(onboarding["employeeId"], onboarding["progress"], onboarding["status"])
    return onboarding


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_onboarding(
    onboarding_request: CreateOnboarding,
    identity: Identity = Depends(require_permission("onboarding:manage")),
):
    if not users_collection.find_one({"id": onboarding_request.employee_id}):
        raise ValidationError(detail=f"Employee {onboarding_request.employee_id} does not exist")
    if onboarding_collection.find_one({"employeeId": onboarding_request.employee_id}):
        raise ValidationError(detail="Onboarding already exists for this employee")

    onboarding = create_onboarding_record(onboarding_request.employee_id, onboarding_request.checklist or None)
    sync_user_onboarding(onboarding["employeeId"], onboarding["progress"], onboarding["status"])
    return onboarding


@router.get("/{employee_id}")
async def get_onboarding(employee_id: str, identity: Identity = Depends(get_current_user)):
    authorize(identity, "onboarding:read", {"employeeId": employee_id})
    return _get_onboarding(employee_id)


@router.put("/{employee_id}")
async def update_onboarding(
    employee_id: str,
    onboarding_request: OnboardingUpdate,
    identity: Identity = Depends(require_permission("onboarding:manage")),
):
    """
    Replace the checklist and/or status of an employee's onboarding.
    Progress is always recomputed from the checklist; an explicit ``status``
    wins over the derived one.
    """
    onboarding = _get_onboarding(employee_id)
    changes = onboarding_request.model_dump(mode="json", exclude_unset=True, by_alias=True)
    return _save_progress(onboarding, changes)


@router.put("/{employee_id}/tasks/{task_index}/complete")
async def complete_onboarding_task(employee_id: str, task_index: int, identity: Identity = Depends(get_current_user)):
    authorize(identity, "onboarding:complete_task", {"employeeId": employee_id})
    onboarding = _get_onboarding(employee_id)

    checklist = onboarding["checklist"]
    if not 0 <= task_index < len(checklist):
        raise get_unknown_entity_exception("Task")
    checklist[task_index]["completed"] = True

    logger.info("Onboarding task %d completed for %s by %s", task_index, employee_id, identity.id)
    return _save_progress(onboarding, {"checklist": checklist})
