from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status
from pydantic import ValidationError as PydanticValidationError

from hris.db import appraisals_collection, users_collection
from hris.exceptions import ValidationError, get_unknown_entity_exception
from hris.models.appraisals import Appraisal, AppraisalStatus
from hris.models.base import now_iso
from hris.models.users import UserRole
from hris.permissions import authorize, can, require_permission
from hris.schemas.appraisal import AppraisalUpdate, CreateAppraisal, EmployeeAppraisalUpdate
from hris.utils.app_utils import Identity, get_current_user
from hris.utils.appraisal_utils import (
    EMPLOYEE_STATUS_TRANSITIONS,
    calculate_overall_score,
    merge_self_assessment,
)

router = APIRouter()


def _get_appraisal(appraisal_id: str) -> dict:
    appraisal = appraisals_collection.find_one({"id": appraisal_id})
    if not appraisal:
        raise get_unknown_entity_exception("Appraisal")
    return appraisal


def _employee_changes(appraisal: dict, payload: dict) -> dict:
    update = EmployeeAppraisalUpdate.model_validate(payload)
    changes = {}

    if update.responses is not None:
        self_assessment = [item.model_dump(by_alias=True) for item in update.responses]
        changes["responses"] = merge_self_assessment(appraisal.get("responses", []), self_assessment)
    if update.employee_comment is not None:
        changes["employeeComment"] = update.employee_comment
    if update.status is not None and update.status != appraisal["status"]:
        allowed = EMPLOYEE_STATUS_TRANSITIONS.get(AppraisalStatus(appraisal["status"]))
        if update.status != allowed:
            raise ValidationError(detail=f"Cannot move appraisal from {appraisal['status']} to {update.status.value}")
        changes["status"] = update.status.value

    return changes


def _reviewer_changes(payload: dict) -> dict:
    update = AppraisalUpdate.model_validate(payload)
    changes = update.model_dump(mode="json", exclude_unset=True, by_alias=True)
    if "managerId" in changes:
        manager = users_collection.find_one({"id": changes["managerId"]}) if changes["managerId"] else None
        changes["managerName"] = manager.get("name") if manager else None
    return changes


@router.get("")
async def list_appraisals(
    employee_id: Optional[str] = Query(None, alias="employeeId"),
    identity: Identity = Depends(get_current_user),
):
    if not can(identity, "appraisals:read_all"):
        return appraisals_collection.find({"employeeId": identity.id})
    if employee_id:
        return appraisals_collection.find({"employeeId": employee_id})
    return appraisals_collection.find()


@router.get("/{appraisal_id}")
async def get_appraisal(appraisal_id: str, identity: Identity = Depends(get_current_user)):
    appraisal = _get_appraisal(appraisal_id)
    if not can(identity, "appraisals:read_all"):
        authorize(identity, "appraisals:update", appraisal)
    return appraisal


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_appraisal(
    appraisal_request: CreateAppraisal,
    identity: Identity = Depends(require_permission("appraisals:create")),
):
    employee = users_collection.find_one({"id": appraisal_request.employee_id})
    if not employee:
        raise ValidationError(detail=f"Employee {appraisal_request.employee_id} does not exist")

    manager_id = appraisal_request.manager_id or employee.get("managerId")
    manager = users_collection.find_one({"id": manager_id}) if manager_id else None

    appraisal = Appraisal(
        employee_name=employee.get("name"),
        manager_name=manager.get("name") if manager else None,
        **{**appraisal_request.model_dump(), "manager_id": manager_id},
    ).to_record()
    appraisals_collection.insert_one(appraisal)

    return appraisal


@router.put("/{appraisal_id}")
async def update_appraisal(appraisal_id: str, payload: dict = Body(...), identity: Identity = Depends(get_current_user)):
    """
    Update an appraisal.
    Employees may only touch their own appraisal, and only their self scores,
    their comment, and the draft -> self_assessment -> manager_review steps.
    Completing an appraisal stamps ``completedAt`` and recomputes ``overallScore``.
    """
    appraisal = _get_appraisal(appraisal_id)
    authorize(identity, "appraisals:update", appraisal)

    try:
        if identity.role == UserRole.EMPLOYEE:
            changes = _employee_changes(appraisal, payload)
        else:
            changes = _reviewer_changes(payload)
    except PydanticValidationError as e:
        raise ValidationError(detail=str(e))

    if changes.get("status") == AppraisalStatus.COMPLETED and appraisal["status"] != AppraisalStatus.COMPLETED:
        changes["completedAt"] = now_iso()
        changes["overallScore"] = calculate_overall_score(
            changes.get("criteria", appraisal.get("criteria", [])),
            changes.get("responses", appraisal.get("responses", [])),
        )

    if not changes:
        return appraisal
    return appraisals_collection.update_one({"id": appraisal_id}, changes)


@router.delete("/{appraisal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_appraisal(appraisal_id: str, identity: Identity = Depends(require_permission("appraisals:delete"))):
    if not appraisals_collection.delete_one({"id": appraisal_id}):
        raise get_unknown_entity_exception("Appraisal")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
