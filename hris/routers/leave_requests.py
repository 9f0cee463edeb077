import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status

from hris.db import leaves_collection, users_collection
from hris.exceptions import get_unknown_entity_exception
from hris.models.leaves import LeaveStatus
from hris.models.notifications import NotificationType
from hris.permissions import authorize, can
from hris.schemas.leave import CreateLeave
from hris.utils.app_utils import Identity, get_current_user
from hris.utils.leave_utils import apply_leave_update, build_leave_request, notify_leave_transition
from hris.utils.notification_utils import create_leave_notification, hr_user_ids

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_leave(leave_id: str) -> dict:
    leave = leaves_collection.find_one({"id": leave_id})
    if not leave:
        raise get_unknown_entity_exception("Leave request")
    return leave


@router.get("")
async def list_leave_requests(
    leave_status: Optional[LeaveStatus] = Query(None, alias="status", description="Filter by approval status"),
    employee_id: Optional[str] = Query(None, alias="employeeId"),
    identity: Identity = Depends(get_current_user),
):
    """
    List leave requests.
    Employees only ever see their own requests; approvers, HR and admins see
    every request and may narrow the list by ``employeeId``.
    """
    query = {}
    if leave_status:
        query["status"] = leave_status.value

    if can(identity, "leave:read_all"):
        if employee_id:
            query["employeeId"] = employee_id
    else:
        query["employeeId"] = identity.id

    leaves = leaves_collection.find(query)
    return sorted(leaves, key=lambda leave: leave.get("createdAt", ""), reverse=True)


@router.get("/{leave_id}")
async def get_leave_request(leave_id: str, identity: Identity = Depends(get_current_user)):
    leave = _get_leave(leave_id)
    authorize(identity, "leave:read", leave)
    return leave


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_leave_request(leave_request: CreateLeave, identity: Identity = Depends(get_current_user)):
    """
    Submit a leave request for the caller.
    Args:
        leave_request (CreateLeave): type, startDate, endDate and optional reason/handover details.
        identity (Identity): The submitting employee.
    Returns:
        dict: The stored request with ``status`` = line_manager_approval and the
            approver ids/names resolved from the caller's manager chain.
    Raises:
        ValidationError: 400 for an unknown leave type or end date before start date
        NotFoundError: 404 if the caller's user record no longer exists
    """
    employee = users_collection.find_one({"id": identity.id})
    if not employee:
        raise get_unknown_entity_exception("Employee")

    leave = build_leave_request(employee, leave_request).to_record()
    leaves_collection.insert_one(leave)

    recipients = [leave["lineManagerId"]] if leave.get("lineManagerId") else hr_user_ids()
    create_leave_notification(leave, NotificationType.LEAVE_REQUEST, recipients)

    logger.info("Leave request %s submitted by %s", leave["id"], identity.id)
    return leave


@router.put("/{leave_id}")
async def update_leave_request(leave_id: str, payload: dict = Body(...), identity: Identity = Depends(get_current_user)):
    """
    Act on a leave request.
    Only the approver designated for the current stage may act (admins may
    always act). The body is checked after the caller, so a wrong approver
    gets 403 whatever they send. Returns the updated request.
    """
    leave = _get_leave(leave_id)

    changes = apply_leave_update(leave, identity, payload)
    if not changes:
        return leave

    leave = leaves_collection.update_one({"id": leave_id}, changes)
    if "status" in changes:
        notify_leave_transition(leave)

    return leave


@router.delete("/{leave_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_leave_request(leave_id: str, identity: Identity = Depends(get_current_user)):
    leave = _get_leave(leave_id)
    authorize(identity, "leave:delete", leave)

    leaves_collection.delete_one({"id": leave_id})
    logger.info("Leave request %s deleted by %s", leave_id, identity.id)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
