import logging
from typing import Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from hris.db import users_collection
from hris.exceptions import ValidationError
from hris.models.base import now_iso
from hris.models.leaves import (
    LEAVE_STAGE_ORDER,
    TERMINAL_LEAVE_STATUSES,
    ApproverSnapshot,
    Leave,
    LeaveComment,
    LeaveStatus,
)
from hris.models.notifications import NotificationType
from hris.models.users import UserRole
from hris.permissions import authorize
from hris.schemas.leave import AdminLeaveUpdate, CreateLeave, LeaveDecision
from hris.utils.app_utils import Identity
from hris.utils.notification_utils import create_leave_notification, hr_user_ids

logger = logging.getLogger(__name__)

ADMIN_EDITABLE_FIELDS = ("type", "start_date", "end_date", "reason", "handover_to", "handover_notes")


def resolve_manager_chain(employee: dict) -> Tuple[Optional[dict], Optional[dict]]:
    """Return (line manager, head of unit): the employee's manager and that manager's manager."""
    line_manager = None
    head_of_unit = None

    if employee.get("managerId"):
        line_manager = users_collection.find_one({"id": employee["managerId"]})
    if line_manager and line_manager.get("managerId"):
        head_of_unit = users_collection.find_one({"id": line_manager["managerId"]})

    return line_manager, head_of_unit


def build_leave_request(employee: dict, leave_request: CreateLeave) -> Leave:
    """
    Create a new leave request record for ``employee``.

    The approvers are snapshotted here and never re-resolved: reassigning a
    manager later does not move requests that are already in flight.
    """
    line_manager, head_of_unit = resolve_manager_chain(employee)

    snapshot = ApproverSnapshot(
        line_manager_id=line_manager["id"] if line_manager else None,
        line_manager_name=line_manager.get("name") if line_manager else None,
        head_of_unit_id=head_of_unit["id"] if head_of_unit else None,
        head_of_unit_name=head_of_unit.get("name") if head_of_unit else None,
    )

    return Leave(
        employee_id=employee["id"],
        employee_name=employee.get("name"),
        approver_snapshot=snapshot,
        line_manager_id=snapshot.line_manager_id,
        line_manager_name=snapshot.line_manager_name,
        head_of_unit_id=snapshot.head_of_unit_id,
        head_of_unit_name=snapshot.head_of_unit_name,
        **leave_request.model_dump(),
    )


def next_status(leave: dict) -> LeaveStatus:
    current = LeaveStatus(leave["status"])

    if current == LeaveStatus.LINE_MANAGER_APPROVAL:
        if leave.get("headOfUnitId"):
            return LeaveStatus.HEAD_OF_UNIT_APPROVAL
        return LeaveStatus.HR_APPROVAL
    if current == LeaveStatus.HEAD_OF_UNIT_APPROVAL:
        return LeaveStatus.HR_APPROVAL
    if current == LeaveStatus.HR_APPROVAL:
        return LeaveStatus.APPROVED

    raise ValidationError(detail=f"Leave request is already {current.value}")


def is_forward_transition(current: LeaveStatus, target: LeaveStatus) -> bool:
    if current in TERMINAL_LEAVE_STATUSES:
        return False
    if target == LeaveStatus.REJECTED:
        return True
    return LEAVE_STAGE_ORDER.index(target) > LEAVE_STAGE_ORDER.index(current)


def _stage_stamps(identity: Identity, current: LeaveStatus, timestamp: str) -> dict:
    if identity.role == UserRole.LINE_MANAGER and current == LeaveStatus.LINE_MANAGER_APPROVAL:
        return {"lineManagerApprovedAt": timestamp}
    if identity.role == UserRole.HEAD_OF_UNIT and current == LeaveStatus.HEAD_OF_UNIT_APPROVAL:
        return {"headOfUnitApprovedAt": timestamp}
    if identity.role == UserRole.HR and current == LeaveStatus.HR_APPROVAL:
        return {"hrApprovedBy": identity.id, "hrApprovedAt": timestamp}
    return {}


def apply_leave_update(leave: dict, identity: Identity, payload: dict) -> dict:
    """
    Work out the changes an update request makes to ``leave``.

    Args:
        leave (dict): The stored leave request.
        identity (Identity): The caller.
        payload (dict): The raw request body.
    Returns:
        dict: Fields to merge into the stored record (empty when nothing changes).
    Raises:
        AuthorizationError: The caller is not the approver for the current stage.
        ValidationError: Malformed body, unknown fields, or a status that would
            move backwards, skip a stage, or leave a terminal state.
    Nothing is written here; the caller persists the returned changes.
    """
    authorize(identity, "leave:update", leave)

    is_admin = identity.role == UserRole.ADMIN
    schema = AdminLeaveUpdate if is_admin else LeaveDecision
    try:
        update = schema.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(detail=str(e))

    timestamp = now_iso()
    current = LeaveStatus(leave["status"])
    changes = {}

    if update.status is not None and update.status != current:
        target = update.status
        if not is_forward_transition(current, target):
            raise ValidationError(detail=f"Leave request cannot move from {current.value} to {target.value}")
        if not is_admin and target not in (next_status(leave), LeaveStatus.REJECTED):
            raise ValidationError(detail=f"Expected {next_status(leave).value} or rejected, got {target.value}")

        changes["status"] = target.value
        changes.update(_stage_stamps(identity, current, timestamp))

        if target == LeaveStatus.APPROVED:
            changes["approvedBy"] = identity.id
            changes["approvedAt"] = timestamp
        elif target == LeaveStatus.REJECTED:
            changes["rejectedBy"] = identity.id
            changes["rejectedAt"] = timestamp
            changes["rejectionReason"] = update.rejection_reason

        logger.info("Leave %s: %s -> %s by %s", leave["id"], current.value, target.value, identity.id)

    if is_admin:
        edited = update.model_fields_set.intersection(ADMIN_EDITABLE_FIELDS)
        if edited:
            changes.update(update.model_dump(mode="json", by_alias=True, include=edited))
            start_date = changes.get("startDate", leave.get("startDate"))
            end_date = changes.get("endDate", leave.get("endDate"))
            if start_date and end_date and end_date < start_date:
                raise ValidationError(detail="End date must be on or after the start date")

    if update.comment:
        comment = LeaveComment(
            author_id=identity.id,
            author_name=identity.name,
            comment=update.comment,
            is_internal=update.is_internal,
        )
        changes["comments"] = list(leave.get("comments", [])) + [comment.to_record()]

    if changes:
        changes["updatedAt"] = timestamp
    return changes


def notify_leave_transition(leave: dict) -> None:
    status = leave.get("status")

    if status == LeaveStatus.HEAD_OF_UNIT_APPROVAL:
        create_leave_notification(leave, NotificationType.LEAVE_APPROVAL_NEEDED, [leave.get("headOfUnitId")])
    elif status == LeaveStatus.HR_APPROVAL:
        create_leave_notification(leave, NotificationType.LEAVE_APPROVAL_NEEDED, hr_user_ids())
    elif status == LeaveStatus.APPROVED:
        create_leave_notification(leave, NotificationType.LEAVE_APPROVED, [leave["employeeId"]])
    elif status == LeaveStatus.REJECTED:
        create_leave_notification(leave, NotificationType.LEAVE_REJECTED, [leave["employeeId"]])
