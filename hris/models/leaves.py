from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import Field

from hris.models.base import CamelModel, new_id, now_iso


class LeaveType(str, Enum):
    ANNUAL = "annual"
    SICK = "sick"
    VACATION = "vacation"
    PERSONAL = "personal"
    MATERNITY = "maternity"
    PATERNITY = "paternity"
    BEREAVEMENT = "bereavement"
    OTHER = "other"


class LeaveStatus(str, Enum):
    LINE_MANAGER_APPROVAL = "line_manager_approval"
    HEAD_OF_UNIT_APPROVAL = "head_of_unit_approval"
    HR_APPROVAL = "hr_approval"
    APPROVED = "approved"
    REJECTED = "rejected"


# forward order of the approval chain; REJECTED sits outside it
LEAVE_STAGE_ORDER = [
    LeaveStatus.LINE_MANAGER_APPROVAL,
    LeaveStatus.HEAD_OF_UNIT_APPROVAL,
    LeaveStatus.HR_APPROVAL,
    LeaveStatus.APPROVED,
]

TERMINAL_LEAVE_STATUSES = {LeaveStatus.APPROVED, LeaveStatus.REJECTED}


class LeaveComment(CamelModel):
    id: str = Field(default_factory=new_id)
    author_id: str
    author_name: Optional[str] = None
    comment: str
    created_at: str = Field(default_factory=now_iso)
    is_internal: bool = False


class ApproverSnapshot(CamelModel):
    """Approvers resolved from the manager chain when the request was filed."""

    line_manager_id: Optional[str] = None
    line_manager_name: Optional[str] = None
    head_of_unit_id: Optional[str] = None
    head_of_unit_name: Optional[str] = None
    captured_at: str = Field(default_factory=now_iso)


class Leave(CamelModel):
    id: str = Field(default_factory=new_id)
    employee_id: str
    employee_name: Optional[str] = None
    type: LeaveType
    start_date: date
    end_date: date
    reason: Optional[str] = None
    handover_to: Optional[str] = None
    handover_notes: Optional[str] = None
    status: LeaveStatus = LeaveStatus.LINE_MANAGER_APPROVAL
    approver_snapshot: ApproverSnapshot
    line_manager_id: Optional[str] = None
    line_manager_name: Optional[str] = None
    line_manager_approved_at: Optional[str] = None
    head_of_unit_id: Optional[str] = None
    head_of_unit_name: Optional[str] = None
    head_of_unit_approved_at: Optional[str] = None
    hr_approved_by: Optional[str] = None
    hr_approved_at: Optional[str] = None
    approved_by: Optional[str] = None
    approved_at: Optional[str] = None
    rejected_by: Optional[str] = None
    rejected_at: Optional[str] = None
    rejection_reason: Optional[str] = None
    comments: List[LeaveComment] = Field(default_factory=list)
    created_at: str = Field(default_factory=now_iso)
    updated_at: str = Field(default_factory=now_iso)
