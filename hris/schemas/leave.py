from datetime import date
from typing import Optional

from pydantic import model_validator

from hris.models.base import PatchModel, StrictModel
from hris.models.leaves import LeaveStatus, LeaveType


class CreateLeave(StrictModel):
    type: LeaveType
    start_date: date
    end_date: date
    reason: Optional[str] = None
    handover_to: Optional[str] = None
    handover_notes: Optional[str] = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("End date must be on or after the start date")
        return self


class LeaveDecision(PatchModel):
    """What a stage approver may send."""

    status: Optional[LeaveStatus] = None
    comment: Optional[str] = None
    is_internal: bool = False
    rejection_reason: Optional[str] = None


class AdminLeaveUpdate(LeaveDecision):
    non_nullable = ("type", "start_date", "end_date")

    type: Optional[LeaveType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    reason: Optional[str] = None
    handover_to: Optional[str] = None
    handover_notes: Optional[str] = None
