from typing import List, Optional

from hris.models.appraisals import AppraisalCriteria, AppraisalResponse, AppraisalStatus
from hris.models.base import PatchModel, StrictModel


class CreateAppraisal(StrictModel):
    employee_id: str
    manager_id: Optional[str] = None
    cycle: str
    period: Optional[str] = None
    criteria: List[AppraisalCriteria] = []


class SelfAssessment(StrictModel):
    criteria_id: str
    self_score: Optional[float] = None
    self_comment: Optional[str] = None


class EmployeeAppraisalUpdate(PatchModel):
    """The subset an employee may touch on their own appraisal."""

    non_nullable = ("responses", "employee_comment", "status")

    responses: Optional[List[SelfAssessment]] = None
    employee_comment: Optional[str] = None
    status: Optional[AppraisalStatus] = None


class AppraisalUpdate(PatchModel):
    non_nullable = ("cycle", "status", "criteria", "responses", "overall_comment", "employee_comment")

    manager_id: Optional[str] = None
    cycle: Optional[str] = None
    period: Optional[str] = None
    status: Optional[AppraisalStatus] = None
    criteria: Optional[List[AppraisalCriteria]] = None
    responses: Optional[List[AppraisalResponse]] = None
    overall_comment: Optional[str] = None
    employee_comment: Optional[str] = None
