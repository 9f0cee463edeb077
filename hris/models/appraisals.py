from enum import Enum
from typing import List, Optional

from pydantic import Field

from hris.models.base import CamelModel, new_id, now_iso


class AppraisalStatus(str, Enum):
    DRAFT = "draft"
    SELF_ASSESSMENT = "self_assessment"
    MANAGER_REVIEW = "manager_review"
    HR_REVIEW = "hr_review"
    COMPLETED = "completed"


class AppraisalCriteria(CamelModel):
    id: str = Field(default_factory=new_id)
    name: str
    description: Optional[str] = None
    weight: float = 1.0
    max_score: float = 5.0


class AppraisalResponse(CamelModel):
    criteria_id: str
    self_score: Optional[float] = None
    self_comment: Optional[str] = None
    manager_score: Optional[float] = None
    manager_comment: Optional[str] = None
    final_score: float = 0


class Appraisal(CamelModel):
    id: str = Field(default_factory=new_id)
    employee_id: str
    employee_name: Optional[str] = None
    manager_id: Optional[str] = None
    manager_name: Optional[str] = None
    cycle: str
    period: Optional[str] = None
    status: AppraisalStatus = AppraisalStatus.DRAFT
    criteria: List[AppraisalCriteria] = Field(default_factory=list)
    responses: List[AppraisalResponse] = Field(default_factory=list)
    overall_score: float = 0
    overall_comment: str = ""
    employee_comment: str = ""
    created_at: str = Field(default_factory=now_iso)
    completed_at: Optional[str] = None
