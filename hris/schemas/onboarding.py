from typing import List, Optional

from hris.models.base import PatchModel, StrictModel
from hris.models.onboarding import ChecklistItem


class CreateOnboarding(StrictModel):
    employee_id: str
    checklist: List[ChecklistItem] = []


class OnboardingUpdate(PatchModel):
    non_nullable = ("checklist", "status")

    checklist: Optional[List[ChecklistItem]] = None
    status: Optional[str] = None
