from typing import List, Optional

from pydantic import Field

from hris.models.base import CamelModel, new_id, now_iso


class ChecklistItem(CamelModel):
    task: str
    due_date: Optional[str] = None
    completed: bool = False


class Onboarding(CamelModel):
    id: str = Field(default_factory=new_id)
    employee_id: str
    checklist: List[ChecklistItem] = Field(default_factory=list)
    progress: int = 0
    status: str = "pending"  # or in_progress/completed
    created_at: str = Field(default_factory=now_iso)
    updated_at: str = Field(default_factory=now_iso)
