from typing import Optional

from pydantic import Field

from hris.models.base import CamelModel, new_id, now_iso


class Department(CamelModel):
    id: str = Field(default_factory=new_id)
    name: str
    description: Optional[str] = None
    head_id: Optional[str] = None
    employee_count: int = 0
    created_at: str = Field(default_factory=now_iso)
