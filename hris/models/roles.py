from typing import List, Optional

from pydantic import Field

from hris.models.base import CamelModel, new_id, now_iso


class Role(CamelModel):
    id: str = Field(default_factory=new_id)
    name: str
    description: Optional[str] = None
    permissions: List[str] = Field(default_factory=list)
    user_count: int = 0
    created_at: str = Field(default_factory=now_iso)
    updated_at: str = Field(default_factory=now_iso)


class Permission(CamelModel):
    id: str = Field(default_factory=new_id)
    name: str
    description: Optional[str] = None
    resource: Optional[str] = None
    action: Optional[str] = None
