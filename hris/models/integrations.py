from typing import Optional

from pydantic import Field

from hris.models.base import CamelModel, new_id


class Integration(CamelModel):
    id: str = Field(default_factory=new_id)
    name: str
    description: Optional[str] = None
    enabled: bool = False
    config: dict = Field(default_factory=dict)
