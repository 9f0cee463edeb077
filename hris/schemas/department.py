from typing import Optional

from pydantic import Field

from hris.models.base import PatchModel, StrictModel


class DepartmentCreate(StrictModel):
    name: str = Field(..., min_length=1, description="Name of the department.")
    description: Optional[str] = Field(None, description="A brief description of the department.")
    head_id: Optional[str] = Field(None, description="User id of the head of the department.")


class DepartmentEdit(PatchModel):
    non_nullable = ("name",)

    name: Optional[str] = Field(None, min_length=1, description="Name of the department.")
    description: Optional[str] = None
    head_id: Optional[str] = None
