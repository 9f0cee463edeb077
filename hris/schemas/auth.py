from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from hris.models.base import PatchModel, StrictModel


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class ChangePassword(StrictModel):
    # trimmed the same way as at login
    model_config = ConfigDict(str_strip_whitespace=True)

    current_password: str
    new_password: str = Field(..., min_length=8, max_length=100)


class ProfileUpdate(PatchModel):
    non_nullable = ("name",)

    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    avatar: Optional[str] = None
