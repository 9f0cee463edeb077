from typing import Optional

from hris.models.base import PatchModel


class IntegrationEdit(PatchModel):
    non_nullable = ("name", "enabled", "config")

    name: Optional[str] = None
    description: Optional[str] = None
    enabled: Optional[bool] = None
    config: Optional[dict] = None
