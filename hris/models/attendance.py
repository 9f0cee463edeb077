from pydantic import Field

from hris.models.base import CamelModel, new_id, now_iso


class AttendanceUpload(CamelModel):
    id: str = Field(default_factory=new_id)
    employee_id: str
    file_name: str
    upload_date: str = Field(default_factory=now_iso)
    status: str = "processed"
    total_hours: float = 160
    working_days: int = 20
