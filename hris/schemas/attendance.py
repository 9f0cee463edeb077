from typing import Optional

from hris.models.base import StrictModel


class CreateAttendanceUpload(StrictModel):
    file_name: str
    total_hours: Optional[float] = None
    working_days: Optional[int] = None
