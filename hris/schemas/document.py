from typing import Optional

from pydantic import field_validator

from hris.models.base import StrictModel
from hris.models.documents import DocumentStatus


class DocumentApproval(StrictModel):
    status: DocumentStatus
    rejection_reason: Optional[str] = None

    @field_validator("status")
    def decision_only(cls, status):
        if status == DocumentStatus.PENDING:
            raise ValueError("Status must be approved or rejected")
        return status
