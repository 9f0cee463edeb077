from enum import Enum
from typing import Optional

from pydantic import Field

from hris.models.base import CamelModel, new_id, now_iso


class NotificationType(str, Enum):
    LEAVE_REQUEST = "leave_request"
    LEAVE_APPROVAL_NEEDED = "leave_approval_needed"
    LEAVE_APPROVED = "leave_approved"
    LEAVE_REJECTED = "leave_rejected"
    DOCUMENT_APPROVED = "document_approved"
    DOCUMENT_REJECTED = "document_rejected"
    DOCUMENT_EXPIRING = "document_expiring"


class Notification(CamelModel):
    id: str = Field(default_factory=new_id)
    user_id: str
    type: NotificationType
    message: str
    related_id: Optional[str] = None
    read: bool = False
    created_at: str = Field(default_factory=now_iso)
