from enum import Enum
from typing import Optional

from pydantic import Field

from hris.models.base import CamelModel, new_id, now_iso


class DocumentType(str, Enum):
    CV = "cv"
    CERTIFICATE = "certificate"
    GHANA_CARD = "ghana_card"
    DEPENDENT_DETAILS = "dependent_details"
    MEDICAL_CERTIFICATE = "medical_certificate"
    ALLOWANCE_PROOF = "allowance_proof"
    OTHER = "other"


class DocumentStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class RelatedEntityType(str, Enum):
    LEAVE_REQUEST = "leave_request"
    ALLOWANCE_CLAIM = "allowance_claim"


DOCUMENT_TYPES = {
    DocumentType.CV: {"label": "CV/Resume", "description": "Current curriculum vitae or resume", "required": True},
    DocumentType.CERTIFICATE: {"label": "Certificates", "description": "Educational or professional certificates", "required": False},
    DocumentType.GHANA_CARD: {"label": "Ghana Card", "description": "National identification card", "required": True},
    DocumentType.DEPENDENT_DETAILS: {"label": "Dependent Details", "description": "Information about dependents", "required": False},
    DocumentType.MEDICAL_CERTIFICATE: {"label": "Medical Certificate", "description": "Medical documentation for leave", "required": False},
    DocumentType.ALLOWANCE_PROOF: {"label": "Allowance Proof", "description": "Supporting documents for allowance claims", "required": False},
    DocumentType.OTHER: {"label": "Other Documents", "description": "Miscellaneous documents", "required": False},
}

REQUIRED_DOCUMENT_TYPES = [doc_type for doc_type, info in DOCUMENT_TYPES.items() if info["required"]]

ALLOWED_FILE_TYPES = [
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "image/jpeg",
    "image/png",
    "image/jpg",
]


class Document(CamelModel):
    id: str = Field(default_factory=new_id)
    employee_id: str
    employee_name: Optional[str] = None
    type: DocumentType
    file_name: str
    original_file_name: str
    file_size: int
    file_type: str
    file_path: str
    status: DocumentStatus = DocumentStatus.PENDING
    message: Optional[str] = None
    uploaded_at: str = Field(default_factory=now_iso)
    approved_by: Optional[str] = None
    approver_name: Optional[str] = None
    approved_at: Optional[str] = None
    rejected_by: Optional[str] = None
    rejector_name: Optional[str] = None
    rejected_at: Optional[str] = None
    rejection_reason: Optional[str] = None
    is_required: bool = False
    expiry_date: Optional[str] = None
    related_entity_id: Optional[str] = None
    related_entity_type: Optional[RelatedEntityType] = None


class AuditAction(str, Enum):
    UPLOADED = "uploaded"
    APPROVED = "approved"
    REJECTED = "rejected"
    DOWNLOADED = "downloaded"
    DELETED = "deleted"


class DocumentAuditLog(CamelModel):
    id: str = Field(default_factory=new_id)
    document_id: str
    action: AuditAction
    performed_by: str
    performer_name: Optional[str] = None
    timestamp: str = Field(default_factory=now_iso)
    details: Optional[str] = None
    ip_address: Optional[str] = None
