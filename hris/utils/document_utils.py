import logging
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional

from pytz import UTC

from hris.config import settings
from hris.db import documents_collection, leaves_collection, users_collection
from hris.exceptions import ValidationError
from hris.models.base import now_iso
from hris.models.documents import (
    DOCUMENT_TYPES,
    REQUIRED_DOCUMENT_TYPES,
    DocumentStatus,
    RelatedEntityType,
)
from hris.models.users import UserRole
from hris.schemas.document import DocumentApproval
from hris.utils.app_utils import Identity

logger = logging.getLogger(__name__)


def parse_expiry_date(expiry_date: Optional[str]) -> Optional[str]:
    if not expiry_date:
        return None
    try:
        return date.fromisoformat(expiry_date[:10]).isoformat()
    except ValueError:
        raise ValidationError(detail="expiryDate must be an ISO date (YYYY-MM-DD)")


def validate_related_entity(related_entity_id: Optional[str], related_entity_type: Optional[RelatedEntityType], identity: Identity):
    if bool(related_entity_id) != bool(related_entity_type):
        raise ValidationError(detail="relatedEntityId and relatedEntityType must be provided together")

    if related_entity_type == RelatedEntityType.LEAVE_REQUEST:
        leave = leaves_collection.find_one({"id": related_entity_id})
        if not leave:
            raise ValidationError(detail="Related leave request does not exist")
        if identity.role not in (UserRole.HR, UserRole.ADMIN) and leave["employeeId"] != identity.id:
            raise ValidationError(detail="Related leave request belongs to another employee")


def is_required_type(document_type) -> bool:
    return DOCUMENT_TYPES[document_type]["required"]


def decide_document(document: dict, identity: Identity, approval: DocumentApproval) -> dict:
    """
    Changes that approve or reject a pending document.

    A rejection needs a non-blank reason. Approved and rejected are terminal:
    a new upload is the way back.
    """
    if document["status"] != DocumentStatus.PENDING:
        raise ValidationError(detail=f"Document has already been {document['status']}")

    timestamp = now_iso()
    if approval.status == DocumentStatus.APPROVED:
        return {
            "status": DocumentStatus.APPROVED.value,
            "approvedBy": identity.id,
            "approverName": identity.name,
            "approvedAt": timestamp,
        }

    reason = (approval.rejection_reason or "").strip()
    if not reason:
        raise ValidationError(detail="A rejection reason is required")

    return {
        "status": DocumentStatus.REJECTED.value,
        "rejectedBy": identity.id,
        "rejectorName": identity.name,
        "rejectedAt": timestamp,
        "rejectionReason": reason,
    }


def filter_documents(
    documents: Iterable[dict],
    status: Optional[str] = None,
    document_type: Optional[str] = None,
    employee_id: Optional[str] = None,
    is_required: Optional[bool] = None,
    expiry_date_from: Optional[str] = None,
    expiry_date_to: Optional[str] = None,
) -> List[dict]:
    result = []
    for document in documents:
        if status and document.get("status") != status:
            continue
        if document_type and document.get("type") != document_type:
            continue
        if employee_id and document.get("employeeId") != employee_id:
            continue
        if is_required is not None and document.get("isRequired") != is_required:
            continue
        expiry = document.get("expiryDate")
        if expiry_date_from and (not expiry or expiry < expiry_date_from):
            continue
        if expiry_date_to and (not expiry or expiry > expiry_date_to):
            continue
        result.append(document)

    return sorted(result, key=lambda d: d.get("uploadedAt", ""), reverse=True)


def check_compliance(employee_id: str) -> dict:
    """Compliant when every required document type has at least one approved document."""
    documents = documents_collection.find({"employeeId": employee_id})
    approved_types = sorted({d["type"] for d in documents if d.get("status") == DocumentStatus.APPROVED})
    required_types = [doc_type.value for doc_type in REQUIRED_DOCUMENT_TYPES]
    missing_types = [doc_type for doc_type in required_types if doc_type not in approved_types]

    return {
        "employeeId": employee_id,
        "compliant": not missing_types,
        "requiredTypes": required_types,
        "approvedTypes": approved_types,
        "missingTypes": missing_types,
    }


def expiring_documents(today: Optional[date] = None, within_days: Optional[int] = None) -> List[dict]:
    today = today or datetime.now(UTC).date()
    if within_days is None:
        within_days = settings.DOCUMENT_EXPIRY_WARNING_DAYS
    horizon = (today + timedelta(days=within_days)).isoformat()

    return [
        document for document in documents_collection.find()
        if document.get("expiryDate") and today.isoformat() <= document["expiryDate"] <= horizon
    ]


def document_stats(today: Optional[date] = None) -> dict:
    documents = documents_collection.find()
    employees = [user for user in users_collection.find() if user.get("role") != UserRole.ADMIN.value]

    return {
        "totalDocuments": len(documents),
        "pendingApproval": sum(1 for d in documents if d.get("status") == DocumentStatus.PENDING),
        "approved": sum(1 for d in documents if d.get("status") == DocumentStatus.APPROVED),
        "rejected": sum(1 for d in documents if d.get("status") == DocumentStatus.REJECTED),
        "expiringSoon": len(expiring_documents(today)),
        "missingRequired": sum(1 for user in employees if not check_compliance(user["id"])["compliant"]),
    }
