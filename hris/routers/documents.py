import logging
import os
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, Response, UploadFile, status
from fastapi.responses import FileResponse

from hris.db import document_audit_logs_collection, documents_collection
from hris.exceptions import get_unknown_entity_exception
from hris.models.documents import (
    DOCUMENT_TYPES,
    REQUIRED_DOCUMENT_TYPES,
    AuditAction,
    Document,
    DocumentStatus,
    DocumentType,
    RelatedEntityType,
)
from hris.models.notifications import NotificationType
from hris.permissions import HR_ROLES, authorize, authorize_roles, can, require_permission
from hris.schemas.document import DocumentApproval
from hris.utils.app_utils import Identity, get_current_user
from hris.utils.audit_utils import get_document_audit_trail, log_document_activity
from hris.utils.document_utils import (
    check_compliance,
    decide_document,
    document_stats,
    filter_documents,
    is_required_type,
    parse_expiry_date,
    validate_related_entity,
)
from hris.utils.file_utils import read_upload, remove_file, save_file, validate_file_type
from hris.utils.notification_utils import create_document_notification

logger = logging.getLogger(__name__)

router = APIRouter()


def _client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


def _get_document(document_id: str) -> dict:
    document = documents_collection.find_one({"id": document_id})
    if not document:
        raise get_unknown_entity_exception("Document")
    return document


@router.get("")
async def list_documents(
    document_status: Optional[DocumentStatus] = Query(None, alias="status"),
    document_type: Optional[DocumentType] = Query(None, alias="type"),
    employee_id: Optional[str] = Query(None, alias="employeeId"),
    is_required: Optional[bool] = Query(None, alias="isRequired"),
    expiry_date_from: Optional[str] = Query(None, alias="expiryDateFrom"),
    expiry_date_to: Optional[str] = Query(None, alias="expiryDateTo"),
    identity: Identity = Depends(get_current_user),
):
    """
    List documents with optional filters.
    HR and admins see everyone's documents; anybody else sees only their own,
    whatever ``employeeId`` they ask for.
    """
    if not can(identity, "documents:read_all"):
        employee_id = identity.id

    return filter_documents(
        documents_collection.find(),
        status=document_status.value if document_status else None,
        document_type=document_type.value if document_type else None,
        employee_id=employee_id,
        is_required=is_required,
        expiry_date_from=expiry_date_from,
        expiry_date_to=expiry_date_to,
    )


@router.get("/stats")
async def get_document_stats(identity: Identity = Depends(require_permission("documents:stats"))):
    return document_stats()


@router.get("/required")
async def get_required_documents(identity: Identity = Depends(get_current_user)):
    return [doc_type.value for doc_type in REQUIRED_DOCUMENT_TYPES]


@router.get("/types")
async def get_document_types(identity: Identity = Depends(get_current_user)):
    return {doc_type.value: info for doc_type, info in DOCUMENT_TYPES.items()}


@router.get("/compliance/{employee_id}")
async def get_compliance(employee_id: str, identity: Identity = Depends(require_permission("documents:compliance"))):
    return check_compliance(employee_id)


@router.get("/employee/{employee_id}")
async def list_employee_documents(employee_id: str, identity: Identity = Depends(get_current_user)):
    authorize(identity, "documents:read", {"employeeId": employee_id})
    return filter_documents(documents_collection.find({"employeeId": employee_id}))


@router.post("/upload", status_code=status.HTTP_201_CREATED)
@router.post("", status_code=status.HTTP_201_CREATED)
async def upload_document(
    request: Request,
    file: UploadFile = File(...),
    document_type: DocumentType = Form(..., alias="type"),
    message: Optional[str] = Form(None),
    expiry_date: Optional[str] = Form(None, alias="expiryDate"),
    related_entity_id: Optional[str] = Form(None, alias="relatedEntityId"),
    related_entity_type: Optional[RelatedEntityType] = Form(None, alias="relatedEntityType"),
    identity: Identity = Depends(get_current_user),
):
    """
    Upload a document for the caller.
    Args:
        file (UploadFile): PDF, Word or JPEG/PNG, at most MAX_UPLOAD_SIZE bytes.
        document_type (DocumentType): One of the fixed document types; decides ``isRequired``.
        message (str, optional): Note for the reviewer.
        expiry_date (str, optional): ISO date the document expires.
        related_entity_id / related_entity_type (optional): Link to a leave
            request or an allowance claim. Both or neither.
    Returns:
        dict: The new document record, always ``pending``.
    Raises:
        ValidationError: 400 for an unsupported type, an oversized or empty
            file, a bad expiry date, or an invalid link. Nothing is stored.
    Rejected documents stay rejected; uploading again creates a new record.
    """
    file_type = validate_file_type(file)
    file_content = await read_upload(file)
    expiry = parse_expiry_date(expiry_date)
    validate_related_entity(related_entity_id, related_entity_type, identity)

    file_name, file_path = save_file(file_content, file.filename)

    document = Document(
        employee_id=identity.id,
        employee_name=identity.name,
        type=document_type,
        file_name=file_name,
        original_file_name=file.filename or file_name,
        file_size=len(file_content),
        file_type=file_type,
        file_path=file_path,
        message=message,
        is_required=is_required_type(document_type),
        expiry_date=expiry,
        related_entity_id=related_entity_id,
        related_entity_type=related_entity_type,
    ).to_record()
    documents_collection.insert_one(document)

    log_document_activity(
        document["id"],
        AuditAction.UPLOADED,
        identity,
        details=f"Uploaded {document['originalFileName']} as {document_type.value}",
        ip_address=_client_ip(request),
    )

    return document


@router.get("/{document_id}")
async def get_document(document_id: str, identity: Identity = Depends(get_current_user)):
    document = _get_document(document_id)
    authorize(identity, "documents:read", document)
    return document


@router.put("/{document_id}/approve")
async def approve_document(
    request: Request,
    document_id: str,
    approval: DocumentApproval,
    identity: Identity = Depends(require_permission("documents:approve")),
):
    """
    Approve or reject a pending document.
    Body: {"status": "approved" | "rejected", "rejectionReason": str}. A
    rejection with a blank reason is a 400 and the document stays pending.
    Each decision appends exactly one audit entry and notifies the owner.
    """
    document = _get_document(document_id)

    changes = decide_document(document, identity, approval)
    document = documents_collection.update_one({"id": document_id}, changes)

    if approval.status == DocumentStatus.APPROVED:
        log_document_activity(document_id, AuditAction.APPROVED, identity, ip_address=_client_ip(request))
        create_document_notification(document, NotificationType.DOCUMENT_APPROVED)
    else:
        log_document_activity(
            document_id,
            AuditAction.REJECTED,
            identity,
            details=document["rejectionReason"],
            ip_address=_client_ip(request),
        )
        create_document_notification(document, NotificationType.DOCUMENT_REJECTED)

    return document


@router.get("/{document_id}/download")
async def download_document(request: Request, document_id: str, identity: Identity = Depends(get_current_user)):
    document = _get_document(document_id)
    authorize(identity, "documents:download", document)

    if not os.path.exists(document["filePath"]):
        logger.error("File for document %s missing at %s", document_id, document["filePath"])
        raise get_unknown_entity_exception("Document file")

    log_document_activity(document_id, AuditAction.DOWNLOADED, identity, ip_address=_client_ip(request))

    return FileResponse(
        document["filePath"],
        media_type=document["fileType"],
        filename=document["originalFileName"],
    )


@router.get("/{document_id}/audit")
async def get_audit_trail(document_id: str, identity: Identity = Depends(get_current_user)):
    """
    Audit trail of a document, oldest first.
    Still available after the document is deleted, to HR and admins.
    """
    document = documents_collection.find_one({"id": document_id})
    if document:
        authorize(identity, "documents:audit", document)
        return get_document_audit_trail(document_id)

    authorize_roles(identity, HR_ROLES)
    if not document_audit_logs_collection.count_documents({"documentId": document_id}):
        raise get_unknown_entity_exception("Document")
    return get_document_audit_trail(document_id)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(request: Request, document_id: str, identity: Identity = Depends(get_current_user)):
    document = _get_document(document_id)
    authorize(identity, "documents:delete", document)

    # the deleted entry is written before the record goes
    log_document_activity(
        document_id,
        AuditAction.DELETED,
        identity,
        details=f"Deleted {document['originalFileName']}",
        ip_address=_client_ip(request),
    )
    remove_file(document["filePath"])
    documents_collection.delete_one({"id": document_id})

    return Response(status_code=status.HTTP_204_NO_CONTENT)
