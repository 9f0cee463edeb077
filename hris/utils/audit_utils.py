import logging
from typing import List, Optional

from hris.db import document_audit_logs_collection
from hris.models.documents import AuditAction, DocumentAuditLog
from hris.utils.app_utils import Identity

logger = logging.getLogger(__name__)


def log_document_activity(
    document_id: str,
    action: AuditAction,
    identity: Identity,
    details: Optional[str] = None,
    ip_address: Optional[str] = None,
) -> dict:
    """
    Append an entry to the document audit log.

    Args:
        document_id (str): The document the action was taken on.
        action (AuditAction): uploaded, approved, rejected, downloaded or deleted.
        identity (Identity): Who performed the action.
        details (str, optional): Free-text description.
        ip_address (str, optional): Client address, when known.
    Entries are never updated or removed, and they are keyed by document id
    only, so they outlive the document itself.
    """
    log_entry = DocumentAuditLog(
        document_id=document_id,
        action=action,
        performed_by=identity.id,
        performer_name=identity.name,
        details=details,
        ip_address=ip_address,
    ).to_record()
    document_audit_logs_collection.insert_one(log_entry)
    logger.info("Document %s %s by %s", document_id, action.value, identity.id)
    return log_entry


def get_document_audit_trail(document_id: str) -> List[dict]:
    entries = document_audit_logs_collection.find({"documentId": document_id})
    return sorted(entries, key=lambda entry: entry["timestamp"])
