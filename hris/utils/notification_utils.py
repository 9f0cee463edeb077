import logging
from typing import Iterable, Optional

from hris.db import notifications_collection, users_collection
from hris.models.notifications import Notification, NotificationType
from hris.models.users import UserRole

logger = logging.getLogger(__name__)


def create_notification(user_id: str, notification_type: NotificationType, message: str, related_id: Optional[str] = None):
    notification = Notification(user_id=user_id, type=notification_type, message=message, related_id=related_id)
    return notifications_collection.insert_one(notification.to_record())


def notify_users(user_ids: Iterable[str], notification_type: NotificationType, message: str, related_id: Optional[str] = None):
    for user_id in user_ids:
        if user_id:
            create_notification(user_id, notification_type, message, related_id)


def hr_user_ids():
    return [user["id"] for user in users_collection.find({"role": UserRole.HR.value})]


def create_leave_notification(leave_request: dict, notification_type: NotificationType, recipient_ids: Iterable[str]):
    message = {
        NotificationType.LEAVE_REQUEST: f"New leave request from {leave_request.get('employeeName')}",
        NotificationType.LEAVE_APPROVAL_NEEDED: f"Leave request from {leave_request.get('employeeName')} is awaiting your approval",
        NotificationType.LEAVE_APPROVED: "Your leave request has been approved",
        NotificationType.LEAVE_REJECTED: "Your leave request has been rejected",
    }

    notify_users(recipient_ids, notification_type, message[notification_type], leave_request["id"])
    logger.debug("Leave notification %s for %s", notification_type.value, leave_request["id"])


def create_document_notification(document: dict, notification_type: NotificationType):
    label = document.get("originalFileName") or document.get("type")
    message = {
        NotificationType.DOCUMENT_APPROVED: f"Your document '{label}' has been approved",
        NotificationType.DOCUMENT_REJECTED: f"Your document '{label}' has been rejected: {document.get('rejectionReason')}",
        NotificationType.DOCUMENT_EXPIRING: f"Your document '{label}' expires on {document.get('expiryDate')}",
    }

    create_notification(document["employeeId"], notification_type, message[notification_type], document["id"])
