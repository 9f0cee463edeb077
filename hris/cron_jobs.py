import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from hris.db import notifications_collection
from hris.models.notifications import NotificationType
from hris.utils.document_utils import expiring_documents
from hris.utils.notification_utils import create_document_notification

logger = logging.getLogger(__name__)

# Create a shared scheduler instance
scheduler = AsyncIOScheduler()


async def notify_expiring_documents():
    """Warn owners of documents expiring within the warning window, once per document."""
    notified = 0
    for document in expiring_documents():
        already_warned = notifications_collection.count_documents(
            {"relatedId": document["id"], "type": NotificationType.DOCUMENT_EXPIRING.value}
        )
        if already_warned:
            continue
        create_document_notification(document, NotificationType.DOCUMENT_EXPIRING)
        notified += 1

    logger.info("Expiry check done, %d owner(s) notified", notified)
    return notified


scheduler.add_job(
    notify_expiring_documents,
    "cron",
    hour=6,
    minute=0,  # every morning
    timezone="UTC",
)
