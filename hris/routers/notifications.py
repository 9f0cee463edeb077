from fastapi import APIRouter, Depends

from hris.db import notifications_collection
from hris.exceptions import get_unknown_entity_exception
from hris.utils.app_utils import Identity, get_current_user

router = APIRouter()


@router.get("")
async def get_notifications(identity: Identity = Depends(get_current_user)):
    """Notifications addressed to the caller, newest first."""
    notifications = notifications_collection.find({"userId": identity.id})
    return sorted(notifications, key=lambda n: n.get("createdAt", ""), reverse=True)


@router.put("/{notification_id}/read")
async def mark_notification_read(notification_id: str, identity: Identity = Depends(get_current_user)):
    # someone else's notification is reported as missing
    notification = notifications_collection.find_one({"id": notification_id, "userId": identity.id})
    if not notification:
        raise get_unknown_entity_exception("Notification")

    return notifications_collection.update_one({"id": notification_id}, {"read": True})
