from fastapi import APIRouter, Body, Depends

from hris.db import (
    appraisals_collection,
    departments_collection,
    documents_collection,
    leaves_collection,
    store,
    users_collection,
)
from hris.models.documents import DocumentStatus
from hris.models.leaves import LeaveStatus, TERMINAL_LEAVE_STATUSES
from hris.permissions import require_permission
from hris.utils.app_utils import Identity

router = APIRouter()


@router.get("/system-settings")
async def get_system_settings(identity: Identity = Depends(require_permission("settings:manage"))):
    return store.system_settings


@router.put("/system-settings")
async def update_system_settings(
    changes: dict = Body(...),
    identity: Identity = Depends(require_permission("settings:manage")),
):
    """Shallow-merge the body into the stored settings and return the result."""
    return store.update_system_settings(changes)


@router.get("/system/stats")
async def get_system_stats(identity: Identity = Depends(require_permission("system:manage"))):
    leaves = leaves_collection.find()
    return {
        "totalUsers": users_collection.count_documents(),
        "activeUsers": users_collection.count_documents({"status": "active"}),
        "totalDepartments": departments_collection.count_documents(),
        "totalLeaveRequests": len(leaves),
        "pendingLeaveRequests": sum(1 for leave in leaves if leave.get("status") not in TERMINAL_LEAVE_STATUSES),
        "approvedLeaveRequests": sum(1 for leave in leaves if leave.get("status") == LeaveStatus.APPROVED),
        "totalDocuments": documents_collection.count_documents(),
        "pendingDocuments": documents_collection.count_documents({"status": DocumentStatus.PENDING.value}),
        "totalAppraisals": appraisals_collection.count_documents(),
    }


@router.post("/system/backup")
async def create_backup(identity: Identity = Depends(require_permission("system:manage"))):
    return {"message": "Backup initiated"}


@router.post("/system/maintenance")
async def run_maintenance(identity: Identity = Depends(require_permission("system:manage"))):
    return {"message": "Maintenance tasks scheduled"}
